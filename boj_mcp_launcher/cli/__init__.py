"""
Launcher command-line entry point.

Every argument is forwarded unchanged to the boj-mcp-server binary.
"""

from .launcher import launch, main, provision, run_binary

__all__ = ["launch", "main", "provision", "run_binary"]
