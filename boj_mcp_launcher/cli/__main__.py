"""
Entry point for running the launcher CLI as a module.

Usage: python -m boj_mcp_launcher.cli [server arguments]
"""

from .launcher import main

if __name__ == "__main__":
    main()
