"""
Entry point for running the launcher as a module.

Usage: python -m boj_mcp_launcher [server arguments]
"""

from boj_mcp_launcher.cli.launcher import main

if __name__ == "__main__":
    main()
