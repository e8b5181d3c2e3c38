"""
boj-mcp-server launcher entry point.

Resolves the server binary (explicit override, or download into the cache)
and runs it with the launcher's arguments, inheriting standard streams and
propagating the exit status.

Logging goes to stderr only; stdout belongs to the server's MCP stream.
"""

import logging
import signal
import subprocess
import sys
import traceback
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence

from boj_mcp_launcher.binary.installer import ensure_binary
from boj_mcp_launcher.config.settings import LauncherConfig
from boj_mcp_launcher.core.exceptions import BinaryTerminatedError

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT


def provision(config: LauncherConfig) -> Path:
    """
    Return a runnable binary path for the configuration.

    An explicit binary path bypasses download and cache entirely.

    Args:
        config: Resolved launcher configuration

    Returns:
        Path to the server binary
    """
    if config.binary_path is not None:
        logger.debug(f"Using explicit binary: {config.binary_path}")
        return config.binary_path

    return ensure_binary(
        config.version,
        release_base_url=config.release_base_url,
        cache_dir=config.cache_dir,
        os_name=config.os_name,
        arch=config.arch,
    )


def run_binary(
    binary_path: Path,
    args: Sequence[str],
    env: Optional[Mapping[str, str]] = None,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> int:
    """
    Run the server binary to completion.

    Args:
        binary_path: Binary to execute
        args: Arguments forwarded verbatim
        env: Child environment (default: inherit)
        runner: subprocess.run-compatible callable

    Returns:
        Child exit code

    Raises:
        BinaryTerminatedError: If the child was killed by a signal
        OSError: If the binary cannot be started
    """
    command: List[str] = [str(binary_path), *args]
    logger.debug(f"Running: {command}")

    completed = runner(command, env=dict(env) if env is not None else None)
    returncode = completed.returncode

    if returncode < 0:
        raise BinaryTerminatedError(_signal_name(-returncode))

    return returncode


def launch(
    args: Sequence[str],
    env: Optional[Mapping[str, str]] = None,
    config: Optional[LauncherConfig] = None,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> int:
    """
    Provision the binary and run it.

    Args:
        args: Arguments forwarded to the server
        env: Environment for configuration and the child (default: os.environ)
        config: Pre-resolved configuration (default: built from env)
        runner: subprocess.run-compatible callable

    Returns:
        Child exit code
    """
    if config is None:
        config = LauncherConfig.from_env(env)

    binary_path = provision(config)
    return run_binary(binary_path, args, env=env, runner=runner)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Console script entry point."""
    args = list(sys.argv[1:] if argv is None else argv)

    _configure_logging(logging.WARNING)
    exit_code = EXIT_FAILURE

    try:
        config = LauncherConfig.from_env()
        _configure_logging(config.logging_level)
        exit_code = launch(args, config=config)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        exit_code = EXIT_INTERRUPTED
    except Exception as e:
        print_error(str(e) or e.__class__.__name__)
        if logger.isEnabledFor(logging.DEBUG):
            traceback.print_exc()

    sys.exit(exit_code)


def print_error(message: str) -> None:
    """
    Print the launcher diagnostic line to stderr.

    Printed regardless of the configured log level.

    Args:
        message: Error message
    """
    print(f"[boj-mcp-server] {message}", file=sys.stderr)


def _configure_logging(level: int) -> None:
    """
    Configure stderr logging for the launcher.

    Args:
        level: Numeric logging level
    """
    if level <= logging.DEBUG:
        format_str = "%(levelname)s [%(name)s] %(message)s"
    else:
        format_str = "[boj-mcp-server] %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        stream=sys.stderr,
        force=True,  # Reconfigure if already configured
    )


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"signal {signum}"


__all__ = ["provision", "run_binary", "launch", "main", "print_error"]
