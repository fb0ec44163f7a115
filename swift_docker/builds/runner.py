"""Docker command runner.

This module handles:
- Composing `docker build` and `docker push` commands
- Executing a command as a child process and waiting for it
- Reaping the child on every exit path, including interrupts and timeouts
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

# Seconds to wait for a terminated child before killing it
TERMINATE_GRACE_PERIOD = 10


class CommandExecutionError(Exception):
    """Raised when a command cannot be run to completion."""

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        code: str = "execution_error",
        output: str = "",
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.code = code
        self.output = output


@dataclass
class CommandResult:
    """Result of a command execution.

    Attributes:
        command: The command that was executed.
        exit_code: Process exit code.
        output: Combined stdout/stderr.
        started_at: Start time.
        finished_at: Finish time.
    """

    command: str
    exit_code: int
    output: str
    started_at: datetime
    finished_at: datetime

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def compose_build_command(
    image_name: str,
    dockerfile_path: Path,
    docker: str = "docker",
) -> list[str]:
    """Compose the `docker build` command for an image.

    The build context is the current directory of the process running
    the command.

    Args:
        image_name: Tag given to the built image.
        dockerfile_path: Path to the rendered Dockerfile.
        docker: Container engine executable.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    return [
        docker,
        "build",
        "--no-cache",
        "--rm",
        "-t",
        image_name,
        "-f",
        str(dockerfile_path),
        ".",
    ]


def compose_push_command(image_name: str, docker: str = "docker") -> list[str]:
    """Compose the `docker push` command for an image."""
    return [docker, "push", image_name]


def _stop(process: subprocess.Popen[str]) -> None:
    """Terminate a child process, killing it if it does not exit in time."""
    if process.poll() is not None:
        return
    logger.warning("Terminating child process %d", process.pid)
    process.terminate()
    try:
        process.wait(timeout=TERMINATE_GRACE_PERIOD)
    except subprocess.TimeoutExpired:
        logger.warning("Killing child process %d", process.pid)
        process.kill()
        process.wait()


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    timeout: int | None = None,
) -> CommandResult:
    """Run a command and wait for it to exit.

    The child is spawned inside a `with` block so it is always waited for.
    On timeout or KeyboardInterrupt the child is terminated before the
    exception propagates.

    Args:
        cmd: Command to execute.
        cwd: Working directory (current directory if None).
        timeout: Timeout in seconds (None = no timeout).

    Returns:
        CommandResult with the exit code and captured output.

    Raises:
        CommandExecutionError: If the command cannot be started or times out.
    """
    cmd_str = shlex.join(cmd)
    logger.info("Executing: %s", cmd_str)
    started_at = datetime.now(timezone.utc)

    try:
        with subprocess.Popen(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
        ) as process:
            try:
                output, _ = process.communicate(timeout=timeout)
            except subprocess.TimeoutExpired as e:
                _stop(process)
                raise CommandExecutionError(
                    f"Command timed out after {timeout} seconds: {cmd_str}",
                    exit_code=-1,
                    code="timeout",
                ) from e
            except KeyboardInterrupt:
                _stop(process)
                raise
    except OSError as e:
        raise CommandExecutionError(
            f"Failed to execute {cmd_str}: {e}",
            code="execution_error",
        ) from e

    finished_at = datetime.now(timezone.utc)
    exit_code = process.returncode
    if exit_code != 0:
        logger.error("Command exited with code %d: %s", exit_code, cmd_str)
    else:
        duration = (finished_at - started_at).total_seconds()
        logger.debug("Command finished in %.1fs: %s", duration, cmd_str)

    return CommandResult(
        command=cmd_str,
        exit_code=exit_code,
        output=output or "",
        started_at=started_at,
        finished_at=finished_at,
    )


__all__ = [
    "CommandExecutionError",
    "CommandResult",
    "compose_build_command",
    "compose_push_command",
    "run_command",
]
