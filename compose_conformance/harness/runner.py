"""
Process Runner - execute orchestration commands and assert their outcome.

Commands run to completion in a fixed working directory with stdout and
stderr captured. A mismatch between the exit status and the caller's
expectation fails the enclosing test immediately, carrying the captured
output as diagnostics.
"""

from __future__ import annotations

import shlex
import shutil
import subprocess
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

from compose_conformance.core.logging import get_logger
from compose_conformance.harness.errors import CommandFailedError


logger = get_logger("harness.runner")


class Expect(str, Enum):
    """Expected outcome of a command."""

    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class CommandResult:
    """Captured outcome of one subprocess invocation."""

    command: list[str]
    cwd: Path | None
    exit_code: int
    stdout: str
    stderr: str
    duration: float

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)

    def describe(self) -> str:
        """Multi-line diagnostic used in failure messages and reports."""
        return (
            f"Command: {self.command_line}\n"
            f"Dir: {self.cwd or '.'}\n"
            f"ExitCode: {self.exit_code}\n"
            f"Stdout: {self.stdout}\n"
            f"Stderr: {self.stderr}"
        )


class ProcessRunner:
    """
    Run external commands and check their exit status.

    Usage:
        runner = ProcessRunner()
        result = runner.run("docker", ["compose", "up", "-d"], cwd=fixture_dir)
        runner.run("false", expect=Expect.FAILURE)

    No timeout is applied unless one is configured; a hung command hangs
    the run.
    """

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout

    def which(self, command: str) -> str | None:
        """Resolve a command on PATH."""
        return shutil.which(command)

    def run(
        self,
        command: str,
        args: Sequence[str] = (),
        cwd: Path | str | None = None,
        expect: Expect = Expect.SUCCESS,
    ) -> CommandResult:
        """
        Execute a command and assert its outcome.

        Args:
            command: Program to execute
            args: Arguments, passed through unchanged and in order
            cwd: Working directory for the command
            expect: Whether the command must succeed or must fail

        Returns:
            CommandResult with captured output

        Raises:
            CommandFailedError: The command could not start, timed out, or
                its exit status did not match ``expect``
        """
        argv = [command, *args]
        workdir = Path(cwd) if cwd is not None else None
        logger.info(f"Running: {shlex.join(argv)} (cwd={workdir or '.'})")

        start = time.monotonic()
        try:
            completed = subprocess.run(
                argv,
                cwd=workdir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandFailedError(
                f"Command timed out after {self.timeout}s: {shlex.join(argv)}\n"
                f"Stdout: {_decode(e.stdout)}\n"
                f"Stderr: {_decode(e.stderr)}"
            ) from e
        except OSError as e:
            raise CommandFailedError(
                f"Could not start command: {shlex.join(argv)}: {e}"
            ) from e

        result = CommandResult(
            command=argv,
            cwd=workdir,
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            duration=time.monotonic() - start,
        )
        logger.info(
            f"Finished: {result.command_line} -> exit {result.exit_code} "
            f"({result.duration:.2f}s)"
        )
        logger.debug(f"stdout:\n{result.stdout}\nstderr:\n{result.stderr}")

        self.assert_outcome(result, expect)
        return result

    @staticmethod
    def assert_outcome(result: CommandResult, expect: Expect) -> None:
        if expect is Expect.SUCCESS and not result.succeeded:
            raise CommandFailedError("Command was expected to succeed", result)
        if expect is Expect.FAILURE and result.succeeded:
            raise CommandFailedError("Command was expected to fail", result)


def _decode(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
