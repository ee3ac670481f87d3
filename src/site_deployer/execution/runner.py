"""Local command execution for the external tools (terraform, ansible, aws)."""

from __future__ import annotations

import codecs
import os
import selectors
import shlex
import shutil
import subprocess
import sys
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, TextIO

from ..utils.logging import get_logger

logger = get_logger(__name__)

COMMAND_NOT_FOUND = 127
TOTAL_TIMEOUT = -2
OUTPUT_ENCODING = "utf-8"
READ_SIZE = 4096


@dataclass
class CommandResult:
    """Result of executing a local command."""

    command: List[str]
    stdout: str
    stderr: str
    exit_status: int
    streamed: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_status == 0

    @property
    def diagnostic(self) -> str:
        """Raw tool output to surface on failure (stderr first)."""
        return self.stderr or self.stdout


class CommandRunner:
    """
    Runs external commands with an explicit environment.

    Two modes are supported:
    - streaming: output is echoed live to the operator and captured as well
    - capturing: output is only captured, for parsing

    A non-zero exit status is returned, never raised. Output that is not valid
    UTF-8 is decoded with replacement characters. If anything interrupts the
    wait (Ctrl-C included) the child process is terminated and reaped before
    the exception propagates.
    """

    def __init__(
        self,
        env: Optional[Dict[str, str]] = None,
        *,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        terminate_grace: float = 10.0,
    ) -> None:
        self.env = dict(env) if env is not None else None
        self._stdout = stdout
        self._stderr = stderr
        self.terminate_grace = terminate_grace

    @property
    def out(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._stderr or sys.stderr

    def which(self, name: str) -> Optional[str]:
        """Look up an executable on the PATH of this runner's environment."""
        search_path = self.env.get("PATH") if self.env is not None else None
        return shutil.which(name, path=search_path)

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Optional[str] = None,
        stream_output: bool = True,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """
        Execute a command locally.

        Args:
            command: Program and arguments (no shell involved)
            cwd: Working directory for the child process
            stream_output: Echo output live while capturing it
            timeout: Total timeout in seconds, None for no limit

        Returns:
            CommandResult with stdout, stderr and exit status
        """
        args = [str(part) for part in command]
        logger.debug("Running: %s", shlex.join(args))
        try:
            process = subprocess.Popen(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                encoding=OUTPUT_ENCODING,
                errors="replace",
                cwd=cwd,
                env=self.env,
            )
        except FileNotFoundError:
            return CommandResult(
                command=args,
                stdout="",
                stderr=f"{args[0]}: command not found",
                exit_status=COMMAND_NOT_FOUND,
            )

        try:
            if stream_output:
                return self._run_streaming(process, args, timeout)
            return self._run_blocking(process, args, timeout)
        except BaseException:
            self._terminate(process)
            raise

    def _run_blocking(
        self, process: subprocess.Popen, args: List[str], timeout: Optional[float]
    ) -> CommandResult:
        try:
            stdout, stderr = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            stdout, stderr = process.communicate()
            return CommandResult(
                command=args,
                stdout=(stdout or "").strip(),
                stderr=f"TOTAL_TIMEOUT: Command exceeded {timeout} seconds total execution time.",
                exit_status=TOTAL_TIMEOUT,
            )
        return CommandResult(
            command=args,
            stdout=stdout.strip(),
            stderr=stderr.strip(),
            exit_status=process.returncode,
        )

    def _run_streaming(
        self, process: subprocess.Popen, args: List[str], timeout: Optional[float]
    ) -> CommandResult:
        # Raw descriptor reads: the text wrappers would buffer complete lines
        # the selector no longer reports as readable.
        channels = {
            process.stdout.fileno(): ([], self.out),
            process.stderr.fileno(): ([], self.err),
        }
        decoders = {
            fd: codecs.getincrementaldecoder(OUTPUT_ENCODING)(errors="replace")
            for fd in channels
        }
        start_time = time.time()

        sel = selectors.DefaultSelector()
        for fd in channels:
            sel.register(fd, selectors.EVENT_READ)
        try:
            while sel.get_map():
                for key, _ in sel.select(timeout=0.1):
                    data = os.read(key.fd, READ_SIZE)
                    text = decoders[key.fd].decode(data, final=not data)
                    if not data:
                        sel.unregister(key.fd)
                    if text:
                        chunks, stream = channels[key.fd]
                        chunks.append(text)
                        stream.write(text)
                        stream.flush()

                if timeout is not None and time.time() - start_time > timeout:
                    process.kill()
                    process.wait()
                    return CommandResult(
                        command=args,
                        stdout="".join(channels[process.stdout.fileno()][0]).strip(),
                        stderr=f"TOTAL_TIMEOUT: Command exceeded {timeout} seconds total execution time.",
                        exit_status=TOTAL_TIMEOUT,
                        streamed=True,
                    )
        finally:
            sel.close()

        process.wait()
        stdout_chunks, _ = channels[process.stdout.fileno()]
        stderr_chunks, _ = channels[process.stderr.fileno()]
        return CommandResult(
            command=args,
            stdout="".join(stdout_chunks).strip(),
            stderr="".join(stderr_chunks).strip(),
            exit_status=process.returncode,
            streamed=True,
        )

    def _terminate(self, process: subprocess.Popen) -> None:
        if process.poll() is not None:
            return
        logger.warning("Stopping child process %s", process.pid)
        process.terminate()
        try:
            process.wait(timeout=self.terminate_grace)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
