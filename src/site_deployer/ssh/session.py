"""SSH session management built on Paramiko."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Callable, Optional

import paramiko

from .credentials import SSHCredentials


class SSHConnectionError(RuntimeError):
    """Raised when an SSH connection cannot be established."""

    pass


@dataclass
class SSHCommandResult:
    command: str
    stdout: str
    stderr: str
    exit_status: int

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


class SSHSession:
    """High-level wrapper around paramiko.SSHClient.

    Host keys of a freshly provisioned instance are unknown, so they are
    accepted on first contact. Only the configured key file is offered; the
    agent and ~/.ssh keys are never consulted and nothing prompts.
    """

    def __init__(
        self,
        credentials: SSHCredentials,
        *,
        client_factory: Callable[[], paramiko.SSHClient] | None = None,
    ) -> None:
        self.credentials = credentials
        self._client_factory = client_factory or paramiko.SSHClient
        self._client: Optional[paramiko.SSHClient] = None

    def __enter__(self) -> "SSHSession":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.close()

    def connect(self) -> None:
        if self._client:
            return
        client = self._client_factory()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        connect_kwargs = {
            "hostname": self.credentials.host,
            "port": self.credentials.port,
            "username": self.credentials.username,
            "key_filename": self.credentials.key_path,
            "timeout": self.credentials.timeout,
            "banner_timeout": self.credentials.timeout,
            "auth_timeout": self.credentials.timeout,
            "look_for_keys": False,
            "allow_agent": False,
        }
        try:
            client.connect(**connect_kwargs)
        except (paramiko.SSHException, OSError, EOFError) as exc:
            client.close()
            raise SSHConnectionError(str(exc) or exc.__class__.__name__) from exc
        self._client = client

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def run(self, command: str, *, timeout: Optional[int] = None) -> SSHCommandResult:
        """Execute a command on the remote host and wait for it to finish."""
        if not self._client:
            self.connect()
        assert self._client is not None

        if timeout is None:
            timeout = self.credentials.timeout

        try:
            _, stdout, stderr = self._client.exec_command(command, timeout=timeout)
        except (paramiko.SSHException, OSError) as exc:
            raise SSHConnectionError(str(exc) or exc.__class__.__name__) from exc
        channel = stdout.channel
        # recv_exit_status() has no timeout of its own
        if not channel.status_event.wait(timeout):
            channel.close()
            return self._timed_out(command, timeout)
        try:
            exit_status = channel.recv_exit_status()
            stdout_text = stdout.read().decode("utf-8", errors="replace")
            stderr_text = stderr.read().decode("utf-8", errors="replace")
        except socket.timeout:
            return self._timed_out(command, timeout)

        return SSHCommandResult(
            command=command,
            stdout=stdout_text.strip(),
            stderr=stderr_text.strip(),
            exit_status=exit_status,
        )

    @staticmethod
    def _timed_out(command: str, timeout: int) -> SSHCommandResult:
        return SSHCommandResult(
            command=command,
            stdout="",
            stderr=f"TIMEOUT: Command did not complete within {timeout} seconds.",
            exit_status=-1,
        )
