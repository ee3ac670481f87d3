"""Single-shot SSH reachability probe."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import paramiko

from ..utils.logging import get_logger
from .credentials import SSHCredentials
from .session import SSHConnectionError, SSHSession

logger = get_logger(__name__)

READY_COMMAND = 'echo "SSH ready"'


@dataclass
class ProbeResult:
    reachable: bool
    detail: str = ""


class SSHReachabilityProbe:
    """Attempts one SSH handshake plus a trivial command against an address.

    A probe never retries; retrying is the readiness poller's job.
    """

    def __init__(
        self,
        username: str,
        key_path: str,
        *,
        port: int = 22,
        connect_timeout: int = 5,
        client_factory: Optional[Callable[[], paramiko.SSHClient]] = None,
    ) -> None:
        self.username = username
        self.key_path = key_path
        self.port = port
        self.connect_timeout = connect_timeout
        self._client_factory = client_factory

    def credentials_for(self, address: str) -> SSHCredentials:
        return SSHCredentials(
            host=address,
            username=self.username,
            key_path=self.key_path,
            port=self.port,
            timeout=self.connect_timeout,
        )

    def __call__(self, address: str) -> ProbeResult:
        credentials = self.credentials_for(address)
        credentials.validate()
        session = SSHSession(credentials, client_factory=self._client_factory)
        try:
            session.connect()
            result = session.run(READY_COMMAND)
        except SSHConnectionError as exc:
            logger.debug("SSH probe to %s failed: %s", credentials.destination, exc)
            return ProbeResult(reachable=False, detail=str(exc))
        finally:
            session.close()

        if not result.ok:
            return ProbeResult(
                reachable=False,
                detail=result.stderr or f"exit status {result.exit_status}",
            )
        return ProbeResult(reachable=True, detail=result.stdout)
