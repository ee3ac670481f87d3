"""SSH credential helpers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SSHCredentials:
    """Key-based login to the provisioned host."""

    host: str
    username: str
    key_path: str
    port: int = 22
    timeout: int = 5

    def validate(self) -> None:
        if not self.host:
            raise ValueError("SSH host is empty")
        if not self.key_path:
            raise ValueError("Key authentication selected but no key_path provided")

    @property
    def destination(self) -> str:
        return f"{self.username}@{self.host}"
