"""SSH utilities for site-deployer."""

from .credentials import SSHCredentials
from .session import SSHCommandResult, SSHConnectionError, SSHSession
from .probe import ProbeResult, SSHReachabilityProbe

__all__ = [
    "SSHCredentials",
    "SSHCommandResult",
    "SSHConnectionError",
    "SSHSession",
    "ProbeResult",
    "SSHReachabilityProbe",
]
