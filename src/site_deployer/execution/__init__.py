"""Local command execution for site-deployer."""

from .runner import CommandResult, CommandRunner

__all__ = ["CommandResult", "CommandRunner"]
