"""Error taxonomy for the deployment pipeline.

Every ``DeploymentError`` is fatal to the pipeline and carries the raw output
of the tool that failed in ``diagnostic``. ``echoed`` marks a diagnostic the
operator already saw because the command streamed its output. ``UserAborted`` is deliberately not
a ``DeploymentError``: declining the apply confirmation is a clean stop.
"""

from __future__ import annotations

from typing import List, Optional


class DeploymentError(RuntimeError):
    """Base class for fatal pipeline failures."""

    def __init__(self, message: str, diagnostic: str = "", *, echoed: bool = False) -> None:
        super().__init__(message)
        self.diagnostic = diagnostic
        self.echoed = echoed


class ConfigError(DeploymentError):
    """Raised when the configuration cannot drive the requested command."""


class MissingTool(DeploymentError):
    def __init__(self, name: str) -> None:
        super().__init__(f"'{name}' is not installed or not in PATH.")
        self.name = name


class InvalidCredentials(DeploymentError):
    """Raised when the provider identity check fails."""

    def __init__(self, details: str, hints: Optional[List[str]] = None) -> None:
        super().__init__("AWS credentials check failed", diagnostic=details)
        self.details = details
        self.hints = list(hints or [])


class InitFailed(DeploymentError):
    pass


class PlanFailed(DeploymentError):
    pass


class ApplyFailed(DeploymentError):
    pass


class OutputNotFound(DeploymentError):
    def __init__(self, name: str, diagnostic: str = "") -> None:
        super().__init__(f"Terraform output '{name}' is missing or empty", diagnostic)
        self.name = name


class ReachabilityTimeout(DeploymentError):
    def __init__(self, address: str, attempts: int, last_detail: str = "") -> None:
        super().__init__(
            f"SSH did not become available on {address} after {attempts} attempts.",
            diagnostic=last_detail,
        )
        self.address = address
        self.attempts = attempts


class StageFailed(DeploymentError):
    def __init__(
        self,
        name: str,
        exit_code: int,
        position: Optional[int] = None,
        label: Optional[str] = None,
        diagnostic: str = "",
        echoed: bool = False,
    ) -> None:
        where = f"Stage {position} ({name})" if position is not None else f"Stage '{name}'"
        if label:
            where += f" [{label}]"
        super().__init__(f"{where} failed with exit code {exit_code}", diagnostic, echoed=echoed)
        self.name = name
        self.exit_code = exit_code
        self.position = position
        self.label = label


class UserAborted(Exception):
    """Raised when the operator declines a confirmation prompt."""

    def __init__(self, message: str = "Aborted by user.") -> None:
        super().__init__(message)
