"""Operator-facing reporting."""

from .health import ServiceCheck, check_service
from .summary import DeploymentSummary, SummaryReporter

__all__ = ["DeploymentSummary", "ServiceCheck", "SummaryReporter", "check_service"]
