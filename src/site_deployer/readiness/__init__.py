"""Readiness polling for the provisioned host."""

from .poller import ReachabilityState, ReadinessPoller

__all__ = ["ReachabilityState", "ReadinessPoller"]
