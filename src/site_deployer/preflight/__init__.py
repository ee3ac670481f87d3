"""Preflight checks."""

from .checker import CallerIdentity, PreflightChecker

__all__ = ["CallerIdentity", "PreflightChecker"]
