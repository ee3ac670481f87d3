"""Operator interaction."""

from .handler import (
    AutoConfirmationProvider,
    CLIConfirmationProvider,
    ConfirmationProvider,
    is_affirmative,
)

__all__ = [
    "AutoConfirmationProvider",
    "CLIConfirmationProvider",
    "ConfirmationProvider",
    "is_affirmative",
]
