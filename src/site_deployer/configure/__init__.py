"""Ansible configuration stages."""

from .inventory import InventoryWriter
from .runner import ConfigurationRunner
from .stages import DEFAULT_DEPLOY_STAGES, StageDescriptor, parse_stages

__all__ = [
    "ConfigurationRunner",
    "DEFAULT_DEPLOY_STAGES",
    "InventoryWriter",
    "StageDescriptor",
    "parse_stages",
]
