"""Terraform provisioning."""

from .facts import FactExtractor, InfrastructureFacts
from .stage import APPLY_QUESTION, ProvisioningStage
from .terraform import TerraformClient

__all__ = [
    "APPLY_QUESTION",
    "FactExtractor",
    "InfrastructureFacts",
    "ProvisioningStage",
    "TerraformClient",
]
