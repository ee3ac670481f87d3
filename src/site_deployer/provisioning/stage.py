"""Provisioning stage: terraform init, plan, confirm, apply."""

from __future__ import annotations

from pathlib import Path

from ..errors import ApplyFailed, InitFailed, PlanFailed, UserAborted
from ..interaction import ConfirmationProvider
from ..utils.logging import get_logger
from .terraform import TerraformClient

logger = get_logger(__name__)

APPLY_QUESTION = "Proceed with 'terraform apply'?"


class ProvisioningStage:
    """
    Drives Terraform to an applied state.

    The plan artifact is owned by this stage: it is created by ``plan``,
    consumed once by ``apply`` and removed whenever ``run`` exits, whether the
    apply succeeded, failed, or was declined. A retry always plans afresh.
    """

    def __init__(
        self,
        terraform: TerraformClient,
        confirmation: ConfirmationProvider,
        plan_path: Path,
    ) -> None:
        self.terraform = terraform
        self.confirmation = confirmation
        self.plan_path = Path(plan_path)
        self.apply_confirmed = False
        self.applied = False

    def run(self) -> None:
        logger.info("🏗️  Initialising Terraform...")
        result = self.terraform.init()
        if not result.ok:
            raise InitFailed("terraform init failed", result.diagnostic, echoed=result.streamed)
        logger.info("✅ Terraform initialised.")

        # A leftover artifact can only come from an interrupted earlier run
        self._discard_plan()
        try:
            self._plan_and_apply()
        finally:
            self._discard_plan()

    def _plan_and_apply(self) -> None:
        logger.info("📝 Running Terraform plan...")
        result = self.terraform.plan(self.plan_path)
        if not result.ok:
            raise PlanFailed("terraform plan failed", result.diagnostic, echoed=result.streamed)
        logger.info("✅ Terraform plan complete.")

        if not self.confirmation.confirm(APPLY_QUESTION):
            raise UserAborted()
        self.apply_confirmed = True

        logger.info("🚀 Applying Terraform plan...")
        result = self.terraform.apply(self.plan_path)
        if not result.ok:
            raise ApplyFailed("terraform apply failed", result.diagnostic, echoed=result.streamed)
        self.applied = True
        logger.info("✅ Terraform apply complete.")

    def _discard_plan(self) -> None:
        if self.plan_path.exists():
            self.plan_path.unlink()
            logger.debug("Removed plan artifact %s", self.plan_path)
