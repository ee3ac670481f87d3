"""The linear deployment pipeline."""

from __future__ import annotations

import time
from typing import Callable, Optional

import requests

from ..config import AppConfig
from ..configure import ConfigurationRunner, InventoryWriter
from ..errors import ConfigError
from ..execution import CommandRunner
from ..interaction import CLIConfirmationProvider, ConfirmationProvider
from ..paths import plan_path
from ..preflight import PreflightChecker
from ..provisioning import FactExtractor, ProvisioningStage, TerraformClient
from ..readiness import ReadinessPoller
from ..readiness.poller import Probe
from ..reporting import DeploymentSummary, SummaryReporter, check_service
from ..ssh import SSHReachabilityProbe
from ..utils.logging import get_logger
from .models import PipelineRun, PipelineStage

logger = get_logger(__name__)


class DeploymentPipeline:
    """
    Preflight → provisioning → facts → inventory → readiness → configuration → summary.

    Each step must succeed before the next starts. Any ``DeploymentError`` or
    ``UserAborted`` propagates to the caller unchanged; nothing is rolled back.
    Collaborators are built from the config unless injected.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        runner: Optional[CommandRunner] = None,
        confirmation: Optional[ConfirmationProvider] = None,
        probe: Optional[Probe] = None,
        sleep: Callable[[float], None] = time.sleep,
        reporter: Optional[SummaryReporter] = None,
        http_session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.runner = runner or CommandRunner(env=config.environment.process_env())
        self.confirmation = confirmation or CLIConfirmationProvider()
        self.probe = probe or SSHReachabilityProbe(
            config.ssh.username,
            str(config.ssh_key_path),
            port=config.ssh.port,
            connect_timeout=config.readiness.connect_timeout,
        )
        self.sleep = sleep
        self.reporter = reporter or SummaryReporter()
        self.http_session = http_session
        self.terraform = TerraformClient(self.runner, config.paths.terraform)
        self.state = PipelineRun()

    def run(self) -> PipelineRun:
        config = self.config
        state = self.state
        self.reporter.banner()

        state.advance(PipelineStage.PREFLIGHT)
        self.build_preflight().check_prerequisites()

        state.advance(PipelineStage.PROVISIONING)
        provisioning = ProvisioningStage(
            self.terraform,
            self.confirmation,
            plan_path(config.paths.terraform),
        )
        try:
            provisioning.run()
        finally:
            state.apply_confirmed = provisioning.apply_confirmed

        state.advance(PipelineStage.FACTS)
        address_output = config.provisioning.address_output
        state.facts = FactExtractor(self.terraform).collect(
            [address_output], config.provisioning.extra_outputs
        )
        state.address = state.facts[address_output]
        logger.info("🌐 Instance public IP: %s", state.address)

        state.advance(PipelineStage.INVENTORY)
        inventory = config.paths.inventory
        if config.configuration.write_inventory:
            InventoryWriter(
                inventory,
                group=config.configuration.host_group,
                username=config.ssh.username,
                key_path=config.ssh_key_path,
            ).write(state.address)
        elif not inventory.is_file():
            raise ConfigError(f"Inventory not found at {inventory} and writing it is disabled")

        state.advance(PipelineStage.READINESS)
        poller = ReadinessPoller(
            self.probe,
            max_attempts=config.readiness.max_attempts,
            interval=config.readiness.interval,
            sleep=self.sleep,
        )
        try:
            state.probe_attempts = poller.wait_until_reachable(state.address)
        finally:
            state.reachability = poller.state

        state.advance(PipelineStage.CONFIGURATION)
        configuration = ConfigurationRunner(self.runner, config.paths.ansible, inventory)
        for position, descriptor in enumerate(config.configuration.stages, 1):
            configuration.run_stage(descriptor, position=position)
            state.completed_stages.append(descriptor.name)

        state.advance(PipelineStage.SUMMARY)
        self.reporter.report(self.build_summary(state.address))

        state.advance(PipelineStage.COMPLETE)
        return state

    def build_preflight(self) -> PreflightChecker:
        return PreflightChecker(
            self.runner,
            self.config.provisioning.required_tools,
            self.config.provisioning.identity_command,
        )

    def build_summary(self, address: str) -> DeploymentSummary:
        summary = DeploymentSummary(
            address=address,
            ssh_user=self.config.ssh.username,
            ssh_key=str(self.config.ssh_key_path),
            teardown=self.terraform.destroy_hint(),
        )
        if self.config.summary.verify_http:
            summary.service_check = check_service(
                summary.url,
                timeout=self.config.summary.http_timeout,
                session=self.http_session,
            )
        return summary
