"""Runs Ansible against the provisioned host."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from ..errors import StageFailed
from ..execution import CommandRunner
from ..utils.logging import get_logger
from .stages import StageDescriptor

logger = get_logger(__name__)


class ConfigurationRunner:
    """
    Executes configuration stages strictly in order.

    A failing stage stops everything after it. Stages are never retried or
    skipped here; idempotency of a re-run is up to the playbooks themselves.
    """

    def __init__(
        self,
        runner: CommandRunner,
        ansible_dir: Path,
        inventory: Path,
        *,
        playbook_binary: str = "ansible-playbook",
        adhoc_binary: str = "ansible",
    ) -> None:
        self.runner = runner
        self.ansible_dir = Path(ansible_dir)
        self.inventory = Path(inventory)
        self.playbook_binary = playbook_binary
        self.adhoc_binary = adhoc_binary

    def run_stage(self, descriptor: StageDescriptor, position: Optional[int] = None) -> None:
        logger.info("⚙️  Running Ansible: %s", descriptor.display_label)
        result = self.runner.run(
            [
                self.playbook_binary,
                "--inventory",
                str(self.inventory),
                str(self.ansible_dir / descriptor.playbook),
            ]
        )
        if not result.ok:
            raise StageFailed(
                descriptor.name,
                result.exit_status,
                position=position,
                label=descriptor.label or None,
                diagnostic=result.diagnostic,
                echoed=result.streamed,
            )
        logger.info("✅ %s complete.", descriptor.display_label)

    def run_stages(self, descriptors: Iterable[StageDescriptor]) -> List[str]:
        """Run each descriptor in order; returns the names that completed."""
        completed: List[str] = []
        for position, descriptor in enumerate(descriptors, 1):
            self.run_stage(descriptor, position=position)
            completed.append(descriptor.name)
        return completed

    def run_module(
        self,
        pattern: str,
        module: str,
        module_args: str,
        *,
        become: bool = False,
        name: Optional[str] = None,
    ) -> None:
        """Run one ad-hoc Ansible module against the hosts matching ``pattern``."""
        command = [self.adhoc_binary, pattern, "-i", str(self.inventory)]
        if become:
            command.append("-b")
        command += ["-m", module, "-a", module_args]

        stage_name = name or module
        logger.info("⚙️  Running Ansible module %s on %s", module, pattern)
        result = self.runner.run(command)
        if not result.ok:
            raise StageFailed(
                stage_name,
                result.exit_status,
                diagnostic=result.diagnostic,
                echoed=result.streamed,
            )
