"""Operator-facing banner and final summary."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from .health import ServiceCheck

RULE = "═" * 42


@dataclass
class DeploymentSummary:
    address: str
    ssh_user: str
    ssh_key: str
    teardown: str
    service_check: Optional[ServiceCheck] = None

    @property
    def url(self) -> str:
        return f"http://{self.address}"

    @property
    def ssh_command(self) -> str:
        return f"ssh -i {self.ssh_key} {self.ssh_user}@{self.address}"


class SummaryReporter:
    """Prints to the operator's terminal; it only ever runs after a full success."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def banner(self) -> None:
        self._print()
        self._print("╔" + "═" * 42 + "╗")
        for line in ("Static Website Deployment", "Terraform + Ansible on AWS EC2"):
            self._print("║" + f"   {line}".ljust(42) + "║")
        self._print("╚" + "═" * 42 + "╝")
        self._print()

    def report(self, summary: DeploymentSummary) -> None:
        self._print()
        self._print(RULE)
        self._print("  Deployment complete!")
        self._print(RULE)
        self._print(f"  Website URL  : {summary.url}")
        if summary.service_check is not None:
            marker = "✅" if summary.service_check.ok else "⚠️"
            self._print(f"  HTTP check   : {marker} {summary.service_check.describe()}")
        self._print(f"  SSH access   : {summary.ssh_command}")
        self._print(f"  Destroy all  : {summary.teardown}")
        self._print(RULE)
