"""Thin wrapper around the terraform CLI."""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..execution import CommandResult, CommandRunner


class TerraformClient:
    """Builds terraform invocations against one root module directory."""

    def __init__(self, runner: CommandRunner, terraform_dir: Path, binary: str = "terraform") -> None:
        self.runner = runner
        self.terraform_dir = Path(terraform_dir)
        self.binary = binary

    def _base(self) -> List[str]:
        return [self.binary, f"-chdir={self.terraform_dir}"]

    def init(self) -> CommandResult:
        return self.runner.run(self._base() + ["init", "-input=false"])

    def plan(self, plan_path: Path) -> CommandResult:
        return self.runner.run(
            self._base() + ["plan", "-input=false", f"-out={Path(plan_path).resolve()}"]
        )

    def apply(self, plan_path: Path) -> CommandResult:
        return self.runner.run(
            self._base() + ["apply", "-input=false", str(Path(plan_path).resolve())]
        )

    def output_raw(self, name: str) -> CommandResult:
        return self.runner.run(self._base() + ["output", "-raw", name], stream_output=False)

    def destroy_hint(self) -> str:
        return f"cd {self.terraform_dir} && {self.binary} destroy"
