"""Infrastructure facts read from Terraform outputs."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping

from ..errors import OutputNotFound
from ..utils.logging import get_logger
from .terraform import TerraformClient

logger = get_logger(__name__)


class InfrastructureFacts(Mapping[str, str]):
    """Read-only mapping of output name to resolved value."""

    def __init__(self, values: Mapping[str, str]) -> None:
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"InfrastructureFacts({dict(self._values)!r})"


class FactExtractor:
    """Queries `terraform output -raw`. Pure reads, safe to call repeatedly."""

    def __init__(self, terraform: TerraformClient) -> None:
        self.terraform = terraform

    def get_output(self, name: str) -> str:
        result = self.terraform.output_raw(name)
        if not result.ok:
            raise OutputNotFound(name, result.diagnostic)
        value = result.stdout.strip()
        if not value:
            raise OutputNotFound(name, result.diagnostic)
        return value

    def collect(
        self, required: Iterable[str], optional: Iterable[str] = ()
    ) -> InfrastructureFacts:
        values: Dict[str, str] = {}
        for name in required:
            values[name] = self.get_output(name)
        for name in optional:
            if name in values:
                continue
            try:
                values[name] = self.get_output(name)
            except OutputNotFound as exc:
                logger.warning("Optional output '%s' unavailable: %s", name, exc.diagnostic or exc)
        return InfrastructureFacts(values)
