"""Configuration stage descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List


@dataclass(frozen=True)
class StageDescriptor:
    """One Ansible playbook run, identified by name and shown with a label."""

    name: str
    playbook: str
    label: str = ""

    @property
    def display_label(self) -> str:
        return self.label or self.name

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "StageDescriptor":
        playbook = payload.get("playbook")
        if not playbook:
            raise ValueError(f"Stage descriptor is missing 'playbook': {payload!r}")
        name = payload.get("name") or playbook.rsplit(".", 1)[0]
        return cls(name=name, playbook=playbook, label=payload.get("label", ""))


def parse_stages(items: Iterable[Any]) -> List[StageDescriptor]:
    """Accept descriptors or plain dicts (as loaded from JSON), preserving order."""
    stages: List[StageDescriptor] = []
    for item in items:
        if isinstance(item, StageDescriptor):
            stages.append(item)
        else:
            stages.append(StageDescriptor.from_dict(item))
    return stages


DEFAULT_DEPLOY_STAGES = (
    StageDescriptor("webserver", "playbook.yml", "Nginx installation and website clone"),
    StageDescriptor("build", "build-nextjs.yml", "Node.js install and Next.js build"),
)
