"""Data models for the orchestrator module."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..provisioning.facts import InfrastructureFacts
from ..readiness.poller import ReachabilityState


class PipelineStage(Enum):
    """流水线阶段（严格按顺序推进）"""
    STARTING = "starting"
    PREFLIGHT = "preflight"
    PROVISIONING = "provisioning"
    FACTS = "facts"
    INVENTORY = "inventory"
    READINESS = "readiness"
    CONFIGURATION = "configuration"
    SUMMARY = "summary"
    COMPLETE = "complete"


@dataclass
class PipelineRun:
    """State of one invocation. Lives for the process only, never persisted."""
    stage: PipelineStage = PipelineStage.STARTING
    apply_confirmed: bool = False
    facts: Optional[InfrastructureFacts] = None
    address: Optional[str] = None
    reachability: ReachabilityState = ReachabilityState.UNKNOWN
    probe_attempts: int = 0
    completed_stages: List[str] = field(default_factory=list)

    def advance(self, stage: PipelineStage) -> None:
        self.stage = stage

    @property
    def succeeded(self) -> bool:
        return self.stage is PipelineStage.COMPLETE
