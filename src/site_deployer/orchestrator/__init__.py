"""Orchestrator module for the deployment pipeline.

- DeploymentPipeline: drives every stage in order, fail-fast
- PipelineRun/PipelineStage: state of the current invocation
"""

from .models import PipelineRun, PipelineStage
from .pipeline import DeploymentPipeline

__all__ = ["DeploymentPipeline", "PipelineRun", "PipelineStage"]
