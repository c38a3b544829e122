"""Reel production pipeline orchestration."""

from .orchestrator import PipelineOrchestrator, ReelRunResult

__all__ = ["PipelineOrchestrator", "ReelRunResult"]
