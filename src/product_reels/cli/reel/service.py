"""Service wrapper that turns a pipeline run into a Result."""

from __future__ import annotations

import logging

from ...errors import PipelineDeadlineExceeded, PipelineStageError, ReelPipelineError
from ...pipeline.orchestrator import PipelineOrchestrator, ReelRunResult
from ...providers.config import ReelSettings, load_provider_config
from ..core.console import progress_console
from ..core.types import Failure, Result, Success
from .params import ReelRunParams

logger = logging.getLogger(__name__)


class ReelRunService:
    """Runs the pipeline for CLI parameters.

    Args:
        settings: Environment settings.
        orchestrator: Prebuilt orchestrator (tests); built from settings
            otherwise.
    """

    def __init__(
        self,
        settings: ReelSettings,
        orchestrator: PipelineOrchestrator | None = None,
    ):
        self.settings = settings
        self._orchestrator = orchestrator

    def _build(self, params: ReelRunParams) -> PipelineOrchestrator:
        if self._orchestrator is not None:
            return self._orchestrator
        return PipelineOrchestrator.from_settings(
            self.settings,
            provider_config=load_provider_config(),
            console=progress_console(params.json_output),
            deadline_seconds=params.deadline_seconds,
        )

    async def run(self, params: ReelRunParams) -> Result[ReelRunResult]:
        try:
            orchestrator = self._build(params)
            result = await orchestrator.run(
                product_id=params.product_id,
                goal=params.goal,
                audio_style=params.audio_style,
                trend_hints=list(params.trend_hints),
                auto_publish=params.auto_publish,
                analyze_images=params.analyze_images,
            )
        except PipelineStageError as e:
            return Failure(str(e), {"stage": e.stage})
        except PipelineDeadlineExceeded as e:
            return Failure(str(e), {"stage": e.stage or "unknown"})
        except ReelPipelineError as e:
            return Failure(str(e))
        return Success(result)
