"""Exception hierarchy for the reel production pipeline.

Every typed failure a stage can surface derives from ReelPipelineError, so
callers can catch the whole family at the CLI boundary.
"""

from __future__ import annotations


class ReelPipelineError(Exception):
    """Base exception for pipeline errors."""

    pass


# =============================================================================
# TEXT GENERATION
# =============================================================================

class AllProvidersFailed(ReelPipelineError):
    """Every configured text provider was skipped or exhausted its retries."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        if errors:
            detail = "; ".join(f"{name}: {msg}" for name, msg in errors.items())
        else:
            detail = "no provider configured"
        super().__init__(f"ALL_AI_SERVICES_FAILED ({detail})")


class ScriptValidationFailed(ReelPipelineError):
    """Provider output was not a usable reel script.

    Recovered inside ScriptComposer via fallback templates.
    """

    pass


# =============================================================================
# VIDEO
# =============================================================================

class NoProductImages(ReelPipelineError):
    """Product has no downloadable images to build a timeline from."""

    pass


class EncodingFailed(ReelPipelineError):
    """Both the full-effects and the degraded render paths failed."""

    def __init__(self, primary_error: str, degraded_error: str):
        self.primary_error = primary_error
        self.degraded_error = degraded_error
        super().__init__(
            f"Video encoding failed. Primary: {primary_error}. Degraded: {degraded_error}"
        )


# =============================================================================
# HOSTING
# =============================================================================

class AllUploadTargetsFailed(ReelPipelineError):
    """Primary and backup hosting services both rejected the upload."""

    def __init__(self, primary_error: str, secondary_error: str):
        self.primary_error = primary_error
        self.secondary_error = secondary_error
        super().__init__(
            f"All upload services failed. Primary: {primary_error}. Backup: {secondary_error}"
        )


# =============================================================================
# SOCIAL PUBLISHING
# =============================================================================

class SocialPublishError(ReelPipelineError):
    """Base for failures while posting the reel to the social platform."""

    pass


class ContainerCreationFailed(SocialPublishError):
    """The platform refused to create a media container."""

    pass


class ProcessingTimeout(SocialPublishError):
    """The container never became ready within the polling budget."""

    pass


class ProcessingFailed(SocialPublishError):
    """The platform reported an ERROR status while processing the video."""

    pass


class PublishCallFailed(SocialPublishError):
    """The container was ready but the publish call failed."""

    pass


# =============================================================================
# ORCHESTRATION
# =============================================================================

class CatalogError(ReelPipelineError):
    """Product could not be read from the catalog."""

    pass


class PipelineStageError(ReelPipelineError):
    """A pipeline stage failed; wraps the underlying cause."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"{stage} failed: {message}")


class PipelineDeadlineExceeded(ReelPipelineError):
    """The run-level deadline expired before the pipeline finished."""

    def __init__(self, deadline_seconds: float, stage: str | None = None):
        self.deadline_seconds = deadline_seconds
        self.stage = stage
        where = f" during {stage}" if stage else ""
        super().__init__(f"Pipeline exceeded its {deadline_seconds:.0f}s deadline{where}")
