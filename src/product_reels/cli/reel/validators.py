"""Reel-specific validators."""

from __future__ import annotations

from ...content.models import ReelGoal
from ...providers.config import ReelSettings
from ...video.models import AudioStyle
from ..core.types import Failure, Result, Success
from .params import ReelRunParams

VALID_GOALS = [goal.value for goal in ReelGoal]
VALID_AUDIO_STYLES = [style.value for style in AudioStyle]


def validate_reel_run_params(
    params: ReelRunParams,
    settings: ReelSettings,
) -> Result[ReelRunParams]:
    """Validate run parameters against the environment.

    Returns Result with params if valid, or Failure with error.
    """
    if params.raw_goal and params.raw_goal not in VALID_GOALS:
        return Failure(
            f"Invalid goal: {params.raw_goal}",
            {"valid_goals": ", ".join(VALID_GOALS)},
        )

    if params.raw_audio_style and params.raw_audio_style not in VALID_AUDIO_STYLES:
        return Failure(
            f"Invalid audio style: {params.raw_audio_style}",
            {"valid_styles": ", ".join(VALID_AUDIO_STYLES)},
        )

    if params.deadline_seconds is not None and params.deadline_seconds <= 0:
        return Failure(
            f"Invalid deadline: {params.deadline_seconds}",
            {"hint": "Deadline must be a positive number of seconds"},
        )

    if not (settings.shopify_store_domain and settings.shopify_storefront_token):
        return Failure(
            "Shopify credentials not configured",
            {"hint": "Set SHOPIFY_STORE_DOMAIN and SHOPIFY_STOREFRONT_TOKEN in .env"},
        )

    return Success(params)
