"""Immutable parameter dataclasses for reel commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...content.models import ReelGoal
from ...video.models import AudioStyle


@dataclass(frozen=True)
class ReelRunParams:
    """Immutable parameters for one pipeline run."""

    product_id: Optional[str]
    goal: ReelGoal
    audio_style: Optional[AudioStyle]
    trend_hints: tuple[str, ...]
    auto_publish: bool
    analyze_images: bool
    deadline_seconds: Optional[float]
    verbose: bool
    json_output: bool = False
    raw_goal: str = ""
    raw_audio_style: Optional[str] = None

    @classmethod
    def from_cli(
        cls,
        product_id: Optional[str] = None,
        goal: str = "reach",
        audio_style: Optional[str] = None,
        trend: Optional[list[str]] = None,
        no_publish: bool = False,
        analyze_images: bool = False,
        deadline: Optional[float] = None,
        verbose: bool = False,
        as_json: bool = False,
        **kwargs,
    ) -> "ReelRunParams":
        """Create from CLI arguments.

        Unknown goal or style names are kept in raw_goal / raw_audio_style
        and left for the validator to report.
        """
        goal_key = (goal or "reach").strip().lower()
        style_key = audio_style.strip().lower() if audio_style else None

        parsed_goal = ReelGoal(goal_key) if goal_key in ReelGoal._value2member_map_ else ReelGoal.REACH
        parsed_style = None
        if style_key and style_key in AudioStyle._value2member_map_:
            parsed_style = AudioStyle(style_key)

        hints = tuple(t.strip() for t in (trend or []) if t and t.strip())

        return cls(
            product_id=product_id.strip() if product_id else None,
            goal=parsed_goal,
            audio_style=parsed_style,
            trend_hints=hints,
            auto_publish=not no_publish,
            analyze_images=analyze_images,
            deadline_seconds=deadline,
            verbose=verbose,
            json_output=as_json,
            raw_goal=goal_key,
            raw_audio_style=style_key,
        )
