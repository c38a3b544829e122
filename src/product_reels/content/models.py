"""Data models for reel script generation."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import INSTAGRAM_HASHTAG_MAX_COUNT

_HASHTAG_BODY = re.compile(r"\W+", re.UNICODE)


class ReelGoal(str, Enum):
    """What the reel is optimised for."""

    REACH = "reach"
    ENGAGEMENT = "engagement"
    CONVERSION = "conversion"


def normalize_hashtags(raw: Any, limit: int = INSTAGRAM_HASHTAG_MAX_COUNT) -> list[str]:
    """Normalize hashtags to ``#Tag`` form, de-duplicated, capped at limit.

    Accepts a list of tags or a single whitespace/comma separated string.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        items = re.split(r"[\s,]+", raw)
    else:
        items = [str(item) for item in raw]

    tags: list[str] = []
    seen: set[str] = set()
    for item in items:
        body = _HASHTAG_BODY.sub("", item.lstrip("#"))
        if not body:
            continue
        key = body.lower()
        if key in seen:
            continue
        seen.add(key)
        tags.append(f"#{body}")
        if len(tags) >= limit:
            break
    return tags


class ReelScript(BaseModel):
    """Finished reel script. Immutable after composition."""

    model_config = ConfigDict(frozen=True)

    hook: str
    scenes: list[str]
    on_screen_text: list[str] = Field(default_factory=list)
    caption: str
    hashtags: list[str]
    cta: str
    goal: ReelGoal = ReelGoal.REACH
    source: Literal["ai", "template"] = "ai"

    def full_caption(self) -> str:
        """Caption, hashtags and call-to-action as posted."""
        parts = [self.caption.strip(), " ".join(self.hashtags), self.cta.strip()]
        return "\n\n".join(part for part in parts if part)


class ScriptDraft(BaseModel):
    """Provider JSON before it becomes a ReelScript.

    Any missing or empty required field fails validation so the composer
    falls back to a template rather than shipping a partial script.
    """

    hook: str
    scenes: list[str]
    on_screen_text: list[str] = Field(default_factory=list)
    caption: str
    hashtags: list[str]
    cta: str = ""

    @field_validator("hook", "caption")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("scenes", "on_screen_text", mode="before")
    @classmethod
    def _clean_lines(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [str(item).strip() for item in value if str(item).strip()]
        return value

    @field_validator("scenes")
    @classmethod
    def _has_scenes(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("scene list must not be empty")
        return value

    @field_validator("hashtags", mode="before")
    @classmethod
    def _normalize_hashtags(cls, value: Any) -> list[str]:
        tags = normalize_hashtags(value)
        if not tags:
            raise ValueError("at least one hashtag is required")
        return tags

    def to_script(self, goal: ReelGoal, default_cta: str) -> ReelScript:
        return ReelScript(
            hook=self.hook,
            scenes=self.scenes,
            on_screen_text=self.on_screen_text,
            caption=self.caption,
            hashtags=self.hashtags,
            cta=self.cta.strip() or default_cta,
            goal=goal,
            source="ai",
        )


class ImageAnalysis(BaseModel):
    """What the vision model saw in the first product image."""

    colors: list[str] = Field(default_factory=list)
    style: str = ""
    mood: str = ""
    description: str = ""
