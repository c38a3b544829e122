"""Data models for Instagram reel publishing."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


@dataclass
class InstagramConfig:
    """Instagram API configuration loaded from environment."""
    instagram_user_id: str
    access_token: str

    # API settings
    api_version: str = "v21.0"

    @classmethod
    def from_env(cls) -> "InstagramConfig":
        """Load configuration from environment variables.

        Raises:
            ValueError: If a required variable is missing.
        """
        instagram_user_id = os.getenv("INSTAGRAM_USER_ID")
        access_token = os.getenv("INSTAGRAM_ACCESS_TOKEN")

        missing = []
        if not instagram_user_id:
            missing.append("INSTAGRAM_USER_ID")
        if not access_token:
            missing.append("INSTAGRAM_ACCESS_TOKEN")
        if missing:
            raise ValueError(f"Missing Instagram settings: {', '.join(missing)}")

        return cls(instagram_user_id=instagram_user_id, access_token=access_token)


class ContainerStatus(str, Enum):
    """Processing state of a reel container."""

    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    ERROR = "ERROR"
    EXPIRED = "EXPIRED"
    TIMED_OUT = "TIMED_OUT"

    @classmethod
    def parse(cls, value: str | None) -> "ContainerStatus":
        """Map a Graph API status_code. A missing code counts as finished."""
        if not value:
            return cls.FINISHED
        try:
            return cls(value.upper())
        except ValueError:
            return cls.IN_PROGRESS


@dataclass
class PublishJob:
    """A remote container being processed, polled by SocialPublisher."""
    container_id: str
    status: ContainerStatus = ContainerStatus.IN_PROGRESS
    attempts: int = 0
    status_message: str | None = None
    failed_polls: int = 0


@dataclass
class PublishResult:
    """Outcome of a successful reel publish."""
    media_id: str
    job: PublishJob
    permalink: str | None = None

    def to_dict(self) -> dict:
        return {
            "media_id": self.media_id,
            "container_id": self.job.container_id,
            "poll_attempts": self.job.attempts,
            "permalink": self.permalink,
        }
