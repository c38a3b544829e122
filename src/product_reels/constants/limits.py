"""Limit constants for Product Reels.

This module contains retry, timeout and polling budgets plus the platform
limits that captions must respect.

MODIFICATION GUIDE:
------------------
- RETRY_* settings: Shared by every text provider in the cascade
- *_TIMEOUT_SECONDS: Every network call and subprocess carries one of these
- PUBLISH_POLL_*: interval * attempts is the processing ceiling (5 minutes)
"""

from typing import Final

# =============================================================================
# INSTAGRAM LIMITS
# =============================================================================

INSTAGRAM_CAPTION_MAX_LENGTH: Final[int] = 2200
"""Maximum caption length in characters for Instagram posts."""

INSTAGRAM_HASHTAG_MAX_COUNT: Final[int] = 30
"""Maximum number of hashtags allowed per post."""

PUBLISH_POLL_INTERVAL_SECONDS: Final[float] = 10.0
"""Wait between container status reads."""

PUBLISH_POLL_MAX_ATTEMPTS: Final[int] = 30
"""Status reads before giving up on container processing."""


# =============================================================================
# RETRY SETTINGS
# =============================================================================

RETRY_MAX_ATTEMPTS: Final[int] = 3
"""Attempts per text provider before the cascade moves on."""

RETRY_BACKOFF_BASE_SECONDS: Final[float] = 1.0
"""Delay before the first retry. Doubles on each further retry."""

RETRY_BACKOFF_MAX_SECONDS: Final[float] = 10.0
"""Cap on the backoff delay."""

RETRY_JITTER_RATIO: Final[float] = 0.1
"""Symmetric jitter applied to each backoff delay (+/- 10%)."""

RETRYABLE_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})
"""HTTP statuses that are worth retrying against the same provider."""


# =============================================================================
# TIMEOUTS
# =============================================================================

AI_TIMEOUT_SECONDS: Final[float] = 30.0
"""Request timeout for hosted text providers."""

AI_LOCAL_TIMEOUT_SECONDS: Final[float] = 60.0
"""Request timeout for the local provider, which is slower per token."""

AI_HEALTH_CHECK_TIMEOUT_SECONDS: Final[float] = 5.0
"""Timeout for the local provider reachability check."""

DOWNLOAD_TIMEOUT_SECONDS: Final[float] = 30.0
"""Timeout for product image and music downloads."""

UPLOAD_TIMEOUT_SECONDS: Final[float] = 120.0
"""Timeout for a single hosting upload."""

PRIMARY_ENCODE_TIMEOUT_SECONDS: Final[float] = 180.0
"""Timeout for the full-effects encode."""

DEGRADED_ENCODE_TIMEOUT_SECONDS: Final[float] = 120.0
"""Timeout for the simplified encode."""

DEFAULT_RUN_DEADLINE_SECONDS: Final[float] = 1200.0
"""Upper bound for a whole pipeline run.

Covers the cascade worst case, both encode paths, two uploads and the
publish polling ceiling.
"""
