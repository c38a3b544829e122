"""Global constants package for Product Reels.

PACKAGE STRUCTURE:
-----------------
- video.py    : Canvas size, frame rate, clip timing, overlay styling
- limits.py   : Retry, timeout and polling budgets, platform limits
- paths.py    : Temp and log directory helpers

USAGE EXAMPLES:
--------------
    from product_reels.constants import VIDEO_WIDTH, VIDEO_HEIGHT
    from product_reels.constants import get_reel_workdir
"""

from .limits import (
    AI_LOCAL_TIMEOUT_SECONDS,
    AI_HEALTH_CHECK_TIMEOUT_SECONDS,
    AI_TIMEOUT_SECONDS,
    DEFAULT_RUN_DEADLINE_SECONDS,
    DEGRADED_ENCODE_TIMEOUT_SECONDS,
    DOWNLOAD_TIMEOUT_SECONDS,
    INSTAGRAM_CAPTION_MAX_LENGTH,
    INSTAGRAM_HASHTAG_MAX_COUNT,
    PRIMARY_ENCODE_TIMEOUT_SECONDS,
    PUBLISH_POLL_INTERVAL_SECONDS,
    PUBLISH_POLL_MAX_ATTEMPTS,
    RETRY_BACKOFF_BASE_SECONDS,
    RETRY_BACKOFF_MAX_SECONDS,
    RETRY_JITTER_RATIO,
    RETRY_MAX_ATTEMPTS,
    RETRYABLE_STATUS_CODES,
    UPLOAD_TIMEOUT_SECONDS,
)
from .paths import (
    TEMP_DIR_NAME,
    get_logs_dir,
    get_reel_workdir,
    get_temp_dir,
    safe_path_component,
)
from .video import (
    AUDIO_CODEC,
    BACKGROUND_VOLUME,
    CLIP_DURATION_SECONDS,
    CLIP_TRANSITION_SECONDS,
    COLOR_CONTRAST,
    COLOR_SATURATION,
    FADE_OUT_SECONDS,
    MAX_REEL_DURATION_SECONDS,
    MAX_SOURCE_IMAGES,
    MIN_REEL_DURATION_SECONDS,
    NARRATION_VOLUME,
    VIDEO_CODEC,
    VIDEO_CRF,
    VIDEO_FPS,
    VIDEO_HEIGHT,
    VIDEO_PIXEL_FORMAT,
    VIDEO_PRESET,
    VIDEO_RESOLUTION,
    VIDEO_WIDTH,
)

__all__ = [
    # Video
    "VIDEO_WIDTH",
    "VIDEO_HEIGHT",
    "VIDEO_RESOLUTION",
    "VIDEO_FPS",
    "VIDEO_CODEC",
    "VIDEO_PRESET",
    "VIDEO_CRF",
    "VIDEO_PIXEL_FORMAT",
    "AUDIO_CODEC",
    "CLIP_DURATION_SECONDS",
    "CLIP_TRANSITION_SECONDS",
    "MIN_REEL_DURATION_SECONDS",
    "MAX_REEL_DURATION_SECONDS",
    "MAX_SOURCE_IMAGES",
    "COLOR_SATURATION",
    "COLOR_CONTRAST",
    "BACKGROUND_VOLUME",
    "NARRATION_VOLUME",
    "FADE_OUT_SECONDS",
    # Limits
    "AI_TIMEOUT_SECONDS",
    "AI_LOCAL_TIMEOUT_SECONDS",
    "AI_HEALTH_CHECK_TIMEOUT_SECONDS",
    "RETRY_MAX_ATTEMPTS",
    "RETRY_BACKOFF_BASE_SECONDS",
    "RETRY_BACKOFF_MAX_SECONDS",
    "RETRY_JITTER_RATIO",
    "RETRYABLE_STATUS_CODES",
    "DOWNLOAD_TIMEOUT_SECONDS",
    "UPLOAD_TIMEOUT_SECONDS",
    "PRIMARY_ENCODE_TIMEOUT_SECONDS",
    "DEGRADED_ENCODE_TIMEOUT_SECONDS",
    "PUBLISH_POLL_INTERVAL_SECONDS",
    "PUBLISH_POLL_MAX_ATTEMPTS",
    "DEFAULT_RUN_DEADLINE_SECONDS",
    "INSTAGRAM_CAPTION_MAX_LENGTH",
    "INSTAGRAM_HASHTAG_MAX_COUNT",
    # Paths
    "TEMP_DIR_NAME",
    "get_temp_dir",
    "get_logs_dir",
    "get_reel_workdir",
    "safe_path_component",
]
