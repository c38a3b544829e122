"""Instagram reel publishing via the Graph API."""

from .client import InstagramAPIError, InstagramClient, sanitize_caption
from .models import ContainerStatus, InstagramConfig, PublishJob, PublishResult
from .publisher import SocialPublisher

__all__ = [
    "InstagramClient",
    "InstagramAPIError",
    "InstagramConfig",
    "ContainerStatus",
    "PublishJob",
    "PublishResult",
    "SocialPublisher",
    "sanitize_caption",
]
