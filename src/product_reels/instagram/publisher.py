"""Reel publishing state machine.

Created -> Polling -> Finished -> Published, or a terminal error:
ContainerCreationFailed, ProcessingFailed, ProcessingTimeout or
PublishCallFailed. Nothing is deleted on partial failure; a container stuck
in processing is left for the platform to expire.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from ..constants import PUBLISH_POLL_INTERVAL_SECONDS, PUBLISH_POLL_MAX_ATTEMPTS
from ..errors import (
    ContainerCreationFailed,
    ProcessingFailed,
    ProcessingTimeout,
    PublishCallFailed,
)
from ..hosting.models import HostedAsset
from .client import InstagramAPIError, InstagramClient
from .models import ContainerStatus, PublishJob, PublishResult

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class SocialPublisher:
    """Posts a hosted video as a reel and waits for it to process.

    Args:
        client: Graph API client.
        poll_interval: Seconds between status reads.
        max_attempts: Status reads before giving up.
        sleep: Async sleep (inject a fake to skip real waiting).
    """

    def __init__(
        self,
        client: InstagramClient,
        poll_interval: float = PUBLISH_POLL_INTERVAL_SECONDS,
        max_attempts: int = PUBLISH_POLL_MAX_ATTEMPTS,
        sleep: SleepFn | None = None,
    ):
        self.client = client
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._sleep = sleep or asyncio.sleep

    @property
    def timeout_seconds(self) -> float:
        return self.poll_interval * self.max_attempts

    async def create_job(
        self,
        hosted: HostedAsset,
        caption: str,
        cover_url: str | None = None,
    ) -> PublishJob:
        """Create the remote container.

        Raises:
            ContainerCreationFailed: Any API or network failure.
        """
        try:
            container_id = await self.client.create_reel_container(
                video_url=hosted.url,
                caption=caption,
                cover_url=cover_url,
            )
        except (InstagramAPIError, httpx.HTTPError) as e:
            raise ContainerCreationFailed(f"Could not create reel container: {e}") from e

        logger.info(f"Reel container created: {container_id}")
        return PublishJob(container_id=container_id)

    async def wait_until_ready(self, job: PublishJob) -> PublishJob:
        """Poll the container until it is FINISHED.

        Each attempt waits one interval and then reads the status. Failed
        reads are tolerated and simply use up that attempt.

        Raises:
            ProcessingFailed: The platform reported ERROR.
            ProcessingTimeout: EXPIRED, or the attempt budget ran out.
        """
        while job.attempts < self.max_attempts:
            await self._sleep(self.poll_interval)
            job.attempts += 1

            try:
                status = await self.client.get_container_status(job.container_id)
            except (InstagramAPIError, httpx.HTTPError) as e:
                job.failed_polls += 1
                logger.debug(f"Status poll {job.attempts}/{self.max_attempts} failed: {e}")
                continue

            job.status = ContainerStatus.parse(status.get("status_code"))
            job.status_message = status.get("status")
            logger.info(
                f"Container {job.container_id} status: {job.status.value} "
                f"({job.attempts}/{self.max_attempts})"
            )

            if job.status == ContainerStatus.FINISHED:
                return job
            if job.status == ContainerStatus.ERROR:
                raise ProcessingFailed(
                    f"Reel processing failed: {job.status_message or 'unknown error'}"
                )
            if job.status == ContainerStatus.EXPIRED:
                raise ProcessingTimeout("Reel container expired before it could be published")

        job.status = ContainerStatus.TIMED_OUT
        minutes = self.timeout_seconds / 60
        raise ProcessingTimeout(f"Reel processing timed out after {minutes:g} minutes")

    async def publish(
        self,
        hosted: HostedAsset,
        caption: str,
        cover_url: str | None = None,
    ) -> PublishResult:
        """Create, wait for and publish a reel.

        Args:
            hosted: Public video location.
            caption: Full post caption.
            cover_url: Optional cover image URL.

        Returns:
            PublishResult with the media id.

        Raises:
            SocialPublishError: One of its subclasses for each terminal state.
        """
        job = await self.create_job(hosted, caption, cover_url)
        await self.wait_until_ready(job)

        try:
            media_id = await self.client.publish_container(job.container_id)
        except (InstagramAPIError, httpx.HTTPError) as e:
            raise PublishCallFailed(f"Publish call failed: {e}") from e

        logger.info(f"Reel published: {media_id}")
        permalink = await self.client.get_media_permalink(media_id)
        return PublishResult(media_id=media_id, job=job, permalink=permalink)
