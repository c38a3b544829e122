"""Pipeline orchestrator - one product in, one hosted (and posted) reel out.

Stages run strictly in order: script -> timeline -> encode -> upload ->
publish. All intermediate files live in a per-product temp directory that
is removed when the run ends, however it ends.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, TypeVar

from rich.console import Console

from ..catalog.models import Product
from ..catalog.shopify import Catalog, ShopifyCatalog
from ..constants import DEFAULT_RUN_DEADLINE_SECONDS, get_reel_workdir
from ..content.composer import ScriptComposer
from ..content.models import ImageAnalysis, ReelGoal, ReelScript
from ..errors import (
    CatalogError,
    PipelineDeadlineExceeded,
    PipelineStageError,
    ReelPipelineError,
    SocialPublishError,
)
from ..hosting.models import HostedAsset
from ..hosting.uploader import AssetPublisher
from ..instagram.client import InstagramClient
from ..instagram.models import InstagramConfig, PublishResult
from ..instagram.publisher import SocialPublisher
from ..providers.config import ProviderConfig, ReelSettings
from ..services.provider_cascade import ProviderCascade
from ..video.encoder import MediaEncoder
from ..video.models import AudioStyle, RenderedAsset
from ..video.timeline import TimelineBuilder

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ReelRunResult:
    """Outcome of a pipeline run.

    post_error is set when rendering and hosting succeeded but the
    automatic post did not.
    """

    product: Product
    script: ReelScript
    rendered: RenderedAsset
    hosted: HostedAsset
    published: PublishResult | None = None
    post_error: str | None = None
    image_analysis: ImageAnalysis | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the result payload shape."""
        return {
            "success": True,
            "product": {"id": self.product.id, "title": self.product.title},
            "video": {
                "duration": self.rendered.duration,
                "resolution": self.rendered.resolution,
                "public_url": self.hosted.url,
                "expires": self.hosted.expires,
                "host": self.hosted.host,
                "degraded": self.rendered.degraded,
            },
            "content": {
                "type": "reel",
                "goal": self.script.goal.value,
                "source": self.script.source,
                "hook": self.script.hook,
                "scenes": list(self.script.scenes),
                "caption": self.script.caption,
                "hashtags": list(self.script.hashtags),
                "cta": self.script.cta,
            },
            "posted": (
                self.published.to_dict() if self.published
                else {"media_id": None, "permalink": None}
            ),
            "post_error": self.post_error,
            "image_analysis": (
                self.image_analysis.model_dump() if self.image_analysis else None
            ),
        }


@dataclass
class _RunState:
    stage: str = "start"
    workdir: Path | None = None


class PipelineOrchestrator:
    """Sequences the reel stages for one product at a time.

    Runs for different products may share one orchestrator concurrently; two
    runs of the same product id must not overlap since they share a workdir.

    Example:
        orchestrator = PipelineOrchestrator.from_settings(ReelSettings())
        result = await orchestrator.run(goal=ReelGoal.REACH, audio_style="phonk")
    """

    def __init__(
        self,
        catalog: Catalog,
        composer: ScriptComposer,
        timeline_builder: TimelineBuilder,
        encoder: MediaEncoder,
        asset_publisher: AssetPublisher,
        social_publisher: SocialPublisher | None = None,
        work_root: Path | None = None,
        deadline_seconds: float = DEFAULT_RUN_DEADLINE_SECONDS,
    ):
        self.catalog = catalog
        self.composer = composer
        self.timeline_builder = timeline_builder
        self.encoder = encoder
        self.asset_publisher = asset_publisher
        self.social_publisher = social_publisher
        self.work_root = work_root
        self.deadline_seconds = deadline_seconds

    @classmethod
    def from_settings(
        cls,
        settings: ReelSettings,
        provider_config: ProviderConfig | None = None,
        console: Console | None = None,
        deadline_seconds: float | None = None,
    ) -> "PipelineOrchestrator":
        """Wire every stage from environment settings.

        Raises:
            CatalogError: Shopify credentials are missing.
        """
        if not (settings.shopify_store_domain and settings.shopify_storefront_token):
            raise CatalogError(
                "SHOPIFY_STORE_DOMAIN and SHOPIFY_STOREFRONT_TOKEN must be set"
            )
        catalog = ShopifyCatalog(settings.shopify_store_domain, settings.shopify_storefront_token)
        cascade = ProviderCascade(provider_config=provider_config, console=console)

        social_publisher = None
        if settings.instagram_configured:
            client = InstagramClient(InstagramConfig(
                instagram_user_id=settings.instagram_user_id,
                access_token=settings.instagram_access_token,
            ))
            social_publisher = SocialPublisher(client)

        return cls(
            catalog=catalog,
            composer=ScriptComposer(cascade, brand=settings.reel_brand_name),
            timeline_builder=TimelineBuilder(brand=settings.reel_brand_name),
            encoder=MediaEncoder(
                font_path=settings.reel_font_path,
                ffmpeg_path=settings.ffmpeg_binary,
            ),
            asset_publisher=AssetPublisher(),
            social_publisher=social_publisher,
            deadline_seconds=deadline_seconds or settings.reel_run_deadline_seconds,
        )

    async def _stage(self, state: _RunState, name: str, awaitable: Awaitable[T]) -> T:
        """Run one stage, wrapping its failure with the stage name."""
        state.stage = name
        logger.info(f"[{name}] started")
        try:
            result = await awaitable
        except ReelPipelineError as e:
            raise PipelineStageError(name, f"{type(e).__name__}: {e}") from e
        except Exception as e:
            logger.exception(f"[{name}] unexpected failure")
            raise PipelineStageError(name, str(e) or type(e).__name__) from e
        logger.info(f"[{name}] done")
        return result

    async def _fetch_product(self, product_id: str | None) -> Product:
        if product_id:
            return await self.catalog.fetch_product(product_id)
        return await self.catalog.fetch_random_product()

    def _cleanup(self, workdir: Path | None) -> None:
        if workdir is None:
            return
        try:
            shutil.rmtree(workdir)
            logger.debug(f"Removed workdir {workdir}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove workdir {workdir}: {e}")

    async def _run(
        self,
        state: _RunState,
        product_id: str | None,
        goal: ReelGoal,
        audio_style: AudioStyle | str | None,
        trend_hints: list[str] | None,
        auto_publish: bool,
        analyze_images: bool,
    ) -> ReelRunResult:
        product = await self._stage(state, "catalog", self._fetch_product(product_id))
        logger.info(f"Product: {product.title} ({product.id}), {len(product.images)} images")

        workdir = get_reel_workdir(product.id, self.work_root)
        state.workdir = workdir
        try:
            analysis = None
            if analyze_images:
                script, analysis = await self._stage(
                    state, "script",
                    self.composer.compose_with_analysis(product, goal, trend_hints),
                )
            else:
                script = await self._stage(
                    state, "script",
                    self.composer.compose(product, goal, trend_hints),
                )

            timeline = await self._stage(
                state, "timeline",
                self.timeline_builder.build(product, script, workdir, audio_style),
            )
            rendered = await self._stage(
                state, "encode",
                self.encoder.encode(timeline, workdir / "reel.mp4"),
            )
            hosted = await self._stage(
                state, "upload",
                self.asset_publisher.publish(rendered.path),
            )

            result = ReelRunResult(
                product=product,
                script=script,
                rendered=rendered,
                hosted=hosted,
                image_analysis=analysis,
            )

            if auto_publish:
                state.stage = "publish"
                if self.social_publisher is None:
                    result.post_error = "Instagram is not configured"
                else:
                    try:
                        result.published = await self.social_publisher.publish(
                            hosted, script.full_caption()
                        )
                    except SocialPublishError as e:
                        logger.error(f"Auto-publish failed: {e}")
                        result.post_error = str(e)

            return result
        finally:
            self._cleanup(workdir)

    async def run(
        self,
        product_id: str | None = None,
        goal: ReelGoal = ReelGoal.REACH,
        audio_style: AudioStyle | str | None = None,
        trend_hints: list[str] | None = None,
        auto_publish: bool = True,
        analyze_images: bool = False,
    ) -> ReelRunResult:
        """Produce (and optionally post) a reel for one product.

        Args:
            product_id: Catalog id, or None for a random product.
            goal: Reel goal driving the script.
            audio_style: Background music style, or None for random.
            trend_hints: Trending topics for the copy.
            auto_publish: Post to Instagram after hosting.
            analyze_images: Describe the lead image alongside the script.

        Returns:
            ReelRunResult; post_error is set when only the post failed.

        Raises:
            PipelineStageError: A stage before publishing failed.
            PipelineDeadlineExceeded: The run took longer than the deadline.
        """
        state = _RunState()
        try:
            return await asyncio.wait_for(
                self._run(
                    state, product_id, goal, audio_style,
                    trend_hints, auto_publish, analyze_images,
                ),
                timeout=self.deadline_seconds,
            )
        except asyncio.TimeoutError as e:
            self._cleanup(state.workdir)
            raise PipelineDeadlineExceeded(self.deadline_seconds, state.stage) from e
