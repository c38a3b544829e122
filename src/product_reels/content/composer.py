"""Reel script composition.

Asks the provider cascade for a JSON script and validates it; anything that
goes wrong (no provider, bad JSON, missing fields) is recovered locally with a
static template, so compose() always returns a script.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from datetime import date
from typing import Any, Callable

from pydantic import ValidationError

from ..catalog.models import Product
from ..errors import AllProvidersFailed, ScriptValidationFailed
from ..services.provider_cascade import ProviderCascade
from .image_analysis import ProductImageAnalyzer
from .models import ImageAnalysis, ReelGoal, ReelScript, ScriptDraft
from .prompts import build_script_prompt
from .templates import FALLBACK_TEMPLATES, render_fallback

logger = logging.getLogger(__name__)

_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def extract_json_object(text: str) -> dict[str, Any]:
    """Extract a JSON object from provider output.

    Handles bare JSON, markdown code fences and JSON surrounded by prose.

    Raises:
        ValueError: If no JSON object can be parsed.
    """
    candidates = [text.strip()]
    candidates.extend(match.strip() for match in _CODE_BLOCK.findall(text))
    object_match = _JSON_OBJECT.search(text)
    if object_match:
        candidates.append(object_match.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    raise ValueError("no JSON object in response")


def parse_script(raw: str, goal: ReelGoal) -> ReelScript:
    """Parse and validate provider output into a ReelScript.

    Raises:
        ScriptValidationFailed: Output is not JSON or misses a required field.
    """
    try:
        data = extract_json_object(raw)
        draft = ScriptDraft.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ScriptValidationFailed(f"Invalid script JSON: {e}") from e

    default_cta = FALLBACK_TEMPLATES[goal][0].cta
    return draft.to_script(goal, default_cta)


class ScriptComposer:
    """Builds ReelScripts from products.

    Example:
        composer = ScriptComposer(cascade, brand="ACME")
        script = await composer.compose(product, goal=ReelGoal.CONVERSION)
    """

    def __init__(
        self,
        cascade: ProviderCascade,
        brand: str = "BRAND",
        temperature: float = 0.8,
        today: Callable[[], date] = date.today,
        image_analyzer: ProductImageAnalyzer | None = None,
    ):
        self.cascade = cascade
        self.brand = brand
        self.temperature = temperature
        self._today = today
        self.image_analyzer = image_analyzer or ProductImageAnalyzer(cascade)

    async def compose(
        self,
        product: Product,
        goal: ReelGoal = ReelGoal.REACH,
        trend_hints: list[str] | None = None,
    ) -> ReelScript:
        """Compose a script for a product.

        Args:
            product: Catalog product.
            goal: What the reel is optimised for.
            trend_hints: Optional trending topics to weave into the copy.

        Returns:
            A validated AI script, or the goal's fallback template.
        """
        prompt = build_script_prompt(product, goal, trend_hints)
        try:
            raw = await self.cascade.generate(
                prompt,
                temperature=self.temperature,
                json_mode=True,
            )
            script = parse_script(raw, goal)
        except AllProvidersFailed as e:
            logger.warning(f"No text provider available, using {goal.value} template: {e}")
            return self._fallback(product, goal, trend_hints)
        except ScriptValidationFailed as e:
            logger.warning(f"Provider script rejected, using {goal.value} template: {e}")
            return self._fallback(product, goal, trend_hints)

        logger.info(f"Composed {goal.value} script: {script.hook!r}")
        return script

    async def compose_with_analysis(
        self,
        product: Product,
        goal: ReelGoal = ReelGoal.REACH,
        trend_hints: list[str] | None = None,
    ) -> tuple[ReelScript, ImageAnalysis | None]:
        """Compose the script and analyse the lead image concurrently."""
        if not product.images:
            return await self.compose(product, goal, trend_hints), None

        script, analysis = await asyncio.gather(
            self.compose(product, goal, trend_hints),
            self.image_analyzer.analyze(product.images[0]),
        )
        return script, analysis

    def _fallback(
        self,
        product: Product,
        goal: ReelGoal,
        trend_hints: list[str] | None,
    ) -> ReelScript:
        return render_fallback(
            product,
            goal,
            today=self._today(),
            brand=self.brand,
            trend_hints=trend_hints,
        )
