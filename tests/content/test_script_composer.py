"""Tests for ScriptComposer: provider scripts, validation and fallback."""

from __future__ import annotations

import json
from datetime import date
from unittest.mock import AsyncMock

import pytest

from product_reels.content.composer import ScriptComposer, extract_json_object, parse_script
from product_reels.content.models import ImageAnalysis, ReelGoal
from product_reels.errors import AllProvidersFailed, ScriptValidationFailed

VALID_SCRIPT = {
    "hook": "This hoodie sold out twice",
    "scenes": ["Close-up of the fabric", "Full fit in motion"],
    "on_screen_text": ["SOLD OUT TWICE", "BACK NOW"],
    "caption": "Restocked. Not for long.",
    "hashtags": ["Hoodie", "#streetwear", "#Hoodie", "winter fit"],
    "cta": "Tap the link in bio",
}


def make_composer(generate) -> ScriptComposer:
    cascade = AsyncMock()
    cascade.generate = generate
    return ScriptComposer(cascade, brand="ACME", today=lambda: date(2024, 6, 3))


class TestExtractJson:

    def test_bare_object(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_fenced_block(self):
        text = 'Here you go:\n```json\n{"hook": "x"}\n```\nEnjoy!'
        assert extract_json_object(text) == {"hook": "x"}

    def test_object_inside_prose(self):
        assert extract_json_object('Sure! {"b": [1, 2]} hope it helps') == {"b": [1, 2]}

    def test_no_object_raises(self):
        with pytest.raises(ValueError):
            extract_json_object("no json here")


class TestParseScript:

    def test_valid_script_is_marked_ai(self):
        script = parse_script(json.dumps(VALID_SCRIPT), ReelGoal.ENGAGEMENT)

        assert script.source == "ai"
        assert script.goal == ReelGoal.ENGAGEMENT
        assert script.hashtags == ["#Hoodie", "#streetwear", "#winterfit"]

    def test_missing_cta_uses_goal_default(self):
        data = {k: v for k, v in VALID_SCRIPT.items() if k != "cta"}
        script = parse_script(json.dumps(data), ReelGoal.REACH)
        assert script.cta == "Follow for more drops like this!"

    @pytest.mark.parametrize("field,value", [
        ("hook", "   "),
        ("scenes", []),
        ("caption", ""),
        ("hashtags", []),
    ])
    def test_empty_required_field_is_rejected(self, field, value):
        data = dict(VALID_SCRIPT, **{field: value})
        with pytest.raises(ScriptValidationFailed):
            parse_script(json.dumps(data), ReelGoal.REACH)

    def test_missing_field_is_rejected(self):
        data = {k: v for k, v in VALID_SCRIPT.items() if k != "scenes"}
        with pytest.raises(ScriptValidationFailed):
            parse_script(json.dumps(data), ReelGoal.REACH)


class TestScriptComposer:

    @pytest.mark.asyncio
    async def test_uses_provider_script(self, sample_product):
        generate = AsyncMock(return_value=json.dumps(VALID_SCRIPT))
        composer = make_composer(generate)

        script = await composer.compose(sample_product, ReelGoal.CONVERSION, ["quiet luxury"])

        assert script.source == "ai"
        assert script.hook == VALID_SCRIPT["hook"]
        prompt = generate.call_args.args[0]
        assert "Oversized Black Hoodie" in prompt
        assert "quiet luxury" in prompt
        assert generate.call_args.kwargs["json_mode"] is True

    @pytest.mark.asyncio
    async def test_all_providers_down_falls_back_to_template(self, sample_product):
        composer = make_composer(AsyncMock(side_effect=AllProvidersFailed({"groq": "HTTP 503"})))

        script = await composer.compose(sample_product, ReelGoal.REACH)

        assert script.source == "template"
        assert script.goal == ReelGoal.REACH
        assert script.hook
        assert script.scenes
        assert script.hashtags

    @pytest.mark.asyncio
    async def test_malformed_output_falls_back_to_template(self, sample_product):
        composer = make_composer(AsyncMock(return_value="I cannot help with that."))

        script = await composer.compose(sample_product, ReelGoal.ENGAGEMENT)

        assert script.source == "template"
        assert script.goal == ReelGoal.ENGAGEMENT

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, sample_product):
        composer = make_composer(AsyncMock(side_effect=RuntimeError("bug")))

        with pytest.raises(RuntimeError):
            await composer.compose(sample_product)

    @pytest.mark.asyncio
    async def test_compose_with_analysis_runs_both(self, sample_product):
        composer = make_composer(AsyncMock(return_value=json.dumps(VALID_SCRIPT)))
        analysis = ImageAnalysis(colors=["black"], style="streetwear", mood="moody")
        composer.image_analyzer = AsyncMock()
        composer.image_analyzer.analyze.return_value = analysis

        script, result = await composer.compose_with_analysis(sample_product)

        assert script.source == "ai"
        assert result == analysis
        composer.image_analyzer.analyze.assert_awaited_once_with(sample_product.images[0])
