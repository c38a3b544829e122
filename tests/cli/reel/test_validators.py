"""Unit tests for reel validators."""

from __future__ import annotations

import pytest

from product_reels.cli.core.types import Failure, Success
from product_reels.cli.reel.params import ReelRunParams
from product_reels.cli.reel.validators import validate_reel_run_params
from product_reels.providers.config import ReelSettings


@pytest.fixture
def settings() -> ReelSettings:
    return ReelSettings(
        _env_file=None,
        shopify_store_domain="acme.myshopify.com",
        shopify_storefront_token="storefront-token",
    )


class TestValidateReelRunParams:
    """Tests for validate_reel_run_params."""

    def test_valid_params_pass(self, settings):
        params = ReelRunParams.from_cli(goal="engagement", audio_style="lofi", deadline=120)
        result = validate_reel_run_params(params, settings)

        assert isinstance(result, Success)
        assert result.value is params

    def test_invalid_goal(self, settings):
        """Test that an unknown goal lists the valid ones."""
        result = validate_reel_run_params(ReelRunParams.from_cli(goal="virality"), settings)

        assert isinstance(result, Failure)
        assert result.error == "Invalid goal: virality"
        assert "reach" in result.details["valid_goals"]

    def test_invalid_style(self, settings):
        result = validate_reel_run_params(ReelRunParams.from_cli(audio_style="polka"), settings)

        assert isinstance(result, Failure)
        assert result.error == "Invalid audio style: polka"

    @pytest.mark.parametrize("deadline", [0, -5.0])
    def test_non_positive_deadline(self, settings, deadline):
        result = validate_reel_run_params(ReelRunParams.from_cli(deadline=deadline), settings)
        assert isinstance(result, Failure)

    def test_missing_shopify_credentials(self, monkeypatch):
        """Test that the catalog credentials are required before any work starts."""
        monkeypatch.delenv("SHOPIFY_STORE_DOMAIN", raising=False)
        monkeypatch.delenv("SHOPIFY_STOREFRONT_TOKEN", raising=False)

        result = validate_reel_run_params(ReelRunParams.from_cli(), ReelSettings(_env_file=None))

        assert isinstance(result, Failure)
        assert "Shopify" in result.error
