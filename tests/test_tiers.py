"""Tests for caller tier resolution and page-list capping."""

from __future__ import annotations

import pytest

from backend.config import Settings
from backend.errors import ConfigurationError
from backend.generator.tiers import resolve_tier


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(workspace_dir=tmp_path, firecrawl_api_key="fc-shared")


class TestResolveTier:
    def test_caller_key_is_unlimited(self, settings: Settings) -> None:
        tier = resolve_tier(settings, "fc-mine")
        assert tier.unlimited is True
        assert tier.page_limit == 100
        assert tier.api_key == "fc-mine"

    def test_shared_key_is_default(self, settings: Settings) -> None:
        tier = resolve_tier(settings, None)
        assert tier.unlimited is False
        assert tier.page_limit == 10
        assert tier.api_key == "fc-shared"

    def test_no_key_at_all(self, settings: Settings) -> None:
        settings.firecrawl_api_key = None
        with pytest.raises(ConfigurationError, match="FIRECRAWL_API_KEY is not set"):
            resolve_tier(settings, None)

    def test_cap_preserves_order(self, settings: Settings) -> None:
        tier = resolve_tier(settings, None)
        urls = [f"https://a.com/{i}" for i in range(25)]
        assert tier.cap(urls) == urls[:10]
        assert tier.cap(urls[:3]) == urls[:3]
