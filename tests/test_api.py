"""Tests for the HTTP layer.

The app is built with ``create_app(settings)`` against a temporary workspace,
so the lifespan opens a throwaway SQLite cache.  Firecrawl is patched in the
service module and the LLM is injected through ``app.state.llm``.
"""

from __future__ import annotations

from typing import Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from backend.api.app import create_app
from backend.config import Settings
from backend.db.cache import store_cache
from backend.errors import UpstreamError
from backend.llm.summarizer import PageSummary
from backend.scraper.models import PageResult

_URLS = ["https://example.com", "https://example.com/docs"]


def _pages_for(urls: list[str]) -> list[PageResult]:
    return [PageResult(source_url=u, markdown=f"Content\tof {u}\n", url=u) for u in urls]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        workspace_dir=tmp_path,
        firecrawl_api_key="fc-shared",
        gemini_api_key="g-key",
    )


@pytest.fixture()
def firecrawl() -> Generator[MagicMock, None, None]:
    with patch("backend.generator.service.FirecrawlClient") as mock_cls:
        mock_cls.return_value.map_site.return_value = list(_URLS)
        mock_cls.return_value.batch_scrape.side_effect = _pages_for
        yield mock_cls


@pytest.fixture()
def client(settings: Settings, firecrawl: MagicMock) -> Generator[TestClient, None, None]:
    app = create_app(settings)
    llm = MagicMock()
    llm.with_structured_output.return_value.invoke.return_value = PageSummary(
        title="Example Title", description="Short description of an example page for tests."
    )
    with TestClient(app, raise_server_exceptions=False) as c:
        c.app.state.llm = llm
        yield c


# ---------------------------------------------------------------------------
# POST /api/map and /api/service
# ---------------------------------------------------------------------------

class TestJsonEndpoints:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_map(self, client: TestClient, firecrawl: MagicMock) -> None:
        resp = client.post(
            "/api/map",
            json={"url": "https://example.com", "bringYourOwnFirecrawlApiKey": "fc-mine"},
        )
        assert resp.status_code == 200
        assert resp.json() == {"mapUrls": _URLS}
        firecrawl.assert_called_once()
        assert firecrawl.call_args[0][0] == "fc-mine"

    def test_service_returns_both_documents(self, client: TestClient) -> None:
        resp = client.post("/api/service", json={"url": "https://example.com", "urls": _URLS})
        assert resp.status_code == 200
        data = resp.json()
        assert set(data) == {"llmstxt", "llmsFulltxt"}
        assert "# https://example.com llms.txt" in data["llmstxt"]
        assert "# https://example.com llms-full.txt" in data["llmsFulltxt"]
        assert data["llmstxt"].count("- [Example Title]") == 2

    def test_service_byok_has_no_disclaimer(self, client: TestClient) -> None:
        resp = client.post(
            "/api/service",
            json={"url": "https://example.com", "urls": _URLS,
                  "bringYourOwnFirecrawlApiKey": "fc-mine"},
        )
        assert resp.status_code == 200
        assert resp.json()["llmstxt"].startswith("# https://example.com llms.txt")

    def test_service_replays_cache(self, client: TestClient, firecrawl: MagicMock) -> None:
        store_cache(client.app.state.db, "https://example.com", False, "short", "full")
        resp = client.post("/api/service", json={"url": "https://example.com", "urls": _URLS})
        assert resp.json() == {"llmstxt": "short", "llmsFulltxt": "full"}
        firecrawl.return_value.batch_scrape.assert_not_called()

    def test_upstream_status_is_forwarded(self, client: TestClient, firecrawl: MagicMock) -> None:
        firecrawl.return_value.batch_scrape.side_effect = UpstreamError(
            "Failed to scrape: Payment required", status_code=402
        )
        resp = client.post("/api/service", json={"url": "https://example.com", "urls": _URLS})
        assert resp.status_code == 402
        assert resp.json() == {"error": "Failed to scrape: Payment required"}

    def test_missing_urls_is_500(self, client: TestClient) -> None:
        resp = client.post("/api/service", json={"url": "https://example.com"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "URLs are not defined"}

    def test_body_without_url_is_500_error(self, client: TestClient) -> None:
        resp = client.post("/api/service", json={"urls": ["https://a.com"]})
        assert resp.status_code == 500
        assert resp.json() == {"error": "url is not defined"}

    def test_map_body_without_url_is_500_error(self, client: TestClient) -> None:
        resp = client.post("/api/map", json={})
        assert resp.status_code == 500
        assert resp.json() == {"error": "url is not defined"}

    def test_urls_not_a_list_is_500_error(self, client: TestClient, firecrawl: MagicMock) -> None:
        resp = client.post("/api/service", json={"url": "https://a.com", "urls": "https://a.com"})
        assert resp.status_code == 500
        body = resp.json()
        assert set(body) == {"error"}
        assert body["error"].startswith("urls: ")
        firecrawl.return_value.batch_scrape.assert_not_called()

    def test_missing_credential_is_500(self, client: TestClient) -> None:
        client.app.state.settings.firecrawl_api_key = None
        resp = client.post("/api/service", json={"url": "https://example.com", "urls": _URLS})
        assert resp.status_code == 500
        assert resp.json() == {"error": "FIRECRAWL_API_KEY is not set"}

    def test_unexpected_error_is_generic_500(self, client: TestClient, firecrawl: MagicMock) -> None:
        firecrawl.return_value.batch_scrape.side_effect = RuntimeError("kaboom")
        resp = client.post("/api/service", json={"url": "https://example.com", "urls": _URLS})
        assert resp.status_code == 500
        assert resp.json() == {"error": "An unexpected error occurred"}


# ---------------------------------------------------------------------------
# GET /{target}[/full]
# ---------------------------------------------------------------------------

class TestGetFacade:
    def test_short_document_as_raw_text(self, client: TestClient, firecrawl: MagicMock) -> None:
        resp = client.get("/https://example.com")

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/json")
        assert not resp.text.startswith("{")
        assert '"llmstxt"' not in resp.text
        assert "\n# https://example.com llms.txt\n\n- [Example Title](https://example.com)" in resp.text
        firecrawl.return_value.map_site.assert_called_once_with("https://example.com")

    def test_full_document_unescapes_tabs_and_newlines(self, client: TestClient) -> None:
        resp = client.get("/https://example.com/full")

        assert resp.status_code == 200
        assert "# https://example.com llms-full.txt\n\nContent\tof https://example.com\n" in resp.text
        assert "\\n" not in resp.text
        assert "\\t" not in resp.text
        assert "llmsfulltxt" not in resp.text
        assert not resp.text.rstrip().endswith("}")

    def test_full_segment_is_not_part_of_target(self, client: TestClient, firecrawl: MagicMock) -> None:
        client.get("/https://example.com/full")
        firecrawl.return_value.map_site.assert_called_once_with("https://example.com")

    def test_percent_encoded_target(self, client: TestClient, firecrawl: MagicMock) -> None:
        client.get("/https%3A%2F%2Fexample.com")
        firecrawl.return_value.map_site.assert_called_once_with("https://example.com")

    def test_api_key_from_query(self, client: TestClient, firecrawl: MagicMock) -> None:
        resp = client.get("/https://example.com", params={"FIRECRAWL_API_KEY": "fc-q"})
        assert resp.status_code == 200
        assert {c.args[0] for c in firecrawl.call_args_list} == {"fc-q"}
        assert not resp.text.lstrip().startswith("*Note")

    def test_api_key_from_header(self, client: TestClient, firecrawl: MagicMock) -> None:
        client.get("/https://example.com", headers={"FIRECRAWL_API_KEY": "fc-h"})
        assert {c.args[0] for c in firecrawl.call_args_list} == {"fc-h"}

    def test_map_error_is_forwarded(self, client: TestClient, firecrawl: MagicMock) -> None:
        firecrawl.return_value.map_site.side_effect = UpstreamError(
            "Failed to map: Unauthorized", status_code=401
        )
        resp = client.get("/https://example.com")
        assert resp.status_code == 401
        assert resp.json() == {"error": "Error from /api/map: Failed to map: Unauthorized"}

    def test_service_error_is_forwarded(self, client: TestClient, firecrawl: MagicMock) -> None:
        firecrawl.return_value.batch_scrape.side_effect = UpstreamError("Failed to scrape: down")
        resp = client.get("/https://example.com")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Error from /api/service: Failed to scrape: down"}

    def test_empty_full_document_is_500(self, client: TestClient) -> None:
        store_cache(client.app.state.db, "https://example.com", False, "short", "")
        resp = client.get("/https://example.com/full")
        assert resp.status_code == 500
        assert resp.json() == {"error": "llmsfulltxt is undefined in the response"}
