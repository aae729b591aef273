"""
Tests for the PageSpeed Insights Client

HTTP calls are mocked at the httpx.AsyncClient level.
"""

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from seo_funnel.audit.pagespeed import PageSpeedClient, PageSpeedError
from seo_funnel.models import LighthouseMetrics


class TestBuildParams:
    """Test query parameter construction."""

    def test_includes_all_categories_and_strategy(self):
        client = PageSpeedClient(api_key="google-key")
        params = client._build_params("https://exempel.se")

        assert params[0] == ("url", "https://exempel.se")
        assert ("key", "google-key") in params
        assert [value for name, value in params if name == "category"] == [
            "performance",
            "accessibility",
            "best-practices",
            "seo",
        ]
        assert params[-1] == ("strategy", "desktop")

    def test_key_omitted_when_not_configured(self):
        client = PageSpeedClient(api_key=None, strategy="mobile")
        params = client._build_params("https://exempel.se")

        assert "key" not in [name for name, _ in params]
        assert params[-1] == ("strategy", "mobile")


class TestFetch:
    """Test request handling and error mapping."""

    @pytest.mark.asyncio
    async def test_returns_raw_payload(self, pagespeed_response, make_response):
        async with PageSpeedClient(api_key="google-key") as client:
            with patch.object(client._client, "get", new_callable=AsyncMock) as mock_get:
                mock_get.return_value = make_response(200, pagespeed_response)
                data = await client.fetch("https://exempel.se")

        assert data == pagespeed_response
        args, kwargs = mock_get.call_args
        assert args[0] == PageSpeedClient.API_ENDPOINT
        assert ("url", "https://exempel.se") in kwargs["params"]

    @pytest.mark.asyncio
    async def test_custom_endpoint(self, pagespeed_response, make_response):
        endpoint = "https://psi.test.invalid/runPagespeed"
        async with PageSpeedClient(endpoint=endpoint) as client:
            with patch.object(client._client, "get", new_callable=AsyncMock) as mock_get:
                mock_get.return_value = make_response(200, pagespeed_response)
                await client.fetch("https://exempel.se")

        assert mock_get.call_args[0][0] == endpoint

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [400, 429, 500])
    async def test_non_success_status(self, status_code, make_response):
        async with PageSpeedClient() as client:
            with patch.object(client._client, "get", new_callable=AsyncMock) as mock_get:
                mock_get.return_value = make_response(status_code, {"error": {"code": status_code}})
                with pytest.raises(PageSpeedError) as exc_info:
                    await client.fetch("https://exempel.se")

        assert str(exc_info.value) == f"HTTP error! status: {status_code}"
        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"id": "https://exempel.se/"},
        {"lighthouseResult": None},
        {"lighthouseResult": {}},
    ])
    async def test_missing_lighthouse_result(self, payload, make_response):
        async with PageSpeedClient() as client:
            with patch.object(client._client, "get", new_callable=AsyncMock) as mock_get:
                mock_get.return_value = make_response(200, payload)
                with pytest.raises(PageSpeedError, match="No Lighthouse results returned"):
                    await client.fetch("https://exempel.se")

    @pytest.mark.asyncio
    async def test_invalid_json_body(self, make_response):
        async with PageSpeedClient() as client:
            with patch.object(client._client, "get", new_callable=AsyncMock) as mock_get:
                mock_get.return_value = make_response(200, text="<html>Service Unavailable</html>")
                with pytest.raises(PageSpeedError, match="Invalid JSON response"):
                    await client.fetch("https://exempel.se")

    @pytest.mark.asyncio
    async def test_timeout(self):
        async with PageSpeedClient(timeout=0.1) as client:
            with patch.object(
                client._client, "get", new_callable=AsyncMock, side_effect=httpx.ReadTimeout("read timed out")
            ):
                with pytest.raises(PageSpeedError, match="Request timed out"):
                    await client.fetch("https://exempel.se")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        async with PageSpeedClient() as client:
            with patch.object(
                client._client, "get", new_callable=AsyncMock, side_effect=httpx.ConnectError("dns failure")
            ):
                with pytest.raises(PageSpeedError, match="Request failed"):
                    await client.fetch("https://exempel.se")

    @pytest.mark.asyncio
    async def test_closed_client(self):
        client = PageSpeedClient()
        await client.close()

        with pytest.raises(PageSpeedError, match="Client is closed"):
            await client.fetch("https://exempel.se")


class TestAnalyze:
    """Test score and timing extraction through the client."""

    @pytest.mark.asyncio
    async def test_extracts_result(self, pagespeed_response, make_response):
        async with PageSpeedClient() as client:
            with patch.object(client._client, "get", new_callable=AsyncMock) as mock_get:
                mock_get.return_value = make_response(200, pagespeed_response)
                result = await client.analyze("https://exempel.se")

        assert result.metrics == LighthouseMetrics(performance=45, accessibility=90, best_practices=90, seo=85)
        assert result.detailed_metrics.largest_contentful_paint == "4.2 s"
        assert result.raw_data == pagespeed_response
        assert result.loading_experience["overall_category"] == "AVERAGE"

    @pytest.mark.asyncio
    async def test_loading_experience_absent(self, make_response):
        payload = {"lighthouseResult": {"categories": {"seo": {"score": 1}}}}
        async with PageSpeedClient() as client:
            with patch.object(client._client, "get", new_callable=AsyncMock) as mock_get:
                mock_get.return_value = make_response(200, payload)
                result = await client.analyze("https://exempel.se")

        assert result.loading_experience is None
        assert result.metrics.seo == 100
        assert result.metrics.performance == 0
