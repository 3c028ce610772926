from __future__ import annotations

from unittest.mock import patch

import pytest

from scrapewise.services.renderer import PageRenderer, RenderedPage, RenderError, is_valid_url


def test_is_valid_url():
    assert is_valid_url("https://example.com/products")
    assert not is_valid_url("ftp://example.com")
    assert not is_valid_url("example.com")


def test_unsupported_provider_is_rejected():
    with pytest.raises(ValueError):
        PageRenderer(provider="firecrawl")


@pytest.mark.asyncio
async def test_render_rejects_invalid_url():
    renderer = PageRenderer(provider="http")

    with pytest.raises(RenderError):
        await renderer.render("not a url")


@pytest.mark.asyncio
async def test_render_uses_injected_fetcher():
    async def fetcher(url):
        return RenderedPage(url=url, final_url=url + "?ok", status_code=200, html="<p>hi</p>")

    page = await PageRenderer(fetcher=fetcher).render("https://example.com")

    assert page.html == "<p>hi</p>"
    assert page.final_url == "https://example.com?ok"
    assert page.timing_ms >= 0


@pytest.mark.asyncio
async def test_render_wraps_navigation_failures():
    async def fetcher(url):
        raise TimeoutError("navigation timeout of 30000 ms exceeded")

    with pytest.raises(RenderError) as excinfo:
        await PageRenderer(fetcher=fetcher).render("https://example.com")

    assert "navigation timeout" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, TimeoutError)


@pytest.mark.asyncio
async def test_http_provider_fetches_with_httpx():
    class FakeResponse:
        url = "https://example.com/final"
        status_code = 200
        text = "<html><body>Rendered</body></html>"

        def raise_for_status(self):
            return None

    class FakeClient:
        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return None

        async def get(self, *args, **kwargs):
            return FakeResponse()

    with patch("scrapewise.services.renderer.httpx.AsyncClient", return_value=FakeClient()):
        page = await PageRenderer(provider="http").render("https://example.com")

    assert page.final_url == "https://example.com/final"
    assert page.status_code == 200
    assert "Rendered" in page.html
