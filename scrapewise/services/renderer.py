"""Fetch rendered page HTML for analysis.

Rendering failures are not absorbed here: without a page there is nothing to
analyze, so callers get a RenderError.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable
from urllib.parse import urlparse

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "ScrapewiseBot/1.0 (+https://example.local)"
SUPPORTED_PROVIDERS = {"playwright", "http"}


class RenderError(RuntimeError):
    """The page could not be navigated to or fetched."""


@dataclass(slots=True)
class RenderedPage:
    url: str
    final_url: str
    status_code: int
    html: str
    timing_ms: int = 0


Fetcher = Callable[[str], Awaitable[RenderedPage]]


def is_valid_url(url: str) -> bool:
    """Basic URL validation."""
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except Exception:
        return False


class PageRenderer:
    """Headless-browser (or plain HTTP) page fetcher."""

    def __init__(
        self,
        *,
        provider: str = "playwright",
        timeout_ms: int = 30000,
        wait_until: str = "networkidle",
        fetcher: Fetcher | None = None,
    ):
        provider = provider.lower().strip() or "playwright"
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported render provider: {provider}")
        self.provider = provider
        self.timeout_ms = max(int(timeout_ms), 1000)
        self.wait_until = wait_until
        self._fetcher = fetcher

    @classmethod
    def from_settings(cls) -> "PageRenderer":
        from scrapewise.config import settings

        return cls(
            provider=settings.render_provider,
            timeout_ms=settings.render_timeout_ms,
            wait_until=settings.render_wait_until,
        )

    async def render(self, url: str) -> RenderedPage:
        if not is_valid_url(url):
            raise RenderError(f"Invalid URL: {url!r}")

        if self._fetcher is not None:
            fetch = self._fetcher
        elif self.provider == "playwright":
            fetch = self._fetch_with_playwright
        else:
            fetch = self._fetch_with_httpx

        started = time.monotonic()
        try:
            page = await fetch(url)
        except RenderError:
            raise
        except Exception as exc:
            logger.warning("Rendering %s failed: %s", url, exc)
            raise RenderError(f"Render failed for {url}: {exc}") from exc

        page.timing_ms = int((time.monotonic() - started) * 1000)
        return page

    async def _fetch_with_httpx(self, url: str) -> RenderedPage:
        async with httpx.AsyncClient(
            timeout=self.timeout_ms / 1000.0,
            follow_redirects=True,
        ) as client:
            response = await client.get(url, headers={"User-Agent": USER_AGENT})
            response.raise_for_status()
            return RenderedPage(
                url=url,
                final_url=str(response.url),
                status_code=int(response.status_code),
                html=response.text,
            )

    async def _fetch_with_playwright(self, url: str) -> RenderedPage:
        try:
            from playwright.async_api import async_playwright
        except ImportError as exc:  # pragma: no cover - depends on browser install
            raise RenderError("Playwright is not installed") from exc

        async with async_playwright() as playwright:  # pragma: no cover - integration behavior
            browser = await playwright.chromium.launch(headless=True)
            try:
                page = await browser.new_page(user_agent=USER_AGENT)
                response = await page.goto(
                    url,
                    wait_until=self.wait_until,
                    timeout=self.timeout_ms,
                )
                html = await page.content()
                status_code = int(response.status) if response is not None else 200
                return RenderedPage(
                    url=url,
                    final_url=page.url,
                    status_code=status_code,
                    html=html,
                )
            finally:
                await browser.close()
