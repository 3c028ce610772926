from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from scrapewise.api.deps import get_engine, get_renderer
from scrapewise.config import settings
from scrapewise.inference.engine import StructureInferenceEngine
from scrapewise.models.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    ScrapeRequest,
    ScrapeResponse,
)
from scrapewise.services import logger as log_service
from scrapewise.services.renderer import PageRenderer, RenderError, is_valid_url

router = APIRouter(prefix="/api", tags=["scraping"])


async def _render_html(renderer: PageRenderer, url: str) -> str:
    try:
        page = await renderer.render(url)
    except RenderError as exc:
        log_service.log_event(event_type="render_failed", message=str(exc), url=url)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return page.html


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    request: AnalyzeRequest,
    engine: StructureInferenceEngine = Depends(get_engine),
    renderer: PageRenderer = Depends(get_renderer),
):
    """Render a page, infer field selectors and preview the first records."""
    if not is_valid_url(request.url):
        raise HTTPException(status_code=400, detail="A valid http(s) URL is required")

    html = await _render_html(renderer, request.url)
    analysis = await engine.analyze(html, request.prompt, use_ai=request.use_ai)
    records = engine.preview(html, analysis.selectors)

    return AnalyzeResponse(
        analysis=analysis,
        preview=records[: settings.preview_limit],
        total_elements=len(records),
        url=request.url,
    )


@router.post("/scrape", response_model=ScrapeResponse)
async def scrape(
    request: ScrapeRequest,
    engine: StructureInferenceEngine = Depends(get_engine),
    renderer: PageRenderer = Depends(get_renderer),
):
    """Apply previously inferred selectors to a freshly rendered page."""
    if not is_valid_url(request.url):
        raise HTTPException(status_code=400, detail="A valid http(s) URL is required")

    html = await _render_html(renderer, request.url)
    records = engine.preview(html, request.selectors)

    return ScrapeResponse(
        data=records,
        total=len(records),
        timestamp=datetime.now(timezone.utc),
    )
