from __future__ import annotations

from functools import lru_cache

from scrapewise.inference.engine import StructureInferenceEngine
from scrapewise.services.renderer import PageRenderer


@lru_cache(maxsize=1)
def get_engine() -> StructureInferenceEngine:
    """Engine built once from settings; it holds no per-request state."""
    return StructureInferenceEngine.from_settings()


def get_renderer() -> PageRenderer:
    return PageRenderer.from_settings()
