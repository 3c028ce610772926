from __future__ import annotations

import logging
import time

from scrapewise.config import settings
from scrapewise.inference.fallback import data_types_for, fallback_analysis
from scrapewise.inference.oracle import OracleAdapter, OracleConfig, OracleSuggestion
from scrapewise.models.schemas import InferenceResult
from scrapewise.services import logger as log_service
from scrapewise.tools.dom_features import page_text, parse_html
from scrapewise.tools.preview import materialize_preview
from scrapewise.tools.selector_builder import GENERIC_ITEM_RULE, ITEM_FIELD

logger = logging.getLogger(__name__)

AI_CONFIDENCE = "high"


class StructureInferenceEngine:
    """Oracle-first structure inference with a deterministic fallback.

    `analyze` always returns a complete InferenceResult once it has HTML to
    work on; oracle outages and bad answers only change the `source` tag.
    """

    def __init__(
        self,
        oracle: OracleAdapter | None = None,
        *,
        page_text_max_chars: int | None = None,
        default_prompt: str | None = None,
    ):
        self.oracle = oracle
        self.page_text_max_chars = (
            page_text_max_chars
            if page_text_max_chars is not None
            else int(settings.page_text_max_chars)
        )
        self.default_prompt = default_prompt or settings.default_prompt

    @classmethod
    def from_settings(cls) -> "StructureInferenceEngine":
        return cls(oracle=OracleAdapter(OracleConfig.from_settings(settings)))

    def _resolve_prompt(self, user_prompt: str | None) -> str:
        prompt = (user_prompt or "").strip()
        return prompt or self.default_prompt

    async def analyze(
        self,
        html: str,
        user_prompt: str | None = None,
        *,
        use_ai: bool = True,
    ) -> InferenceResult:
        prompt = self._resolve_prompt(user_prompt)
        document = parse_html(html)
        text = page_text(document, self.page_text_max_chars)
        t0 = time.monotonic()

        suggestion: OracleSuggestion | None = None
        if use_ai and self.oracle is not None:
            suggestion = await self.oracle.suggest(text, prompt)

        if suggestion is not None:
            selectors = dict(suggestion.selectors)
            selectors.setdefault(ITEM_FIELD, GENERIC_ITEM_RULE)
            result = InferenceResult(
                selectors=selectors,
                data_types=suggestion.data_types
                or data_types_for(prompt, document, self.page_text_max_chars),
                confidence=AI_CONFIDENCE,
                source="ai",
            )
        else:
            logger.info("Using lexical fallback analysis")
            result = fallback_analysis(document, prompt, self.page_text_max_chars)

        log_service.log_analysis(
            source=result.source,
            confidence=result.confidence,
            fields=sorted(result.selectors),
            data_types=list(result.data_types),
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        return result

    def preview(self, html: str, selectors: dict[str, str]) -> list[dict[str, str]]:
        return materialize_preview(parse_html(html), selectors)

    def data_types_for(self, user_prompt: str | None, html: str) -> list[str]:
        return data_types_for(
            self._resolve_prompt(user_prompt),
            parse_html(html),
            self.page_text_max_chars,
        )
