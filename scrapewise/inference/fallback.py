"""Deterministic selector discovery used when the inference service gives no answer."""
from __future__ import annotations

import logging
from typing import Callable, Iterable

from bs4 import BeautifulSoup

from scrapewise.models.schemas import InferenceResult
from scrapewise.services import logger as log_service
from scrapewise.tools import patterns
from scrapewise.tools.dom_features import (
    PAGE_TEXT_MAX_CHARS,
    CandidateElement,
    extract_candidates,
    page_text,
)
from scrapewise.tools.selector_builder import (
    GENERIC_CONTACT_RULE,
    GENERIC_ITEM_RULE,
    GENERIC_PRICE_RULE,
    GENERIC_TITLE_RULE,
    ITEM_FIELD,
    build_selector,
)

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = "medium"
MIN_TITLE_TEXT = 10


def _first_match(
    candidates: Iterable[CandidateElement],
    predicate: Callable[[CandidateElement], bool],
    default: str,
) -> str:
    # First in document order wins; later candidates are never compared.
    for candidate in candidates:
        if predicate(candidate):
            return build_selector(candidate)
    return default


def find_price_selector(candidates: list[CandidateElement]) -> str:
    return _first_match(
        candidates,
        lambda c: patterns.looks_like_money(c.text),
        GENERIC_PRICE_RULE,
    )


def find_title_selector(candidates: list[CandidateElement]) -> str:
    return _first_match(
        candidates,
        lambda c: patterns.is_product_like_heading(c.tag) and len(c.text) > MIN_TITLE_TEXT,
        GENERIC_TITLE_RULE,
    )


def find_contact_selector(candidates: list[CandidateElement]) -> str:
    return _first_match(
        candidates,
        lambda c: patterns.looks_like_contact(c.text),
        GENERIC_CONTACT_RULE,
    )


def discover_selectors(
    candidates: list[CandidateElement],
    user_prompt: str,
    signals: patterns.PageSignals,
) -> dict[str, str]:
    """Populate each field whose prompt hint or page-wide signal fires."""
    selectors: dict[str, str] = {}

    if patterns.prompt_wants_price(user_prompt) or signals.money:
        selectors["price"] = find_price_selector(candidates)

    if patterns.prompt_wants_title(user_prompt) or signals.noun:
        selectors["title"] = find_title_selector(candidates)

    if patterns.prompt_wants_contact(user_prompt) or signals.email or signals.phone:
        selectors["contact"] = find_contact_selector(candidates)

    selectors[ITEM_FIELD] = GENERIC_ITEM_RULE
    return selectors


def data_types_for(
    user_prompt: str,
    document: BeautifulSoup,
    max_chars: int = PAGE_TEXT_MAX_CHARS,
) -> list[str]:
    signals = patterns.tag_entities(page_text(document, max_chars, separator=" "))
    return patterns.identify_data_types(user_prompt, signals)


def fallback_analysis(
    document: BeautifulSoup,
    user_prompt: str,
    max_chars: int = PAGE_TEXT_MAX_CHARS,
) -> InferenceResult:
    """Classify the page with lexical heuristics. Never raises."""
    try:
        signals = patterns.tag_entities(page_text(document, max_chars, separator=" "))
        candidates = extract_candidates(document)
        selectors = discover_selectors(candidates, user_prompt, signals)
        data_types = patterns.identify_data_types(user_prompt, signals)
    except Exception as exc:
        logger.exception("Fallback analysis failed; using generic container rule")
        log_service.log_event(
            event_type="fallback_error",
            message="Fallback analysis failed",
            error=str(exc),
        )
        selectors = {ITEM_FIELD: GENERIC_ITEM_RULE}
        data_types = ["text_content"]

    return InferenceResult(
        selectors=selectors,
        data_types=data_types,
        confidence=FALLBACK_CONFIDENCE,
        source="fallback",
    )
