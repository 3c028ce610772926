from __future__ import annotations

import logging

import soupsieve
from bs4 import BeautifulSoup, Tag

from scrapewise.tools.selector_builder import ITEM_FIELD

logger = logging.getLogger(__name__)


def _containers(document: BeautifulSoup, item_rule: str | None) -> list[Tag]:
    if not item_rule:
        body = document.body
        return [body] if body is not None else [document]
    try:
        return document.select(item_rule)
    except soupsieve.SelectorSyntaxError:
        logger.warning("Item rule does not compile, no records: %r", item_rule)
        return []


def _first_text(container: Tag, rule: str) -> str:
    try:
        match = container.select_one(rule)
    except soupsieve.SelectorSyntaxError:
        return ""
    if match is None:
        return ""
    return match.get_text().strip()


def materialize_preview(
    document: BeautifulSoup,
    selectors: dict[str, str],
) -> list[dict[str, str]]:
    """Apply a field map to a document, one record per item container.

    Records where every field came back empty are dropped. Slicing to a
    preview size is left to the caller.
    """
    fields = [(name, rule) for name, rule in selectors.items() if name != ITEM_FIELD]
    records: list[dict[str, str]] = []
    for container in _containers(document, selectors.get(ITEM_FIELD)):
        record = {name: _first_text(container, rule) for name, rule in fields}
        if any(record.values()):
            records.append(record)
    return records
