from __future__ import annotations

from typing import TYPE_CHECKING

import soupsieve

if TYPE_CHECKING:
    from scrapewise.tools.dom_features import CandidateElement

ITEM_FIELD = "item"
MIN_CLASS_LENGTH = 2

GENERIC_PRICE_RULE = '.price, .cost, [class*="price"]'
GENERIC_TITLE_RULE = ".title, .name, h1, h2, h3"
GENERIC_CONTACT_RULE = '.contact, .email, .phone, [href^="mailto:"], [href^="tel:"]'
GENERIC_ITEM_RULE = '.product, .item, .card, [class*="item"], li, article'


def build_selector(element: CandidateElement) -> str:
    """Most specific cheap rule for an element: id, then first usable class, then tag.

    Uniqueness is not checked; the rule may match siblings or unrelated nodes.
    """
    if element.id:
        return f"#{soupsieve.escape(element.id)}"
    if element.classes:
        usable = [c for c in element.classes if len(c) > MIN_CLASS_LENGTH]
        if usable:
            return f".{soupsieve.escape(usable[0])}"
    return soupsieve.escape(element.tag)


def is_valid_selector(rule: object) -> bool:
    if not isinstance(rule, str) or not rule.strip():
        return False
    try:
        soupsieve.compile(rule.strip())
    except soupsieve.SelectorSyntaxError:
        return False
    return True
