"""Lexical classifiers for prices, contact details and product-like labels.

Page-wide signals come from a blank spaCy English pipeline: only the tokenizer
and lexical attributes are used, so no trained model has to be downloaded.
Every predicate here is pure given its inputs.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

import spacy
from spacy.language import Language

MONEY_RE = re.compile(r"(\$|€|£|USD|price|cost)", re.IGNORECASE)
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(r"(?<![\d$€£.])(?:\+\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?![\d.])")

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4"})
CURRENCY_CODES = frozenset({"usd", "eur", "gbp"})

PRICE_HINTS = ("price", "cost")
TITLE_HINTS = ("product", "title", "name")
CONTACT_HINTS = ("contact", "email", "phone", "tel")

# Prompt gates used for the data-type inventory, evaluated in this order.
PRICES_PROMPT_RE = re.compile(r"price|cost|€|\$|£", re.IGNORECASE)
EMAILS_PROMPT_RE = re.compile(r"contact|email", re.IGNORECASE)
PHONES_PROMPT_RE = re.compile(r"phone|tel|contact", re.IGNORECASE)
PRODUCTS_PROMPT_RE = re.compile(r"product|item|service", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class PageSignals:
    money: bool = False
    email: bool = False
    phone: bool = False
    noun: bool = False


@lru_cache(maxsize=1)
def _tokenizer() -> Language:
    return spacy.blank("en")


def looks_like_money(text: str) -> bool:
    return bool(MONEY_RE.search(text or ""))


def looks_like_email(text: str) -> bool:
    return bool(EMAIL_RE.search(text or ""))


def looks_like_phone(text: str) -> bool:
    return bool(PHONE_RE.search(text or ""))


def looks_like_contact(text: str) -> bool:
    return looks_like_email(text) or looks_like_phone(text)


def is_product_like_heading(tag: str) -> bool:
    return (tag or "").lower() in HEADING_TAGS


def _mentions(prompt: str, hints: tuple[str, ...]) -> bool:
    lowered = (prompt or "").lower()
    return any(hint in lowered for hint in hints)


def prompt_wants_price(prompt: str) -> bool:
    return _mentions(prompt, PRICE_HINTS)


def prompt_wants_title(prompt: str) -> bool:
    return _mentions(prompt, TITLE_HINTS)


def prompt_wants_contact(prompt: str) -> bool:
    return _mentions(prompt, CONTACT_HINTS)


def tag_entities(text: str) -> PageSignals:
    """Tag money, email, phone and noun-like spans anywhere in `text`."""
    if not text or not text.strip():
        return PageSignals()

    doc = _tokenizer()(text)
    money = False
    email = False
    noun = False
    for i, token in enumerate(doc):
        if token.like_email:
            email = True
        if token.is_currency:
            neighbours = [doc[j] for j in (i - 1, i + 1) if 0 <= j < len(doc)]
            if any(n.like_num for n in neighbours):
                money = True
        elif token.like_num and i + 1 < len(doc) and doc[i + 1].lower_ in CURRENCY_CODES:
            money = True
        if token.is_alpha and not token.is_stop and len(token) > 2:
            noun = True

    return PageSignals(
        money=money or looks_like_money(text),
        email=email or looks_like_email(text),
        phone=looks_like_phone(text),
        noun=noun,
    )


def identify_data_types(user_prompt: str, signals: PageSignals) -> list[str]:
    """Coarse inventory of what the page offers or the user asked for."""
    prompt = user_prompt or ""
    types: list[str] = []
    if signals.money or PRICES_PROMPT_RE.search(prompt):
        types.append("prices")
    if signals.email or EMAILS_PROMPT_RE.search(prompt):
        types.append("emails")
    if signals.phone or PHONES_PROMPT_RE.search(prompt):
        types.append("phones")
    if signals.noun or PRODUCTS_PROMPT_RE.search(prompt):
        types.append("products")
    return types or ["text_content"]
