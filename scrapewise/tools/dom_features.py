from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

MIN_CANDIDATE_TEXT = 10
MAX_CANDIDATE_TEXT = 200
PAGE_TEXT_MAX_CHARS = 1500


@dataclass(frozen=True, slots=True)
class CandidateElement:
    tag: str
    text: str
    classes: tuple[str, ...] | None = None
    id: str | None = None
    parent_tag: str | None = None


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _classes_of(element: Tag) -> tuple[str, ...] | None:
    raw = element.get("class")
    if isinstance(raw, str):
        raw = raw.split()
    if not raw:
        return None
    classes = tuple(c for c in raw if isinstance(c, str) and c)
    return classes or None


def _id_of(element: Tag) -> str | None:
    raw = element.get("id")
    if isinstance(raw, list):
        raw = " ".join(raw)
    if not isinstance(raw, str) or not raw.strip():
        return None
    return raw.strip()


def _parent_tag_of(element: Tag) -> str | None:
    parent = element.parent
    if parent is None or isinstance(parent, BeautifulSoup):
        return None
    return parent.name


def extract_candidates(document: BeautifulSoup) -> list[CandidateElement]:
    """Flatten the document into elements that carry a meaningful amount of text.

    Order is document order; downstream "first match" searches depend on it.
    """
    candidates: list[CandidateElement] = []
    for element in document.find_all(True):
        text = element.get_text().strip()
        if len(text) <= MIN_CANDIDATE_TEXT:
            continue
        candidates.append(
            CandidateElement(
                tag=element.name,
                text=text[:MAX_CANDIDATE_TEXT],
                classes=_classes_of(element),
                id=_id_of(element),
                parent_tag=_parent_tag_of(element),
            )
        )
    return candidates


def page_text(
    document: BeautifulSoup,
    max_chars: int = PAGE_TEXT_MAX_CHARS,
    *,
    separator: str = "",
) -> str:
    """Body text (whole document when there is no body), truncated.

    With the default separator adjacent text nodes run together, as a browser's
    textContent does; pass " " to keep word boundaries for tokenizing.
    """
    root = document.body or document
    text = root.get_text(separator)
    if max_chars <= 0:
        return text
    return text[:max_chars]
