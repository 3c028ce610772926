from __future__ import annotations

from scrapewise.tools.dom_features import (
    CandidateElement,
    extract_candidates,
    page_text,
    parse_html,
)


def test_extract_candidates_keeps_document_order_and_filters_short_text():
    document = parse_html(
        "<div id='main' class='wrap box'>"
        "<p>Short</p>"
        "<p class='lead'>This paragraph is long enough</p>"
        "</div>"
    )

    candidates = extract_candidates(document)

    assert [c.tag for c in candidates] == ["div", "p"]
    assert candidates[0] == CandidateElement(
        tag="div",
        text="ShortThis paragraph is long enough",
        classes=("wrap", "box"),
        id="main",
        parent_tag=None,
    )
    assert candidates[1].classes == ("lead",)
    assert candidates[1].parent_tag == "div"
    assert candidates[1].id is None


def test_extract_candidates_requires_more_than_ten_characters():
    document = parse_html("<span>0123456789</span><span>0123456789A</span>")

    candidates = extract_candidates(document)

    assert [c.text for c in candidates] == ["0123456789A"]


def test_extract_candidates_truncates_text_to_200_chars():
    document = parse_html(f"<p>   {'x' * 500}   </p>")

    [candidate] = extract_candidates(document)

    assert candidate.text == "x" * 200


def test_extract_candidates_treats_blank_attributes_as_absent():
    document = parse_html('<span class="" id="  ">Some longer text here</span>')

    [candidate] = extract_candidates(document)

    assert candidate.classes is None
    assert candidate.id is None


def test_extract_candidates_on_empty_document():
    assert extract_candidates(parse_html("")) == []
    assert extract_candidates(parse_html("<div><br/><img src='a.png'/></div>")) == []


def test_page_text_prefers_body_and_truncates():
    document = parse_html(
        "<html><head><title>Ignored title</title></head>"
        f"<body><p>Body text</p><p>{'y' * 2000}</p></body></html>"
    )

    text = page_text(document)

    assert text.startswith("Body text")
    assert "Ignored title" not in text
    assert len(text) == 1500


def test_page_text_without_body_uses_whole_document():
    document = parse_html("<h2>Widget</h2><span>$19.99</span>")

    assert page_text(document) == "Widget$19.99"
    assert page_text(document, separator=" ") == "Widget $19.99"
