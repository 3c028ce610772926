from __future__ import annotations

from scrapewise.tools.dom_features import parse_html
from scrapewise.tools.preview import materialize_preview

LISTING_HTML = """
<ul>
  <li class="product"><h3>Alpha</h3><span class="price">$1</span></li>
  <li class="product"><h3>Beta</h3></li>
  <li class="product"><p>nothing</p></li>
</ul>
"""


def test_preview_builds_one_record_per_container_in_order():
    records = materialize_preview(
        parse_html(LISTING_HTML),
        {"item": "li.product", "title": "h3", "price": ".price"},
    )

    assert records == [
        {"title": "Alpha", "price": "$1"},
        {"title": "Beta", "price": ""},
    ]


def test_preview_without_item_rule_uses_body():
    document = parse_html("<html><body><h1> Hello </h1></body></html>")

    assert materialize_preview(document, {"title": "h1"}) == [{"title": "Hello"}]


def test_preview_with_no_matching_containers_is_empty():
    records = materialize_preview(parse_html(LISTING_HTML), {"item": ".missing", "title": "h3"})

    assert records == []


def test_preview_degrades_invalid_rules():
    document = parse_html(LISTING_HTML)

    records = materialize_preview(document, {"item": "li.product", "title": "h3", "price": "span["})
    assert records == [{"title": "Alpha", "price": ""}, {"title": "Beta", "price": ""}]

    assert materialize_preview(document, {"item": "li[", "title": "h3"}) == []


def test_preview_takes_first_descendant_only():
    document = parse_html('<div class="card"><b>first</b><b>second</b></div>')

    assert materialize_preview(document, {"item": ".card", "label": "b"}) == [{"label": "first"}]


def test_preview_of_widget_page_with_explicit_rules():
    document = parse_html('<div id="p1"><h2>Widget</h2><span class="price">$19.99</span></div>')

    records = materialize_preview(document, {"item": "div", "price": ".price", "title": "h2"})

    assert records == [{"price": "$19.99", "title": "Widget"}]
