from __future__ import annotations

import json

import pytest

from scrapewise.services import prompt_store
from scrapewise.services.prompt_store import get_instruction, render_instruction


@pytest.fixture
def catalog_file(tmp_path, monkeypatch):
    """Point the store at a scratch catalog and return a writer for it."""
    path = tmp_path / "prompts.json"
    monkeypatch.setattr(prompt_store, "PROMPTS_PATH", path)
    prompt_store.clear_instruction_cache()

    def write(payload):
        path.write_text(json.dumps(payload), encoding="utf-8")
        prompt_store.clear_instruction_cache()

    yield write
    prompt_store.clear_instruction_cache()


def test_selector_instruction_substitutes_values():
    prompt = render_instruction(
        "selector_instruction",
        user_prompt="product prices",
        page_text="Widget $19.99",
    )
    assert "User wants: product prices" in prompt
    assert "Webpage content: Widget $19.99" in prompt


def test_selector_instruction_caps_page_text():
    instruction = get_instruction("selector_instruction")
    prompt = render_instruction("selector_instruction", user_prompt="x", page_text="y" * 4000)

    assert instruction.fields == ("user_prompt", "page_text")
    assert instruction.max_chars == {"page_text": 1500}
    assert "y" * 1500 in prompt
    assert "y" * 1501 not in prompt


def test_render_reports_missing_values():
    with pytest.raises(KeyError, match="page_text"):
        render_instruction("selector_instruction", user_prompt="x")


def test_render_rejects_unexpected_values():
    with pytest.raises(TypeError, match="tone"):
        render_instruction("selector_instruction", user_prompt="x", page_text="y", tone="terse")


def test_unknown_instruction():
    with pytest.raises(KeyError):
        render_instruction("missing_instruction")


def test_none_values_render_empty(catalog_file):
    catalog_file({"greeting": {"template": "Hi [$name]", "fields": ["name"]}})

    assert render_instruction("greeting", name=None) == "Hi []"


def test_catalog_rejects_undeclared_placeholders(catalog_file):
    catalog_file({"broken": {"template": "Use $page_text and ${extra}", "fields": ["page_text"]}})

    with pytest.raises(ValueError, match="extra"):
        get_instruction("broken")


def test_catalog_rejects_limits_for_unknown_fields(catalog_file):
    catalog_file({"broken": {"template": "$a", "fields": ["a"], "max_chars": {"b": 10}}})

    with pytest.raises(ValueError, match="'b'"):
        get_instruction("broken")


def test_catalog_reloads_after_file_change(catalog_file):
    catalog_file({"greeting": {"template": "Hi $name", "fields": ["name"]}})
    assert render_instruction("greeting", name="Ada") == "Hi Ada"

    catalog_file({"greeting": {"template": "Hello $name", "fields": ["name"]}})
    assert render_instruction("greeting", name="Ada") == "Hello Ada"
