"""Instruction templates sent to the selector oracle.

Each catalog entry in ``prompts/prompts.json`` declares the fields it takes and,
optionally, a character cap per field::

    {"selector_instruction": {"template": "...$page_text...",
                              "fields": ["user_prompt", "page_text"],
                              "max_chars": {"page_text": 1500}}}

A template that references an undeclared ``$name`` is rejected at load time.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from string import Template
from typing import Any


PROMPTS_PATH = Path(__file__).resolve().parents[1] / "prompts" / "prompts.json"
_instructions: dict[str, "InstructionTemplate"] | None = None
_instructions_mtime_ns: int | None = None


@dataclass(frozen=True, slots=True)
class InstructionTemplate:
    key: str
    template: Template
    fields: tuple[str, ...]
    max_chars: dict[str, int] = field(default_factory=dict)

    def render(self, values: dict[str, Any]) -> str:
        for name in self.fields:
            if name not in values:
                raise KeyError(f"Missing template value '{name}' for instruction '{self.key}'")
        unexpected = sorted(set(values) - set(self.fields))
        if unexpected:
            raise TypeError(f"Instruction '{self.key}' does not take: {', '.join(unexpected)}")

        prepared: dict[str, str] = {}
        for name in self.fields:
            raw = values[name]
            text = "" if raw is None else str(raw)
            limit = self.max_chars.get(name)
            if limit is not None:
                text = text[:limit]
            prepared[name] = text
        return self.template.substitute(prepared)


def _placeholders(template: Template) -> set[str]:
    names: set[str] = set()
    for match in template.pattern.finditer(template.template):
        name = match.group("named") or match.group("braced")
        if name:
            names.add(name)
    return names


def _compile_entry(key: str, entry: Any) -> InstructionTemplate:
    if not isinstance(entry, dict) or not isinstance(entry.get("template"), str):
        raise ValueError(f"Instruction '{key}' must be an object with a string template.")

    fields = entry.get("fields", [])
    if not isinstance(fields, list) or not all(isinstance(f, str) for f in fields):
        raise ValueError(f"Instruction '{key}' fields must be a list of names.")

    template = Template(entry["template"])
    undeclared = _placeholders(template) - set(fields)
    if undeclared:
        raise ValueError(f"Instruction '{key}' uses undeclared fields: {', '.join(sorted(undeclared))}")

    max_chars = entry.get("max_chars", {})
    if not isinstance(max_chars, dict):
        raise ValueError(f"Instruction '{key}' max_chars must be an object.")
    for name, limit in max_chars.items():
        if name not in fields or not isinstance(limit, int) or limit <= 0:
            raise ValueError(f"Instruction '{key}' has an invalid limit for '{name}'.")

    return InstructionTemplate(
        key=key,
        template=template,
        fields=tuple(fields),
        max_chars=dict(max_chars),
    )


def load_instructions() -> dict[str, InstructionTemplate]:
    """Compile the catalog, re-reading it only when the file changed."""
    global _instructions, _instructions_mtime_ns
    mtime_ns = PROMPTS_PATH.stat().st_mtime_ns
    if _instructions is not None and _instructions_mtime_ns == mtime_ns:
        return _instructions

    payload = json.loads(PROMPTS_PATH.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Instruction catalog must be a JSON object.")
    compiled = {key: _compile_entry(key, entry) for key, entry in payload.items()}
    _instructions = compiled
    _instructions_mtime_ns = mtime_ns
    return compiled


def get_instruction(key: str) -> InstructionTemplate:
    instructions = load_instructions()
    if key not in instructions:
        raise KeyError(f"Instruction not found: {key}")
    return instructions[key]


def render_instruction(key: str, **values: Any) -> str:
    return get_instruction(key).render(values)


def clear_instruction_cache() -> None:
    global _instructions, _instructions_mtime_ns
    _instructions = None
    _instructions_mtime_ns = None
