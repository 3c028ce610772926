from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scrapewise.tools.selector_builder import ITEM_FIELD, is_valid_selector

Confidence = Literal["high", "medium", "low"]
Source = Literal["ai", "fallback"]
DataType = Literal["prices", "emails", "phones", "products", "text_content"]


def _clean_field_map(value: dict[str, str], *, require_item: bool) -> dict[str, str]:
    cleaned: dict[str, str] = {}
    for field_name, rule in value.items():
        name = field_name.strip()
        if not name:
            raise ValueError("Field names must be non-empty")
        if not is_valid_selector(rule):
            raise ValueError(f"Invalid selection rule for '{name}': {rule!r}")
        cleaned[name] = rule.strip()
    if require_item and ITEM_FIELD not in cleaned:
        raise ValueError("Selectors must include an 'item' container rule")
    return cleaned


# --- Inference ---


class InferenceResult(BaseModel):
    """Field to selector mapping plus provenance for one analyzed page."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    selectors: dict[str, str]
    data_types: list[DataType] = Field(alias="dataTypes", min_length=1)
    confidence: Confidence
    source: Source

    @field_validator("selectors")
    @classmethod
    def _validate_selectors(cls, value: dict[str, str]) -> dict[str, str]:
        return _clean_field_map(value, require_item=True)


# --- Requests ---


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    prompt: str = ""
    use_ai: bool = Field(default=True, alias="useAi")


class ScrapeRequest(BaseModel):
    url: str
    selectors: dict[str, str]

    @field_validator("selectors")
    @classmethod
    def _validate_selectors(cls, value: dict[str, str]) -> dict[str, str]:
        if not value:
            raise ValueError("At least one selector is required")
        return _clean_field_map(value, require_item=False)


# --- Responses ---


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    analysis: InferenceResult
    preview: list[dict[str, str]]
    total_elements: int = Field(alias="totalElements")
    url: str


class ScrapeResponse(BaseModel):
    success: bool = True
    data: list[dict[str, str]]
    total: int
    timestamp: datetime


class HealthResponse(BaseModel):
    status: str
    service: str
    ai: bool
    timestamp: datetime
