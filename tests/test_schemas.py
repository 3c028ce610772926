from __future__ import annotations

import pytest
from pydantic import ValidationError

from scrapewise.models.schemas import InferenceResult, ScrapeRequest


def _payload(**overrides):
    payload = {
        "selectors": {"price": ".price", "item": "li"},
        "dataTypes": ["prices"],
        "confidence": "medium",
        "source": "fallback",
    }
    payload.update(overrides)
    return payload


def test_inference_result_serializes_with_plain_keys():
    result = InferenceResult.model_validate(_payload())

    dumped = result.model_dump(by_alias=True)

    assert set(dumped) == {"selectors", "dataTypes", "confidence", "source"}
    assert InferenceResult.model_validate(dumped) == result


def test_inference_result_accepts_field_names():
    result = InferenceResult(
        selectors={"item": "li"},
        data_types=["text_content"],
        confidence="high",
        source="ai",
    )

    assert result.data_types == ["text_content"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"selectors": {"price": ".price"}},
        {"selectors": {"item": ""}},
        {"selectors": {"item": "li["}},
        {"dataTypes": []},
        {"dataTypes": ["currencies"]},
        {"confidence": "certain"},
        {"source": "cache"},
        {"extra": True},
    ],
)
def test_inference_result_rejects_malformed_payloads(overrides):
    with pytest.raises(ValidationError):
        InferenceResult.model_validate(_payload(**overrides))


def test_scrape_request_validates_selectors():
    request = ScrapeRequest(url="https://a.example", selectors={"title": " h1 "})
    assert request.selectors == {"title": "h1"}

    with pytest.raises(ValidationError):
        ScrapeRequest(url="https://a.example", selectors={})
    with pytest.raises(ValidationError):
        ScrapeRequest(url="https://a.example", selectors={"title": "h1["})
