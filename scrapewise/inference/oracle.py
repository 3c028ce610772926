"""Adapter for the Hugging Face text-generation endpoint used as a selector oracle.

The service is optional and unreliable: every failure mode collapses into
``None`` so the engine can fall back. Nothing raised here crosses `suggest`.
"""
from __future__ import annotations

import asyncio
import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any

import httpx

from scrapewise.config import Settings, settings
from scrapewise.services import logger as log_service
from scrapewise.services.prompt_store import render_instruction
from scrapewise.tools.selector_builder import ITEM_FIELD, is_valid_selector

logger = logging.getLogger(__name__)

JSON_SPAN_RE = re.compile(r"\{[\s\S]*\}")
KNOWN_DATA_TYPES = ("prices", "emails", "phones", "products", "text_content")
RESERVED_KEYS = frozenset({"dataTypes", "data_types", "confidence", "source"})


@dataclass(frozen=True, slots=True)
class OracleConfig:
    token: str
    base_url: str = "https://api-inference.huggingface.co/models"
    model: str = "microsoft/DialoGPT-medium"
    timeout_seconds: float = 30.0

    @property
    def enabled(self) -> bool:
        return bool(self.token.strip())

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.model}"

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "OracleConfig":
        source = source or settings
        return cls(
            token=source.huggingface_token,
            base_url=source.inference_base_url,
            model=source.inference_model,
            timeout_seconds=float(source.inference_timeout_seconds),
        )


@dataclass(frozen=True, slots=True)
class OracleSuggestion:
    selectors: dict[str, str]
    data_types: list[str] | None = None


def _coerce_selectors(raw: Any) -> dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    selectors: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key.strip() or key in RESERVED_KEYS:
            continue
        if not is_valid_selector(value):
            continue
        selectors[key.strip()] = value.strip()
    return selectors


def _coerce_data_types(raw: Any) -> list[str] | None:
    if not isinstance(raw, list):
        return None
    types: list[str] = []
    for item in raw:
        if isinstance(item, str) and item in KNOWN_DATA_TYPES and item not in types:
            types.append(item)
    return types or None


def parse_oracle_text(text: str) -> OracleSuggestion | None:
    """Pull the embedded JSON object out of generated text and check its shape.

    Accepts ``{"selectors": {...}, "dataTypes": [...]}`` or a flat field map.
    Returns None unless at least one non-item field carries a usable rule.
    """
    if not isinstance(text, str):
        return None
    match = JSON_SPAN_RE.search(text)
    if not match:
        return None
    try:
        payload = json.loads(match.group(0))
    except (ValueError, RecursionError):
        logger.info("Oracle response contained no parseable JSON object")
        return None
    if not isinstance(payload, dict):
        return None

    if isinstance(payload.get("selectors"), dict):
        selectors = _coerce_selectors(payload["selectors"])
        data_types = _coerce_data_types(payload.get("dataTypes", payload.get("data_types")))
    else:
        selectors = _coerce_selectors(payload)
        data_types = _coerce_data_types(payload.get("dataTypes"))

    if not any(name != ITEM_FIELD for name in selectors):
        return None
    return OracleSuggestion(selectors=selectors, data_types=data_types)


def _generated_text(payload: Any) -> str | None:
    if isinstance(payload, list) and payload:
        payload = payload[0]
    if isinstance(payload, dict):
        text = payload.get("generated_text")
        if isinstance(text, str):
            return text
    return None


class OracleAdapter:
    """One-shot selector suggestions from the inference service."""

    name = "oracle"

    def __init__(
        self,
        config: OracleConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self._http_client = http_client

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def build_instruction(self, page_text: str, user_prompt: str) -> str:
        return render_instruction(
            "selector_instruction",
            user_prompt=user_prompt,
            page_text=page_text,
        )

    async def suggest(self, page_text: str, user_prompt: str) -> OracleSuggestion | None:
        if not self.enabled:
            logger.debug("Inference token not configured; skipping oracle")
            return None

        instruction = self.build_instruction(page_text, user_prompt)
        t0 = time.monotonic()
        status_code: int | None = None
        try:
            # httpx timeouts are per phase; a trickling body needs a deadline for the whole call.
            response = await asyncio.wait_for(
                self._request(instruction),
                timeout=self.config.timeout_seconds,
            )
            status_code = response.status_code
            if status_code != 200:
                raise RuntimeError(f"Inference API error: {status_code}")
            payload = response.json()
        except (httpx.HTTPError, asyncio.TimeoutError, RuntimeError, ValueError) as exc:
            logger.warning("Inference service failed, using fallback: %s", exc)
            log_service.log_inference_call(
                model=self.config.model,
                caller=self.name,
                duration_ms=int((time.monotonic() - t0) * 1000),
                status="error",
                status_code=status_code,
                error=str(exc) or type(exc).__name__,
            )
            return None

        suggestion = None
        text = _generated_text(payload)
        if text is not None:
            suggestion = parse_oracle_text(text)

        log_service.log_inference_call(
            model=self.config.model,
            caller=self.name,
            duration_ms=int((time.monotonic() - t0) * 1000),
            status="success" if suggestion is not None else "unparseable",
            status_code=status_code,
        )
        return suggestion

    async def _request(self, instruction: str) -> httpx.Response:
        if self._http_client is None:
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                return await self._post(client, instruction)
        return await self._post(self._http_client, instruction)

    async def _post(self, client: httpx.AsyncClient, instruction: str) -> httpx.Response:
        return await client.post(
            self.config.endpoint,
            json={"inputs": instruction},
            headers={
                "Authorization": f"Bearer {self.config.token}",
                "Content-Type": "application/json",
            },
            timeout=self.config.timeout_seconds,
        )
