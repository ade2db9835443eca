# -*- coding: utf-8 -*-
"""Gemini REST client (generateContent) shared by the vision pipeline and quotes."""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

import httpx

from .config import settings

logger = logging.getLogger(__name__)


class GeminiError(RuntimeError):
    """The model call failed or returned no usable text."""


@dataclass(frozen=True)
class GeminiSettings:
    base_url: str
    model: str
    api_key: str | None
    timeout: float


def resolve_gemini_settings() -> GeminiSettings:
    return GeminiSettings(
        base_url=settings.gemini_base_url.rstrip("/"),
        model=settings.gemini_model,
        api_key=settings.gemini_api_key,
        timeout=settings.gemini_timeout,
    )


def text_part(text: str) -> Dict[str, Any]:
    return {"text": text}


def image_part(image_bytes: bytes, mime_type: str) -> Dict[str, Any]:
    b64 = base64.b64encode(image_bytes).decode("ascii")
    return {"inline_data": {"mime_type": mime_type, "data": b64}}


def _extract_error(data: object) -> str | None:
    """Pull a readable message out of a Google API error payload."""
    if not isinstance(data, dict):
        return None
    err = data.get("error")
    if not isinstance(err, dict):
        return None
    message = err.get("message")
    if not isinstance(message, str) or not message.strip():
        return None
    status = err.get("status") or err.get("code")
    return f"{status}: {message.strip()}" if status else message.strip()


def _extract_text(data: object) -> str | None:
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    if not isinstance(first, dict):
        return None
    content = first.get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list):
        return None
    out: List[str] = []
    for part in parts:
        if isinstance(part, dict) and isinstance(part.get("text"), str):
            out.append(part["text"])
    return "".join(out) if out else None


def generate_content(parts: List[Dict[str, Any]], *, cfg: GeminiSettings | None = None) -> str:
    """Send one generateContent request and return the first candidate's text."""
    cfg = cfg or resolve_gemini_settings()
    if not cfg.api_key:
        raise GeminiError("GEMINI_API_KEY is not configured")

    url = f"{cfg.base_url}/models/{cfg.model}:generateContent"
    headers = {"Content-Type": "application/json", "x-goog-api-key": cfg.api_key}
    payload = {"contents": [{"role": "user", "parts": parts}]}

    try:
        with httpx.Client(timeout=cfg.timeout, follow_redirects=True) as client:
            resp = client.post(url, headers=headers, json=payload)
    except httpx.HTTPError as exc:
        raise GeminiError(f"Gemini request failed: {exc}") from exc

    try:
        data = resp.json()
    except json.JSONDecodeError as exc:
        snippet = (resp.text or "").replace("\n", " ").strip()[:200]
        raise GeminiError(f"Gemini returned non-JSON response ({resp.status_code}): {snippet}") from exc

    if resp.status_code >= 400:
        message = _extract_error(data) or f"HTTP {resp.status_code}"
        raise GeminiError(f"Gemini API error: {message}")

    text = _extract_text(data)
    if text is None:
        # Blocked prompts come back with promptFeedback and no candidates.
        feedback = data.get("promptFeedback") if isinstance(data, dict) else None
        raise GeminiError(f"Gemini response contained no text (feedback={feedback})")
    logger.debug("gemini %s returned %d chars", cfg.model, len(text))
    return text


def generate_text(prompt: str) -> str:
    return generate_content([text_part(prompt)])


def generate_with_image(prompt: str, image_bytes: bytes, mime_type: str) -> str:
    return generate_content([text_part(prompt), image_part(image_bytes, mime_type)])
