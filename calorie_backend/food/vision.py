# -*- coding: utf-8 -*-
"""Food — photo analysis: one Gemini call, then a strict JSON parse with a pattern fallback.

The caller always gets a complete NutritionEstimate. The only error surfaced is
UpstreamUnavailable, raised when the model call itself fails.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from .. import gemini
from .models import NutritionEstimate

logger = logging.getLogger(__name__)

# Policy defaults for fields the fallback parse cannot find.
DEFAULT_FOOD_NAME = "Unknown Food"
DEFAULT_WEIGHT = 100
DEFAULT_CALORIES = 200
DEFAULT_PROTEIN = 10

EXPECTED_KEYS = ("foodName", "weight", "calories", "protein")
NUMERIC_KEYS = ("weight", "calories", "protein")

ANALYSIS_PROMPT = """
You are a nutritionist AI. Analyze the food in the provided image and return the following details:

1. Food name or dish name
2. Estimated weight in grams
3. Estimated calories
4. Estimated protein in grams

Respond ONLY in this JSON format:
{
  "foodName": "dish name",
  "weight": number,
  "calories": number,
  "protein": number
}
Do not add explanations or additional text. If unsure, make the best reasonable estimation.
"""

# (prompt, image_bytes, media_type) -> response text
VisionModel = Callable[[str, bytes, str], str]


class UpstreamUnavailable(RuntimeError):
    """The generative model call failed; there is no text to parse."""


@dataclass(frozen=True)
class StrictParseOk:
    estimate: NutritionEstimate


@dataclass(frozen=True)
class StrictParseFailed:
    reason: str


StrictParseResult = Union[StrictParseOk, StrictParseFailed]


_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_FOOD_NAME_RE = re.compile(r"foodName[\"']?[^\"'\n]*?[\"']([^\"']+)[\"']", re.IGNORECASE)
_NUMBER_RES = {key: re.compile(rf"{key}.*?(\d+)", re.IGNORECASE) for key in NUMERIC_KEYS}


def normalize_response_text(text: str) -> str:
    """Drop every fence marker (paired or not, with or without a json tag) and trim."""
    return _FENCE_RE.sub("", text or "").strip()


def _iter_json_object_candidates(text: str) -> List[str]:
    """Extract balanced {...} candidates from arbitrary text, respecting string literals."""
    candidates: List[str] = []
    in_str = False
    escaped = False
    depth = 0
    start_idx: int | None = None

    for i, ch in enumerate(text):
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            continue

        if ch == "\"":
            in_str = True
            continue

        if ch == "{":
            if depth == 0:
                start_idx = i
            depth += 1
            continue

        if ch == "}":
            if depth > 0:
                depth -= 1
                if depth == 0 and start_idx is not None:
                    candidates.append(text[start_idx : i + 1])
                    start_idx = None
            continue

    return candidates


def _coerce_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        # Huge JSON integers overflow float(); numeric strings may be malformed.
        number = float(value.strip() if isinstance(value, str) else value)
    except (OverflowError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def _estimate_from_object(obj: Dict[str, Any]) -> StrictParseResult:
    missing = [key for key in EXPECTED_KEYS if key not in obj]
    if missing:
        return StrictParseFailed(f"missing keys: {', '.join(missing)}")

    food_name = obj["foodName"]
    if not isinstance(food_name, str) or not food_name.strip():
        return StrictParseFailed("foodName is not a non-empty string")

    numbers: Dict[str, float] = {}
    for key in NUMERIC_KEYS:
        number = _coerce_number(obj[key])
        if number is None:
            return StrictParseFailed(f"{key} is not a non-negative number: {obj[key]!r}")
        numbers[key] = number

    return StrictParseOk(NutritionEstimate(food_name=food_name, **numbers))


def strict_parse(text: str) -> StrictParseResult:
    """Decode the text as the expected JSON object.

    The whole text is tried first, then each balanced {...} block in order, so
    prose around an otherwise valid object does not defeat the parse.
    """
    candidates = [text]
    candidates.extend(c for c in _iter_json_object_candidates(text) if c != text)

    result: StrictParseResult = StrictParseFailed("no JSON object found")
    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        # ValueError also covers integers past the interpreter's digit limit.
        except (ValueError, RecursionError) as exc:
            if candidate is text:
                result = StrictParseFailed(f"invalid JSON: {exc}")
            continue
        if not isinstance(parsed, dict):
            result = StrictParseFailed(f"expected a JSON object, got {type(parsed).__name__}")
            continue
        result = _estimate_from_object(parsed)
        if isinstance(result, StrictParseOk):
            return result
    return result


def fallback_parse(text: str) -> NutritionEstimate:
    """Pick each field out of prose or near-JSON independently; defaults fill the gaps."""
    name_match = _FOOD_NAME_RE.search(text)
    food_name = name_match.group(1).strip() if name_match else ""

    numbers: Dict[str, float] = {}
    defaults = {"weight": DEFAULT_WEIGHT, "calories": DEFAULT_CALORIES, "protein": DEFAULT_PROTEIN}
    for key in NUMERIC_KEYS:
        match = _NUMBER_RES[key].search(text)
        # A digit run too long for a finite float counts as no match.
        number = _coerce_number(match.group(1)) if match else None
        numbers[key] = number if number is not None else float(defaults[key])

    return NutritionEstimate(food_name=food_name or DEFAULT_FOOD_NAME, **numbers)


def extract_nutrition(response_text: str) -> NutritionEstimate:
    text = normalize_response_text(response_text)
    result = strict_parse(text)
    if isinstance(result, StrictParseOk):
        return result.estimate

    logger.warning("nutrition JSON parse failed (%s); using pattern fallback", result.reason)
    return fallback_parse(text)


def analyze_food_image(
    image_bytes: bytes,
    media_type: str,
    *,
    model: VisionModel | None = None,
) -> NutritionEstimate:
    call = model or gemini.generate_with_image
    try:
        response_text = call(ANALYSIS_PROMPT, image_bytes, media_type)
    except Exception as exc:
        logger.error("food image analysis call failed: %s", exc)
        raise UpstreamUnavailable(str(exc) or exc.__class__.__name__) from exc

    if not isinstance(response_text, str):
        raise UpstreamUnavailable(f"model returned {type(response_text).__name__} instead of text")

    logger.debug("food image analysis response: %s", response_text[:800])
    return extract_nutrition(response_text)
