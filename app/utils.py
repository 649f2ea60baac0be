"""Utility helpers for the Moodflix service."""

from __future__ import annotations

import json
import math
import re
import secrets
import string
from datetime import date
from typing import Any


JSON_BLOCK_RE = re.compile(r"```(?:json)?\s*([\[{].*?[\]}])\s*```", re.DOTALL)
BARE_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)
BARE_JSON_RE = re.compile(r"\{.*\}", re.DOTALL)
LEADING_FLOAT_RE = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")
YEAR_RE = re.compile(r"\d{4}")

TOKEN_ALPHABET = string.ascii_lowercase + string.digits
CANDIDATE_LIST_KEYS: tuple[str, ...] = ("movies", "results", "items", "recommendations")


def extract_json_payload(content: str) -> Any:
    """Extract and parse the first JSON array or object from a model response."""

    match = JSON_BLOCK_RE.search(content)
    if match:
        payload = match.group(1)
    else:
        stripped = content.strip()
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
        array_start = content.find("[")
        object_start = content.find("{")
        if array_start != -1 and (object_start == -1 or array_start < object_start):
            match = BARE_ARRAY_RE.search(content)
        else:
            match = BARE_JSON_RE.search(content)
        if not match:
            raise ValueError("No JSON payload found in response")
        payload = match.group(0)

    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid JSON payload produced by the model") from exc


def candidate_records(payload: Any) -> list[dict[str, Any]]:
    """Return the candidate records contained in a parsed model payload."""

    if isinstance(payload, dict):
        for key in CANDIDATE_LIST_KEYS:
            candidate = payload.get(key)
            if isinstance(candidate, list):
                payload = candidate
                break
        else:
            return []
    if not isinstance(payload, list):
        return []
    return [entry for entry in payload if isinstance(entry, dict)]


def random_token(length: int = 9) -> str:
    """Return a short random lowercase alphanumeric token."""

    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def coerce_number(value: object, default: float = 0.0) -> float:
    """Coerce ``value`` into a finite float, reading strings like ``parseFloat``."""

    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return default
    elif isinstance(value, str):
        match = LEADING_FLOAT_RE.match(value)
        if not match:
            return default
        number = float(match.group(0))
    else:
        return default
    if not math.isfinite(number):
        return default
    return number


def extract_year(value: object, *, today: date | None = None) -> int:
    """Resolve a release year, defaulting to the current calendar year."""

    fallback = (today or date.today()).year
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value or fallback
    if isinstance(value, float):
        if not math.isfinite(value) or not value:
            return fallback
        return int(value)
    if isinstance(value, str):
        match = YEAR_RE.search(value)
        return int(match.group(0)) if match else fallback
    return fallback
