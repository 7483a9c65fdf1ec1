from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, Optional, Tuple

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```$", re.DOTALL)


class ModelOutputError(ValueError):
    """Model returned text that does not satisfy the requested JSON shape."""


def strip_code_fence(text: str) -> str:
    m = _FENCE_RE.match(text.strip())
    return m.group(1).strip() if m else text.strip()


def parse_json_object(text: Optional[str]) -> Dict[str, Any]:
    """
    Parses a model answer that is expected to be a single JSON object.
    Markdown code fences around the object are tolerated.
    Raises ModelOutputError on empty text, invalid JSON or a non-object value.
    """
    body = strip_code_fence(text or "")
    if not body:
        raise ModelOutputError("Empty model response")

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, RecursionError) as e:
        # keep the snippet short
        raise ModelOutputError(f"Model output is not valid JSON. Snippet: {body[:800]}") from e

    if not isinstance(data, dict):
        raise ModelOutputError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def coerce_str_list(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    out = []
    for v in value:
        if isinstance(v, str) and v.strip():
            out.append(v.strip())
    return tuple(out)


def coerce_score(value: Any, default: int) -> int:
    """Integer in [0, 100]; anything non-numeric (bools included) becomes default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        # JSON ints are unbounded, clamp before any float conversion
        return max(0, min(100, value))
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return default
    return max(0, min(100, int(round(value))))
