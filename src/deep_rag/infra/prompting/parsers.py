from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from deep_rag.exceptions import DecompositionError

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


class DecompositionPayload(BaseModel):
    reasoning: str = ""
    sub_queries: list[str] = Field(alias="subQueries")

    @field_validator("sub_queries", mode="before")
    @classmethod
    def _strip_blank(cls, v):  # type: ignore[no-untyped-def]
        if isinstance(v, list):
            return [str(s).strip() for s in v if isinstance(s, str) and s.strip()]
        return v


def _extract_json(text: str, opener: str, closer: str) -> Any:
    """Decode the first JSON value delimited by opener/closer in a model reply.

    Tolerates code fences and prose around the payload.
    """
    raw = (text or "").strip()
    m = _FENCE_RE.search(raw)
    if m:
        raw = m.group(1).strip()
    start = raw.find(opener)
    end = raw.rfind(closer)
    if start == -1 or end <= start:
        raise DecompositionError("No JSON payload found in completion")
    try:
        return json.loads(raw[start : end + 1])
    except json.JSONDecodeError as e:
        raise DecompositionError(f"Malformed JSON in completion: {e.msg}") from e


def parse_decomposition(text: str) -> DecompositionPayload:
    data = _extract_json(text, "{", "}")
    try:
        payload = DecompositionPayload.model_validate(data)
    except ValidationError as e:
        raise DecompositionError(
            f"Decomposition schema mismatch: {e.error_count()} error(s)"
        ) from e
    if not payload.sub_queries:
        raise DecompositionError("Decomposition returned no sub-queries")
    return payload


def parse_string_list(text: str) -> list[str]:
    data = _extract_json(text, "[", "]")
    if not isinstance(data, list):
        raise DecompositionError("Expected a JSON array of strings")
    return [s.strip() for s in data if isinstance(s, str) and s.strip()]
