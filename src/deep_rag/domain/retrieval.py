from __future__ import annotations

import hashlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

SignatureStrategy = Literal["sha256", "prefix"]

# Prefix strategy: first N characters plus total length
PREFIX_CHARS = 100


@dataclass(frozen=True)
class RetrievalResult:
    """A scored passage returned by a knowledge store for one query."""

    content: str
    source: str
    score: float
    metadata: Mapping[str, str] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return source_label(self.source)

    def signature(self, strategy: SignatureStrategy = "sha256") -> str:
        return content_signature(self.content, strategy)


def content_signature(content: str, strategy: SignatureStrategy = "sha256") -> str:
    """Return the deduplication key for a passage.

    ``sha256`` hashes the full text; ``prefix`` keys on the first
    ``PREFIX_CHARS`` characters plus the total length.
    """
    text = content or ""
    if strategy == "prefix":
        return f"{text[:PREFIX_CHARS]}_{len(text)}"
    if strategy == "sha256":
        return hashlib.sha256(text.encode("utf-8")).hexdigest()
    raise ValueError(f"Unsupported signature strategy: {strategy}")


def source_label(source: str) -> str:
    """Human-readable label for a source locator.

    >>> source_label("s3://bucket/docs/rate-limits.md")
    'rate-limits.md'
    >>> source_label("docs/guide/")
    'guide'
    """
    parts = [p for p in (source or "").split("/") if p]
    return parts[-1] if parts else (source or "")
