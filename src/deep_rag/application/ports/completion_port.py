from __future__ import annotations

from typing import Protocol


class TextCompletionPort(Protocol):
    """Single-turn text completion used for query decomposition."""

    def complete(self, prompt: str) -> str:  # pragma: no cover - interface
        ...
