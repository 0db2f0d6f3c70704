from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from deep_rag.domain.retrieval import RetrievalResult


class KnowledgeStorePort(Protocol):
    """Scored passage lookup over an external vector/semantic index.

    Implementations must be safe to call from several threads at once.
    """

    def search(self, query: str, limit: int) -> Sequence[RetrievalResult]:  # pragma: no cover
        ...
