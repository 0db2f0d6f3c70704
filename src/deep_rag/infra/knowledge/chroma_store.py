"""Chroma-backed knowledge store.

Wraps a langchain-chroma collection and converts its relevance-scored hits
into domain RetrievalResult values.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from langchain_chroma import Chroma
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings

from deep_rag.domain.retrieval import RetrievalResult

UNKNOWN_SOURCE = "Unknown source"


def collection_name_for(base: str, signature: str) -> str:
    """Build a filesystem-friendly, model-scoped collection name.

    >>> collection_name_for("kb", "openai:text-embedding-3-small")
    'kb__openai_text_embedding_3_small'
    """
    slug = re.sub(r"[^a-z0-9]+", "_", signature.lower()).strip("_")
    return f"{base}__{slug}"[:63]


def _clamp(score: float) -> float:
    return max(0.0, min(1.0, float(score)))


def _stringify(md: Mapping[str, Any] | None) -> dict[str, str]:
    return {str(k): str(v) for k, v in (md or {}).items() if v is not None}


class ChromaKnowledgeStore:
    def __init__(
        self,
        collection: str,
        persist_dir: Path,
        embedder: Embeddings,
        *,
        source_key: str = "source",
        filter: dict[str, Any] | None = None,
    ) -> None:
        persist_dir.mkdir(parents=True, exist_ok=True)
        self._source_key = source_key
        self._filter = filter
        self._db = Chroma(
            collection_name=collection,
            persist_directory=str(persist_dir),
            embedding_function=embedder,
        )

    @staticmethod
    def _normalize_filter(f: dict[str, Any] | None) -> dict[str, Any] | None:
        """Wrap multi-key metadata filters in an explicit ``$and`` for Chroma."""
        if not f:
            return None
        if any(str(k).startswith("$") for k in f.keys()):
            return f
        if len(f) <= 1:
            return f
        return {"$and": [{k: v} for k, v in f.items()]}

    def _to_result(self, doc: Document, score: float) -> RetrievalResult:
        md = dict(doc.metadata or {})
        source = str(md.get(self._source_key) or md.get("title") or UNKNOWN_SOURCE)
        return RetrievalResult(
            content=doc.page_content or "",
            source=source,
            score=_clamp(score),
            metadata=_stringify(md),
        )

    def search(self, query: str, limit: int) -> list[RetrievalResult]:
        pairs = self._db.similarity_search_with_relevance_scores(
            query, k=int(limit), filter=self._normalize_filter(self._filter)
        )
        return [self._to_result(d, s) for (d, s) in pairs]

