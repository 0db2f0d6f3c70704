from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from deep_rag.application.ports.knowledge_store_port import KnowledgeStorePort
from deep_rag.domain.context import format_results_block
from deep_rag.domain.retrieval import RetrievalResult
from deep_rag.exceptions import RetrievalError

log = logging.getLogger(__name__)


@dataclass
class Retriever:
    store: KnowledgeStorePort
    max_results: int = 10
    min_relevance_score: float = 0.5

    def retrieve(self, query: str) -> list[RetrievalResult]:
        """Search the store and drop hits below the relevance threshold.

        Store order is preserved. Store failures surface as RetrievalError.
        """
        t0 = time.perf_counter()
        try:
            hits = list(self.store.search(query, int(self.max_results)))
        except RetrievalError:
            raise
        except Exception as e:
            log.error("Knowledge store search failed for %r: %s", query[:50], e)
            raise RetrievalError(f"Knowledge store search failed: {e}") from e

        threshold = float(self.min_relevance_score)
        kept = [r for r in hits if r.score >= threshold]
        log.info(
            "Retrieved %d results (%d below threshold %.2f) for %r in %.0fms",
            len(kept),
            len(hits) - len(kept),
            threshold,
            query[:50],
            (time.perf_counter() - t0) * 1000,
        )
        return kept

    def retrieve_as_context(self, query: str) -> str:
        results = self.retrieve(query)
        if not results:
            return ""
        return format_results_block(results)
