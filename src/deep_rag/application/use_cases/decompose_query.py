from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from deep_rag.application.ports.completion_port import TextCompletionPort
from deep_rag.domain.decomposition import DecomposedQuery
from deep_rag.infra.prompting.parsers import parse_decomposition, parse_string_list
from deep_rag.infra.prompting.templates import DECOMPOSITION_TEMPLATE, EXPANSION_TEMPLATE

log = logging.getLogger(__name__)


@dataclass
class QueryDecomposer:
    """Split one question into complementary search queries via a completion call.

    Never raises for backend or parsing problems: the original query is
    returned as the only sub-query instead.
    """

    completion: TextCompletionPort | None = None
    max_sub_queries: int = 5
    expansion_count: int = 3

    @property
    def available(self) -> bool:
        return self.completion is not None

    def decompose(self, query: str) -> DecomposedQuery:
        if not (query or "").strip():
            raise ValueError("query must be non-empty")

        if self.completion is None:
            log.warning("Query decomposition skipped: no completion provider configured")
            return DecomposedQuery.fallback(query)

        t0 = time.perf_counter()
        log.info("Decomposing query: %s", query[:100])
        try:
            prompt = DECOMPOSITION_TEMPLATE.format(
                query=query, max_sub_queries=int(self.max_sub_queries)
            )
            payload = parse_decomposition(self.completion.complete(prompt))
        except Exception as e:  # noqa: BLE001
            log.warning("Query decomposition failed, using original query: %s", e)
            return DecomposedQuery.fallback(query)

        sub_queries = tuple(payload.sub_queries[: int(self.max_sub_queries)])
        log.info(
            "Query decomposed into %d sub-queries (%d proposed) in %.0fms",
            len(sub_queries),
            len(payload.sub_queries),
            (time.perf_counter() - t0) * 1000,
        )
        return DecomposedQuery(
            original_query=query, sub_queries=sub_queries, rationale=payload.reasoning
        )

    def expand(self, query: str) -> list[str]:
        """Return the query followed by alternative phrasings (best effort)."""
        if self.completion is None:
            return [query]
        try:
            prompt = EXPANSION_TEMPLATE.format(query=query, count=int(self.expansion_count))
            alternatives = parse_string_list(self.completion.complete(prompt))
        except Exception as e:  # noqa: BLE001
            log.warning("Query expansion failed: %s", e)
            return [query]
        out = [query]
        for alt in alternatives:
            if alt not in out:
                out.append(alt)
        return out
