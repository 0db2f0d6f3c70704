from __future__ import annotations

from dataclasses import dataclass

FALLBACK_RATIONALE = "decomposition unavailable"


@dataclass(frozen=True)
class DecomposedQuery:
    original_query: str
    sub_queries: tuple[str, ...]
    rationale: str

    @classmethod
    def fallback(cls, query: str) -> DecomposedQuery:
        """Single sub-query equal to the original question."""
        return cls(original_query=query, sub_queries=(query,), rationale=FALLBACK_RATIONALE)

    @property
    def is_fallback(self) -> bool:
        return self.rationale == FALLBACK_RATIONALE and self.sub_queries == (self.original_query,)
