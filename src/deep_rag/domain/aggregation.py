from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from deep_rag.domain.retrieval import RetrievalResult, SignatureStrategy


def rank_results(results: Iterable[RetrievalResult]) -> list[RetrievalResult]:
    """Sort by score descending; ties keep their input order."""
    return sorted(results, key=lambda r: r.score, reverse=True)


class ResultAccumulator:
    """Run-wide unique result set keyed by content signature.

    The first occurrence of a signature wins; later duplicates are counted
    and dropped. Insertion order is preserved for stable ranking.
    """

    def __init__(self, strategy: SignatureStrategy = "sha256") -> None:
        self._strategy = strategy
        self._by_sig: dict[str, RetrievalResult] = {}
        self._sources: dict[str, None] = {}
        self.duplicates = 0

    def add(self, results: Iterable[RetrievalResult]) -> int:
        """Fold one result set in; returns how many new unique results it added."""
        added = 0
        for r in results:
            sig = r.signature(self._strategy)
            if sig in self._by_sig:
                self.duplicates += 1
                continue
            self._by_sig[sig] = r
            self._sources.setdefault(r.source, None)
            added += 1
        return added

    def __len__(self) -> int:
        return len(self._by_sig)

    @property
    def results(self) -> list[RetrievalResult]:
        return list(self._by_sig.values())

    @property
    def sources(self) -> list[str]:
        return list(self._sources)

    def ranked(self) -> list[RetrievalResult]:
        return rank_results(self._by_sig.values())


def merge(
    result_sets: Iterable[Sequence[RetrievalResult]], strategy: SignatureStrategy = "sha256"
) -> list[RetrievalResult]:
    """Flatten, deduplicate (first seen wins) and rank per-sub-query result sets."""
    acc = ResultAccumulator(strategy)
    for rs in result_sets:
        acc.add(rs)
    return acc.ranked()


@dataclass
class AggregatedContext:
    ranked_results: list[RetrievalResult] = field(default_factory=list)
    unique_sources: list[str] = field(default_factory=list)
    sub_queries: list[str] = field(default_factory=list)
    total_results: int = 0
    processing_time_ms: int = 0

    @classmethod
    def from_accumulator(
        cls, acc: ResultAccumulator, sub_queries: Sequence[str], processing_time_ms: int = 0
    ) -> AggregatedContext:
        ranked = acc.ranked()
        return cls(
            ranked_results=ranked,
            unique_sources=acc.sources,
            sub_queries=list(sub_queries),
            total_results=len(ranked),
            processing_time_ms=processing_time_ms,
        )
