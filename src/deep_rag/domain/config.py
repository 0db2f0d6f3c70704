from __future__ import annotations

from dataclasses import dataclass

from deep_rag.domain.retrieval import SignatureStrategy
from deep_rag.exceptions import ConfigurationError


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable pipeline configuration, injected into the orchestrator."""

    enabled: bool = False
    max_results_per_query: int = 10
    max_sub_queries: int = 5
    min_relevance_score: float = 0.5
    # 1 = sequential retrieval
    max_workers: int = 1
    signature: SignatureStrategy = "sha256"

    def __post_init__(self) -> None:
        if int(self.max_results_per_query) < 1:
            raise ConfigurationError("max_results_per_query must be >= 1")
        if int(self.max_sub_queries) < 1:
            raise ConfigurationError("max_sub_queries must be >= 1")
        if not 0.0 <= float(self.min_relevance_score) <= 1.0:
            raise ConfigurationError("min_relevance_score must be within [0, 1]")
        if int(self.max_workers) < 1:
            raise ConfigurationError("max_workers must be >= 1")
        if self.signature not in ("sha256", "prefix"):
            raise ConfigurationError(f"Unsupported signature strategy: {self.signature}")

    def as_dict(self) -> dict[str, object]:
        return {
            "maxResults": self.max_results_per_query,
            "maxDecompositionQueries": self.max_sub_queries,
            "minRelevanceScore": self.min_relevance_score,
            "maxWorkers": self.max_workers,
            "signature": self.signature,
        }
