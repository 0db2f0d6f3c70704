"""Retrieval-augmented prompting with query decomposition.

Public entry points live in the application layer; the composition root in
``deep_rag.config`` wires concrete adapters from environment settings.
"""

from deep_rag.application.use_cases import PipelineOrchestrator, QueryDecomposer, Retriever
from deep_rag.domain import PipelineConfig, ProgressEvent, RAGContext, RetrievalResult

__all__ = [
    "PipelineOrchestrator",
    "QueryDecomposer",
    "Retriever",
    "PipelineConfig",
    "ProgressEvent",
    "RAGContext",
    "RetrievalResult",
]
