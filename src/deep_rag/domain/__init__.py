"""Domain layer: pure types and logic (no I/O, no external libs)."""

from .aggregation import AggregatedContext, ResultAccumulator, merge, rank_results
from .config import PipelineConfig
from .context import RAGContext, augment_message, format_context, format_results_block
from .decomposition import FALLBACK_RATIONALE, DecomposedQuery
from .events import ProgressEvent, Stage
from .retrieval import RetrievalResult, content_signature, source_label

__all__ = [
    "AggregatedContext",
    "ResultAccumulator",
    "merge",
    "rank_results",
    "PipelineConfig",
    "RAGContext",
    "augment_message",
    "format_context",
    "format_results_block",
    "FALLBACK_RATIONALE",
    "DecomposedQuery",
    "ProgressEvent",
    "Stage",
    "RetrievalResult",
    "content_signature",
    "source_label",
]
