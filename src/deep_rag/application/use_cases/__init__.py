from .augment_prompt import PipelineOrchestrator
from .decompose_query import QueryDecomposer
from .retrieve import Retriever

__all__ = [
    "PipelineOrchestrator",
    "QueryDecomposer",
    "Retriever",
]
