from .completion_port import TextCompletionPort
from .knowledge_store_port import KnowledgeStorePort
from .progress_port import ProgressSink

__all__ = [
    "KnowledgeStorePort",
    "TextCompletionPort",
    "ProgressSink",
]
