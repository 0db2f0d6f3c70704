"""Knowledge store adapters implementing KnowledgeStorePort."""

from .chroma_store import ChromaKnowledgeStore, collection_name_for

__all__ = [
    "ChromaKnowledgeStore",
    "collection_name_for",
]
