from .factory import build_embeddings

__all__ = ["build_embeddings"]
