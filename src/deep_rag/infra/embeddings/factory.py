from __future__ import annotations

import math
from typing import Any

from langchain_core.embeddings import Embeddings

from deep_rag.core.settings import EmbeddingSettings


class DummyEmbeddings(Embeddings):
    """Deterministic hashed character features; offline and test use only."""

    dim: int = 16

    def _embed(self, text: str) -> list[float]:
        vec = [0.0] * self.dim
        for i, ch in enumerate(text.lower()):
            vec[(i + ord(ch)) % self.dim] += 1.0
        norm = math.sqrt(sum(v * v for v in vec)) or 1.0
        return [v / norm for v in vec]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self._embed(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        return self._embed(text)


def build_embeddings(cfg: EmbeddingSettings) -> Embeddings:
    provider = (cfg.provider or "").lower().strip()

    if provider == "openai":
        try:
            from langchain_openai import OpenAIEmbeddings
        except Exception as e:  # pragma: no cover - import guarded
            raise RuntimeError(
                "OpenAI embeddings not installed. pip install langchain-openai openai"
            ) from e
        kwargs: dict[str, Any] = {"model": cfg.model_name}
        if cfg.openai_api_key:
            kwargs["api_key"] = cfg.openai_api_key
        if cfg.openai_base_url:
            kwargs["base_url"] = cfg.openai_base_url
        return OpenAIEmbeddings(**kwargs)

    if provider == "huggingface":
        try:
            from langchain_huggingface import HuggingFaceEmbeddings
        except Exception as e:  # pragma: no cover - import guarded
            raise RuntimeError(
                "HuggingFace embeddings not installed. pip install 'deep-rag[hf]'"
            ) from e
        return HuggingFaceEmbeddings(
            model_name=cfg.model_name,
            model_kwargs={"device": cfg.device},
            encode_kwargs={"normalize_embeddings": bool(cfg.normalize)},
        )

    if provider == "dummy":
        return DummyEmbeddings()

    raise ValueError(f"Unsupported embeddings provider: {cfg.provider}")
