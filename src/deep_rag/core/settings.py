from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deep_rag.domain.config import PipelineConfig

EmbeddingProvider = Literal["huggingface", "openai", "dummy"]


def _coerce_bool(v):  # type: ignore[no-untyped-def]
    # Accept tolerant boolean env values and trim whitespace (e.g., "false ", "0 ")
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"):
            return True
        if s in ("0", "false", "no", "off", ""):
            return False
    return v


class EmbeddingSettings(BaseSettings):
    provider: EmbeddingProvider = Field("huggingface", alias="EMBEDDING_PROVIDER")
    model_name: str = Field(
        "sentence-transformers/all-MiniLM-L6-v2", alias="EMBEDDING_MODEL_NAME"
    )
    device: str = Field("cpu", alias="EMBEDDING_DEVICE")
    normalize: bool = Field(True, alias="EMBEDDING_NORMALIZE")
    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(None, alias="OPENAI_BASE_URL")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", protected_namespaces=()
    )

    @property
    def signature(self) -> str:
        return f"{self.provider}:{self.model_name}:{'norm' if self.normalize else 'raw'}"


class LLMSettings(BaseSettings):
    # "" disables query decomposition
    provider: str = Field("", alias="LLM_PROVIDER")
    model: str | None = Field(None, alias="LLM_MODEL")
    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(None, alias="OPENAI_BASE_URL")
    anthropic_api_key: str | None = Field(None, alias="ANTHROPIC_API_KEY")
    timeout: float = Field(30.0, alias="LLM_TIMEOUT")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class RagSettings(BaseSettings):
    """Environment-backed pipeline settings, read once at startup."""

    enabled: bool = Field(False, alias="RAG_ENABLED")
    max_results: int = Field(10, alias="RAG_MAX_RESULTS")
    max_decomposition_queries: int = Field(5, alias="RAG_MAX_DECOMPOSITION_QUERIES")
    min_relevance_score: float = Field(0.5, alias="RAG_MIN_RELEVANCE_SCORE")
    max_workers: int = Field(1, alias="RAG_MAX_WORKERS")
    signature: Literal["sha256", "prefix"] = Field("sha256", alias="RAG_SIGNATURE")

    # Knowledge store; no collection means "not configured"
    kb_collection: str | None = Field(None, alias="RAG_KB_COLLECTION")
    kb_persist_dir: Path = Field(Path(".vector_store/chroma"), alias="RAG_KB_PERSIST_DIR")
    kb_namespace_by_model: bool = Field(False, alias="RAG_KB_NAMESPACE_BY_MODEL")

    embeddings: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("enabled", "kb_namespace_by_model", mode="before")
    @classmethod
    def _bool(cls, v):  # type: ignore[no-untyped-def]
        return _coerce_bool(v)

    @field_validator("kb_collection", mode="before")
    @classmethod
    def _blank_is_none(cls, v):  # type: ignore[no-untyped-def]
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_pipeline_config(self) -> PipelineConfig:
        return PipelineConfig(
            enabled=bool(self.enabled),
            max_results_per_query=int(self.max_results),
            max_sub_queries=int(self.max_decomposition_queries),
            min_relevance_score=float(self.min_relevance_score),
            max_workers=int(self.max_workers),
            signature=self.signature,
        )
