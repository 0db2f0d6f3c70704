from __future__ import annotations

import logging
from functools import lru_cache

from deep_rag.application.ports.completion_port import TextCompletionPort
from deep_rag.application.ports.knowledge_store_port import KnowledgeStorePort
from deep_rag.application.use_cases import PipelineOrchestrator
from deep_rag.core.settings import LLMSettings, RagSettings
from deep_rag.exceptions import ConfigurationError

log = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-20241022",
}


def build_completion(cfg: LLMSettings) -> TextCompletionPort | None:
    """Build the completion provider used for decomposition.

    Returns None when no provider or credential is configured; the
    decomposer then falls back to the original query.
    """
    prov = (cfg.provider or "").lower().strip()
    if not prov:
        return None

    if prov in ("openai", "azure-openai"):
        if not cfg.openai_api_key:
            log.warning("LLM_PROVIDER=%s but OPENAI_API_KEY is not set", prov)
            return None
        from deep_rag.infrastructure.llm.providers import OpenAIChatCompletion

        return OpenAIChatCompletion(
            model=cfg.model or DEFAULT_MODELS["openai"],
            api_key=cfg.openai_api_key,
            base_url=cfg.openai_base_url,
        )

    if prov == "anthropic":
        if not cfg.anthropic_api_key:
            log.warning("LLM_PROVIDER=anthropic but ANTHROPIC_API_KEY is not set")
            return None
        from deep_rag.infrastructure.llm.providers import AnthropicCompletion

        return AnthropicCompletion(
            model=cfg.model or DEFAULT_MODELS["anthropic"],
            api_key=cfg.anthropic_api_key,
            timeout=float(cfg.timeout),
        )

    if prov == "dummy":
        from deep_rag.infrastructure.llm.providers import DummyCompletion

        return DummyCompletion()

    raise ConfigurationError(f"Unsupported LLM provider: {cfg.provider}")


def build_knowledge_store(settings: RagSettings) -> KnowledgeStorePort | None:
    """Build the Chroma knowledge store, or None when no collection is configured."""
    if not settings.kb_collection:
        return None

    from deep_rag.infra.embeddings.factory import build_embeddings
    from deep_rag.infra.knowledge.chroma_store import ChromaKnowledgeStore, collection_name_for

    emb_cfg = settings.embeddings
    collection = settings.kb_collection
    if settings.kb_namespace_by_model:
        collection = collection_name_for(collection, emb_cfg.signature)
    log.info("Knowledge store: collection=%s persist_dir=%s", collection, settings.kb_persist_dir)
    return ChromaKnowledgeStore(collection, settings.kb_persist_dir, build_embeddings(emb_cfg))


def build_orchestrator(settings: RagSettings | None = None) -> PipelineOrchestrator:
    settings = settings or RagSettings()
    config = settings.to_pipeline_config()
    if not config.enabled:
        log.info("RAG is disabled")
        return PipelineOrchestrator(config)

    store = build_knowledge_store(settings)
    if store is None:
        log.warning("RAG is enabled but RAG_KB_COLLECTION is not set")
    completion = build_completion(settings.llm)
    if completion is None:
        log.warning("No completion provider configured; query decomposition disabled")
    return PipelineOrchestrator(config, store=store, completion=completion)


@lru_cache(maxsize=1)
def get_settings() -> RagSettings:
    return RagSettings()


@lru_cache(maxsize=1)
def get_orchestrator() -> PipelineOrchestrator:
    return build_orchestrator(get_settings())
