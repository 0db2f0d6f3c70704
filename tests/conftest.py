from __future__ import annotations

from pathlib import Path

import pytest

_ENV_VARS = (
    "RAG_ENABLED",
    "RAG_MAX_RESULTS",
    "RAG_MAX_DECOMPOSITION_QUERIES",
    "RAG_MIN_RELEVANCE_SCORE",
    "RAG_MAX_WORKERS",
    "RAG_SIGNATURE",
    "RAG_KB_COLLECTION",
    "RAG_KB_PERSIST_DIR",
    "RAG_KB_NAMESPACE_BY_MODEL",
    "EMBEDDING_PROVIDER",
    "EMBEDDING_MODEL_NAME",
    "LLM_PROVIDER",
    "LLM_MODEL",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "ANTHROPIC_API_KEY",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # Keep settings independent from the developer's shell and any .env file
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
