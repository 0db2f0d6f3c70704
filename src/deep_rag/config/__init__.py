"""Composition root: build adapters and the pipeline from settings."""

from .composition import (
    build_completion,
    build_knowledge_store,
    build_orchestrator,
    get_orchestrator,
    get_settings,
)

__all__ = [
    "build_completion",
    "build_knowledge_store",
    "build_orchestrator",
    "get_orchestrator",
    "get_settings",
]
