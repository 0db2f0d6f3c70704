from __future__ import annotations


class DeepRagError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(DeepRagError):
    """Raised for invalid or missing configuration."""


class DecompositionError(DeepRagError):
    """Raised when a query cannot be decomposed into sub-queries."""


class RetrievalError(DeepRagError):
    """Raised when a knowledge store call fails for a single query."""


class CompletionError(DeepRagError):
    """Raised when a text-completion backend fails to produce output."""
