from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from deep_rag.domain.retrieval import RetrievalResult

CONTEXT_HEADING = "## Retrieved Knowledge Base Context"
QUESTION_HEADING = "## User Question"
SEPARATOR = "---"

INSTRUCTIONS = """\
## Instructions for Using This Context

1. Use the retrieved information to provide accurate, comprehensive answers
2. If the context doesn't fully answer the question, acknowledge what information is missing
3. Cite specific documents by their number (e.g., "According to Document 1...")
4. Synthesize information from multiple documents when relevant
5. If you find contradictions between documents, note them
"""


@dataclass
class RAGContext:
    query: str
    context: str = ""
    sources: list[str] = field(default_factory=list)
    sub_queries: list[str] = field(default_factory=list)
    total_results: int = 0
    processing_time_ms: int = 0

    @classmethod
    def empty(cls, query: str) -> RAGContext:
        return cls(query=query)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def format_context(ranked: Sequence[RetrievalResult], original_query: str) -> str:
    """Render ranked evidence into a citation-friendly prompt block.

    Returns "" when there is nothing to render.
    """
    if not ranked:
        return ""

    out: list[str] = [
        CONTEXT_HEADING,
        "",
        "The following information was retrieved from the knowledge base to help "
        f'answer the question: "{original_query}"',
        "",
        SEPARATOR,
        "",
    ]
    for i, r in enumerate(ranked, 1):
        out.append(f"### Document {i} [{r.label}]")
        out.append(f"**Relevance Score:** {r.score * 100:.1f}%")
        out.append("")
        out.append(r.content)
        out.append("")
        out.append(SEPARATOR)
        out.append("")
    out.append("")
    out.append(INSTRUCTIONS)
    out.append(SEPARATOR)
    return "\n".join(out) + "\n\n"


def format_results_block(results: Sequence[RetrievalResult]) -> str:
    """Compact rendering used for single-query lookups."""
    parts = [f"[Source {i}: {r.source}]\n{r.content}\n" for i, r in enumerate(results, 1)]
    return "\n---\n\n".join(parts)


def augment_message(context: str, user_message: str) -> str:
    if not context:
        return user_message
    return f"{context}\n\n{QUESTION_HEADING}\n\n{user_message}"
