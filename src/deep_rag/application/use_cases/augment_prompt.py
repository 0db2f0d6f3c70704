from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from deep_rag.application.ports.completion_port import TextCompletionPort
from deep_rag.application.ports.knowledge_store_port import KnowledgeStorePort
from deep_rag.application.ports.progress_port import ProgressSink
from deep_rag.application.use_cases.decompose_query import QueryDecomposer
from deep_rag.application.use_cases.retrieve import Retriever
from deep_rag.domain.aggregation import AggregatedContext, ResultAccumulator
from deep_rag.domain.config import PipelineConfig
from deep_rag.domain.context import RAGContext, augment_message, format_context
from deep_rag.domain.events import ProgressEvent, Stage
from deep_rag.domain.retrieval import RetrievalResult
from deep_rag.exceptions import ConfigurationError

log = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Decompose, retrieve, aggregate and format evidence for one question.

    Each call is a single linear pass: decomposition, one retrieval per
    sub-query, aggregation, formatting. Per-sub-query failures are logged and
    skipped; only a misconfiguration (enabled without a knowledge store) is
    raised to the caller.

    Progress events are delivered synchronously on the calling thread in this
    order: ``decomposition`` (twice), ``retrieval`` once per sub-query in
    index order, ``aggregation``, ``complete``. With ``max_workers > 1`` the
    ``retrieval`` events are emitted as each call is submitted, before any
    result is folded; results are still folded in sub-query order, so the
    ranked output matches a sequential run.
    """

    def __init__(
        self,
        config: PipelineConfig,
        *,
        store: KnowledgeStorePort | None = None,
        completion: TextCompletionPort | None = None,
        decomposer: QueryDecomposer | None = None,
        retriever: Retriever | None = None,
    ) -> None:
        self.config = config
        self.decomposer = decomposer or QueryDecomposer(
            completion=completion, max_sub_queries=config.max_sub_queries
        )
        if retriever is None and store is not None:
            retriever = Retriever(
                store=store,
                max_results=config.max_results_per_query,
                min_relevance_score=config.min_relevance_score,
            )
        self.retriever = retriever

    @property
    def configured(self) -> bool:
        return self.retriever is not None

    @property
    def enabled(self) -> bool:
        return bool(self.config.enabled)

    def status(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "configured": self.configured,
            "decomposition": self.decomposer.available,
            "config": self.config.as_dict(),
        }

    # --- events ------------------------------------------------------------

    @staticmethod
    def _emit(
        on_event: ProgressSink | None,
        stage: Stage,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> None:
        event = ProgressEvent(stage=stage, message=message, data=data)
        log.debug("progress[%s] %s", stage, message)
        if on_event is None:
            return
        try:
            on_event(event)
        except Exception as e:  # noqa: BLE001
            log.warning("Progress sink raised on %s event: %s", stage, e)

    # --- retrieval ---------------------------------------------------------

    def _retrieve_one(self, index: int, total: int, sub_query: str) -> list[RetrievalResult]:
        assert self.retriever is not None
        try:
            return self.retriever.retrieve(sub_query)
        except Exception as e:  # noqa: BLE001
            log.error("Retrieval failed for sub-query %d/%d %r: %s", index, total, sub_query, e)
            return []

    def _retrieval_event(self, on_event: ProgressSink | None, i: int, total: int, sq: str) -> None:
        self._emit(
            on_event,
            "retrieval",
            f"Searching knowledge base ({i}/{total}): {sq[:50]}...",
            {"index": i, "total": total, "subQuery": sq},
        )

    def _fold(
        self, acc: ResultAccumulator, i: int, total: int, results: list[RetrievalResult]
    ) -> None:
        added = acc.add(results)
        log.debug(
            "Sub-query %d/%d contributed %d results (%d new, %d unique so far)",
            i,
            total,
            len(results),
            added,
            len(acc),
        )

    def _retrieve_sequential(
        self, sub_queries: Sequence[str], acc: ResultAccumulator, on_event: ProgressSink | None
    ) -> None:
        total = len(sub_queries)
        for i, sq in enumerate(sub_queries, 1):
            self._retrieval_event(on_event, i, total, sq)
            self._fold(acc, i, total, self._retrieve_one(i, total, sq))

    def _retrieve_parallel(
        self, sub_queries: Sequence[str], acc: ResultAccumulator, on_event: ProgressSink | None
    ) -> None:
        total = len(sub_queries)
        workers = min(int(self.config.max_workers), total)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="deep-rag") as pool:
            futures: list[Future[list[RetrievalResult]]] = []
            for i, sq in enumerate(sub_queries, 1):
                self._retrieval_event(on_event, i, total, sq)
                futures.append(pool.submit(self._retrieve_one, i, total, sq))
            for i, fut in enumerate(futures, 1):
                self._fold(acc, i, total, fut.result())

    # --- public API --------------------------------------------------------

    def aggregate(self, query: str, on_event: ProgressSink | None = None) -> AggregatedContext:
        """Run decomposition and retrieval; return the ranked, deduplicated evidence.

        Applies the same guards as ``retrieve_context``: a disabled pipeline or a
        blank query yields an empty result without events.
        """
        if not self.enabled:
            return AggregatedContext()
        if self.retriever is None:
            raise ConfigurationError("Retrieval is enabled but no knowledge store is configured")
        if not (query or "").strip():
            log.debug("Blank query; skipping retrieval")
            return AggregatedContext()
        return self._aggregate(query, on_event)

    def _aggregate(self, query: str, on_event: ProgressSink | None) -> AggregatedContext:
        t0 = time.perf_counter()
        self._emit(on_event, "decomposition", "Analyzing question and generating sub-queries...")
        decomposed = self.decomposer.decompose(query)
        sub_queries = list(decomposed.sub_queries)
        log.info("Query decomposed: %r -> %s", query[:50], sub_queries)
        self._emit(
            on_event,
            "decomposition",
            f"Generated {len(sub_queries)} sub-queries",
            {"subQueries": list(sub_queries), "reasoning": decomposed.rationale},
        )

        acc = ResultAccumulator(self.config.signature)
        if int(self.config.max_workers) > 1 and len(sub_queries) > 1:
            self._retrieve_parallel(sub_queries, acc, on_event)
        else:
            self._retrieve_sequential(sub_queries, acc, on_event)

        self._emit(
            on_event,
            "aggregation",
            f"Aggregating {len(acc)} unique results from {len(sub_queries)} searches...",
            {"uniqueResults": len(acc), "sources": len(acc.sources)},
        )
        elapsed = int(round((time.perf_counter() - t0) * 1000))
        return AggregatedContext.from_accumulator(acc, sub_queries, processing_time_ms=elapsed)

    def retrieve_context(self, query: str, on_event: ProgressSink | None = None) -> RAGContext:
        if not self.enabled:
            return RAGContext.empty(query)
        if self.retriever is None:
            raise ConfigurationError("Retrieval is enabled but no knowledge store is configured")
        if not (query or "").strip():
            log.debug("Blank query; skipping retrieval")
            return RAGContext.empty(query)

        t0 = time.perf_counter()
        agg = self._aggregate(query, on_event)
        context = format_context(agg.ranked_results, query)
        elapsed = int(round((time.perf_counter() - t0) * 1000))

        log.info(
            "RAG retrieval complete for %r: %d results from %d sources in %dms",
            query[:50],
            agg.total_results,
            len(agg.unique_sources),
            elapsed,
        )
        self._emit(
            on_event,
            "complete",
            f"Retrieved {agg.total_results} relevant passages from "
            f"{len(agg.unique_sources)} sources",
            {
                "totalResults": agg.total_results,
                "sources": list(agg.unique_sources),
                "processingTimeMs": elapsed,
            },
        )
        return RAGContext(
            query=query,
            context=context,
            sources=list(agg.unique_sources),
            sub_queries=list(agg.sub_queries),
            total_results=agg.total_results,
            processing_time_ms=elapsed,
        )

    def augment_prompt(self, user_message: str, on_event: ProgressSink | None = None) -> str:
        """Prefix the message with retrieved context, or return it unchanged."""
        if not self.enabled:
            return user_message
        rag = self.retrieve_context(user_message, on_event)
        return augment_message(rag.context, user_message)
