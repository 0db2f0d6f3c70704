from __future__ import annotations

from fakes import rr

from deep_rag.domain.aggregation import AggregatedContext, ResultAccumulator, merge, rank_results
from deep_rag.domain.retrieval import content_signature, source_label


def test_merge_keeps_shared_item_once() -> None:
    shared = "Rate limiting caps requests per client."
    r1 = [rr(shared, "docs/one.md", 0.8), rr("Only in first", "docs/one.md", 0.7)]
    r2 = [rr(shared, "docs/two.md", 0.95), rr("Only in second", "docs/two.md", 0.6)]

    out = merge([r1, r2])

    assert [r.content for r in out].count(shared) == 1
    assert len(out) == 3


def test_merge_retains_first_seen_duplicate() -> None:
    first = rr("same text", "docs/first.md", 0.6)
    later = rr("same text", "docs/later.md", 0.99)

    out = merge([[first], [later]])

    assert out == [first]


def test_ranking_is_monotonic_and_stable_on_ties() -> None:
    a = rr("a", score=0.7)
    b = rr("b", score=0.9)
    c = rr("c", score=0.7)
    d = rr("d", score=0.8)

    out = merge([[a, b], [c, d]])

    scores = [r.score for r in out]
    assert all(scores[i] >= scores[i + 1] for i in range(len(scores) - 1))
    # a was inserted before c and both score 0.7
    assert [r.content for r in out] == ["b", "d", "a", "c"]
    assert rank_results([a, c]) == [a, c]


def test_merge_is_deterministic() -> None:
    sets = [[rr("x", score=0.5), rr("y", score=0.6)], [rr("y", "other", 0.9), rr("z", score=0.6)]]
    assert merge(sets) == merge(sets)


def test_accumulator_tracks_sources_in_first_seen_order() -> None:
    acc = ResultAccumulator()
    assert acc.add([rr("1", "b.md"), rr("2", "a.md")]) == 2
    assert acc.add([rr("1", "c.md"), rr("3", "b.md")]) == 1

    assert len(acc) == 3
    assert acc.duplicates == 1
    assert acc.sources == ["b.md", "a.md"]
    assert [r.content for r in acc.results] == ["1", "2", "3"]


def test_aggregated_context_sources_match_ranked_results() -> None:
    acc = ResultAccumulator()
    acc.add([rr("p", "s1", 0.6), rr("q", "s2", 0.9), rr("p", "s3", 0.99)])

    agg = AggregatedContext.from_accumulator(acc, ["q1"], processing_time_ms=12)

    assert agg.total_results == 2
    assert set(agg.unique_sources) == {r.source for r in agg.ranked_results}
    assert agg.sub_queries == ["q1"]
    assert agg.processing_time_ms == 12


def test_prefix_signature_matches_on_prefix_and_length() -> None:
    base = "x" * 150
    same_prefix_same_len = "x" * 100 + "y" * 50
    assert content_signature(base, "prefix") == content_signature(same_prefix_same_len, "prefix")
    assert content_signature(base) != content_signature(same_prefix_same_len)

    out = merge([[rr(base)], [rr(same_prefix_same_len)]], strategy="prefix")
    assert len(out) == 1


def test_source_label_uses_last_path_segment() -> None:
    assert source_label("s3://bucket/folder/guide.pdf") == "guide.pdf"
    assert source_label("docs/rate-limits.md") == "rate-limits.md"
    assert source_label("https://example.com/kb/page/") == "page"
    assert source_label("plain") == "plain"
    assert source_label("") == ""
