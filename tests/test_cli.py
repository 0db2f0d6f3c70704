from __future__ import annotations

import json

import pytest
from fakes import FakeCompletion, FakeStore, decomposition_reply, rr
from typer.testing import CliRunner

from deep_rag.application.use_cases import PipelineOrchestrator
from deep_rag.domain.config import PipelineConfig
from deep_rag.interface import cli

runner = CliRunner()


def _use(monkeypatch: pytest.MonkeyPatch, orch: PipelineOrchestrator) -> None:
    monkeypatch.setattr(cli, "_build_orchestrator", lambda: orch)


def _enabled() -> PipelineOrchestrator:
    store = FakeStore(default=[rr("Keys rotate every 90 days.", "s3://kb/security.md", 0.9)])
    llm = FakeCompletion(decomposition_reply(["key rotation policy", "rotate api keys"]))
    return PipelineOrchestrator(PipelineConfig(enabled=True), store=store, completion=llm)


def test_status_prints_json(monkeypatch: pytest.MonkeyPatch) -> None:
    _use(monkeypatch, PipelineOrchestrator(PipelineConfig(enabled=False)))
    res = runner.invoke(cli.app, ["status"])
    assert res.exit_code == 0
    data = json.loads(res.stdout)
    assert data["enabled"] is False
    assert data["configured"] is False


def test_decompose_prints_sub_queries(monkeypatch: pytest.MonkeyPatch) -> None:
    _use(monkeypatch, _enabled())
    res = runner.invoke(cli.app, ["decompose", "How do I rotate API keys?"])
    assert res.exit_code == 0
    data = json.loads(res.stdout)
    assert data["subQueries"] == ["key rotation policy", "rotate api keys"]
    assert data["originalQuery"] == "How do I rotate API keys?"


def test_decompose_requires_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    _use(monkeypatch, PipelineOrchestrator(PipelineConfig(enabled=False)))
    res = runner.invoke(cli.app, ["decompose", "anything"])
    assert res.exit_code == 1


def test_retrieve_json(monkeypatch: pytest.MonkeyPatch) -> None:
    _use(monkeypatch, _enabled())
    res = runner.invoke(cli.app, ["retrieve", "How do I rotate API keys?", "--json"])
    assert res.exit_code == 0
    data = json.loads(res.stdout)
    assert data["total_results"] == 1
    assert data["sources"] == ["s3://kb/security.md"]
    assert data["sub_queries"] == ["key rotation policy", "rotate api keys"]


def test_augment_disabled_echoes_message(monkeypatch: pytest.MonkeyPatch) -> None:
    _use(monkeypatch, PipelineOrchestrator(PipelineConfig(enabled=False)))
    res = runner.invoke(cli.app, ["augment", "Hello"])
    assert res.exit_code == 0
    assert res.stdout == "Hello\n"


def test_augment_enabled_includes_context(monkeypatch: pytest.MonkeyPatch) -> None:
    _use(monkeypatch, _enabled())
    res = runner.invoke(cli.app, ["augment", "How do I rotate API keys?"])
    assert res.exit_code == 0
    assert "### Document 1 [security.md]" in res.stdout
    assert "## User Question\n\nHow do I rotate API keys?" in res.stdout
