from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from deep_rag.exceptions import CompletionError
from deep_rag.infrastructure.llm.providers import (
    AnthropicCompletion,
    DummyCompletion,
    OpenAIChatCompletion,
)


class _FakeChat:
    def __init__(self, content: Any = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.messages: list[Any] = []

    def invoke(self, messages: Any) -> SimpleNamespace:
        self.messages.append(messages)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.content)


class _FakeMessages:
    def __init__(self, blocks: list[Any] | None = None, error: Exception | None = None) -> None:
        self.blocks = blocks or []
        self.error = error
        self.kwargs: dict[str, Any] = {}

    def create(self, **kwargs: Any) -> SimpleNamespace:
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.blocks)


def _openai(chat: _FakeChat) -> OpenAIChatCompletion:
    llm = OpenAIChatCompletion(model="gpt-4o-mini", api_key="sk-TEST")
    llm._chat = chat  # no network
    return llm


def _anthropic(messages: _FakeMessages) -> AnthropicCompletion:
    llm = AnthropicCompletion(api_key="sk-ant-TEST", max_tokens=256)
    llm._client = SimpleNamespace(messages=messages)
    return llm


def test_dummy_completion_records_prompt() -> None:
    llm = DummyCompletion(reply='{"reasoning": "r", "subQueries": ["a"]}')
    out = llm.complete("Decompose this")
    assert out.startswith("{")
    assert llm.prompts == ["Decompose this"]


def test_openai_completion_returns_text_reply() -> None:
    chat = _FakeChat(content='["a", "b"]')
    assert _openai(chat).complete("Rephrase this") == '["a", "b"]'
    assert chat.messages == [[{"role": "user", "content": "Rephrase this"}]]


def test_openai_completion_wraps_backend_failure() -> None:
    boom = ConnectionError("connection reset")
    with pytest.raises(CompletionError) as exc:
        _openai(_FakeChat(error=boom)).complete("q")
    assert exc.value.__cause__ is boom


@pytest.mark.parametrize("content", ["", None, [{"type": "image"}]])
def test_openai_completion_without_text_is_an_error(content: Any) -> None:
    with pytest.raises(CompletionError):
        _openai(_FakeChat(content=content)).complete("q")


def test_anthropic_completion_joins_text_blocks() -> None:
    messages = _FakeMessages(
        [
            SimpleNamespace(type="text", text='{"reasoning": "r", '),
            SimpleNamespace(type="tool_use", text="ignored"),
            SimpleNamespace(type="text", text='"subQueries": ["a"]}'),
        ]
    )
    out = _anthropic(messages).complete("Decompose this")

    assert out == '{"reasoning": "r", "subQueries": ["a"]}'
    assert messages.kwargs["model"].startswith("claude")
    assert messages.kwargs["max_tokens"] == 256
    assert messages.kwargs["messages"] == [{"role": "user", "content": "Decompose this"}]


def test_anthropic_completion_wraps_backend_failure() -> None:
    boom = TimeoutError("request timed out")
    with pytest.raises(CompletionError) as exc:
        _anthropic(_FakeMessages(error=boom)).complete("q")
    assert exc.value.__cause__ is boom


def test_anthropic_completion_without_text_is_an_error() -> None:
    with pytest.raises(CompletionError):
        _anthropic(_FakeMessages([SimpleNamespace(type="tool_use")])).complete("q")
