from __future__ import annotations

"""Text-completion providers implementing TextCompletionPort.

Adapters:
- DummyCompletion: dependency-free canned reply for tests and offline use.
- OpenAIChatCompletion: wraps langchain-openai ChatOpenAI.
- AnthropicCompletion: wraps the anthropic Messages API.

Each exposes ``complete(prompt) -> str`` and raises CompletionError when the
backend fails, so the decomposer can fall back uniformly.
"""

from dataclasses import dataclass, field  # noqa: E402

from deep_rag.application.ports.completion_port import TextCompletionPort  # noqa: E402
from deep_rag.exceptions import CompletionError  # noqa: E402


@dataclass
class DummyCompletion(TextCompletionPort):
    """Returns ``reply`` verbatim and records the prompts it was given."""

    reply: str = ""
    prompts: list[str] = field(default_factory=list)

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


@dataclass
class OpenAIChatCompletion(TextCompletionPort):
    model: str
    api_key: str | None = None
    base_url: str | None = None
    temperature: float = 0.0
    max_tokens: int | None = 1024

    def __post_init__(self) -> None:  # lazy import and instantiate client
        try:
            from langchain_openai import ChatOpenAI
        except Exception as e:  # pragma: no cover - import guarded
            raise RuntimeError(
                "langchain-openai is required for OpenAIChatCompletion.\n"
                "Install with: pip install langchain-openai openai"
            ) from e

        kwargs: dict[str, object] = {
            "model": self.model,
            "temperature": float(self.temperature),
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if self.max_tokens is not None:
            kwargs["max_tokens"] = int(self.max_tokens)
        self._chat = ChatOpenAI(**kwargs)

    def complete(self, prompt: str) -> str:
        try:
            resp = self._chat.invoke([{"role": "user", "content": prompt}])
        except Exception as e:
            raise CompletionError(f"OpenAIChatCompletion failed to generate: {e}") from e
        text = getattr(resp, "content", None)
        if isinstance(text, str) and text:
            return text
        raise CompletionError("OpenAIChatCompletion returned no text content")


@dataclass
class AnthropicCompletion(TextCompletionPort):
    model: str = "claude-3-5-haiku-20241022"
    api_key: str | None = None
    max_tokens: int = 1024
    timeout: float = 30.0

    def __post_init__(self) -> None:
        try:
            import anthropic
        except Exception as e:  # pragma: no cover - import guarded
            raise RuntimeError(
                "anthropic is required for AnthropicCompletion.\n"
                "Install with: pip install anthropic"
            ) from e
        self._client = anthropic.Anthropic(api_key=self.api_key, timeout=self.timeout)

    def complete(self, prompt: str) -> str:
        try:
            resp = self._client.messages.create(
                model=self.model,
                max_tokens=int(self.max_tokens),
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise CompletionError(f"AnthropicCompletion failed to generate: {e}") from e
        parts = [
            getattr(block, "text", "")
            for block in (resp.content or [])
            if getattr(block, "type", None) == "text"
        ]
        text = "".join(parts)
        if not text:
            raise CompletionError("AnthropicCompletion returned no text content")
        return text


__all__ = ["DummyCompletion", "OpenAIChatCompletion", "AnthropicCompletion"]
