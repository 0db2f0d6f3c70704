from .providers import AnthropicCompletion, DummyCompletion, OpenAIChatCompletion

__all__ = ["AnthropicCompletion", "DummyCompletion", "OpenAIChatCompletion"]
