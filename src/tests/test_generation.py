"""
Tests for the OpenAI generation wrappers.
"""

import asyncio
from types import SimpleNamespace

import pytest

from yt2article.generation import make_generate_openai, make_generate_openai_async


def _completion(content):
    message = SimpleNamespace(content=content)
    usage = SimpleNamespace(prompt_tokens=10, completion_tokens=5)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=usage)


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return _completion(self.content)


class FakeAsyncCompletions(FakeCompletions):
    async def create(self, **kwargs):
        self.calls.append(kwargs)
        return _completion(self.content)


def _client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_make_generate_openai():
    """Test the prompt is sent as a single user message."""
    completions = FakeCompletions("<h1>Judul</h1>")
    generate = make_generate_openai(_client(completions), "gpt-4o", 0.7, max_tokens=5000)

    assert generate("write it") == "<h1>Judul</h1>"
    assert completions.calls == [
        {
            "model": "gpt-4o",
            "messages": [{"role": "user", "content": "write it"}],
            "temperature": 0.7,
            "max_tokens": 5000,
        }
    ]


def test_make_generate_openai_without_max_tokens():
    """Test max_tokens is only sent when set."""
    completions = FakeCompletions("text")
    generate = make_generate_openai(_client(completions))

    generate("prompt")

    assert "max_tokens" not in completions.calls[0]


def test_missing_content_is_empty_string():
    """Test a null message content comes back as ''."""
    generate = make_generate_openai(_client(FakeCompletions(None)))

    assert generate("prompt") == ""


def test_make_generate_openai_async():
    """Test the async wrapper awaits the client."""
    completions = FakeAsyncCompletions("<p>isi</p>")
    generate = make_generate_openai_async(_client(completions), "gpt-4o-mini", 0.2)

    assert asyncio.run(generate("prompt")) == "<p>isi</p>"
    assert completions.calls[0]["model"] == "gpt-4o-mini"


def test_requires_client():
    """Test a missing client is rejected up front."""
    with pytest.raises(RuntimeError):
        make_generate_openai(None)
    with pytest.raises(RuntimeError):
        make_generate_openai_async(None)
