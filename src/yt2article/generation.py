"""
Text generation with OpenAI GPT.
"""

import logging
from collections.abc import Awaitable, Callable

from openai import AsyncOpenAI, OpenAI

logger = logging.getLogger("yt2article")


def _request(model: str, prompt: str, temperature: float, max_tokens: int | None) -> dict:
    """Build chat completion arguments for a single user prompt."""
    kwargs = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": temperature,
    }
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    return kwargs


def _message_text(response) -> str:
    """Pull the first choice's text out of a chat completion, or ''."""
    usage = getattr(response, "usage", None)
    if usage is not None:
        logger.debug(f"Token usage: prompt={usage.prompt_tokens}, completion={usage.completion_tokens}")
    if not response.choices:
        return ""
    return response.choices[0].message.content or ""


def make_generate_openai(
    client: OpenAI,
    model: str = "gpt-4o",
    temperature: float = 0.7,
    max_tokens: int | None = None,
) -> Callable[[str], str]:
    """Create a prompt -> text function backed by OpenAI chat completions."""
    if client is None:
        raise RuntimeError("OpenAI client is not initialized (missing OPENAI_API_KEY)")

    def generate(prompt: str) -> str:
        response = client.chat.completions.create(**_request(model, prompt, temperature, max_tokens))
        return _message_text(response)

    return generate


def make_generate_openai_async(
    client: AsyncOpenAI,
    model: str = "gpt-4o",
    temperature: float = 0.7,
    max_tokens: int | None = None,
) -> Callable[[str], Awaitable[str]]:
    """Create an async prompt -> text function backed by OpenAI chat completions."""
    if client is None:
        raise RuntimeError("OpenAI client is not initialized (missing OPENAI_API_KEY)")

    async def generate_async(prompt: str) -> str:
        response = await client.chat.completions.create(**_request(model, prompt, temperature, max_tokens))
        return _message_text(response)

    return generate_async
