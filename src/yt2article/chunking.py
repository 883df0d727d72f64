"""
Token-aware transcript chunking.
"""

import logging
from collections.abc import Callable

import tiktoken

from .errors import ConfigError

logger = logging.getLogger("yt2article")

# Used when tiktoken does not map the model name to an encoding
FALLBACK_ENCODING = "o200k_base"


def make_token_counter(model: str = "gpt-4o") -> Callable[[str], int]:
    """Create a token counting function for an OpenAI model."""
    try:
        encoding = tiktoken.encoding_for_model(model)
    except KeyError:
        logger.warning(f"No tiktoken encoding known for {model!r}, using {FALLBACK_ENCODING}")
        encoding = tiktoken.get_encoding(FALLBACK_ENCODING)

    def count_tokens(text: str) -> int:
        return len(encoding.encode(text))

    return count_tokens


def split_text_into_chunks(
    text: str,
    max_tokens: int,
    count_tokens: Callable[[str], int],
) -> list[str]:
    """
    Split text into word-aligned chunks of at most `max_tokens` tokens.

    Each word is costed as `count_tokens(" " + word)`, since that is how a
    sub-word tokenizer sees a word following other text. A word is never split:
    one whose own cost exceeds the budget becomes a chunk on its own.
    """
    if max_tokens <= 0:
        raise ConfigError(f"max_tokens must be positive, got {max_tokens}")

    chunks: list[str] = []
    cur: list[str] = []
    cur_tokens = 0

    for word in text.split():
        word_tokens = count_tokens(" " + word)
        if cur and cur_tokens + word_tokens > max_tokens:
            chunks.append(" ".join(cur).strip())
            cur = [word]
            cur_tokens = word_tokens
        else:
            cur.append(word)
            cur_tokens += word_tokens

    if cur:
        chunks.append(" ".join(cur).strip())
    return chunks
