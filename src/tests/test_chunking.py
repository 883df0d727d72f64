"""
Tests for token-aware chunking.
"""

import logging
import math

import pytest

from yt2article.chunking import make_token_counter, split_text_into_chunks
from yt2article.errors import ConfigError


def two_tokens_per_word(text: str) -> int:
    return 2 * len(text.split())


def one_token_per_char(text: str) -> int:
    return len(text)


def test_chunk_count_for_uniform_words():
    """Test 1000 words at 2 tokens each with a 100 token budget."""
    text = " ".join(f"word{i}" for i in range(1000))

    chunks = split_text_into_chunks(text, 100, two_tokens_per_word)

    assert len(chunks) == math.ceil(1000 / 50)
    assert all(len(c.split()) == 50 for c in chunks)


def test_last_chunk_may_be_shorter():
    """Test a remainder ends up in a shorter final chunk."""
    text = " ".join(["w"] * 120)

    chunks = split_text_into_chunks(text, 100, two_tokens_per_word)

    assert [len(c.split()) for c in chunks] == [50, 50, 20]


def test_chunks_rejoin_to_normalized_text():
    """Test joining chunks with single spaces reproduces the whitespace-normalized input."""
    text = "[0:00]\nHello   there,\tthis is  a\n\ntranscript [5:00]\nwith more words here "

    chunks = split_text_into_chunks(text, 12, one_token_per_char)

    assert " ".join(chunks) == " ".join(text.split())


def test_chunks_respect_budget():
    """Test every chunk's token estimate stays within the budget."""
    text = "the quick brown fox jumps over the lazy dog " * 30
    max_tokens = 25

    chunks = split_text_into_chunks(text, max_tokens, one_token_per_char)

    for chunk in chunks:
        estimate = sum(one_token_per_char(" " + w) for w in chunk.split())
        assert estimate <= max_tokens


def test_word_cost_includes_leading_space():
    """Test the counter sees each word with a leading space."""
    seen = []

    def counter(text: str) -> int:
        seen.append(text)
        return 1

    split_text_into_chunks("alpha beta gamma", 10, counter)

    assert seen == [" alpha", " beta", " gamma"]


def test_oversized_word_becomes_own_chunk():
    """Test a word larger than the budget is kept whole in its own chunk."""
    text = "a b " + "x" * 40 + " c d"

    chunks = split_text_into_chunks(text, 10, one_token_per_char)

    assert chunks == ["a b", "x" * 40, "c d"]


def test_oversized_first_word_emits_no_empty_chunk():
    """Test an oversized opening word does not produce an empty chunk before it."""
    chunks = split_text_into_chunks("x" * 40 + " y", 10, one_token_per_char)

    assert chunks == ["x" * 40, "y"]


def test_empty_text_gives_no_chunks():
    """Test empty and whitespace-only input."""
    assert split_text_into_chunks("", 10, one_token_per_char) == []
    assert split_text_into_chunks(" \n\t ", 10, one_token_per_char) == []


def test_chunking_is_deterministic():
    """Test the same input always gives the same boundaries."""
    text = " ".join(f"token{i % 7}" for i in range(300))

    first = split_text_into_chunks(text, 40, one_token_per_char)
    second = split_text_into_chunks(text, 40, one_token_per_char)

    assert first == second


def test_non_positive_budget_raises():
    """Test a zero or negative budget is a configuration error."""
    with pytest.raises(ConfigError):
        split_text_into_chunks("some text", 0, one_token_per_char)
    with pytest.raises(ConfigError):
        split_text_into_chunks("some text", -5, one_token_per_char)


def test_token_counter_for_known_model():
    """Test the tiktoken counter for gpt-4o counts a leading-space word as one token."""
    count = make_token_counter("gpt-4o")

    assert count(" hello") == 1
    assert count("") == 0


def test_token_counter_unknown_model_falls_back(caplog):
    """Test an unknown model name warns and uses the fallback encoding."""
    with caplog.at_level(logging.WARNING, logger="yt2article"):
        count = make_token_counter("not-a-real-model")

    assert "not-a-real-model" in caplog.text
    assert count(" hello") == make_token_counter("gpt-4o")(" hello")
    assert count("a longer sentence with several words") > 0


def test_chunks_fit_budget_with_real_tokenizer():
    """Test chunks stay within budget when costed with tiktoken."""
    count = make_token_counter("gpt-4o")
    text = " ".join(["The quick brown fox jumps over the lazy dog, internationalization!"] * 40)
    max_tokens = 50

    chunks = split_text_into_chunks(text, max_tokens, count)

    assert len(chunks) > 1
    for chunk in chunks:
        assert sum(count(" " + word) for word in chunk.split()) <= max_tokens
    assert " ".join(chunks).split() == text.split()
