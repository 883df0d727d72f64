"""
Tests for configuration loading and cost estimation.
"""

import pytest

from yt2article.config import load_config
from yt2article.cost import estimate_costs
from yt2article.errors import ConfigError

ENV_VARS = [
    "OPENAI_API_KEY",
    "YT2ARTICLE_MODEL",
    "YT2ARTICLE_LANGUAGE",
    "YT2ARTICLE_TEMPERATURE",
    "YT2ARTICLE_MAX_MODEL_TOKENS",
    "YT2ARTICLE_MAX_RESPONSE_TOKENS",
    "YT2ARTICLE_RESERVE_TOKENS",
    "YT2ARTICLE_CAPTION_LANGUAGE",
    "YT2ARTICLE_HTTP_TIMEOUT",
    "YT2ARTICLE_HOST",
    "YT2ARTICLE_PORT",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        # setenv first so teardown also removes values loaded from .env
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    env_file = tmp_path / ".env"
    env_file.write_text("", encoding="utf-8")
    return env_file


def test_defaults(clean_env):
    """Test defaults when nothing is configured."""
    config = load_config(str(clean_env))

    assert config.openai_api_key is None
    assert config.model == "gpt-4o"
    assert config.language == "Bahasa Indonesia"
    assert config.temperature == 0.7
    assert config.max_prompt_tokens == 128_000 - 5_000 - 500
    assert config.caption_language is None


def test_env_file_and_environment(clean_env, monkeypatch):
    """Test values are read from the .env file and environment."""
    clean_env.write_text("OPENAI_API_KEY=sk-test\nYT2ARTICLE_LANGUAGE=English\n", encoding="utf-8")
    monkeypatch.setenv("YT2ARTICLE_MAX_MODEL_TOKENS", "16000")
    monkeypatch.setenv("YT2ARTICLE_MAX_RESPONSE_TOKENS", "2000")
    monkeypatch.setenv("YT2ARTICLE_CAPTION_LANGUAGE", "id")

    config = load_config(str(clean_env))

    assert config.openai_api_key == "sk-test"
    assert config.language == "English"
    assert config.max_prompt_tokens == 16000 - 2000 - 500
    assert config.caption_language == "id"


def test_malformed_number(clean_env, monkeypatch):
    """Test non-numeric token limits are configuration errors."""
    monkeypatch.setenv("YT2ARTICLE_MAX_MODEL_TOKENS", "lots")

    with pytest.raises(ConfigError):
        load_config(str(clean_env))


def test_estimate_costs():
    """Test the cost estimate for a two-chunk article."""
    est = estimate_costs(
        1_000_000,
        2,
        max_response_tokens=500_000,
        rates={"gpt_in_per_mtok": 2.0, "gpt_out_per_mtok": 8.0},
    )

    assert est["input_tokens"] == 1_000_000
    assert est["output_tokens"] == 1_000_000
    assert est["input_cost"] == pytest.approx(2.0)
    assert est["output_cost"] == pytest.approx(8.0)
    assert est["total"] == pytest.approx(10.0)


def test_estimate_costs_prompt_overhead():
    """Test per-chunk prompt instructions are counted as input."""
    est = estimate_costs(100, 4, max_response_tokens=0, prompt_overhead_tokens=25, rates={})

    assert est["input_tokens"] == 200
    assert est["output_cost"] == 0.0
