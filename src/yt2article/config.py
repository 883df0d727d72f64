"""
Pipeline configuration loaded from the environment and .env files.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger("yt2article")

DEFAULT_MODEL = "gpt-4o"
DEFAULT_LANGUAGE = "Bahasa Indonesia"


@dataclass
class PipelineConfig:
    """Settings for caption retrieval and article generation."""

    openai_api_key: str | None = None
    model: str = DEFAULT_MODEL
    language: str = DEFAULT_LANGUAGE
    temperature: float = 0.7
    max_model_tokens: int = 128_000
    max_response_tokens: int = 5_000  # allocated for each chunk's response
    reserve_tokens: int = 500  # buffer for the prompt instructions
    caption_language: str | None = None
    http_timeout: float = 30.0
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def max_prompt_tokens(self) -> int:
        """Tokens available for transcript text in each prompt."""
        return prompt_token_budget(self.max_model_tokens, self.max_response_tokens, self.reserve_tokens)


def prompt_token_budget(max_model_tokens: int, max_response_tokens: int, reserve_tokens: int) -> int:
    """Compute the per-chunk prompt budget; it must be positive."""
    budget = max_model_tokens - max_response_tokens - reserve_tokens
    if budget <= 0:
        raise ConfigError(
            f"No room for the prompt: {max_model_tokens} model tokens - "
            f"{max_response_tokens} response - {reserve_tokens} reserve = {budget}"
        )
    return budget


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def load_config(env_file: str | None = None) -> PipelineConfig:
    """
    Build a PipelineConfig from environment variables.

    Args:
        env_file: Optional .env path; by default a .env in the project root
            is used, falling back to the current directory.

    Returns:
        Populated PipelineConfig
    """
    if env_file:
        load_dotenv(env_file)
    else:
        # Look for .env in the project root (parent of src directory)
        env_path = Path(__file__).parent.parent.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path)
        else:
            load_dotenv()

    config = PipelineConfig(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        model=os.getenv("YT2ARTICLE_MODEL") or DEFAULT_MODEL,
        language=os.getenv("YT2ARTICLE_LANGUAGE") or DEFAULT_LANGUAGE,
        temperature=_env_float("YT2ARTICLE_TEMPERATURE", 0.7),
        max_model_tokens=_env_int("YT2ARTICLE_MAX_MODEL_TOKENS", 128_000),
        max_response_tokens=_env_int("YT2ARTICLE_MAX_RESPONSE_TOKENS", 5_000),
        reserve_tokens=_env_int("YT2ARTICLE_RESERVE_TOKENS", 500),
        caption_language=os.getenv("YT2ARTICLE_CAPTION_LANGUAGE") or None,
        http_timeout=_env_float("YT2ARTICLE_HTTP_TIMEOUT", 30.0),
        host=os.getenv("YT2ARTICLE_HOST") or "127.0.0.1",
        port=_env_int("YT2ARTICLE_PORT", 8000),
    )
    logger.debug(f"Loaded config: model={config.model}, language={config.language}")
    return config
