"""yt2article - FastAPI application."""

import logging
from collections.abc import Awaitable, Callable

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from openai import AsyncOpenAI
from pydantic import BaseModel

from . import __version__
from .captions import parse_start_time, parse_transcript
from .chunking import make_token_counter
from .config import PipelineConfig, load_config
from .errors import ConfigError, GenerationError, InputError, NotFoundError, ParseError, Yt2ArticleError
from .generation import make_generate_openai_async
from .pipeline import ArticlePipeline
from .youtube import make_caption_fetcher

logger = logging.getLogger("yt2article")

router = APIRouter(prefix="/api", tags=["article"])


class ArticleRequest(BaseModel):
    transcript: str | None = None


class ArticleResponse(BaseModel):
    article: str


class TranscriptResponse(BaseModel):
    transcript: str


class ErrorResponse(BaseModel):
    error: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get(
    "/transcript",
    response_model=TranscriptResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def get_transcript(request: Request, videoUrl: str | None = None, startTime: str | None = None):
    """Fetch a video's captions and return them as a timestamped transcript."""
    if not videoUrl:
        raise InputError("videoUrl is required")
    start_seconds = parse_start_time(startTime)

    try:
        markup = request.app.state.fetch_captions(videoUrl)
        transcript = parse_transcript(markup, start_seconds)
    except Yt2ArticleError:
        raise
    except Exception as e:
        logger.exception(f"Caption retrieval failed for {videoUrl}: {e}")
        return _error(500, "Error processing video")

    return TranscriptResponse(transcript=transcript)


@router.post(
    "/generate-article",
    response_model=ArticleResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_article(request: Request, body: ArticleRequest | None = None):
    """Generate an HTML article from a transcript."""
    if body is None or not body.transcript or not body.transcript.strip():
        return _error(400, "Transcript is required")

    pipeline: ArticlePipeline = request.app.state.pipeline
    article = await pipeline.run_async(body.transcript)
    return ArticleResponse(article=article)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"{request.url.path}: invalid request: {exc.errors()}")
    if request.url.path.endswith("/generate-article"):
        return _error(400, "Transcript is required")
    return _error(400, "Invalid request")


async def _input_error(request: Request, exc: InputError) -> JSONResponse:
    return _error(400, str(exc))


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info(f"{request.url.path}: {exc}")
    return _error(404, "No captions available")


async def _parse_error(request: Request, exc: ParseError) -> JSONResponse:
    logger.warning(f"{request.url.path}: {exc}")
    return _error(404, "No transcript available")


async def _generation_error(request: Request, exc: GenerationError) -> JSONResponse:
    logger.error(f"{request.url.path}: {exc} (cause: {exc.__cause__!r})")
    return _error(500, "Error generating article")


async def _config_error(request: Request, exc: ConfigError) -> JSONResponse:
    logger.error(f"{request.url.path}: {exc}")
    return _error(500, "Invalid token budget")


def create_app(
    config: PipelineConfig | None = None,
    *,
    generate: Callable[[str], Awaitable[str]] | None = None,
    count_tokens: Callable[[str], int] | None = None,
    fetch_captions: Callable[[str], str] | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Collaborators that are not passed in are built once here from `config`:
    an AsyncOpenAI client for generation, a tiktoken counter and an httpx
    caption fetcher.
    """
    config = config or load_config()

    if generate is None:
        if not config.openai_api_key:
            raise ConfigError("OPENAI_API_KEY is not set. Put it in .env or environment.")
        client = AsyncOpenAI(api_key=config.openai_api_key)
        generate = make_generate_openai_async(
            client, config.model, config.temperature, max_tokens=config.max_response_tokens
        )
    if count_tokens is None:
        count_tokens = make_token_counter(config.model)
    if fetch_captions is None:
        fetch_captions = make_caption_fetcher(config.http_timeout, config.caption_language)

    app = FastAPI(
        title="yt2article",
        description="Generate articles from YouTube video captions",
        version=__version__,
    )
    app.state.config = config
    app.state.fetch_captions = fetch_captions
    app.state.pipeline = ArticlePipeline(generate, count_tokens, config)

    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(InputError, _input_error)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(ParseError, _parse_error)
    app.add_exception_handler(GenerationError, _generation_error)
    app.add_exception_handler(ConfigError, _config_error)

    app.include_router(router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    return app


def main() -> None:
    """Run the API server."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    config = load_config()
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
