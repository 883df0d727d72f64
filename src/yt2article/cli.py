"""
Command-line interface for the transcript-to-article pipeline.
"""

import argparse
import logging
import os
import sys

from openai import OpenAI

from .captions import parse_start_time, parse_transcript
from .chunking import make_token_counter
from .config import PipelineConfig, load_config
from .cost import estimate_costs
from .errors import Yt2ArticleError
from .generation import make_generate_openai
from .pipeline import ArticlePipeline, build_chunk_prompt, join_parts
from .youtube import make_caption_fetcher

logger = logging.getLogger("yt2article")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(description="Generate an article from a YouTube video's captions")

    # Phase control
    ap.add_argument(
        "--stage",
        choices=["transcript", "article", "all"],
        default="all",
        help="transcript: fetch+parse captions; article: generate from a transcript; all: both",
    )

    # IO
    ap.add_argument("--video-url", default=None, help="YouTube video URL (transcript/all stages)")
    ap.add_argument("--start-time", default=None, help="Skip captions before this time (mm:ss)")
    ap.add_argument("--workdir", default=".work")
    ap.add_argument(
        "--transcript-file",
        default=None,
        help="Transcript to read (article stage) or write (default: <workdir>/transcript.txt)",
    )
    ap.add_argument("--output", default=None, help="Article output path (default: <workdir>/article.html)")
    ap.add_argument("--caption-language", default=None, help="Preferred caption language code")

    # Generation
    ap.add_argument("--model", default=None, help="GPT model (default: $YT2ARTICLE_MODEL or gpt-4o)")
    ap.add_argument("--language", default=None, help="Article output language")
    ap.add_argument("--temperature", type=float, default=None)
    ap.add_argument("--max-model-tokens", type=int, default=None)
    ap.add_argument("--max-response-tokens", type=int, default=None)
    ap.add_argument("--reserve-tokens", type=int, default=None)

    # Cost estimation
    ap.add_argument("--estimate-only", action="store_true", help="Print cost estimate and exit")
    ap.add_argument("--rate-gpt-in-per-mtok", type=float, default=2.50)
    ap.add_argument("--rate-gpt-out-per-mtok", type=float, default=10.00)

    # Logging
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return ap.parse_args(argv)


def apply_overrides(config: PipelineConfig, args: argparse.Namespace) -> PipelineConfig:
    """Override config values with any CLI flags that were given."""
    overrides = {
        "model": args.model,
        "language": args.language,
        "temperature": args.temperature,
        "max_model_tokens": args.max_model_tokens,
        "max_response_tokens": args.max_response_tokens,
        "reserve_tokens": args.reserve_tokens,
        "caption_language": args.caption_language,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)
    return config


def run_transcript_stage(args: argparse.Namespace, config: PipelineConfig, transcript_path: str) -> str:
    """Fetch captions, parse them into a transcript and save it."""
    if not args.video_url:
        raise RuntimeError("--video-url is required for the transcript stage")
    start_seconds = parse_start_time(args.start_time)

    fetch_captions = make_caption_fetcher(config.http_timeout, config.caption_language)
    markup = fetch_captions(args.video_url)
    transcript = parse_transcript(markup, start_seconds)
    if not transcript:
        logger.warning(f"No caption text at or after {start_seconds}s")

    with open(transcript_path, "w", encoding="utf-8") as f:
        f.write(transcript)
    logger.info(f"Saved transcript -> {transcript_path} ({len(transcript)} chars)")
    return transcript


def log_cost_estimate(pipeline: ArticlePipeline, transcript: str, args: argparse.Namespace) -> list[str]:
    """Log the estimated generation cost for a transcript and return its chunks."""
    chunks = pipeline.prepare_chunks(transcript)
    count = pipeline.count_tokens
    prompt_tokens = sum(count(c) for c in chunks)
    overhead = count(build_chunk_prompt("", 0, len(chunks), pipeline.config.language))
    est = estimate_costs(
        prompt_tokens,
        len(chunks),
        max_response_tokens=pipeline.config.max_response_tokens,
        prompt_overhead_tokens=overhead,
        rates={
            "gpt_in_per_mtok": args.rate_gpt_in_per_mtok,
            "gpt_out_per_mtok": args.rate_gpt_out_per_mtok,
        },
    )
    logger.info(f"=== Estimated costs ({len(chunks)} chunk(s), model {pipeline.config.model}) ===")
    logger.info(f"Input ({est['input_tokens']} tokens): ${est['input_cost']:.4f}")
    logger.info(f"Output (<= {est['output_tokens']} tokens): ${est['output_cost']:.4f}")
    logger.info(f"TOTAL (upper bound): ${est['total']:.4f}")
    return chunks


def run_article_stage(args: argparse.Namespace, config: PipelineConfig, transcript: str) -> None:
    """Generate the article from a transcript and save it."""
    count_tokens = make_token_counter(config.model)

    # The estimate needs no client
    generate = None
    if not args.estimate_only:
        if not config.openai_api_key:
            raise RuntimeError("OPENAI_API_KEY is not set. Put it in .env or environment.")
        client = OpenAI(api_key=config.openai_api_key)
        generate = make_generate_openai(
            client, config.model, config.temperature, max_tokens=config.max_response_tokens
        )

    pipeline = ArticlePipeline(generate, count_tokens, config, progress=True)
    chunks = log_cost_estimate(pipeline, transcript, args)
    if args.estimate_only:
        return

    article = join_parts(pipeline.generate_parts(chunks))
    output = args.output or os.path.join(args.workdir, "article.html")
    with open(output, "w", encoding="utf-8") as f:
        f.write(article)
    logger.info(f"Done (article) -> {output}")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = apply_overrides(load_config(), args)
        os.makedirs(args.workdir, exist_ok=True)
        transcript_path = args.transcript_file or os.path.join(args.workdir, "transcript.txt")

        if args.stage in ("transcript", "all"):
            transcript = run_transcript_stage(args, config, transcript_path)
            if args.stage == "transcript":
                logger.info("Stage 'transcript' complete. Review it, then run stage 'article'.")
                return
        else:
            if not os.path.exists(transcript_path):
                raise RuntimeError(f"Transcript not found for article stage: {transcript_path}")
            with open(transcript_path, encoding="utf-8") as f:
                transcript = f.read()
            logger.info(f"Loaded transcript -> {transcript_path} ({len(transcript)} chars)")

        run_article_stage(args, config, transcript)
    except Yt2ArticleError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
