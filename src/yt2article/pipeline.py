"""
Chunked article generation from a transcript.
"""

import logging
from collections.abc import Awaitable, Callable

from tqdm import tqdm

from .chunking import split_text_into_chunks
from .config import PipelineConfig
from .errors import GenerationError
from .models import ArticlePart

logger = logging.getLogger("yt2article")

PART_SEPARATOR = "\n"


def build_chunk_prompt(chunk: str, index: int, total: int, language: str) -> str:
    """Build the generation prompt for one transcript chunk (0-based index)."""
    return f"""You are a helpful assistant who writes detailed, well-structured articles based on transcripts.

Continue writing an article based on the following transcript chunk. Use proper HTML tags such as <h1>, <h2>, <p>, <ul>, <li>, <strong>, and <em> to format the content appropriately. Ensure the content is engaging and easy to read.

Important:

- Do not include any code blocks or code fences (like ```html or ```) in your response.
- Do not repeat content from previous chunks.
- Ensure continuity and coherence with previous sections.
- Translate the content to {language}.

Transcript Chunk ({index + 1}/{total}):
{chunk}"""


class ArticlePipeline:
    """
    Turn a transcript into an article, one generation call per chunk.

    Chunks are sent strictly in order and each call completes before the next
    is issued. Previous output is not passed back; the prompt only asks the
    model to keep continuity.

    Args:
        generate: prompt -> text function (awaitable for `run_async`)
        count_tokens: token counting function matching the model
        config: token budget and output language
        progress: show a tqdm progress bar over chunks
    """

    def __init__(
        self,
        generate: Callable[[str], str] | Callable[[str], Awaitable[str]],
        count_tokens: Callable[[str], int],
        config: PipelineConfig | None = None,
        *,
        progress: bool = False,
    ):
        self.generate = generate
        self.count_tokens = count_tokens
        self.config = config or PipelineConfig()
        self.progress = progress

    def prepare_chunks(self, transcript: str) -> list[str]:
        """Validate the transcript and split it to fit the prompt budget."""
        if not transcript or not transcript.strip():
            raise GenerationError("Transcript is empty")

        max_prompt_tokens = self.config.max_prompt_tokens
        chunks = split_text_into_chunks(transcript, max_prompt_tokens, self.count_tokens)
        logger.info(f"Split transcript into {len(chunks)} chunk(s) (max {max_prompt_tokens} tokens each)")
        return chunks

    def _prompt(self, chunks: list[str], index: int) -> str:
        logger.debug(f"Generating chunk {index + 1}/{len(chunks)} ({len(chunks[index])} chars)")
        return build_chunk_prompt(chunks[index], index, len(chunks), self.config.language)

    def _failed(self, index: int, total: int, e: Exception) -> GenerationError:
        logger.error(f"Generation failed for chunk {index + 1}/{total}: {e}")
        return GenerationError(f"Generation failed for chunk {index + 1}/{total}", chunk_index=index)

    def _collect(self, parts: list[ArticlePart], index: int, total: int, text: str | None) -> None:
        if not text:
            logger.warning(f"Empty response for chunk {index + 1}/{total}, skipping")
            return
        parts.append(ArticlePart(index=index, text=text))

    def generate_parts(self, chunks: list[str]) -> list[ArticlePart]:
        """Generate article parts for already prepared chunks, in order."""
        parts: list[ArticlePart] = []
        with tqdm(total=len(chunks), desc="Generating article", disable=not self.progress) as bar:
            for i in range(len(chunks)):
                try:
                    text = self.generate(self._prompt(chunks, i))
                except Exception as e:
                    raise self._failed(i, len(chunks), e) from e
                self._collect(parts, i, len(chunks), text)
                bar.update(1)
        return parts

    def run_parts(self, transcript: str) -> list[ArticlePart]:
        """Generate article parts in chunk order."""
        return self.generate_parts(self.prepare_chunks(transcript))

    def run(self, transcript: str) -> str:
        """Generate the full article."""
        return join_parts(self.run_parts(transcript))

    async def run_parts_async(self, transcript: str) -> list[ArticlePart]:
        """Generate article parts, awaiting each chunk before sending the next."""
        chunks = self.prepare_chunks(transcript)
        parts: list[ArticlePart] = []
        with tqdm(total=len(chunks), desc="Generating article", disable=not self.progress) as bar:
            for i in range(len(chunks)):
                try:
                    text = await self.generate(self._prompt(chunks, i))
                except Exception as e:
                    raise self._failed(i, len(chunks), e) from e
                self._collect(parts, i, len(chunks), text)
                bar.update(1)
        return parts

    async def run_async(self, transcript: str) -> str:
        """Async version of `run`."""
        return join_parts(await self.run_parts_async(transcript))


def join_parts(parts: list[ArticlePart]) -> str:
    """Join article parts in chunk order."""
    ordered = sorted(parts, key=lambda p: p.index)
    article = PART_SEPARATOR.join(p.text for p in ordered)
    logger.info(f"Article assembled from {len(ordered)} part(s): {len(article)} chars")
    return article


def generate_article(
    transcript: str,
    max_model_tokens: int,
    max_response_tokens: int,
    reserve_tokens: int,
    generate: Callable[[str], str],
    count_tokens: Callable[[str], int],
    language: str | None = None,
) -> str:
    """Generate an article from a transcript with an explicit token budget."""
    config = PipelineConfig(
        max_model_tokens=max_model_tokens,
        max_response_tokens=max_response_tokens,
        reserve_tokens=reserve_tokens,
    )
    if language:
        config.language = language
    return ArticlePipeline(generate, count_tokens, config).run(transcript)
