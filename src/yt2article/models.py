"""
Data models for the transcript-to-article pipeline.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CaptionEntry:
    """A single caption line with its start time."""

    text: str
    start_seconds: float


@dataclass(frozen=True)
class TranscriptBlock:
    """A fixed-duration block of caption text."""

    block_start_seconds: int
    text: str


@dataclass(frozen=True)
class ArticlePart:
    """Generated article text for one transcript chunk."""

    index: int
    text: str


@dataclass(frozen=True)
class CaptionTrack:
    """A caption track advertised by the YouTube player."""

    base_url: str
    language_code: str
    name: str = ""
    is_asr: bool = False  # auto-generated
