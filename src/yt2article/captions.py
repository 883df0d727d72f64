"""
Caption XML parsing and 5-minute transcript blocks.
"""

import html
import logging
import math
import xml.etree.ElementTree as ET

from .errors import InputError, ParseError
from .models import CaptionEntry, TranscriptBlock

logger = logging.getLogger("yt2article")

BLOCK_DURATION_SECS = 300


def _parse_start(value: str | None) -> float:
    """Parse a `start` attribute; anything unusable counts as 0."""
    if value is None:
        return 0.0
    try:
        start = float(value)
    except ValueError:
        return 0.0
    return start if math.isfinite(start) else 0.0


def parse_caption_entries(markup: str) -> list[CaptionEntry]:
    """Parse timed-text XML into caption entries, in document order."""
    if not markup or not markup.strip():
        raise ParseError("Caption markup is empty")

    try:
        root = ET.fromstring(markup)
    except ET.ParseError as e:
        raise ParseError(f"Caption markup is not well-formed: {e}") from e

    entries: list[CaptionEntry] = []
    for node in root.iter("text"):
        # XML parsing decodes one level; YouTube escapes entities twice
        raw = "".join(node.itertext())
        entries.append(CaptionEntry(text=html.unescape(raw), start_seconds=_parse_start(node.get("start"))))
    return entries


def format_timestamp(seconds: float) -> str:
    """Format seconds as [m:ss] with unpadded minutes."""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"[{minutes}:{secs:02d}]"


def group_into_blocks(
    entries: list[CaptionEntry],
    start_offset_seconds: float = 0,
    *,
    block_duration: float = BLOCK_DURATION_SECS,
) -> list[TranscriptBlock]:
    """
    Group caption entries into fixed-duration blocks.

    Entries starting before `start_offset_seconds` are dropped. A block opens at
    the first retained entry and closes once an entry starts `block_duration`
    seconds or more after the block start; that entry opens the next block.
    A trailing block is only kept if it has text.
    """
    blocks: list[TranscriptBlock] = []
    cur: list[str] = []
    cur_start: float | None = None

    for entry in entries:
        if entry.start_seconds < start_offset_seconds:
            continue
        if cur_start is None:
            cur_start = entry.start_seconds
        elif entry.start_seconds >= cur_start + block_duration:
            blocks.append(TranscriptBlock(block_start_seconds=int(cur_start), text=" ".join(cur).strip()))
            cur_start = entry.start_seconds
            cur = []
        cur.append(entry.text)

    if cur_start is not None:
        text = " ".join(cur).strip()
        if text:
            blocks.append(TranscriptBlock(block_start_seconds=int(cur_start), text=text))
    return blocks


def render_blocks(blocks: list[TranscriptBlock]) -> str:
    """Render blocks as timestamped paragraphs."""
    out = "".join(f"{format_timestamp(b.block_start_seconds)}\n{b.text}\n\n" for b in blocks)
    return out.rstrip()


def parse_transcript(markup: str, start_offset_seconds: float = 0) -> str:
    """Parse caption markup into a timestamped transcript starting at the offset."""
    entries = parse_caption_entries(markup)
    blocks = group_into_blocks(entries, start_offset_seconds)
    logger.info(
        f"Parsed {len(entries)} caption entries into {len(blocks)} block(s) "
        f"(offset {start_offset_seconds}s)"
    )
    return render_blocks(blocks)


def parse_start_time(value: str | None) -> int:
    """Convert `mm:ss` (or bare minutes) to seconds; empty means 0."""
    if value is None or not value.strip():
        return 0
    parts = value.strip().split(":")
    if len(parts) > 2:
        raise InputError(f"Invalid start time: {value!r} (expected mm:ss)")
    try:
        minutes = int(parts[0])
        seconds = int(parts[1]) if len(parts) == 2 and parts[1] else 0
    except ValueError:
        raise InputError(f"Invalid start time: {value!r} (expected mm:ss)") from None
    if minutes < 0 or seconds < 0:
        raise InputError(f"Invalid start time: {value!r} (must not be negative)")
    return minutes * 60 + seconds
