"""
YouTube caption track retrieval.
"""

import json
import logging
import re
from collections.abc import Callable

import httpx

from .errors import InputError, NotFoundError
from .models import CaptionTrack

logger = logging.getLogger("yt2article")

WATCH_URL = "https://www.youtube.com/watch"
USER_AGENT = "Mozilla/5.0 (compatible; yt2article/0.1)"

_VIDEO_ID_PATTERNS = [
    re.compile(r"(?:v=|/v/|youtu\.be/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"(?:embed/|shorts/)([a-zA-Z0-9_-]{11})"),
]
_BARE_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{11}$")
_PLAYER_RESPONSE_RE = re.compile(r"ytInitialPlayerResponse\s*=\s*")


def extract_video_id(url: str) -> str:
    """Extract the 11-character video id from a YouTube URL or bare id."""
    if not url or not url.strip():
        raise InputError("Video URL is required")
    url = url.strip()
    if _BARE_ID_RE.match(url):
        return url
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    raise InputError(f"Not a YouTube video URL: {url}")


def extract_caption_tracks(page_html: str) -> list[CaptionTrack]:
    """Read the caption track list from the player response embedded in a watch page."""
    match = _PLAYER_RESPONSE_RE.search(page_html)
    if not match:
        logger.debug("No ytInitialPlayerResponse found in watch page")
        return []
    try:
        player, _ = json.JSONDecoder().raw_decode(page_html, match.end())
    except json.JSONDecodeError as e:
        logger.warning(f"Could not decode player response: {e}")
        return []

    if not isinstance(player, dict):
        logger.warning(f"Player response is not an object: {type(player).__name__}")
        return []

    captions = player.get("captions")
    renderer = captions.get("playerCaptionsTracklistRenderer") if isinstance(captions, dict) else None
    if not isinstance(renderer, dict):
        return []
    tracks = []
    entries = renderer.get("captionTracks")
    for t in entries if isinstance(entries, list) else []:
        if not isinstance(t, dict) or not t.get("baseUrl"):
            continue
        name = t.get("name")
        tracks.append(
            CaptionTrack(
                base_url=t["baseUrl"],
                language_code=t.get("languageCode", ""),
                name=name.get("simpleText", "") if isinstance(name, dict) else "",
                is_asr=t.get("kind") == "asr" or str(t.get("vssId", "")).startswith("a."),
            )
        )
    return tracks


def select_caption_track(tracks: list[CaptionTrack], language: str | None = None) -> CaptionTrack | None:
    """Pick a track: the requested language (manual before auto-generated), else the first one."""
    if not tracks:
        return None
    if language:
        lang = language.lower()
        matching = [t for t in tracks if t.language_code.lower().split("-")[0] == lang.split("-")[0]]
        if matching:
            matching.sort(key=lambda t: t.is_asr)
            return matching[0]
        logger.info(f"No {language!r} captions, using {tracks[0].language_code!r}")
    return tracks[0]


def fetch_caption_markup(video_url: str, *, client: httpx.Client, language: str | None = None) -> str:
    """
    Fetch the timed-text XML of a video's caption track.

    Args:
        video_url: YouTube URL or video id
        client: httpx client used for both the watch page and the track
        language: preferred caption language code (optional)

    Returns:
        Raw caption markup
    """
    video_id = extract_video_id(video_url)
    logger.info(f"Fetching caption tracks for video {video_id}")

    r = client.get(WATCH_URL, params={"v": video_id, "hl": "en"})
    r.raise_for_status()
    tracks = extract_caption_tracks(r.text)
    track = select_caption_track(tracks, language)
    if track is None:
        raise NotFoundError(f"No captions available for video {video_id}")

    logger.info(
        f"Using caption track {track.language_code!r}"
        f"{' (auto-generated)' if track.is_asr else ''} of {len(tracks)}"
    )
    r = client.get(track.base_url)
    r.raise_for_status()
    return r.text


def make_caption_fetcher(timeout: float = 30.0, language: str | None = None) -> Callable[[str], str]:
    """Create a video URL -> caption markup function with its own HTTP client."""

    def fetch(video_url: str) -> str:
        headers = {"User-Agent": USER_AGENT, "Accept-Language": "en-US,en;q=0.8"}
        with httpx.Client(follow_redirects=True, timeout=timeout, headers=headers) as client:
            return fetch_caption_markup(video_url, client=client, language=language)

    return fetch
