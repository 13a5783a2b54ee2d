import re
from pathlib import Path
from typing import Optional

VIDEO_ID_RE = re.compile(r"[A-Za-z0-9_-]{11}")

INVALID_VIDEO_ID_MESSAGE = (
    "Invalid YouTube video ID. It should be 11 characters long and contain only "
    "letters, numbers, underscores, and hyphens."
)

def normalize_video_id(video_id: str) -> str:
    """
    Strip the leading ``--`` some shells need to pass an id starting with ``-``.
    Example: '---abcdefghij' -> '-abcdefghij'
    """
    video_id = video_id.strip()
    if video_id.startswith("--"):
        video_id = video_id[2:]
    return video_id

def is_valid_video_id(video_id: str) -> bool:
    """Exactly 11 characters from [A-Za-z0-9_-]."""
    return bool(VIDEO_ID_RE.fullmatch(video_id or ""))

def watch_url(video_id: str, host: str = "www.youtube.com") -> str:
    return f"https://{host}/watch?v={video_id}"

def raw_artifact_path(output_directory: Path, prefix: str, video_id: str) -> Path:
    """Persisted raw download, e.g. ``output/comments_<id>.json``."""
    return Path(output_directory) / f"{prefix}_{video_id}.json"

def text_artifact_path(output_directory: Path, prefix: str, video_id: str) -> Path:
    """Formatted text output, e.g. ``output/livechat_<id>.txt``."""
    return Path(output_directory) / f"{prefix}_{video_id}.txt"

def find_cookies_file(cookies_path: Optional[Path], filename: str) -> Optional[Path]:
    """Return the cookie file inside ``cookies_path`` if it exists."""
    if not cookies_path:
        return None
    candidate = Path(cookies_path) / filename
    if candidate.is_file():
        return candidate
    return None
