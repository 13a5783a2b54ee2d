import json
import logging
from pathlib import Path
from typing import Any, List

from yt_comments.fetch.errors import MalformedDataError
from yt_comments.schemas import DEFAULT_AUTHOR, DEFAULT_COMMENT_TEXT, CommentRecord

logger = logging.getLogger(__name__)

def parse_comments_file(path: Path) -> List[CommentRecord]:
    """Parse the ``.info.json`` document yt-dlp writes with ``--write-comments``."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedDataError(f"Could not read comments data from {path}: {e}") from e
    records = parse_comments_document(content)
    logger.info("Parsed %d comments from %s", len(records), path)
    return records

def parse_comments_document(content: str) -> List[CommentRecord]:
    """
    Decode a JSON document and map its ``comments`` list to records.

    An empty list is a valid result. A missing or null ``comments`` field is
    not.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedDataError(f"Downloaded comments data is not valid JSON: {e}") from e

    if not isinstance(data, dict) or data.get("comments") is None:
        raise MalformedDataError("No comments found in the downloaded data.")

    comments = data["comments"]
    if not isinstance(comments, list):
        raise MalformedDataError("The 'comments' field in the downloaded data is not a list.")

    return [_to_record(comment) for comment in comments]

def _to_record(comment: Any) -> CommentRecord:
    if not isinstance(comment, dict):
        return CommentRecord()
    return CommentRecord(
        author=_text_or(comment.get("author"), DEFAULT_AUTHOR),
        text=_text_or(comment.get("text"), DEFAULT_COMMENT_TEXT),
    )

def _text_or(value: Any, default: str) -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)
