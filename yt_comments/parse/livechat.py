"""
Live chat replay parsing.

yt-dlp stores a chat replay as newline-delimited JSON, one
``replayChatItemAction`` per line, with the interesting fields buried several
levels deep:

    {"replayChatItemAction": {"actions": [{"addChatItemAction": {"item": {
        "liveChatTextMessageRenderer": {
            "authorName": {"simpleText": "..."},
            "message": {"runs": [{"text": "..."}, {"emoji": {"emojiId": "..."}}]},
            "timestampText": {"simpleText": "1:02"}}}}}]}}

The shape is controlled by YouTube, so fields are read with optional accessors
and anything unrecognized is skipped rather than treated as an error.
"""
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional

from yt_comments.fetch.errors import MalformedDataError, NoMessagesFoundError
from yt_comments.schemas import DEFAULT_AUTHOR, ChatMessageRecord

logger = logging.getLogger(__name__)

TEXT_MESSAGE_RENDERER = "liveChatTextMessageRenderer"

def dig(value: Any, *keys: Any) -> Any:
    """Follow dict keys / list indexes, returning None at the first miss."""
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
        elif isinstance(value, list) and isinstance(key, int) and -len(value) <= key < len(value):
            value = value[key]
        else:
            return None
        if value is None:
            return None
    return value

def parse_live_chat_file(path: Path) -> List[ChatMessageRecord]:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            messages = parse_live_chat_lines(f)
    except OSError as e:
        raise MalformedDataError(f"Could not read live chat data from {path}: {e}") from e
    logger.info("Parsed %d chat messages from %s", len(messages), path)
    return messages

def parse_live_chat_lines(lines: Iterable[str]) -> List[ChatMessageRecord]:
    """Extract text messages from NDJSON lines; fails if none are found."""
    messages = [
        message
        for data in _decode_lines(lines)
        for message in _messages_from_line(data)
    ]
    if not messages:
        raise NoMessagesFoundError()
    return messages

def _decode_lines(lines: Iterable[str]) -> Iterator[dict]:
    for number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("Skipping undecodable live chat line %d", number)
            continue
        if not data or not isinstance(data, dict):
            continue
        yield data

def _messages_from_line(data: dict) -> Iterator[ChatMessageRecord]:
    actions = dig(data, "replayChatItemAction", "actions")
    if not isinstance(actions, list):
        return
    for action in actions:
        renderer = dig(action, "addChatItemAction", "item", TEXT_MESSAGE_RENDERER)
        if not isinstance(renderer, dict):
            continue
        yield _to_record(renderer)

def _to_record(renderer: dict) -> ChatMessageRecord:
    author = dig(renderer, "authorName", "simpleText")
    timestamp = dig(renderer, "timestampText", "simpleText")
    return ChatMessageRecord(
        author=str(author) if author is not None else DEFAULT_AUTHOR,
        text=message_text(dig(renderer, "message", "runs")),
        timestamp=str(timestamp) if timestamp is not None else "",
    )

def message_text(runs: Optional[list]) -> str:
    """Join message runs, replacing emoji runs with their emoji id."""
    if not isinstance(runs, list):
        return ""
    parts = []
    for run in runs:
        if not isinstance(run, dict):
            continue
        if run.get("text") is not None:
            parts.append(str(run["text"]))
        elif "emoji" in run:
            emoji_id = dig(run, "emoji", "emojiId")
            if emoji_id is not None:
                parts.append(str(emoji_id))
    return "".join(parts)
