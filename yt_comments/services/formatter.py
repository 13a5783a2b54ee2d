from pathlib import Path
from typing import Iterable

from yt_comments.schemas import ChatMessageRecord, CommentRecord

def format_comments(records: Iterable[CommentRecord]) -> str:
    """One ``author:\\ntext`` block per comment, blank line after each."""
    return "".join(f"{record.author}:\n{record.text}\n\n" for record in records)

def format_live_chat(records: Iterable[ChatMessageRecord]) -> str:
    lines = []
    for record in records:
        if record.timestamp:
            lines.append(f"[{record.timestamp}] {record.author}: {record.text}\n")
        else:
            lines.append(f"{record.author}: {record.text}\n")
    return "".join(lines)

def write_text(path: Path, content: str) -> Path:
    """Write ``content`` to ``path``, replacing anything already there."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(content)
    return path
