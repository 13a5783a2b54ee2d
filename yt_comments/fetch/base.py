from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

class FetchKind(str, Enum):
    COMMENTS = "comments"
    LIVE_CHAT = "livechat"

    @property
    def file_prefix(self) -> str:
        """Prefix of the persisted artifacts, e.g. ``comments_<id>.json``."""
        return self.value

    @property
    def raw_suffix(self) -> str:
        """Suffix yt-dlp appends to the output template for this kind."""
        if self is FetchKind.COMMENTS:
            return ".info.json"
        return ".live_chat.json"

@dataclass(frozen=True)
class DownloaderConfig:
    output_directory: Path
    executable: str = "yt-dlp"
    timeout: float = 300
    cookies_path: Optional[Path] = None
    cookies_filename: str = "cookies.txt"
    watch_host: str = "www.youtube.com"

    @classmethod
    def from_settings(cls, settings=None, **overrides) -> "DownloaderConfig":
        """Build a config from the env-driven settings, with optional overrides."""
        if settings is None:
            from yt_comments.core.config import settings
        values = {
            "output_directory": Path(settings.OUTPUT_DIRECTORY),
            "executable": settings.YOUTUBE_DL_PATH,
            "timeout": settings.COMMAND_TIMEOUT,
            "cookies_path": Path(settings.COOKIES_PATH) if settings.COOKIES_PATH else None,
            "cookies_filename": settings.COOKIES_FILENAME,
            "watch_host": settings.WATCH_HOST,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        if not isinstance(values["output_directory"], Path):
            values["output_directory"] = Path(values["output_directory"])
        if values["cookies_path"] is not None and not isinstance(values["cookies_path"], Path):
            values["cookies_path"] = Path(values["cookies_path"])
        return cls(**values)

@dataclass(frozen=True)
class RawArtifact:
    kind: FetchKind
    video_id: str
    path: Path

class BaseDownloader:
    def download(self, kind: FetchKind, video_id: str) -> RawArtifact:
        raise NotImplementedError
