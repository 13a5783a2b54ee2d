import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from yt_comments.fetch.base import BaseDownloader, DownloaderConfig, FetchKind
from yt_comments.fetch.downloader import YtDlpDownloader
from yt_comments.fetch.errors import AggregateFetchError, EmptyResultError, FetchError
from yt_comments.fetch.utils import raw_artifact_path, text_artifact_path
from yt_comments.parse.comments import parse_comments_file
from yt_comments.parse.livechat import parse_live_chat_file
from yt_comments.services.formatter import format_comments, format_live_chat, write_text

logger = logging.getLogger(__name__)

@dataclass
class FetchAllResult:
    video_id: str
    comments: Optional[Path] = None
    livechat: Optional[Path] = None
    errors: Dict[str, FetchError] = field(default_factory=dict)

class CommentsService:
    """
    Fetch pipelines for one output directory.

    Each pipeline is download (yt-dlp) -> parse -> format. Single resource
    calls propagate failures unchanged; ``fetch_all`` runs both pipelines and
    only fails when neither produced a file.
    """

    def __init__(self, config: Optional[DownloaderConfig] = None, downloader: Optional[BaseDownloader] = None):
        self.config = config or DownloaderConfig.from_settings()
        self.downloader = downloader or YtDlpDownloader(self.config)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @property
    def output_dir(self) -> Path:
        return Path(self.config.output_directory)

    # Comments

    def download_comments(self, video_id: str) -> Path:
        return self.downloader.download(FetchKind.COMMENTS, video_id).path

    def parse_comments(self, video_id: str, json_file: Optional[Path] = None) -> Path:
        json_file = self._existing_raw_file(FetchKind.COMMENTS, video_id, json_file)
        records = parse_comments_file(json_file)
        output_file = text_artifact_path(self.output_dir, FetchKind.COMMENTS.file_prefix, video_id)
        write_text(output_file, format_comments(records))
        logger.info("Wrote %d comments to %s", len(records), output_file)
        return output_file

    def fetch_comments(self, video_id: str) -> Path:
        json_file = self.download_comments(video_id)
        return self.parse_comments(video_id, json_file)

    # Live chat

    def download_live_chat(self, video_id: str) -> Path:
        return self.downloader.download(FetchKind.LIVE_CHAT, video_id).path

    def parse_live_chat(self, video_id: str, json_file: Optional[Path] = None) -> Path:
        json_file = self._existing_raw_file(FetchKind.LIVE_CHAT, video_id, json_file)
        records = parse_live_chat_file(json_file)
        output_file = text_artifact_path(self.output_dir, FetchKind.LIVE_CHAT.file_prefix, video_id)
        write_text(output_file, format_live_chat(records))
        logger.info("Wrote %d chat messages to %s", len(records), output_file)
        return output_file

    def fetch_live_chat(self, video_id: str) -> Path:
        json_file = self.download_live_chat(video_id)
        return self.parse_live_chat(video_id, json_file)

    # Both

    def fetch_all(self, video_id: str) -> FetchAllResult:
        """
        Fetch comments and live chat concurrently.

        Both pipelines always run to completion. A failed side is recorded in
        ``errors`` and left as None; if both fail, AggregateFetchError is raised.
        """
        pipelines = {
            FetchKind.COMMENTS.value: self.fetch_comments,
            FetchKind.LIVE_CHAT.value: self.fetch_live_chat,
        }
        with ThreadPoolExecutor(max_workers=len(pipelines), thread_name_prefix="fetch") as pool:
            futures = {
                side: pool.submit(_capture, pipeline, video_id)
                for side, pipeline in pipelines.items()
            }
            outcomes = {side: future.result() for side, future in futures.items()}

        result = FetchAllResult(video_id=video_id)
        for side, (path, error) in outcomes.items():
            if error is not None:
                logger.warning("Could not fetch %s for %s: %s", side, video_id, error)
                result.errors[side] = error
            else:
                setattr(result, side, path)

        if result.comments is None and result.livechat is None:
            raise AggregateFetchError(video_id, result.errors)
        return result

    def _existing_raw_file(self, kind: FetchKind, video_id: str, json_file: Optional[Path]) -> Path:
        if json_file is None:
            json_file = raw_artifact_path(self.output_dir, kind.file_prefix, video_id)
        json_file = Path(json_file)
        if not json_file.is_file():
            raise EmptyResultError(
                f"Raw {kind.value} file not found: {json_file}. Download it first."
            )
        return json_file

def _capture(pipeline: Callable[[str], Path], video_id: str) -> Tuple[Optional[Path], Optional[FetchError]]:
    try:
        return pipeline(video_id), None
    except FetchError as e:
        return None, e
    except OSError as e:
        logger.exception("I/O error while fetching %s", video_id)
        return None, FetchError(f"I/O error: {e}")
