import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from .base import BaseDownloader, DownloaderConfig, FetchKind, RawArtifact
from .errors import (
    CommandTimeoutError,
    EmptyResultError,
    ExecutableNotFoundError,
    classify_error,
)
from .utils import find_cookies_file, raw_artifact_path, watch_url

logger = logging.getLogger(__name__)

_MODE_FLAGS = {
    FetchKind.COMMENTS: ["--write-comments"],
    FetchKind.LIVE_CHAT: ["--write-subs", "--sub-langs", "live_chat"],
}

_EMPTY_RESULT_MESSAGES = {
    FetchKind.COMMENTS: (
        "Failed to download comments. The video might not have any comments "
        "or they might be disabled."
    ),
    FetchKind.LIVE_CHAT: (
        "Failed to download live chat. The video might not have a live chat "
        "replay or it might not be available yet."
    ),
}

class YtDlpDownloader(BaseDownloader):
    """Runs yt-dlp in metadata-only mode and persists its raw output."""

    def __init__(self, config: DownloaderConfig):
        self.config = config

    def build_command(self, kind: FetchKind, video_id: str, output_template: str) -> List[str]:
        cmd = [
            self.config.executable,
            "--skip-download",
            *_MODE_FLAGS[kind],
            "--no-check-certificate",
            "--output", output_template,
            watch_url(video_id, self.config.watch_host),
        ]
        cookies_file = find_cookies_file(self.config.cookies_path, self.config.cookies_filename)
        if cookies_file is not None:
            cmd.extend(["--cookies", str(cookies_file)])
        elif self.config.cookies_path:
            logger.debug("No cookie file %s in %s, fetching anonymously",
                         self.config.cookies_filename, self.config.cookies_path)
        return cmd

    def download(self, kind: FetchKind, video_id: str) -> RawArtifact:
        with tempfile.TemporaryDirectory(prefix="yt-comments-") as tmp_dir:
            output_template = str(Path(tmp_dir) / video_id)
            cmd = self.build_command(kind, video_id, output_template)
            logger.info("Running yt-dlp for %s of %s", kind.value, video_id)
            self._run(cmd, kind)

            produced = Path(output_template + kind.raw_suffix)
            if not produced.is_file():
                raise EmptyResultError(_EMPTY_RESULT_MESSAGES[kind])

            destination = raw_artifact_path(self.config.output_directory, kind.file_prefix, video_id)
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(produced, destination)

        logger.info("Saved raw %s data to %s", kind.value, destination)
        return RawArtifact(kind=kind, video_id=video_id, path=destination)

    def _run(self, cmd: List[str], kind: FetchKind) -> subprocess.CompletedProcess:
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.config.timeout,
            )
        except subprocess.TimeoutExpired as e:
            logger.error("yt-dlp timed out after %ss", self.config.timeout)
            raise CommandTimeoutError(self.config.timeout, _as_text(e.stderr)) from e
        except FileNotFoundError as e:
            raise ExecutableNotFoundError(self.config.executable) from e

        if result.returncode != 0:
            error = classify_error(result.stderr or "", result.returncode, kind)
            logger.warning("yt-dlp failed (%s): %s", error.code, error)
            raise error
        return result

def _as_text(output: Optional[object]) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return str(output)
