import os
import subprocess
import sys
import time
import pytest
from pathlib import Path
from unittest.mock import patch
from yt_comments.fetch.base import DownloaderConfig, FetchKind
from yt_comments.fetch.downloader import YtDlpDownloader
from yt_comments.services.fetch import CommentsService
from yt_comments.fetch.errors import (
    CommandFailedError,
    CommandTimeoutError,
    CommentsDisabledError,
    EmptyResultError,
    ExecutableNotFoundError,
    FutureEventMinutesError,
    NoLiveChatError,
)

VIDEO_ID = "dQw4w9WgXcQ"

def completed(cmd, returncode=0, stderr=""):
    return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr=stderr)

def output_template(cmd):
    return cmd[cmd.index("--output") + 1]

def writes(suffix, content):
    """subprocess.run stand-in that writes the file yt-dlp would produce."""
    def run(cmd, **kwargs):
        Path(output_template(cmd) + suffix).write_text(content, encoding="utf-8")
        return completed(cmd)
    return run

class TestBuildCommand:
    """Unit tests for the yt-dlp command line"""

    def test_comments_command(self, config):
        cmd = YtDlpDownloader(config).build_command(FetchKind.COMMENTS, VIDEO_ID, "/tmp/x/" + VIDEO_ID)
        assert cmd == [
            "yt-dlp",
            "--skip-download",
            "--write-comments",
            "--no-check-certificate",
            "--output", "/tmp/x/" + VIDEO_ID,
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        ]

    def test_live_chat_command(self, config):
        cmd = YtDlpDownloader(config).build_command(FetchKind.LIVE_CHAT, VIDEO_ID, "tmpl")
        assert cmd[1:5] == ["--skip-download", "--write-subs", "--sub-langs", "live_chat"]
        assert "--write-comments" not in cmd

    def test_cookies_appended_when_file_exists(self, output_dir, tmp_path):
        cookies_dir = tmp_path / "auth"
        cookies_dir.mkdir()
        (cookies_dir / "cookies.txt").write_text("# Netscape HTTP Cookie File\n")
        config = DownloaderConfig(output_directory=output_dir, cookies_path=cookies_dir)
        cmd = YtDlpDownloader(config).build_command(FetchKind.COMMENTS, VIDEO_ID, "tmpl")
        assert cmd[-2:] == ["--cookies", str(cookies_dir / "cookies.txt")]

    def test_missing_cookie_file_is_not_an_error(self, output_dir, tmp_path):
        config = DownloaderConfig(output_directory=output_dir, cookies_path=tmp_path / "nowhere")
        cmd = YtDlpDownloader(config).build_command(FetchKind.COMMENTS, VIDEO_ID, "tmpl")
        assert "--cookies" not in cmd

    def test_custom_executable(self, output_dir):
        config = DownloaderConfig(output_directory=output_dir, executable="/opt/bin/yt-dlp")
        cmd = YtDlpDownloader(config).build_command(FetchKind.COMMENTS, VIDEO_ID, "tmpl")
        assert cmd[0] == "/opt/bin/yt-dlp"

class TestDownload:
    """Unit tests for running yt-dlp with subprocess.run mocked"""

    @patch("yt_comments.fetch.downloader.subprocess.run")
    def test_comments_copied_to_output(self, mock_run, config, output_dir):
        mock_run.side_effect = writes(".info.json", '{"comments": []}')

        artifact = YtDlpDownloader(config).download(FetchKind.COMMENTS, VIDEO_ID)

        assert artifact.path == output_dir / f"comments_{VIDEO_ID}.json"
        assert artifact.path.read_text(encoding="utf-8") == '{"comments": []}'
        assert artifact.kind is FetchKind.COMMENTS
        kwargs = mock_run.call_args.kwargs
        assert kwargs["timeout"] == 5
        assert kwargs["capture_output"] is True

    @patch("yt_comments.fetch.downloader.subprocess.run")
    def test_live_chat_copied_to_output(self, mock_run, config, output_dir):
        mock_run.side_effect = writes(".live_chat.json", "{}\n")

        artifact = YtDlpDownloader(config).download(FetchKind.LIVE_CHAT, VIDEO_ID)

        assert artifact.path == output_dir / f"livechat_{VIDEO_ID}.json"
        assert artifact.path.exists()

    @patch("yt_comments.fetch.downloader.subprocess.run")
    def test_temporary_files_removed(self, mock_run, config):
        templates = []

        def run(cmd, **kwargs):
            templates.append(output_template(cmd))
            Path(templates[-1] + ".info.json").write_text("{}", encoding="utf-8")
            return completed(cmd)

        mock_run.side_effect = run
        YtDlpDownloader(config).download(FetchKind.COMMENTS, VIDEO_ID)
        assert not Path(templates[0]).parent.exists()

    @patch("yt_comments.fetch.downloader.subprocess.run")
    def test_success_without_file_is_empty_result(self, mock_run, config, output_dir):
        mock_run.side_effect = lambda cmd, **kwargs: completed(cmd)

        with pytest.raises(EmptyResultError, match="might not have any comments"):
            YtDlpDownloader(config).download(FetchKind.COMMENTS, VIDEO_ID)
        assert not (output_dir / f"comments_{VIDEO_ID}.json").exists()

    @patch("yt_comments.fetch.downloader.subprocess.run")
    def test_failure_is_classified(self, mock_run, config):
        mock_run.side_effect = lambda cmd, **kwargs: completed(
            cmd, 1, "ERROR: [youtube] dQw4w9WgXcQ: This live event will begin in 15 minutes."
        )
        with pytest.raises(FutureEventMinutesError) as exc_info:
            YtDlpDownloader(config).download(FetchKind.COMMENTS, VIDEO_ID)
        assert exc_info.value.minutes == 15

    @patch("yt_comments.fetch.downloader.subprocess.run")
    def test_comments_disabled(self, mock_run, config):
        mock_run.side_effect = lambda cmd, **kwargs: completed(cmd, 1, "comments are disabled")
        with pytest.raises(CommentsDisabledError):
            YtDlpDownloader(config).download(FetchKind.COMMENTS, VIDEO_ID)

    @patch("yt_comments.fetch.downloader.subprocess.run")
    def test_no_live_chat(self, mock_run, config):
        mock_run.side_effect = lambda cmd, **kwargs: completed(
            cmd, 1, "ERROR: This video doesn't have live chat"
        )
        with pytest.raises(NoLiveChatError):
            YtDlpDownloader(config).download(FetchKind.LIVE_CHAT, VIDEO_ID)

    @patch("yt_comments.fetch.downloader.subprocess.run")
    def test_generic_failure(self, mock_run, config):
        mock_run.side_effect = lambda cmd, **kwargs: completed(cmd, 1, "ERROR: Private video")
        with pytest.raises(CommandFailedError) as exc_info:
            YtDlpDownloader(config).download(FetchKind.COMMENTS, VIDEO_ID)
        assert exc_info.value.exit_code == 1
        assert "Private video" in str(exc_info.value)

    @patch("yt_comments.fetch.downloader.subprocess.run")
    def test_timeout(self, mock_run, config):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["yt-dlp"], timeout=5, stderr=b"partial")
        with pytest.raises(CommandTimeoutError) as exc_info:
            YtDlpDownloader(config).download(FetchKind.LIVE_CHAT, VIDEO_ID)
        assert exc_info.value.stderr == "partial"
        assert mock_run.call_count == 1

    @patch("yt_comments.fetch.downloader.subprocess.run")
    def test_missing_executable(self, mock_run, config):
        mock_run.side_effect = FileNotFoundError("yt-dlp")
        with pytest.raises(ExecutableNotFoundError, match="YOUTUBE_DL_PATH"):
            YtDlpDownloader(config).download(FetchKind.COMMENTS, VIDEO_ID)

def fake_executable(directory, body):
    """Write a runnable stand-in for yt-dlp using the current interpreter."""
    script = Path(directory) / "fake-yt-dlp"
    script.write_text(f"#!{sys.executable}\nimport sys, time\nfrom pathlib import Path\n{body}\n", encoding="utf-8")
    script.chmod(0o755)
    return str(script)

# Comments fail with Latin-1 bytes on stderr, live chat succeeds.
LATIN1_STDERR_SCRIPT = """
args = sys.argv[1:]
if "--write-comments" in args:
    sys.stderr.buffer.write(b"ERROR: caf\\xe9 \\xff\\n")
    sys.exit(1)
template = args[args.index("--output") + 1]
line = '{"replayChatItemAction": {"actions": [{"addChatItemAction": {"item": {"liveChatTextMessageRenderer": {"authorName": {"simpleText": "Ana"}, "message": {"runs": [{"text": "ok"}]}}}}}]}}'
Path(template + ".live_chat.json").write_text(line + "\\n", encoding="utf-8")
"""

@pytest.mark.skipif(os.name == "nt", reason="needs an executable script with a shebang")
class TestRealProcess:
    """Tests that run an actual child process in place of yt-dlp"""

    def test_undecodable_stderr_is_classified(self, output_dir, tmp_path):
        config = DownloaderConfig(output_directory=output_dir, executable=fake_executable(tmp_path, LATIN1_STDERR_SCRIPT), timeout=30)

        with pytest.raises(CommandFailedError) as exc_info:
            YtDlpDownloader(config).download(FetchKind.COMMENTS, VIDEO_ID)

        assert exc_info.value.exit_code == 1
        assert "ERROR: caf" in exc_info.value.stderr

    def test_undecodable_stderr_keeps_other_side_of_fetch_all(self, output_dir, tmp_path):
        config = DownloaderConfig(output_directory=output_dir, executable=fake_executable(tmp_path, LATIN1_STDERR_SCRIPT), timeout=30)

        result = CommentsService(config).fetch_all(VIDEO_ID)

        assert result.comments is None
        assert isinstance(result.errors["comments"], CommandFailedError)
        assert result.livechat == output_dir / f"livechat_{VIDEO_ID}.txt"
        assert result.livechat.read_text(encoding="utf-8") == "Ana: ok\n"

    def test_timeout_terminates_child(self, output_dir, tmp_path):
        config = DownloaderConfig(output_directory=output_dir, executable=fake_executable(tmp_path, "time.sleep(60)"), timeout=1)

        started = time.monotonic()
        with pytest.raises(CommandTimeoutError) as exc_info:
            YtDlpDownloader(config).download(FetchKind.COMMENTS, VIDEO_ID)
        elapsed = time.monotonic() - started

        assert elapsed < 10
        assert exc_info.value.timeout == 1
