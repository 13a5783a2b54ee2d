import json
import pytest
from yt_comments.fetch.base import BaseDownloader, DownloaderConfig, FetchKind, RawArtifact
from yt_comments.fetch.utils import raw_artifact_path

VIDEO_ID = "dQw4w9WgXcQ"

def chat_line(author=None, runs=None, timestamp=None, renderer="liveChatTextMessageRenderer"):
    """Build one NDJSON line the way yt-dlp stores a chat replay action."""
    body = {}
    if author is not None:
        body["authorName"] = {"simpleText": author}
    if runs is not None:
        body["message"] = {"runs": runs}
    if timestamp is not None:
        body["timestampText"] = {"simpleText": timestamp}
    return json.dumps({
        "replayChatItemAction": {
            "actions": [{"addChatItemAction": {"item": {renderer: body}}}],
            "videoOffsetTimeMsec": "1000",
        }
    })

class FakeDownloader(BaseDownloader):
    """Writes canned raw content instead of running yt-dlp."""

    def __init__(self, config, contents=None, errors=None):
        self.config = config
        self.contents = contents or {}
        self.errors = errors or {}
        self.calls = []

    def download(self, kind, video_id):
        self.calls.append((kind, video_id))
        if kind in self.errors:
            raise self.errors[kind]
        path = raw_artifact_path(self.config.output_directory, kind.file_prefix, video_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.contents[kind], encoding="utf-8")
        return RawArtifact(kind=kind, video_id=video_id, path=path)

@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "output"
    path.mkdir()
    return path

@pytest.fixture
def config(output_dir):
    return DownloaderConfig(output_directory=output_dir, executable="yt-dlp", timeout=5)

@pytest.fixture
def comments_json():
    return json.dumps({
        "id": VIDEO_ID,
        "comments": [
            {"author": "Test User 1", "text": "This is a test comment"},
            {"author": "Test User 2", "text": "This is another test comment"},
        ],
    })

@pytest.fixture
def live_chat_ndjson():
    return "\n".join([
        chat_line("Alice", [{"text": "hello "}, {"emoji": {"emojiId": ":wave:"}}], "0:01"),
        "",
        "{not json",
        chat_line("Bob", [{"text": "hi"}], "0:05"),
    ]) + "\n"

@pytest.fixture
def fake_downloader(config, comments_json, live_chat_ndjson):
    return FakeDownloader(config, contents={
        FetchKind.COMMENTS: comments_json,
        FetchKind.LIVE_CHAT: live_chat_ndjson,
    })

