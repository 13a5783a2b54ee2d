from yt_comments.parse.comments import parse_comments_document
from yt_comments.schemas import ChatMessageRecord, CommentRecord
from yt_comments.services.formatter import format_comments, format_live_chat, write_text

class TestFormatter:
    """Unit tests for plain text rendering"""

    def test_comment_blocks(self):
        records = parse_comments_document('{"comments":[{"author":"A","text":"hi"},{"text":"bye"}]}')
        assert format_comments(records) == "A:\nhi\n\nAnonymous:\nbye\n\n"

    def test_no_comments_renders_empty(self):
        assert format_comments([]) == ""

    def test_chat_lines_with_and_without_timestamp(self):
        records = [
            ChatMessageRecord(author="Alice", text="hello", timestamp="1:02:03"),
            ChatMessageRecord(author="Bob", text="hi"),
        ]
        assert format_live_chat(records) == "[1:02:03] Alice: hello\nBob: hi\n"

    def test_deterministic(self):
        records = [CommentRecord(author="A", text="x"), CommentRecord(author="A", text="x")]
        assert format_comments(records) == format_comments(list(records))
        assert format_comments(records).count("A:\nx\n\n") == 2

    def test_write_text_overwrites(self, tmp_path):
        path = tmp_path / "nested" / "comments_x.txt"
        write_text(path, "first version that is longer")
        write_text(path, "second")
        assert path.read_text(encoding="utf-8") == "second"

    def test_write_text_keeps_unicode(self, tmp_path):
        path = write_text(tmp_path / "out.txt", "Zoë: ナイス 👍\n")
        assert path.read_bytes() == "Zoë: ナイス 👍\n".encode("utf-8")
