from pydantic import BaseModel, Field, field_validator
from typing import Dict, Optional

from yt_comments.fetch.utils import INVALID_VIDEO_ID_MESSAGE, is_valid_video_id, normalize_video_id

DEFAULT_AUTHOR = "Anonymous"
DEFAULT_COMMENT_TEXT = "No comment text"

class CommentRecord(BaseModel):
    author: str = Field(default=DEFAULT_AUTHOR, description="Comment author display name")
    text: str = Field(default=DEFAULT_COMMENT_TEXT, description="Comment body")

class ChatMessageRecord(BaseModel):
    author: str = Field(default=DEFAULT_AUTHOR, description="Chat author display name")
    text: str = Field(default="", description="Message text with emoji placeholders")
    timestamp: str = Field(default="", description="Offset into the stream, e.g. '1:02:03'")

class VideoRequest(BaseModel):
    video_id: str = Field(description="11 character YouTube video ID")

    @field_validator("video_id")
    @classmethod
    def check_video_id(cls, value: str) -> str:
        value = normalize_video_id(value)
        if not is_valid_video_id(value):
            raise ValueError(INVALID_VIDEO_ID_MESSAGE)
        return value

class FetchResponse(BaseModel):
    video_id: str
    path: str

class FetchAllResponse(BaseModel):
    video_id: str
    comments: Optional[str] = None
    livechat: Optional[str] = None
    warnings: Dict[str, str] = Field(default_factory=dict, description="Failure message per absent side")
