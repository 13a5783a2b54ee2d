import os
from typing import Optional

class Settings:
    # Storage
    OUTPUT_DIRECTORY: str = os.getenv("YOUTUBE_COMMENTS_OUTPUT_DIR", "output")

    # Downloader
    YOUTUBE_DL_PATH: str = os.getenv("YOUTUBE_DL_PATH", "yt-dlp")
    COMMAND_TIMEOUT: int = int(os.getenv("YOUTUBE_COMMENTS_TIMEOUT", "300"))
    WATCH_HOST: str = os.getenv("YOUTUBE_WATCH_HOST", "www.youtube.com")

    # Authentication: directory holding an optional Netscape cookie file
    COOKIES_PATH: Optional[str] = os.getenv("YOUTUBE_COMMENTS_COOKIES_PATH")
    COOKIES_FILENAME: str = os.getenv("YOUTUBE_COMMENTS_COOKIES_FILE", "cookies.txt")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # API server
    API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))

settings = Settings()
