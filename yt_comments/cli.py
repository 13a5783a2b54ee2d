"""CLI entry point for dumping YouTube comments and live chat."""

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

from yt_comments.core.logging_config import configure_logging
from yt_comments.fetch.base import DownloaderConfig
from yt_comments.fetch.errors import FetchError
from yt_comments.fetch.utils import INVALID_VIDEO_ID_MESSAGE, is_valid_video_id, normalize_video_id
from yt_comments.services.fetch import CommentsService

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yt-comments",
        description="Dump YouTube comments and live chat replays to text files",
        allow_abbrev=False,
    )
    parser.add_argument("--output-dir", help="Directory for downloaded and formatted files")
    parser.add_argument("--yt-dlp", dest="executable", help="Path to the yt-dlp executable")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for yt-dlp (default: 300)")
    parser.add_argument("--cookies-dir", help="Directory containing an optional cookies.txt")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, help_text in [
        ("download-comments", "Download comments to a JSON file"),
        ("parse-comments", "Format a previously downloaded comments JSON file"),
        ("fetch-comments", "Download comments and save them to a text file"),
        ("fetch-livechat", "Download the live chat replay and save it to a text file"),
        ("fetch-all", "Fetch both comments and live chat into separate text files"),
    ]:
        sub = subparsers.add_parser(name, help=help_text, allow_abbrev=False)
        sub.add_argument(
            "video_id", nargs="?",
            help="The YouTube video ID (prefix with -- if it starts with -)",
        )

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Bind address")
    serve.add_argument("--port", type=int, help="Bind port")
    return parser

def build_service(args: argparse.Namespace) -> CommentsService:
    config = DownloaderConfig.from_settings(
        output_directory=args.output_dir,
        executable=args.executable,
        timeout=args.timeout,
        cookies_path=args.cookies_dir,
    )
    return CommentsService(config)

def run_fetch_all(service: CommentsService, video_id: str) -> int:
    result = service.fetch_all(video_id)
    if result.comments:
        print(f"Comments saved to: {result.comments}")
    else:
        print(f"WARNING: Could not fetch comments for this video. {result.errors.get('comments', '')}".rstrip())
    if result.livechat:
        print(f"Live chat saved to: {result.livechat}")
    else:
        print(f"WARNING: Could not fetch live chat for this video. {result.errors.get('livechat', '')}".rstrip())
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    # Ids starting with "-" must be passed as "--<id>"; keep argparse from
    # reading them as options.
    parser = build_parser()
    args, extra = parser.parse_known_args(argv)
    if args.command != "serve" and args.video_id is None and len(extra) == 1:
        args.video_id = extra.pop()
    if extra:
        parser.error(f"unrecognized arguments: {' '.join(extra)}")
    if args.command != "serve" and args.video_id is None:
        parser.error("the following arguments are required: video_id")

    configure_logging(args.log_level)

    if args.command == "serve":
        from yt_comments.main import main as run_api
        run_api(host=args.host, port=args.port)
        return 0

    video_id = normalize_video_id(args.video_id)
    if not is_valid_video_id(video_id):
        print(f"ERROR: {INVALID_VIDEO_ID_MESSAGE}", file=sys.stderr)
        return 1

    service = build_service(args)
    actions: Dict[str, Callable[[], object]] = {
        "download-comments": lambda: f"Comments downloaded and saved to: {service.download_comments(video_id)}",
        "parse-comments": lambda: f"Comments parsed and saved to: {service.parse_comments(video_id)}",
        "fetch-comments": lambda: f"Comments saved to: {service.fetch_comments(video_id)}",
        "fetch-livechat": lambda: f"Live chat saved to: {service.fetch_live_chat(video_id)}",
    }

    logger.info("Running %s for video ID: %s", args.command, video_id)
    try:
        if args.command == "fetch-all":
            return run_fetch_all(service, video_id)
        print(actions[args.command]())
        return 0
    except FetchError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

if __name__ == "__main__":
    sys.exit(main())
