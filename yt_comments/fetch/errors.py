"""
Failure taxonomy for comment and live chat fetches.

Every failure raised by the downloader, the parsers or the orchestrator is a
``FetchError`` subclass carrying a stable ``code`` and a message that tells the
user what happened and, where possible, what to do about it.
"""
import re
from typing import Callable, Dict, List, Optional, Tuple

from yt_comments.fetch.base import FetchKind

class FetchError(Exception):
    """Base class for every classified fetch failure."""

    code = "fetch_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class FutureEventError(FetchError):
    """Video is a scheduled live event with no known start time."""

    code = "future_event"

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message or "This video is a future live event. Comments are not available yet."
        )

class FutureEventHoursError(FutureEventError):
    code = "future_event_hours"

    def __init__(self, hours: int):
        self.hours = hours
        unit = "hour" if hours == 1 else "hours"
        super().__init__(
            f"This video is a future live event that will begin in {hours} {unit}. "
            "Comments are not available yet."
        )

class FutureEventMinutesError(FutureEventError):
    code = "future_event_minutes"

    def __init__(self, minutes: int):
        self.minutes = minutes
        unit = "minute" if minutes == 1 else "minutes"
        super().__init__(
            f"This video is a future live event that will begin in {minutes} {unit}. "
            "Comments are not available yet."
        )

class CommentsDisabledError(FetchError):
    code = "comments_disabled"

    def __init__(self):
        super().__init__("Comments are disabled for this video.")

class NoLiveChatError(FetchError):
    code = "no_live_chat"

    def __init__(self):
        super().__init__(
            "This video has no live chat replay. Only finished live streams and "
            "premieres with chat enabled have one."
        )

class EmptyResultError(FetchError):
    """The downloader reported success but produced no data file."""

    code = "empty_result"

class MalformedDataError(FetchError):
    code = "malformed_data"

class NoMessagesFoundError(FetchError):
    code = "no_messages_found"

    def __init__(self, message: str = "No chat messages found in the downloaded live chat data."):
        super().__init__(message)

class CommandFailedError(FetchError):
    """The downloader exited with a failure nothing more specific matched."""

    code = "command_failed"

    def __init__(self, exit_code: Optional[int], stderr: str, message: Optional[str] = None):
        self.exit_code = exit_code
        self.stderr = stderr
        if message is None:
            message = f"Failed to execute yt-dlp: {describe_exit_code(exit_code)}"
            if stderr.strip():
                message += f"\n\nError Output: {stderr.strip()}"
        super().__init__(message)

class CommandTimeoutError(CommandFailedError):
    code = "command_timeout"

    def __init__(self, timeout: float, stderr: str = ""):
        self.timeout = timeout
        super().__init__(
            None,
            stderr,
            message=f"yt-dlp did not finish within {timeout:g} seconds and was terminated.",
        )

class ExecutableNotFoundError(CommandFailedError):
    code = "executable_not_found"

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(
            None,
            "",
            message=(
                f"Could not run '{executable}'. Install yt-dlp or set YOUTUBE_DL_PATH "
                "to the location of the executable."
            ),
        )

class AggregateFetchError(FetchError):
    """Both the comments and the live chat fetch failed for one video."""

    code = "aggregate_failure"

    def __init__(self, video_id: str, errors: Optional[Dict[str, FetchError]] = None):
        self.video_id = video_id
        self.errors = errors or {}
        message = f"Could not fetch comments or live chat for video {video_id}."
        for side, error in self.errors.items():
            message += f"\n- {side}: {error}"
        super().__init__(message)

_SIGNAL_NAMES = {
    1: "Hangup",
    2: "Interrupt",
    9: "Killed",
    15: "Terminated",
}

def describe_exit_code(exit_code: Optional[int]) -> str:
    """Human readable text for a process exit status."""
    if exit_code is None:
        return "Unknown error"
    if exit_code < 0:
        name = _SIGNAL_NAMES.get(-exit_code, "signal")
        return f"{name} (signal {-exit_code})"
    if exit_code == 1:
        return "General error (exit status 1)"
    if exit_code == 2:
        return "Misuse of command (exit status 2)"
    return f"Exit status {exit_code}"

# Ordered: the first matching rule wins.
_Rule = Tuple[re.Pattern, Callable[[re.Match], FetchError], Tuple[FetchKind, ...]]

_BOTH = (FetchKind.COMMENTS, FetchKind.LIVE_CHAT)

CLASSIFICATION_RULES: List[_Rule] = [
    (
        re.compile(r"This live event will begin in (\d+) hours?"),
        lambda m: FutureEventHoursError(int(m.group(1))),
        _BOTH,
    ),
    (
        re.compile(r"This live event will begin in (\d+) minutes?"),
        lambda m: FutureEventMinutesError(int(m.group(1))),
        _BOTH,
    ),
    (
        re.compile(r"This live event will begin"),
        lambda m: FutureEventError(),
        _BOTH,
    ),
    (
        re.compile(r"comments are disabled", re.IGNORECASE),
        lambda m: CommentsDisabledError(),
        _BOTH,
    ),
    (
        re.compile(
            r"no live ?chat|doesn't have (?:a )?live ?chat"
            r"|There are no subtitles for the requested languages",
            re.IGNORECASE,
        ),
        lambda m: NoLiveChatError(),
        (FetchKind.LIVE_CHAT,),
    ),
]

def classify_error(stderr: str, exit_code: Optional[int], kind: FetchKind) -> FetchError:
    """
    Map the diagnostic output of a failed downloader run to a typed failure.

    Rules are evaluated top to bottom and the first match wins, so a future
    live event takes priority over anything else the output may mention.
    """
    text = stderr or ""
    for pattern, build, kinds in CLASSIFICATION_RULES:
        if kind not in kinds:
            continue
        match = pattern.search(text)
        if match:
            return build(match)
    return CommandFailedError(exit_code, text)
