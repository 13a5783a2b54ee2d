from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from yt_comments.fetch.errors import (
    AggregateFetchError,
    CommandFailedError,
    CommandTimeoutError,
    CommentsDisabledError,
    EmptyResultError,
    ExecutableNotFoundError,
    FetchError,
    FutureEventError,
    MalformedDataError,
    NoLiveChatError,
    NoMessagesFoundError,
)
from yt_comments.schemas import FetchAllResponse, FetchResponse, VideoRequest
from yt_comments.services.fetch import CommentsService

router = APIRouter()

# Checked in order, subclasses before their bases.
_ERROR_STATUS = [
    (FutureEventError, status.HTTP_425_TOO_EARLY),
    (CommentsDisabledError, status.HTTP_404_NOT_FOUND),
    (NoLiveChatError, status.HTTP_404_NOT_FOUND),
    (EmptyResultError, status.HTTP_404_NOT_FOUND),
    (NoMessagesFoundError, status.HTTP_404_NOT_FOUND),
    (MalformedDataError, status.HTTP_502_BAD_GATEWAY),
    (CommandTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (ExecutableNotFoundError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (CommandFailedError, status.HTTP_502_BAD_GATEWAY),
    (AggregateFetchError, status.HTTP_502_BAD_GATEWAY),
]

def error_status(error: FetchError) -> int:
    for error_type, code in _ERROR_STATUS:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR

def to_http_exception(error: FetchError) -> HTTPException:
    return HTTPException(
        status_code=error_status(error),
        detail={"reason": error.code, "message": str(error)},
    )

def get_service() -> CommentsService:
    return CommentsService()

@router.post("/comments", response_model=FetchResponse)
async def fetch_comments(request: VideoRequest, service: CommentsService = Depends(get_service)):
    """Download, parse and format the comments of a video."""
    try:
        path = await run_in_threadpool(service.fetch_comments, request.video_id)
    except FetchError as e:
        raise to_http_exception(e)
    return FetchResponse(video_id=request.video_id, path=str(path))

@router.post("/comments/download", response_model=FetchResponse)
async def download_comments(request: VideoRequest, service: CommentsService = Depends(get_service)):
    """Download the raw comments JSON only."""
    try:
        path = await run_in_threadpool(service.download_comments, request.video_id)
    except FetchError as e:
        raise to_http_exception(e)
    return FetchResponse(video_id=request.video_id, path=str(path))

@router.post("/comments/parse", response_model=FetchResponse)
async def parse_comments(request: VideoRequest, service: CommentsService = Depends(get_service)):
    """Format a previously downloaded comments JSON."""
    try:
        path = await run_in_threadpool(service.parse_comments, request.video_id)
    except FetchError as e:
        raise to_http_exception(e)
    return FetchResponse(video_id=request.video_id, path=str(path))

@router.post("/livechat", response_model=FetchResponse)
async def fetch_live_chat(request: VideoRequest, service: CommentsService = Depends(get_service)):
    """Download, parse and format the live chat replay of a video."""
    try:
        path = await run_in_threadpool(service.fetch_live_chat, request.video_id)
    except FetchError as e:
        raise to_http_exception(e)
    return FetchResponse(video_id=request.video_id, path=str(path))

@router.post("/fetch-all", response_model=FetchAllResponse)
async def fetch_all(request: VideoRequest, service: CommentsService = Depends(get_service)):
    """
    Fetch comments and live chat together.

    A side that failed is returned as null with its reason under ``warnings``.
    Only when both sides fail does the request fail.
    """
    try:
        result = await run_in_threadpool(service.fetch_all, request.video_id)
    except FetchError as e:
        raise to_http_exception(e)
    return FetchAllResponse(
        video_id=result.video_id,
        comments=str(result.comments) if result.comments else None,
        livechat=str(result.livechat) if result.livechat else None,
        warnings={side: str(error) for side, error in result.errors.items()},
    )

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "YouTube Comments Fetcher"}
