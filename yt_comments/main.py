import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from contextlib import asynccontextmanager
from yt_comments.api.routes import router
from yt_comments.core.config import settings
from yt_comments.core.logging_config import configure_logging

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Prepare the output directory on startup.
    """
    configure_logging()
    logger.info("Initializing YouTube Comments Fetcher...")
    Path(settings.OUTPUT_DIRECTORY).mkdir(parents=True, exist_ok=True)
    logger.info("Writing output to %s", settings.OUTPUT_DIRECTORY)

    yield

    logger.info("Shutting down YouTube Comments Fetcher...")

app = FastAPI(
    title="YouTube Comments Fetcher",
    description="API for dumping YouTube comments and live chat replays to text files",
    version="1.0.0",
    lifespan=lifespan
)

# Include API routes
app.include_router(router)

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "service": "YouTube Comments Fetcher",
        "version": "1.0.0",
        "endpoints": {
            "comments": "POST /comments",
            "download_comments": "POST /comments/download",
            "parse_comments": "POST /comments/parse",
            "livechat": "POST /livechat",
            "fetch_all": "POST /fetch-all",
            "health": "GET /health"
        }
    }

def main(host: Optional[str] = None, port: Optional[int] = None):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "yt_comments.main:app",
        host=host or settings.API_HOST,
        port=port or settings.API_PORT,
    )

if __name__ == "__main__":
    main()
