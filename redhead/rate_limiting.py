import os
import logging
from dotenv import load_dotenv
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

load_dotenv()

GLOBAL_RATE_LIMIT = os.getenv("GLOBAL_RATE_LIMIT", "1000 per 15 minutes")
GENERATE_RATE_LIMIT = os.getenv("GENERATE_RATE_LIMIT", "20/minute")

limiter = Limiter(key_func=get_remote_address, default_limits=[GLOBAL_RATE_LIMIT])


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Renders slowapi's 429 in the same ``{"message": ...}`` shape as other errors."""
    logging.warning(f"Rate limit exceeded for {request.url.path}: {exc.detail}")
    if request.url.path.startswith("/api/generate"):
        message = "Generation rate limit exceeded, please wait a moment"
    else:
        message = "Too many requests, please try again later"
    return JSONResponse(status_code=429, content={"message": message})
