import logging
import os
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import register_routes
from .logging import configure_logging, LogLevels
from .rate_limiting import limiter, rate_limit_exceeded_handler
from .storage.dependency import init_storage

load_dotenv()

configure_logging(os.getenv("LOG_LEVEL", LogLevels.info))


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_storage()
    yield


app = FastAPI(title="Redhead", lifespan=lifespan)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Register routes
register_routes(app)

# --- Error responses ---
# Every failure reaches the client as {"message": "..."}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        problems.append(f"{location}: {error['msg']}" if location else error["msg"])
    logging.info(f"Rejected invalid request to {request.url.path}: {problems}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request data: " + "; ".join(problems)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logging.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration = (time.perf_counter() - start) * 1000
        logging.info(
            f"{request.method} {request.url.path} {response.status_code} in {duration:.0f}ms"
        )
    return response


# --- CORS Configuration ---

# Comma-separated list, e.g. ALLOWED_ORIGINS="https://redhead.example.com"
allowed_origins_str = os.getenv("ALLOWED_ORIGINS", "")
origins = [
    origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()
]

# Fallback for local development if no env var is set
if not origins and os.getenv("APP_ENV") != "production":
    origins = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:5173",
    ]
    logging.warning(
        f"ALLOWED_ORIGINS not set. Using default development origins: {origins}"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def run() -> None:
    import uvicorn

    port = int(os.getenv("PORT", "5000"))
    uvicorn.run("redhead.main:app", host="0.0.0.0", port=port)
