"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.routes import game
from blackjack.errors import (
    InsufficientBalanceError,
    InvalidBetError,
    InvalidTransitionError,
)
from config import config

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _bet_error_handler(
    request: Request, exc: InvalidBetError | InsufficientBalanceError
) -> JSONResponse:
    """Rejected bets are shown to the player; state is unchanged."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def _transition_error_handler(request: Request, exc: InvalidTransitionError) -> JSONResponse:
    """Handle commands sent in the wrong phase."""
    logger.warning("%s: %s", request.url.path, exc)
    return JSONResponse(status_code=409, content={"detail": str(exc)})


app = FastAPI(
    title="Blackjack Table",
    description="Single-player blackjack round engine API",
    version="0.1.0",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(InvalidBetError, _bet_error_handler)
app.add_exception_handler(InsufficientBalanceError, _bet_error_handler)
app.add_exception_handler(InvalidTransitionError, _transition_error_handler)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(game.router, prefix="/api/game", tags=["game"])
