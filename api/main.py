"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.routes import account, game
from config import config
from core.exceptions import (
    BlackjackError,
    DeckExhausted,
    InsufficientFunds,
    InvalidBet,
    InvalidTransition,
    UnknownCurrency,
)

logging.basicConfig(level=config.log.level, format=config.log.format)
logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)

# HTTP status for each rejected game operation
ERROR_STATUS: dict[type[BlackjackError], int] = {
    InvalidTransition: 409,
    DeckExhausted: 409,
    InsufficientFunds: 400,
    UnknownCurrency: 400,
    InvalidBet: 400,
}


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _game_error_handler(request: Request, exc: BlackjackError) -> JSONResponse:
    """Report a rejected game operation to the caller."""
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        400,
    )
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


app = FastAPI(
    title="Blackjack Table",
    description="Blackjack game service with per-game sessions and balances",
    version="0.1.0",
)

# Add rate limiter to app state and exception handlers
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(BlackjackError, _game_error_handler)

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


# Include routers
app.include_router(account.router, prefix="/api/account", tags=["account"])
app.include_router(game.router, prefix="/api/game", tags=["game"])


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log.level.lower(),
    )


if __name__ == "__main__":
    run()
