"""FastAPI application receiving vote webhooks from the directory."""

import hmac

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..core.exceptions import VoteQueueFullError
from ..parsers.topgg_parser import TopggParser
from .queue import VoteQueue

logger = structlog.get_logger(__name__)

# Methods routed to the handler so that auth is checked before the method
_ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _secret_matches(provided: str | None, secret: str) -> bool:
    """Exact, constant-time comparison of the Authorization header."""
    if provided is None:
        return False
    # Starlette decodes header bytes as latin-1; recover the raw bytes
    return hmac.compare_digest(provided.encode("latin-1"), secret.encode("utf-8"))


def create_webhook_app(secret: str, sink: VoteQueue, path: str = "/") -> FastAPI:
    """
    Create the webhook application.

    Each request to ``path`` is handled as follows:

    1. ``Authorization`` header not exactly ``secret`` -> 401
    2. Any method but POST -> 405; body that is not a vote -> 400
    3. Vote pushed to ``sink``, empty 200 returned (503 if the sink refuses it)

    Args:
        secret: Shared secret configured on the directory's webhook page
        sink: Queue receiving decoded votes
        path: URL path to serve (default: root)

    Returns:
        Configured FastAPI application

    Example:
        >>> queue = VoteQueue()
        >>> app = create_webhook_app("my-webhook-secret", queue)
        >>> # Serve with uvicorn, or test with httpx.ASGITransport(app=app)
    """
    if not secret:
        raise ValueError("Webhook secret must not be empty")
    # HTTP servers strip whitespace around header values
    if secret != secret.strip():
        raise ValueError("Webhook secret must not have leading or trailing whitespace")

    app = FastAPI(
        title="top.gg vote webhook",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.api_route(path, methods=_ROUTED_METHODS, include_in_schema=False)
    async def receive_vote(request: Request) -> Response:
        client_host = request.client.host if request.client else None

        if not _secret_matches(request.headers.get("authorization"), secret):
            logger.warning(
                "webhook_unauthorized",
                method=request.method,
                client=client_host,
            )
            return JSONResponse(status_code=401, content={"detail": "Unauthorized"})

        if request.method != "POST":
            return JSONResponse(
                status_code=405,
                content={"detail": "Method Not Allowed"},
                headers={"Allow": "POST"},
            )

        body = await request.body()
        try:
            vote = TopggParser.parse_webhook_vote(body)
        except ValidationError as e:
            logger.warning(
                "webhook_invalid_payload",
                client=client_host,
                error_count=e.error_count(),
            )
            return JSONResponse(status_code=400, content={"detail": "Invalid vote payload"})

        try:
            sink.put(vote)
        except VoteQueueFullError:
            return JSONResponse(status_code=503, content={"detail": "Vote queue full"})

        logger.info(
            "webhook_vote_received",
            bot=vote.bot,
            user=vote.user,
            kind=vote.kind,
            is_weekend=vote.is_weekend,
        )
        return Response(status_code=200)

    return app
