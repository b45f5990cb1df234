"""Audit logging middleware — records every state-changing request to audit_trail."""


import asyncio
import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from propcomply.core.config import settings
from propcomply.domain.audit import AuditTrail

logger = logging.getLogger(__name__)

# Methods that mutate state
_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

_UUID_LENGTH = 36


def _singular(word: str) -> str:
    if word.endswith("ies"):
        return word[:-3] + "y"
    return word.removesuffix("s")


def infer_entity(path: str) -> tuple[str, str | None]:
    """Map a URL path to ``(entity_type, entity_id)``.

    /api/v1/properties/<id>/certificates  -> ("certificate", None)
    /api/v1/certificates/<id>             -> ("certificate", "<id>")
    """
    parts = [p for p in path.strip("/").split("/") if p]
    if not parts:
        return "unknown", None
    if len(parts[-1]) == _UUID_LENGTH and len(parts) >= 2:
        return _singular(parts[-2]), parts[-1]
    return _singular(parts[-1]), None


class AuditMiddleware(BaseHTTPMiddleware):
    """Logs all write operations.

    Each audit row is written in a background task AFTER the response is
    produced so it never adds latency to the request. Failures in audit
    logging are logged and never raised to the caller.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000)

        if request.method in _WRITE_METHODS:
            asyncio.create_task(
                self._record(request, response.status_code, duration_ms)
            )

        return response

    async def _record(
        self, request: Request, status_code: int, duration_ms: int
    ) -> None:
        """Persist an audit row."""
        try:
            entity_type, entity_id = infer_entity(request.url.path)
            session_factory = request.app.state.session_factory

            async with session_factory() as session:
                session.add(
                    AuditTrail(
                        client_id=settings.default_client_id,
                        ip_address=request.client.host if request.client else None,
                        user_agent=request.headers.get("user-agent"),
                        action=f"{request.method}:{status_code}",
                        entity_type=entity_type,
                        entity_id=entity_id,
                        description=f"{request.method} {request.url.path} → {status_code} ({duration_ms}ms)",
                    )
                )
                await session.commit()
        except Exception as exc:  # pragma: no cover
            logger.warning("Audit write failed for %s %s: %s", request.method, request.url.path, exc)
