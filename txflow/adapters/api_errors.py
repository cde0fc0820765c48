from __future__ import annotations

from typing import Any, Optional


class ApiError(RuntimeError):
    """Base class for REST adapter failures (ledger node or pinning backend)."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        reason: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.reason = reason
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx; for submissions this is the ledger rejecting the transaction."""


class ApiServerError(ApiError):
    """HTTP 5xx from the remote service."""


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(self, message: str, *, context: Optional[str] = None) -> None:
        super().__init__(message, context=context)


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of an error body without raising."""
    try:
        return resp.json()
    except Exception:
        snippet = getattr(resp, "text", "")
        if not snippet:
            return None
        return snippet[:400]


def first_string(payload: Any) -> Optional[str]:
    """Return the first human-readable message found in an error body."""
    if isinstance(payload, str):
        return payload.strip() or None
    if isinstance(payload, dict):
        for key in ("message", "detail", "error", "title"):
            candidate = first_string(payload.get(key))
            if candidate:
                return candidate
    if isinstance(payload, list):
        for item in payload:
            candidate = first_string(item)
            if candidate:
                return candidate
    return None


def build_error_message(ctx: str, status: int, payload: Any) -> str:
    detail = first_string(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


def raise_for_status(resp: Any, ctx: str) -> None:
    """Raise a typed adapter error for non-2xx responses.

    ``reason`` carries the remote service's raw message so use cases can show
    the ledger's own wording (e.g. an opt-in or balance failure).
    """
    status = resp.status_code
    if 200 <= status < 300:
        return
    payload = parse_error_payload(resp)
    message = build_error_message(ctx, status, payload)
    reason = first_string(payload)
    if 400 <= status < 500:
        raise ApiClientError(message, status=status, reason=reason, payload=payload, context=ctx)
    if 500 <= status < 600:
        raise ApiServerError(message, status=status, reason=reason, payload=payload, context=ctx)
    raise ApiError(message, status=status, reason=reason, payload=payload, context=ctx)


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiServerError",
    "ApiTimeoutError",
    "build_error_message",
    "first_string",
    "parse_error_payload",
    "raise_for_status",
]
