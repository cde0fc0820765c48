"""REST adapter for the content pinning backend (`/api/pin-image`)."""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from txflow.adapters.api_errors import raise_for_status
from txflow.adapters.http_client import HttpConfig, RetryingSession
from txflow.domain.ports import PinningPort


class PinningRestAdapter(PinningPort):
    """Upload binary content and return the URL the backend pinned it under."""

    def __init__(self, base_url: str, *, upload_timeout_s: int = 60) -> None:
        if not base_url:
            raise ValueError("PinningRestAdapter requires a backend URL")
        self.base_url = base_url.rstrip("/")
        self.cfg = HttpConfig(upload_timeout_s=upload_timeout_s, retries=0)
        self.session = RetryingSession(self.cfg)

    def pin(self, content: bytes, filename: str) -> str:
        url = f"{self.base_url}/api/pin-image"
        files = {"file": (filename or "upload.bin", bytes(content), "application/octet-stream")}
        resp = self.session.post_multipart(url, files=files)
        raise_for_status(resp, "pin")
        metadata_url = self._metadata_url(self._json_dict(resp))
        if not metadata_url:
            raise RuntimeError("Backend did not return a valid metadata URL")
        return metadata_url

    @staticmethod
    def _metadata_url(payload: Dict[str, Any]) -> Optional[str]:
        for key in ("metadataUrl", "metadata_url", "url"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None

    @staticmethod
    def _json_dict(resp: requests.Response) -> Dict[str, Any]:
        try:
            payload = resp.json()
        except Exception:
            raise RuntimeError(f"Invalid JSON response: {getattr(resp, 'text', '')[:400]}")
        if not isinstance(payload, dict):
            raise RuntimeError("Invalid JSON response shape: expected object")
        return payload


__all__ = ["PinningRestAdapter"]
