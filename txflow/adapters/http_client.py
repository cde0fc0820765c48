"""Shared HTTP transport utilities for REST adapters.

This module provides a thin wrapper around ``requests.Session`` so adapter
implementations can share timeout policy, retry behavior, and auth header
construction.

Dependencies:
    - ``requests`` for network I/O.
    - ``txflow.adapters.api_errors.ApiTimeoutError`` for typed transport failures.

Call context:
    - Constructed by ``txflow/adapters/algod_rest.py`` and
      ``txflow/adapters/pinning_rest.py``.
    - Used only inside adapter layer methods; use cases interact through ports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from txflow.adapters.api_errors import ApiTimeoutError

_log = logging.getLogger(__name__)


@dataclass
class HttpConfig:
    """Timeout and retry configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Default timeout in seconds for JSON API calls.
        upload_timeout_s: Default timeout in seconds for multipart uploads.
        retries: Number of retry attempts after the initial idempotent request.
    """
    request_timeout_s: int = 10
    upload_timeout_s: int = 60
    retries: int = 2


class RetryingSession:
    """Shared requests wrapper with auth headers and retry loops for reads.

    Only GETs are retried. POSTs are sent exactly once: a transaction
    submission that timed out may still have reached the node, and resending
    it is the caller's decision.
    """

    def __init__(
        self,
        cfg: HttpConfig,
        *,
        auth_header: Optional[str] = None,
        auth_token: Optional[str] = None,
    ) -> None:
        """Create a session.

        Args:
            cfg: Shared timeout and retry settings.
            auth_header: Header name used to carry ``auth_token`` (e.g.
                ``X-Algo-API-Token``), or ``None``.
            auth_token: Token value, or ``None`` for public endpoints.
        """
        self.session = requests.Session()
        self.cfg = cfg
        self.auth_header = auth_header
        self.auth_token = auth_token

    def _headers(self, accept: str = "application/json", content_type: Optional[str] = None) -> Dict[str, str]:
        headers = {"Accept": accept}
        if self.auth_header and self.auth_token:
            headers[self.auth_header] = self.auth_token
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a GET request with retries on timeout/connectivity failures.

        Raises:
            ApiTimeoutError: If all attempts fail with timeout/connection errors.
        """
        context = f"GET {url}"
        last_err: ApiTimeoutError | None = None
        attempts = self.cfg.retries + 1
        for attempt in range(attempts):
            try:
                return self.session.get(
                    url,
                    params=params,
                    headers=self._headers(),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError):
                _log.debug("GET %s failed (attempt %d/%d)", url, attempt + 1, attempts)
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
        raise last_err

    def post_bytes(
        self,
        url: str,
        *,
        body: bytes,
        content_type: str = "application/x-binary",
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send one raw POST request; never retried.

        Raises:
            ApiTimeoutError: If the request times out or cannot connect.
        """
        try:
            return self.session.post(
                url,
                data=body,
                headers=self._headers(content_type=content_type),
                timeout=timeout or self.cfg.request_timeout_s,
            )
        except (req_exc.Timeout, req_exc.ConnectionError) as exc:
            raise ApiTimeoutError(f"Timeout contacting {url}", context=f"POST {url}") from exc

    def post_multipart(
        self,
        url: str,
        *,
        files: Dict[str, Any],
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send one multipart POST request; never retried.

        Raises:
            ApiTimeoutError: If the request times out or cannot connect.
        """
        try:
            return self.session.post(
                url,
                files=files,
                headers=self._headers(),
                timeout=timeout or self.cfg.upload_timeout_s,
            )
        except (req_exc.Timeout, req_exc.ConnectionError) as exc:
            raise ApiTimeoutError(f"Timeout contacting {url}", context=f"POST {url}") from exc


__all__ = ["HttpConfig", "RetryingSession"]
