"""Runtime settings for the command line front end.

Values come from ``TXFLOW_*`` environment variables. The conventional
``ALGOD_SERVER``/``ALGOD_PORT``/``ALGOD_TOKEN`` names are honored as
fallbacks so an existing node environment works unchanged.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from txflow.domain.entities import MAX_GROUP_SIZE

DEFAULT_ALGOD_SERVER = "https://testnet-api.algonode.cloud"
DEFAULT_EXPLORER_BASE_URL = "https://lora.algokit.io/testnet"
DEFAULT_PINNING_BASE_URL = "http://localhost:3001"
PINNING_PORT = 3001

_CODESPACES_HOST = re.compile(r"-\d+\.app\.github\.dev$")


def resolve_pinning_base(env_value: Optional[str] = None, host: Optional[str] = None) -> str:
    """Pick the pinning backend root.

    An explicit value wins. A GitHub Codespaces forwarded host is rewritten to
    the backend's forwarded port; anything else falls back to localhost.
    """
    explicit = (env_value or "").strip()
    if explicit:
        return explicit.rstrip("/")
    host = (host or "").strip()
    if host.endswith(".app.github.dev"):
        return "https://" + _CODESPACES_HOST.sub(f"-{PINNING_PORT}.app.github.dev", host)
    return DEFAULT_PINNING_BASE_URL


@dataclass(frozen=True)
class Settings:
    """Typed runtime settings, no I/O here."""

    algod_server: str = DEFAULT_ALGOD_SERVER
    algod_port: str = ""
    algod_token: str = ""
    explorer_base_url: str = DEFAULT_EXPLORER_BASE_URL
    pinning_base_url: str = DEFAULT_PINNING_BASE_URL
    request_timeout_s: int = 10
    upload_timeout_s: int = 60
    retries: int = 2
    wait_rounds: int = 4
    max_group_size: int = MAX_GROUP_SIZE

    @property
    def algod_url(self) -> str:
        server = self.algod_server.strip().rstrip("/")
        port = str(self.algod_port).strip()
        return f"{server}:{port}" if port else server

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, *, host: Optional[str] = None) -> "Settings":
        """Build settings from an environment mapping (``os.environ`` by default)."""
        env = os.environ if environ is None else environ

        def pick(*names: str) -> Optional[str]:
            for name in names:
                value = env.get(name)
                if value is not None and value.strip():
                    return value.strip()
            return None

        values: dict = {}
        for key, names in (
            ("algod_server", ("TXFLOW_ALGOD_SERVER", "ALGOD_SERVER")),
            ("algod_port", ("TXFLOW_ALGOD_PORT", "ALGOD_PORT")),
            ("algod_token", ("TXFLOW_ALGOD_TOKEN", "ALGOD_TOKEN")),
            ("explorer_base_url", ("TXFLOW_EXPLORER_URL",)),
        ):
            value = pick(*names)
            if value is not None:
                values[key] = value
        for key, name in (
            ("request_timeout_s", "TXFLOW_REQUEST_TIMEOUT_S"),
            ("upload_timeout_s", "TXFLOW_UPLOAD_TIMEOUT_S"),
            ("retries", "TXFLOW_RETRIES"),
            ("wait_rounds", "TXFLOW_WAIT_ROUNDS"),
        ):
            value = pick(name)
            if value is not None:
                values[key] = _coerce_int(key, value)
        values["pinning_base_url"] = resolve_pinning_base(
            pick("TXFLOW_PINNING_URL"),
            host if host is not None else env.get("TXFLOW_HOST"),
        )
        return cls(**values).validate()

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with non-``None`` overrides applied and validated."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).validate()

    def validate(self) -> "Settings":
        """Raise ``ValueError`` for unusable values; return ``self`` otherwise."""
        for name in ("algod_server", "explorer_base_url", "pinning_base_url"):
            url = str(getattr(self, name) or "").strip()
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"{name} must be an http(s) URL.")
        port = str(self.algod_port).strip()
        if port and (not port.isdigit() or not 0 < int(port) < 65536):
            raise ValueError("algod_port must be a TCP port number.")
        for name in ("request_timeout_s", "upload_timeout_s", "wait_rounds"):
            if _coerce_int(name, getattr(self, name)) <= 0:
                raise ValueError(f"{name} must be positive.")
        if _coerce_int("retries", self.retries) < 0:
            raise ValueError("retries must be non-negative.")
        if not 1 <= _coerce_int("max_group_size", self.max_group_size) <= MAX_GROUP_SIZE:
            raise ValueError(f"max_group_size must be between 1 and {MAX_GROUP_SIZE}.")
        return self


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ValueError(f"{name} must be an integer.") from exc
    raise ValueError(f"{name} must be an integer.")


__all__ = [
    "DEFAULT_ALGOD_SERVER",
    "DEFAULT_EXPLORER_BASE_URL",
    "DEFAULT_PINNING_BASE_URL",
    "Settings",
    "resolve_pinning_base",
]
