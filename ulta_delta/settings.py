from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional


DEFAULT_API_BASE_URL = "https://api.ultvs.click"
DEFAULT_USER_AGENT = "ulta-android/1.2.2.37"


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        timeout = float(value)
    except ValueError as exc:
        raise ValueError(f"Invalid timeout '{value}': expected a number of seconds") from exc
    if timeout <= 0:
        raise ValueError(f"Invalid timeout '{value}': must be greater than zero")
    return timeout


@dataclass(frozen=True)
class ApiSettings:
    base_url: str = DEFAULT_API_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    # None keeps the request blocking until the server answers.
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "ApiSettings":
        return cls(
            base_url=(os.getenv("ULTA_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
            user_agent=os.getenv("ULTA_USER_AGENT") or DEFAULT_USER_AGENT,
            timeout=_parse_timeout(os.getenv("ULTA_HTTP_TIMEOUT")),
        )

    def override(
        self,
        *,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[str] = None,
    ) -> "ApiSettings":
        changes: dict[str, object] = {}
        if base_url:
            changes["base_url"] = base_url.rstrip("/")
        if user_agent:
            changes["user_agent"] = user_agent
        if timeout is not None:
            changes["timeout"] = _parse_timeout(timeout)
        return replace(self, **changes)
