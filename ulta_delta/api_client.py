from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Optional

import httpx

from ulta_delta.errors import MissingApiKeyError, RemoteError
from ulta_delta.settings import ApiSettings


logger = logging.getLogger(__name__)

DOWNLOAD_PATH = "/client-api/v1/download-awg-key"


def build_client(settings: ApiSettings) -> httpx.Client:
    return httpx.Client(timeout=httpx.Timeout(settings.timeout))


def _mask(api_key: str) -> str:
    if len(api_key) <= 4:
        return "*" * len(api_key)
    return api_key[:4] + "*" * (len(api_key) - 4)


def _extract_config_text(response: httpx.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        return response.text

    if isinstance(body, str):
        return body
    if isinstance(body, dict) and body.get("data"):
        data = body["data"]
        if isinstance(data, str):
            return data
        return json.dumps(data, indent=2, ensure_ascii=False)

    message = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("localized_message")
    raise RemoteError(f"API error: {message or 'Unknown error'}", status_code=response.status_code)


def fetch_config(
    api_key: str,
    *,
    settings: Optional[ApiSettings] = None,
    client: Optional[httpx.Client] = None,
) -> str:
    """Exchange `api_key` for the device config text.

    A passed-in `client` is left open for the caller; otherwise a client is
    built from `settings` and closed before returning.
    """
    if not api_key:
        raise MissingApiKeyError("API key is required")

    settings = settings or ApiSettings.from_env()
    url = f"{settings.base_url}{DOWNLOAD_PATH}"
    headers = {
        "X-Device-Id": str(uuid.uuid4()),
        "User-Agent": settings.user_agent,
    }

    owns_client = client is None
    http = client if client is not None else build_client(settings)
    logger.info("Fetching config for key %s from %s", _mask(api_key), settings.base_url)
    try:
        response = http.get(url, params={"public_request_id": api_key}, headers=headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        raise RemoteError(f"HTTP Error: {status} {exc.response.reason_phrase}", status_code=status) from exc
    except httpx.HTTPError as exc:
        raise RemoteError(f"HTTP Error: {exc}") from exc
    finally:
        if owns_client:
            http.close()

    return _extract_config_text(response)
