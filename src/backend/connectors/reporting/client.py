from __future__ import annotations

import json
import time
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from .config import ReportingConfig


class ReportingHttpError(RuntimeError):
    def __init__(self, status: int, message: str, body: str | None = None):
        super().__init__(f"Reporting HTTP {status}: {message}")
        self.status = status
        self.body = body


def reporting_get(
    config: ReportingConfig,
    path: str,
    *,
    params: dict[str, Any] | None = None,
    timeout_seconds: int = 30,
    max_retries: int = 3,
) -> dict[str, Any]:
    """
    Perform an authenticated GET against the reporting API.

    Retries 429/5xx responses and connection errors with exponential backoff.
    """
    retries = 0
    backoff = 0.5

    while True:
        url = _build_url(config.base_url, path, params)
        req = Request(url, method="GET")
        req.add_header("Accept", "application/json")
        req.add_header("Authorization", f"Bearer {config.api_token}")

        try:
            with urlopen(req, timeout=timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
                return json.loads(raw)
        except HTTPError as exc:
            body = exc.read().decode("utf-8") if exc.fp else None
            status = exc.code

            if status in (429, 500, 502, 503, 504) and retries < max_retries:
                time.sleep(backoff)
                retries += 1
                backoff *= 2
                continue

            raise ReportingHttpError(status, exc.reason, body) from exc
        except URLError as exc:
            if retries < max_retries:
                time.sleep(backoff)
                retries += 1
                backoff *= 2
                continue
            raise ReportingHttpError(0, str(exc)) from exc


def _build_url(base_url: str, path: str, params: dict[str, Any] | None) -> str:
    normalized_path = path if path.startswith("/") else f"/{path}"
    url = f"{base_url.rstrip('/')}{normalized_path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return url
