from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response


logger = logging.getLogger(__name__)


class ServiceError(RuntimeError):
    """Raised when an external service cannot be reached or answers badly."""


class NotFound(LookupError):
    """Raised when a place search returns no candidates."""


@dataclass
class RequestConfig:
    timeout: Optional[float] = None


class HttpProvider:
    """Base class for the JSON-over-HTTP services the dashboard talks to."""

    headers: dict = {}

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def _handle_response(self, response: Response) -> Response:
        if response.status_code >= 400:
            self._log.error("Service returned %s: %s", response.status_code, response.text[:200])
            raise ServiceError(f"HTTP {response.status_code}")
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        headers = dict(self.headers)
        headers.update(kwargs.pop("headers", None) or {})
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise ServiceError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise ServiceError("request failed") from exc
        return self._handle_response(response)

    def _get_json(self, url: str, params: dict) -> Any:
        response = self._request("GET", url, params=params)
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise ServiceError("invalid json") from exc


__all__ = ["HttpProvider", "NotFound", "RequestConfig", "ServiceError"]
