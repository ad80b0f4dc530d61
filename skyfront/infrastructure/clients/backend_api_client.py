"""Airline backend API client for making authenticated requests."""
import logging
import time
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from skyfront.config.settings import Config
from skyfront.domain.exceptions import (
    ApiError,
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
)
from skyfront.middleware.monitoring import track_api_call


logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
DEFAULT_ERROR_MESSAGE = "An error occurred"

_STATUS_ERRORS = {
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
}


def mask_token(token: Optional[str]) -> str:
    """Mask a bearer token for logging."""
    if not token:
        return "<none>"
    return f"{token[:6]}***" if len(token) > 6 else "***"


class BackendAPIClient:
    """
    Client for the airline booking REST backend.

    Handles bearer authentication, response envelopes and error
    normalisation. One instance is shared by every resource service.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_total: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        enable_metrics: bool = False
    ):
        """
        Initialize the backend API client.

        Args:
            base_url: Base URL of the backend API (defaults to Config value)
            timeout: Per-request timeout in seconds (defaults to Config value)
            retry_total: Retries for idempotent requests on 429/502/503/504
            retry_backoff: Backoff factor between retries
            enable_metrics: Record Prometheus metrics for each call
        """
        self.base_url = (base_url or Config.API_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else Config.API_TIMEOUT
        self.enable_metrics = enable_metrics
        self._logger = logging.getLogger(__name__)

        # Create session with retry strategy; POST/PATCH are never retried
        self.session = requests.Session()
        retry_strategy = Retry(
            total=Config.API_RETRY_TOTAL if retry_total is None else retry_total,
            backoff_factor=Config.API_RETRY_BACKOFF if retry_backoff is None else retry_backoff,
            status_forcelist=[429, 502, 503, 504],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _build_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Drop empty query values and render booleans the way the backend expects."""
        if not params:
            return None
        cleaned = {}
        for key, value in params.items():
            if value is None or value == "":
                continue
            if isinstance(value, bool):
                value = str(value).lower()
            elif hasattr(value, "value"):
                value = value.value
            cleaned[key] = value
        return cleaned or None

    def _send(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json_data: Any = None,
        accept: str = "application/json"
    ) -> requests.Response:
        """
        Make an HTTP request and map every failure to ApiError.

        Raises:
            ApiError: If the request fails or the server returns an error status
        """
        url = self._build_url(path)
        headers = {"Accept": accept}
        if json_data is not None:
            headers["Content-Type"] = "application/json"
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._logger.debug(f"Request: {method} {url} params={params} token={mask_token(token)}")
        started = time.perf_counter()
        outcome = "success"
        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=headers,
                params=self._clean_params(params),
                json=json_data,
                timeout=self.timeout,
            )
            self._logger.debug(f"Status Code: {response.status_code}")
            response.raise_for_status()
            return response
        except requests.exceptions.HTTPError as e:
            outcome = "http_error"
            error = self._http_error(e.response)
            self._logger.warning(f"HTTP error {error.status_code}: {method} {url} - {error.message}")
            raise error from e
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            outcome = "network_error"
            self._logger.error(f"API request failed: {method} {url} - {e}")
            raise ApiError("NETWORK_ERROR", NETWORK_ERROR_MESSAGE, details=str(e)) from e
        except requests.exceptions.RequestException as e:
            outcome = "network_error"
            self._logger.error(f"API request failed: {method} {url} - {e}")
            raise ApiError("UNKNOWN_ERROR", str(e) or "An unknown error occurred", details=str(e)) from e
        finally:
            if self.enable_metrics:
                track_api_call(method, outcome, time.perf_counter() - started)

    @staticmethod
    def _http_error(response: Optional[requests.Response]) -> ApiError:
        """Build an ApiError carrying the server's own message."""
        if response is None:
            return ApiError("UNKNOWN_ERROR", DEFAULT_ERROR_MESSAGE)
        status = response.status_code
        try:
            data = response.json()
        except ValueError:
            data = None
        message = DEFAULT_ERROR_MESSAGE
        if isinstance(data, dict):
            message = data.get("message") or data.get("error") or DEFAULT_ERROR_MESSAGE
        error_class = _STATUS_ERRORS.get(status, ApiError)
        return error_class(f"HTTP_{status}", message, status_code=status, details=data)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as json_error:
            raise ApiError(
                "UNKNOWN_ERROR",
                f"Expected JSON response but got: {response.text[:200]}",
                status_code=response.status_code,
            ) from json_error

    @staticmethod
    def _unwrap(body: Any, status_code: Optional[int] = None) -> Any:
        """Strip the ``{success, data, message}`` envelope when present."""
        if isinstance(body, dict) and "success" in body:
            if not body.get("success"):
                errors = body.get("errors") or []
                message = body.get("message") or (errors[0] if errors else "Request failed")
                raise ApiError("REQUEST_FAILED", message, status_code=status_code, details=body)
            return body.get("data")
        return body

    def request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json_data: Any = None
    ) -> Any:
        """
        Make a request and return the unwrapped ``data`` of the response.

        Raises:
            ApiError: If the request fails
        """
        response = self._send(method, path, token=token, params=params, json_data=json_data)
        return self._unwrap(self._decode(response), response.status_code)

    def get(self, path: str, token: Optional[str] = None, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, token=token, params=params)

    def post(self, path: str, token: Optional[str] = None, json_data: Any = None) -> Any:
        return self.request("POST", path, token=token, json_data=json_data)

    def put(self, path: str, token: Optional[str] = None, json_data: Any = None) -> Any:
        return self.request("PUT", path, token=token, json_data=json_data)

    def patch(self, path: str, token: Optional[str] = None, json_data: Any = None) -> Any:
        return self.request("PATCH", path, token=token, json_data=json_data)

    def delete(self, path: str, token: Optional[str] = None) -> Any:
        return self.request("DELETE", path, token=token)

    def get_paginated(
        self,
        path: str,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Fetch a paginated listing.

        Returns:
            ``{"items": [...], "pagination": {...} | None}``. Both the flat
            ``{data: [...], pagination}`` and the nested
            ``{data: {data: [...], pagination}}`` shapes are accepted.
        """
        response = self._send("GET", path, token=token, params=params)
        body = self._decode(response)
        if isinstance(body, list):
            return {"items": body, "pagination": None}
        if not isinstance(body, dict):
            return {"items": [], "pagination": None}

        pagination = body.get("pagination")
        data = self._unwrap(body, response.status_code) if "success" in body else body.get("data", body)
        if isinstance(data, dict):
            pagination = data.get("pagination") or pagination
            data = data.get("data", data.get("content", []))
        return {"items": data or [], "pagination": pagination}

    def get_bytes(self, path: str, token: Optional[str] = None) -> bytes:
        """Download a binary document (e.g. a PDF manifest)."""
        response = self._send("GET", path, token=token, accept="*/*")
        return response.content
