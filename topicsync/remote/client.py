"""HTTP client for the topicsync backend.

Every backend response is an envelope ``{"err_code", "msg", "data"}``;
``err_code == 0`` means success. Business failures, HTTP status failures
and transport failures all surface as ApiError so repos have one failure
type to handle.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from topicsync.protocols import ApiError, AuthExpiredError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

ERR_CODE_OK = 0
ERR_CODE_LOGIN_EXPIRED = -100004


class ApiClient:
    """Thin wrapper around ``httpx.Client`` that unwraps response envelopes.

    Args:
        backend_url: Base URL of the backend.
        auth_token: Bearer token sent with every request.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        backend_url: str,
        auth_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.backend_url = backend_url.rstrip("/")
        self._auth_token = auth_token
        self._client = httpx.Client(
            base_url=self.backend_url,
            timeout=timeout,
            transport=transport,
        )

    def set_token(self, auth_token: Optional[str]) -> None:
        self._auth_token = auth_token

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("POST", path, json=payload or {})

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ApiError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            logger.warning(f"{method} {path} returned HTTP {response.status_code}")
            raise ApiError(
                f"Backend returned HTTP {response.status_code} for {path}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(
                f"Invalid JSON from {path}", status_code=response.status_code
            ) from e

        if not isinstance(body, dict) or "err_code" not in body:
            raise ApiError(f"Malformed response envelope from {path}")

        err_code = body.get("err_code")
        if err_code == ERR_CODE_OK:
            logger.debug(f"{method} {path} ok")
            return body.get("data")

        msg = body.get("msg") or f"Request to {path} failed"
        logger.info(f"{method} {path} returned err_code={err_code}: {msg}")
        if err_code == ERR_CODE_LOGIN_EXPIRED:
            raise AuthExpiredError(msg, err_code=err_code, status_code=response.status_code)
        raise ApiError(msg, err_code=err_code, status_code=response.status_code)

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
