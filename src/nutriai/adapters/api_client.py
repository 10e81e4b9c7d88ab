"""REST client for the NutriAI backend."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from nutriai.errors import (
    HTTP_UNAUTHORIZED,
    ApiError,
    ApiResponseError,
    RequestTimeoutError,
    UnauthorizedError,
)
from nutriai.services.storage import TOKEN_KEY, KeyValueStore

_logger = logging.getLogger(__name__)

JsonBody = dict[str, object]


class ApiClient(Protocol):
    """Interface for backend calls; failures raise ``ApiError``."""

    async def get(
        self,
        path: str,
        params: dict[str, object] | None = None,
        *,
        demo_token: bool = False,
    ) -> JsonBody:
        """Fetch a JSON resource."""

    async def post(
        self,
        path: str,
        body: object | None = None,
        *,
        timeout: float | None = None,
        demo_token: bool = False,
    ) -> JsonBody:
        """Send a JSON body."""

    async def put(self, path: str, body: object | None = None) -> JsonBody:
        """Replace a resource."""

    async def delete(self, path: str) -> JsonBody:
        """Delete a resource."""

    async def upload(
        self,
        path: str,
        files: list[tuple[str, tuple[str, bytes, str]]],
        *,
        data: dict[str, str] | None = None,
        demo_token: bool = False,
    ) -> JsonBody:
        """Send a multipart form."""


def require_success(
    body: JsonBody, default_message: str = "Request failed"
) -> JsonBody:
    """Return the ``data`` of a success envelope or raise ``ApiResponseError``."""
    if not body.get("success"):
        raise ApiResponseError(str(body.get("error") or default_message))
    data = body.get("data")
    return data if isinstance(data, dict) else {"items": data}


@dataclass
class HttpxApiClient(ApiClient):
    """HTTPX-backed backend client attaching the stored bearer token."""

    base_url: str
    store: KeyValueStore
    http_client: httpx.AsyncClient
    demo_token_value: str = "demo-token"
    timeout: float = 15

    @classmethod
    def create(
        cls,
        base_url: str,
        store: KeyValueStore,
        demo_token_value: str = "demo-token",
        timeout: float = 15,
    ) -> "HttpxApiClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            store=store,
            http_client=httpx.AsyncClient(),
            demo_token_value=demo_token_value,
            timeout=timeout,
        )

    def _headers(self, demo_token: bool) -> dict[str, str]:
        token = self.store.get(TOKEN_KEY)
        if not token and demo_token:
            token = self.demo_token_value
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _send(  # noqa: PLR0913
        self,
        method: str,
        path: str,
        *,
        params: dict[str, object] | None = None,
        body: object | None = None,
        files: list[tuple[str, tuple[str, bytes, str]]] | None = None,
        data: dict[str, str] | None = None,
        timeout: float | None = None,
        demo_token: bool = False,
    ) -> JsonBody:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.request(
                method,
                url,
                params=params,
                json=body if files is None else None,
                files=files,
                data=data,
                headers=self._headers(demo_token),
                timeout=timeout or self.timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            _logger.warning("Backend timeout: %s %s", method, path)
            raise RequestTimeoutError(f"{method} {path} timed out") from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            _logger.warning("Backend error: %s %s status=%s", method, path, status_code)
            if status_code == HTTP_UNAUTHORIZED:
                raise UnauthorizedError() from exc
            detail = _error_detail(exc.response)
            raise ApiError(
                detail or f"HTTP {status_code}", status_code, detail
            ) from exc
        except httpx.HTTPError as exc:
            _logger.warning("Backend unreachable: %s %s", method, path)
            raise ApiError(str(exc) or "Network error") from exc
        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError("Malformed JSON response", response.status_code) from exc
        return payload if isinstance(payload, dict) else {"data": payload}

    async def get(
        self,
        path: str,
        params: dict[str, object] | None = None,
        *,
        demo_token: bool = False,
    ) -> JsonBody:
        return await self._send("GET", path, params=params, demo_token=demo_token)

    async def post(
        self,
        path: str,
        body: object | None = None,
        *,
        timeout: float | None = None,
        demo_token: bool = False,
    ) -> JsonBody:
        return await self._send(
            "POST",
            path,
            body=body if body is not None else {},
            timeout=timeout,
            demo_token=demo_token,
        )

    async def put(self, path: str, body: object | None = None) -> JsonBody:
        return await self._send("PUT", path, body=body)

    async def delete(self, path: str) -> JsonBody:
        return await self._send("DELETE", path)

    async def upload(
        self,
        path: str,
        files: list[tuple[str, tuple[str, bytes, str]]],
        *,
        data: dict[str, str] | None = None,
        demo_token: bool = False,
    ) -> JsonBody:
        return await self._send(
            "POST", path, files=files, data=data, demo_token=demo_token
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_detail(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        for key in ("error", "message"):
            if payload.get(key):
                return str(payload[key])
    return None
