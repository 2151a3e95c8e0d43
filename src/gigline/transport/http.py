"""
REST HTTP client for the Gigline API.
"""

import time
from typing import Any, Optional

import httpx

from gigline.config import DEFAULT_BASE_URL
from gigline.errors import ApiError, TransportError
from gigline.session import SessionStore

USER_AGENT = "gigline-client/0.1.0"


class HttpClient:
    def __init__(
        self,
        session: SessionStore,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> SessionStore:
        return self._session

    def _auth_headers(self, authenticated: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        token = self._session.token
        if authenticated and token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _unwrap(json_data: Any) -> Any:
        """Unwrap `{"data": <actual_data>}` envelopes; bare payloads pass through."""
        if isinstance(json_data, dict) and set(json_data) <= {"status", "success", "data"} and "data" in json_data:
            return json_data["data"]
        return json_data

    async def _send(self, method: str, path: str, authenticated: bool, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        headers.update(self._auth_headers(authenticated))
        try:
            resp = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        if resp.status_code >= 400:
            raise ApiError(resp.status_code, f"HTTP {resp.status_code}: {resp.text[:200]}")
        if not resp.content:
            return None
        try:
            return self._unwrap(resp.json())
        except ValueError:
            return None

    async def get(self, path: str, authenticated: bool = True, fresh: bool = False) -> Any:
        params = {"t": str(int(time.time() * 1000))} if fresh else None
        return await self._send("GET", path, authenticated, params=params,
                                headers={"Cache-Control": "no-store"} if fresh else {})

    async def post(self, path: str, body: Optional[dict[str, Any]] = None, authenticated: bool = True) -> Any:
        return await self._send("POST", path, authenticated, json=body)

    async def post_multipart(
        self,
        path: str,
        fields: dict[str, str],
        files: Optional[dict[str, tuple[str, bytes, str]]] = None,
        authenticated: bool = True,
    ) -> Any:
        """Always multipart/form-data, even for text-only payloads.
        Plain fields go in as filename-less parts."""
        parts: list[tuple[str, Any]] = [(name, (None, value)) for name, value in fields.items()]
        for name, upload in (files or {}).items():
            parts.append((name, upload))
        return await self._send("POST", path, authenticated, files=parts)

    async def delete(self, path: str, authenticated: bool = True) -> Any:
        return await self._send("DELETE", path, authenticated)

    async def aclose(self) -> None:
        await self._client.aclose()
