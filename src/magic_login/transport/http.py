"""
REST HTTP client for a magic-code auth backend.
"""

from typing import Any, Optional

import httpx

from magic_login.errors import ConnectionError, MagicLoginError

USER_AGENT = "magic-login/0.1.0"


class HttpClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/api",
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @staticmethod
    def _unwrap(json_data: Any) -> Any:
        """Unwrap ``{ "status": "success", "data": <actual_data> }`` envelopes."""
        if isinstance(json_data, dict) and "status" in json_data and "data" in json_data:
            return json_data["data"]
        return json_data

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text[:200]
        if isinstance(body, dict):
            for key in ("error", "message", "detail"):
                if isinstance(body.get(key), str):
                    return body[key]
        return resp.text[:200]

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        try:
            resp = await self._client.post(path, json=body, headers={"Content-Type": "application/json"})
        except httpx.HTTPError as e:
            raise ConnectionError(f"POST {path} failed: {e}") from e
        if resp.status_code >= 400:
            raise MagicLoginError(
                "http_error",
                self._error_message(resp),
                details={"status": resp.status_code, "path": path},
            )
        if not resp.content:
            return None
        return self._unwrap(resp.json())

    async def close(self) -> None:
        await self._client.aclose()
