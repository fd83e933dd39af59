"""
Async HTTP client for the blog API.

Every API operation is one request. Mutating calls carry the shared bearer
token. Failures are normalized into GatewayError carrying the server's
``{"error"}`` message (or the HTTP reason phrase when the body is not JSON).

List endpoints degrade instead of raising: on any failure they log and
return an empty list so a first page load never has to special-case errors.

Usage:
    async with BlogGateway("https://blog.example.com", token="s3cret") as api:
        posts = await api.list_posts()
        url = await api.upload_file("cover.png", png_bytes, "image/png")
"""

from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

import httpx
import structlog

from app.core.config import settings

logger = structlog.get_logger(__name__)

__all__ = ["BlogGateway", "GatewayError"]


class GatewayError(Exception):
    """A failed API call. status_code is None for network-level failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _error_message(response: httpx.Response) -> str:
    message = response.reason_phrase or f"HTTP {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return message
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return message


def _segment(value: str) -> str:
    """Escape an id as a single path segment ('/', '?' and '#' included)."""
    return quote(str(value), safe="")


def _decode(response: httpx.Response) -> Any:
    if not response.is_success:
        raise GatewayError(_error_message(response), response.status_code)
    try:
        return response.json()
    except ValueError as e:
        raise GatewayError(f"Invalid JSON response: {e}", response.status_code) from e


class BlogGateway:
    """
    Typed wrapper over the blog HTTP API.

    Args:
        base_url: API origin (defaults to API_BASE_URL)
        token: Shared bearer secret for mutating calls (defaults to AUTH_SECRET)
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token = token if token is not None else settings.auth_secret
        # No timeout: a hung request hangs its caller, as the UI always has
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=None, transport=transport)

    async def __aenter__(self) -> "BlogGateway":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, path: str, auth: bool = False, **kwargs) -> Any:
        headers = self._auth_headers() if auth else {}
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise GatewayError(str(e) or type(e).__name__) from e
        return _decode(response)

    # --- Reads (degrade to empty on failure) ---

    async def _list(self, path: str, what: str) -> List[Dict[str, Any]]:
        try:
            data = await self._request("GET", path)
        except GatewayError as e:
            logger.error(f"Fetch {what} failed", error=e.message, status_code=e.status_code)
            return []
        if not isinstance(data, list):
            logger.error(f"Fetch {what} returned a non-list body", body_type=type(data).__name__)
            return []
        return data

    async def list_posts(self) -> List[Dict[str, Any]]:
        return await self._list("/api/posts", "posts")

    async def list_categories(self) -> List[Dict[str, Any]]:
        return await self._list("/api/categories", "categories")

    # --- Everything else propagates GatewayError ---

    async def get_post(self, post_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/posts/{_segment(post_id)}")

    async def save_post(self, post: Dict[str, Any]) -> Dict[str, Any]:
        """Create or replace a post. Returns ``{"success": True, "id": ...}``."""
        return await self._request("POST", "/api/posts", auth=True, json=post)

    async def delete_post(self, post_id: str) -> None:
        await self._request("DELETE", f"/api/posts/{_segment(post_id)}", auth=True)

    async def upload_file(
        self,
        filename: str,
        content: Union[bytes, Any],
        content_type: Optional[str] = None,
    ) -> str:
        """
        Upload a file as multipart field ``file`` and return its public URL.

        ``content`` may be bytes or a binary file object.
        """
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        data = await self._request("PUT", "/api/upload", auth=True, files=files)
        url = data.get("url") if isinstance(data, dict) else None
        if not url:
            raise GatewayError("Upload succeeded but no URL was returned")
        return url

    async def create_category(self, name: str, parent_id: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/api/categories",
            auth=True,
            json={"name": name, "parentId": parent_id},
        )

    async def delete_category(self, category_id: str) -> None:
        await self._request("DELETE", f"/api/categories/{_segment(category_id)}", auth=True)
