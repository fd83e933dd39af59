"""
Tests for the async client gateway.

Tests cover:
- Error message normalization ({"error"} body vs. reason phrase)
- List endpoints degrading to [] on any failure
- Other calls raising GatewayError
- Bearer header on mutating calls only
- Upload attaching the file body as multipart
- End-to-end against the real app over ASGI
"""

import json

import httpx
import pytest
from sqlmodel import SQLModel

from app.client.gateway import BlogGateway, GatewayError
from app.core.config import settings

BASE_URL = "https://api.example.test"


def make_gateway(handler, token="tok") -> BlogGateway:
    return BlogGateway(BASE_URL, token=token, transport=httpx.MockTransport(handler))


class TestErrorNormalization:
    @pytest.mark.asyncio
    async def test_error_field_used_as_message(self):
        def handler(request):
            return httpx.Response(404, json={"error": "Not found"})

        async with make_gateway(handler) as api:
            with pytest.raises(GatewayError) as exc_info:
                await api.get_post("missing")

        assert exc_info.value.message == "Not found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_reason_phrase_when_body_not_json(self):
        def handler(request):
            return httpx.Response(502, text="<html>bad gateway</html>")

        async with make_gateway(handler) as api:
            with pytest.raises(GatewayError) as exc_info:
                await api.save_post({"id": "p1"})

        assert exc_info.value.message == "Bad Gateway"
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_network_error_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_gateway(handler) as api:
            with pytest.raises(GatewayError) as exc_info:
                await api.create_category("News")

        assert exc_info.value.status_code is None
        assert "connection refused" in exc_info.value.message


class TestListDegradation:
    @pytest.mark.asyncio
    async def test_list_posts_returns_empty_on_server_error(self):
        def handler(request):
            return httpx.Response(500, json={"error": "disk I/O error"})

        async with make_gateway(handler) as api:
            assert await api.list_posts() == []

    @pytest.mark.asyncio
    async def test_list_categories_returns_empty_on_network_error(self):
        def handler(request):
            raise httpx.ReadError("reset", request=request)

        async with make_gateway(handler) as api:
            assert await api.list_categories() == []

    @pytest.mark.asyncio
    async def test_list_posts_returns_empty_on_bad_json(self):
        def handler(request):
            return httpx.Response(200, text="not json")

        async with make_gateway(handler) as api:
            assert await api.list_posts() == []

    @pytest.mark.asyncio
    async def test_list_posts_passes_data_through(self):
        def handler(request):
            return httpx.Response(200, json=[{"id": "p1"}])

        async with make_gateway(handler) as api:
            assert await api.list_posts() == [{"id": "p1"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"posts": []}, {"error": "x"}, "text", 42])
    async def test_list_returns_empty_on_non_list_body(self, body):
        def handler(request):
            return httpx.Response(200, json=body)

        async with make_gateway(handler) as api:
            assert await api.list_posts() == []
            assert await api.list_categories() == []


class TestRequests:
    @pytest.mark.asyncio
    async def test_mutations_carry_bearer_and_reads_do_not(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path, request.headers.get("Authorization")))
            if request.method == "GET":
                return httpx.Response(200, json=[])
            return httpx.Response(200, json={"success": True, "id": "p1"})

        async with make_gateway(handler, token="s3cret") as api:
            await api.list_posts()
            await api.save_post({"id": "p1"})
            await api.delete_post("p1")
            await api.delete_category("c1")

        assert seen == [
            ("GET", "/api/posts", None),
            ("POST", "/api/posts", "Bearer s3cret"),
            ("DELETE", "/api/posts/p1", "Bearer s3cret"),
            ("DELETE", "/api/categories/c1", "Bearer s3cret"),
        ]

    @pytest.mark.asyncio
    async def test_ids_are_escaped_as_one_path_segment(self):
        seen = []

        def handler(request):
            seen.append(request.url.raw_path)
            return httpx.Response(200, json={"success": True})

        async with make_gateway(handler) as api:
            await api.get_post("a?b")
            await api.delete_post("a#b")
            await api.delete_post("x/../y")
            await api.delete_category("c 1")

        assert seen == [
            b"/api/posts/a%3Fb",
            b"/api/posts/a%23b",
            b"/api/posts/x%2F..%2Fy",
            b"/api/categories/c%201",
        ]

    @pytest.mark.asyncio
    async def test_create_category_body(self):
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "1", "name": "News", "parentId": None})

        async with make_gateway(handler) as api:
            category = await api.create_category("News", None)

        assert captured["body"] == {"name": "News", "parentId": None}
        assert category["parentId"] is None

    @pytest.mark.asyncio
    async def test_delete_failure_raises(self):
        def handler(request):
            return httpx.Response(400, json={"error": "Category has posts and cannot be deleted"})

        async with make_gateway(handler) as api:
            with pytest.raises(GatewayError, match="has posts"):
                await api.delete_category("c1")

    @pytest.mark.asyncio
    async def test_upload_attaches_file_body(self):
        captured = {}

        def handler(request):
            captured["content_type"] = request.headers["Content-Type"]
            captured["body"] = request.content
            return httpx.Response(200, json={"url": "https://cdn.test/images/1-a.png"})

        async with make_gateway(handler) as api:
            url = await api.upload_file("a.png", b"PNGDATA", "image/png")

        assert url == "https://cdn.test/images/1-a.png"
        assert captured["content_type"].startswith("multipart/form-data")
        assert b'name="file"; filename="a.png"' in captured["body"]
        assert b"PNGDATA" in captured["body"]

    @pytest.mark.asyncio
    async def test_upload_without_url_raises(self):
        def handler(request):
            return httpx.Response(200, json={})

        async with make_gateway(handler) as api:
            with pytest.raises(GatewayError, match="no URL"):
                await api.upload_file("a.png", b"x")


class TestAgainstApp:
    """Gateway talking to the real application in-process."""

    @pytest.fixture
    def gateway(self, client):
        from app.main import app

        return BlogGateway(
            "http://testserver",
            token=settings.AUTH_SECRET,
            transport=httpx.ASGITransport(app=app),
        )

    @pytest.mark.asyncio
    async def test_save_then_get_round_trip(self, gateway):
        async with gateway as api:
            result = await api.save_post({"id": "rt", "title": "Round trip", "tags": ["a", "b"]})
            post = await api.get_post("rt")

        assert result == {"success": True, "id": "rt"}
        assert post["tags"] == ["a", "b"]
        assert post["createdAt"] == post["updatedAt"]

    @pytest.mark.asyncio
    async def test_store_fault_degrades_list_but_raises_on_save(self, gateway, test_engine):
        SQLModel.metadata.drop_all(test_engine)

        async with gateway as api:
            assert await api.list_posts() == []
            with pytest.raises(GatewayError) as exc_info:
                await api.save_post({"id": "x", "title": "t"})

        assert exc_info.value.status_code == 500
        assert "no such table" in exc_info.value.message
