"""API tests for document endpoints."""

from typing import Any, Dict

import pytest
from httpx import AsyncClient


class TestDocumentAPI:
    """API tests for document endpoints."""

    @pytest.mark.asyncio
    async def test_create_document_success(self, client: AsyncClient):
        """Test successful document creation."""
        document_data = {
            "title": "Field Guide",
            "description": "Everything about birds",
            "price_cents": 1500,
            "kind": "knowledge_base",
            "product_id": "prod_42",
        }

        response = await client.post("/api/v1/document/", json=document_data)

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Field Guide"
        assert data["price_cents"] == 1500
        assert data["product_id"] == "prod_42"
        assert data["is_published"] is False
        assert data["page_count"] == 0
        assert "id" in data
        assert "created_at" in data

    @pytest.mark.asyncio
    async def test_create_document_minimal_data(self, client: AsyncClient):
        response = await client.post("/api/v1/document/", json={"title": "Notes"})

        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "knowledge_base"
        assert data["price_cents"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{}, {"title": ""}, {"title": "x", "price_cents": -1}, {"title": "x", "kind": "novel"}],
    )
    async def test_create_document_invalid(self, client: AsyncClient, payload: Dict[str, Any]):
        """Test request validation."""
        response = await client.post("/api/v1/document/", json=payload)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_get_document(self, client: AsyncClient, test_document: Dict[str, Any], test_pages: list):
        response = await client.get(f"/api/v1/document/{test_document['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Field Guide"
        assert data["page_count"] == 4

    @pytest.mark.asyncio
    async def test_get_document_not_found(self, client: AsyncClient):
        """Test 404 for a missing document."""
        response = await client.get("/api/v1/document/99999")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_list_documents(self, client: AsyncClient, published_document: Dict[str, Any]):
        await client.post("/api/v1/document/", json={"title": "Draft"})

        response = await client.get("/api/v1/document/", params={"is_published": "true"})

        assert response.status_code == 200
        data = response.json()
        assert data["total_count"] == 1
        assert data["data"][0]["id"] == published_document["id"]

    @pytest.mark.asyncio
    async def test_list_documents_pagination(self, client: AsyncClient):
        for index in range(3):
            await client.post("/api/v1/document/", json={"title": f"Doc {index}"})

        response = await client.get("/api/v1/document/", params={"page": 1, "items_per_page": 2})

        data = response.json()
        assert len(data["data"]) == 2
        assert data["total_count"] == 3
        assert data["has_more"] is True

    @pytest.mark.asyncio
    async def test_publish_empty_document_rejected(self, client: AsyncClient, test_document: Dict[str, Any]):
        """Publishing requires at least one page."""
        response = await client.put(f"/api/v1/document/{test_document['id']}", json={"is_published": True})

        assert response.status_code == 422
        assert "at least one page" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_publish_document(self, client: AsyncClient, test_document: Dict[str, Any], test_pages: list):
        response = await client.put(f"/api/v1/document/{test_document['id']}", json={"is_published": True})

        assert response.status_code == 200
        assert response.json()["is_published"] is True

    @pytest.mark.asyncio
    async def test_delete_document(self, client: AsyncClient, test_document: Dict[str, Any], test_blocks: list):
        """Test deleting a document with its content."""
        response = await client.delete(f"/api/v1/document/{test_document['id']}")
        assert response.status_code == 204

        response = await client.get(f"/api/v1/document/{test_document['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_document_not_found(self, client: AsyncClient):
        response = await client.delete("/api/v1/document/99999")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_issue_access_grant(self, client: AsyncClient, paid_document: Dict[str, Any]):
        response = await client.post(f"/api/v1/document/{paid_document['id']}/access-grants")

        assert response.status_code == 201
        data = response.json()
        assert data["document_id"] == paid_document["id"]
        assert data["revoked"] is False
        assert data["token"]

    @pytest.mark.asyncio
    async def test_revoke_access_grant(self, client: AsyncClient, paid_document: Dict[str, Any]):
        response = await client.delete(f"/api/v1/access-grant/{paid_document['token']}")

        assert response.status_code == 200
        assert response.json()["revoked"] is True

        response = await client.delete("/api/v1/access-grant/unknown")
        assert response.status_code == 404


class TestServiceEndpoints:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client: AsyncClient):
        response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client: AsyncClient):
        response = await client.get("/api/v1/health")
        assert response.headers["X-Request-ID"]
