"""Persistence collaborator used by the editor."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ...modules.common.exceptions import PermissionDeniedError, PersistenceError
from ..config import settings
from ..logging import get_logger

logger = get_logger(__name__)


@dataclass
class PageRecord:
    id: int
    document_id: int
    title: str
    parent_page_id: Optional[int]
    sort_order: int


@dataclass
class BlockRecord:
    id: Optional[int]
    page_id: int
    type: str
    content: str
    sort_order: int


class DocumentStore(ABC):
    """Create/read/update/delete/reorder operations on pages and blocks.

    Every implementation raises ``PersistenceError`` when a call cannot be
    applied.
    """

    @abstractmethod
    async def get_page(self, page_id: int) -> PageRecord:
        pass

    @abstractmethod
    async def list_blocks(self, page_id: int) -> List[BlockRecord]:
        """Blocks of a page in display order."""
        pass

    @abstractmethod
    async def create_page(self, document_id: int, parent_page_id: Optional[int] = None) -> PageRecord:
        pass

    @abstractmethod
    async def rename_page(self, page_id: int, title: str) -> None:
        pass

    @abstractmethod
    async def delete_page(self, page_id: int) -> None:
        pass

    @abstractmethod
    async def reorder_root_pages(self, document_id: int, ordered_ids: Sequence[int]) -> None:
        pass

    @abstractmethod
    async def create_block(self, page_id: int, block_type: str, sort_order: int) -> BlockRecord:
        pass

    @abstractmethod
    async def update_block(self, block_id: int, type: Optional[str] = None, content: Optional[str] = None) -> None:
        pass

    @abstractmethod
    async def delete_block(self, block_id: int) -> None:
        pass

    @abstractmethod
    async def reorder_blocks(self, page_id: int, ordered_ids: Sequence[int]) -> None:
        pass

    @abstractmethod
    async def get_public_view(self, document_id: int, token: Optional[str] = None) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def get_public_page(self, document_id: int, page_id: int, token: Optional[str] = None) -> Dict[str, Any]:
        """Raises ``PermissionDeniedError`` when the caller has no access."""
        pass


def _page(data: Dict[str, Any]) -> PageRecord:
    return PageRecord(
        id=data["id"],
        document_id=data["document_id"],
        title=data["title"],
        parent_page_id=data.get("parent_page_id"),
        sort_order=data["sort_order"],
    )


def _block(data: Dict[str, Any]) -> BlockRecord:
    return BlockRecord(
        id=data["id"],
        page_id=data["page_id"],
        type=data["type"],
        content=data.get("content") or "",
        sort_order=data["sort_order"],
    )


class HttpDocumentStore(DocumentStore):
    """``DocumentStore`` backed by the JSON API.

    Args:
        base_url: Api root, e.g. ``http://localhost:8000/api/v1``
        timeout: Request timeout in seconds
        client: Preconfigured client; its ``base_url`` is used as the api root
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.EDITOR_API_BASE_URL,
            timeout=timeout if timeout is not None else settings.EDITOR_REQUEST_TIMEOUT,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpDocumentStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                detail = e.response.json().get("detail", e.response.text)
            except ValueError:
                detail = e.response.text
            logger.warning(
                "Store request rejected",
                extra={"method": method, "path": path, "status_code": e.response.status_code},
            )
            raise PersistenceError(f"{method} {path} failed: {detail}", status_code=e.response.status_code) from e
        except httpx.TimeoutException as e:
            raise PersistenceError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise PersistenceError(f"{method} {path} failed: {e}") from e
        return response

    async def get_page(self, page_id: int) -> PageRecord:
        response = await self._request("GET", f"/page/{page_id}")
        return _page(response.json())

    async def list_blocks(self, page_id: int) -> List[BlockRecord]:
        response = await self._request("GET", f"/page/{page_id}/blocks")
        return [_block(item) for item in response.json()]

    async def create_page(self, document_id: int, parent_page_id: Optional[int] = None) -> PageRecord:
        response = await self._request(
            "POST", f"/document/{document_id}/pages", json={"parent_page_id": parent_page_id}
        )
        return _page(response.json())

    async def rename_page(self, page_id: int, title: str) -> None:
        await self._request("PATCH", f"/page/{page_id}", json={"title": title})

    async def delete_page(self, page_id: int) -> None:
        await self._request("DELETE", f"/page/{page_id}")

    async def reorder_root_pages(self, document_id: int, ordered_ids: Sequence[int]) -> None:
        await self._request("PUT", f"/document/{document_id}/pages/reorder", json={"ids": list(ordered_ids)})

    async def create_block(self, page_id: int, block_type: str, sort_order: int) -> BlockRecord:
        response = await self._request(
            "POST", f"/page/{page_id}/blocks", json={"type": block_type, "sort_order": sort_order}
        )
        return _block(response.json())

    async def update_block(self, block_id: int, type: Optional[str] = None, content: Optional[str] = None) -> None:
        payload: Dict[str, Any] = {}
        if type is not None:
            payload["type"] = type
        if content is not None:
            payload["content"] = content
        await self._request("PATCH", f"/block/{block_id}", json=payload)

    async def delete_block(self, block_id: int) -> None:
        await self._request("DELETE", f"/block/{block_id}")

    async def reorder_blocks(self, page_id: int, ordered_ids: Sequence[int]) -> None:
        await self._request("PUT", f"/page/{page_id}/blocks/reorder", json={"ids": list(ordered_ids)})

    async def get_public_view(self, document_id: int, token: Optional[str] = None) -> Dict[str, Any]:
        params = {"token": token} if token else None
        response = await self._request("GET", f"/view/{document_id}", params=params)
        return response.json()

    async def get_public_page(self, document_id: int, page_id: int, token: Optional[str] = None) -> Dict[str, Any]:
        params = {"token": token} if token else None
        try:
            response = await self._request("GET", f"/view/{document_id}/page/{page_id}", params=params)
        except PersistenceError as e:
            if e.status_code == 403:
                raise PermissionDeniedError(str(e)) from e
            raise
        return response.json()
