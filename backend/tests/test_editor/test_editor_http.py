"""End-to-end editor sessions against the running API."""

from typing import Any, Dict, List

import pytest
from httpx import AsyncClient

from docengine.infrastructure.editor import EditorInteractionEngine, HttpDocumentStore, Key
from docengine.modules.common.exceptions import PermissionDeniedError, PersistenceError


async def stored(api_client: AsyncClient, page_id: int) -> List[Dict[str, Any]]:
    response = await api_client.get(f"/page/{page_id}/blocks")
    return response.json()


class TestHttpDocumentStore:
    """Test suite for the API-backed store."""

    @pytest.mark.asyncio
    async def test_reads_page_and_blocks(self, api_client: AsyncClient, test_pages: list, test_blocks: list):
        store = HttpDocumentStore(client=api_client)

        page = await store.get_page(test_pages[0]["id"])
        blocks = await store.list_blocks(test_pages[0]["id"])

        assert page.title == "Intro"
        assert [block.content for block in blocks] == ["a", "x", "y", "note", "z"]

    @pytest.mark.asyncio
    async def test_missing_page_raises_persistence_error(self, api_client: AsyncClient):
        store = HttpDocumentStore(client=api_client)

        with pytest.raises(PersistenceError) as exc_info:
            await store.get_page(99999)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_page_tree_operations(self, api_client: AsyncClient, test_document: Dict[str, Any]):
        store = HttpDocumentStore(client=api_client)

        first = await store.create_page(test_document["id"])
        second = await store.create_page(test_document["id"])
        await store.rename_page(first.id, "Welcome")
        await store.reorder_root_pages(test_document["id"], [second.id, first.id])

        response = await api_client.get(f"/document/{test_document['id']}/pages")
        assert [page["title"] for page in response.json()] == ["Untitled Page", "Welcome"]

        await store.delete_page(second.id)
        response = await api_client.get(f"/document/{test_document['id']}/pages")
        assert [page["id"] for page in response.json()] == [first.id]

    @pytest.mark.asyncio
    async def test_public_page_denied(self, api_client: AsyncClient, paid_document: Dict[str, Any], test_pages: list):
        """A 403 from the viewer becomes a permission error."""
        store = HttpDocumentStore(client=api_client)

        view = await store.get_public_view(paid_document["id"])
        assert view["has_access"] is False

        with pytest.raises(PermissionDeniedError):
            await store.get_public_page(paid_document["id"], test_pages[0]["id"])

        page = await store.get_public_page(paid_document["id"], test_pages[0]["id"], token=paid_document["token"])
        assert len(page["blocks"]) == 5


class TestEditorSession:
    """Editing a page through the engine and reading back what was stored."""

    @pytest.mark.asyncio
    async def test_typing_and_enter(self, api_client: AsyncClient, test_pages: list, test_blocks: list):
        page_id = test_pages[0]["id"]
        engine = EditorInteractionEngine(HttpDocumentStore(client=api_client), page_id, content_delay=10)
        assert await engine.load()

        engine.handle_input(test_blocks[3]["id"], "note, revised")
        assert await engine.handle_key(Key.ENTER) is True
        engine.handle_input(engine.focused.block_id, "after the note")
        await engine.close()

        blocks = await stored(api_client, page_id)
        assert [block["content"] for block in blocks] == ["a", "x", "y", "note, revised", "after the note", "z"]
        assert len({block["sort_order"] for block in blocks}) == 6

    @pytest.mark.asyncio
    async def test_slash_command_changes_type(self, api_client: AsyncClient, test_pages: list, test_blocks: list):
        page_id = test_pages[0]["id"]
        block_id = test_blocks[3]["id"]
        engine = EditorInteractionEngine(HttpDocumentStore(client=api_client), page_id, content_delay=10)
        await engine.load()

        engine.handle_input(block_id, "/")
        engine.handle_input(block_id, "/todo")
        await engine.handle_key(Key.ENTER)
        await engine.close()

        response = await api_client.get(f"/block/{block_id}")
        assert response.json()["type"] == "todo"
        assert response.json()["content"] == ""

    @pytest.mark.asyncio
    async def test_drop_and_delete(self, api_client: AsyncClient, test_pages: list, test_blocks: list):
        page_id = test_pages[0]["id"]
        engine = EditorInteractionEngine(HttpDocumentStore(client=api_client), page_id, content_delay=10)
        await engine.load()

        await engine.drop(0, 3)
        engine.handle_input(test_blocks[4]["id"], "")
        await engine.handle_key(Key.BACKSPACE)
        await engine.close()

        blocks = await stored(api_client, page_id)
        assert [block["content"] for block in blocks] == ["x", "y", "note", "a"]

    @pytest.mark.asyncio
    async def test_title_edit(self, api_client: AsyncClient, test_pages: list):
        page_id = test_pages[1]["id"]
        engine = EditorInteractionEngine(HttpDocumentStore(client=api_client), page_id, title_delay=10)
        await engine.load()

        engine.edit_title(" Using the guide ")
        await engine.close()

        response = await api_client.get(f"/page/{page_id}")
        assert response.json()["title"] == "Using the guide"

    @pytest.mark.asyncio
    async def test_missing_page_notifies(self, api_client: AsyncClient):
        messages: List[str] = []
        engine = EditorInteractionEngine(HttpDocumentStore(client=api_client), 99999, notify=messages.append)

        assert await engine.load() is False
        assert len(messages) == 1
