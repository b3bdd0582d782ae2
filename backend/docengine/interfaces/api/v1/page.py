"""Page and page-block API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status

from ....modules.block.schemas import BlockCreate, BlockRead
from ....modules.block.services import BlockService
from ....modules.common.schemas import OrderedIds
from ....modules.common.utils.error_handler import handle_exception
from ....modules.page.schemas import PageRead, PageUpdate
from ....modules.page.services import PageService
from ..dependencies import DbSession, get_block_service, get_page_service

router = APIRouter(prefix="/page", tags=["Pages"])


@router.get(
    "/{page_id}",
    summary="Get Page",
    responses={200: {"description": "Page details"}, 404: {"description": "Page not found"}},
)
async def get_page(
    page_id: int,
    db: DbSession,
    page_service: PageService = Depends(get_page_service),
) -> PageRead:
    try:
        return await page_service.get_page(page_id, db)
    except Exception as e:
        raise handle_exception(e)


@router.patch(
    "/{page_id}",
    summary="Rename Page",
    description="Sets a new title. The title is trimmed and must not be blank.",
    responses={
        200: {"description": "Page renamed"},
        404: {"description": "Page not found"},
        422: {"description": "Blank title"},
    },
)
async def rename_page(
    page_id: int,
    update_data: PageUpdate,
    db: DbSession,
    page_service: PageService = Depends(get_page_service),
) -> PageRead:
    try:
        return await page_service.rename_page(page_id, update_data, db)
    except Exception as e:
        raise handle_exception(e)


@router.delete(
    "/{page_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Page",
    description="""
    Deletes the page and its blocks. Child pages are kept: they move up to
    the deleted page's parent, in its place.
    """,
    responses={204: {"description": "Page deleted"}, 404: {"description": "Page not found"}},
)
async def delete_page(
    page_id: int,
    db: DbSession,
    page_service: PageService = Depends(get_page_service),
):
    try:
        await page_service.delete_page(page_id, db)
    except Exception as e:
        raise handle_exception(e)


@router.put(
    "/{page_id}/children/reorder",
    summary="Reorder Child Pages",
    description="""
    Replaces the order of the page's direct children. `ids` must list every
    child page id exactly once; anything else is rejected and nothing changes.
    """,
    responses={
        200: {"description": "Child pages in their new order"},
        404: {"description": "Page not found"},
        422: {"description": "Ids are not a permutation of the page's children"},
    },
)
async def reorder_child_pages(
    page_id: int,
    order: OrderedIds,
    db: DbSession,
    page_service: PageService = Depends(get_page_service),
) -> List[PageRead]:
    try:
        return await page_service.reorder_child_pages(page_id, order.ids, db)
    except Exception as e:
        raise handle_exception(e)


@router.get(
    "/{page_id}/blocks",
    summary="List Blocks",
    responses={200: {"description": "Blocks in display order"}, 404: {"description": "Page not found"}},
)
async def list_blocks(
    page_id: int,
    db: DbSession,
    block_service: BlockService = Depends(get_block_service),
) -> List[BlockRead]:
    try:
        return await block_service.list_blocks(page_id, db)
    except Exception as e:
        raise handle_exception(e)


@router.post(
    "/{page_id}/blocks",
    status_code=status.HTTP_201_CREATED,
    summary="Create Block",
    description="""
    Creates a block. With `sort_order`, siblings at or after that key move
    up by one; without it the block is appended.
    """,
    responses={201: {"description": "Block created"}, 404: {"description": "Page not found"}},
)
async def create_block(
    page_id: int,
    block_data: BlockCreate,
    db: DbSession,
    block_service: BlockService = Depends(get_block_service),
) -> BlockRead:
    try:
        return await block_service.create_block(page_id, block_data, db)
    except Exception as e:
        raise handle_exception(e)


@router.put(
    "/{page_id}/blocks/reorder",
    summary="Reorder Blocks",
    description="""
    Replaces the order of the page's blocks. `ids` must list every block id
    of the page exactly once; anything else is rejected and nothing changes.
    """,
    responses={
        200: {"description": "Blocks in their new order"},
        404: {"description": "Page not found"},
        422: {"description": "Ids are not a permutation of the page's blocks"},
    },
)
async def reorder_blocks(
    page_id: int,
    order: OrderedIds,
    db: DbSession,
    block_service: BlockService = Depends(get_block_service),
) -> List[BlockRead]:
    try:
        return await block_service.reorder_blocks(page_id, order.ids, db)
    except Exception as e:
        raise handle_exception(e)
