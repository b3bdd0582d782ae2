"""Block API endpoints."""

from fastapi import APIRouter, Depends, status

from ....modules.block.schemas import BlockRead, BlockUpdate
from ....modules.block.services import BlockService
from ....modules.common.utils.error_handler import handle_exception
from ..dependencies import DbSession, get_block_service

router = APIRouter(prefix="/block", tags=["Blocks"])


@router.get(
    "/{block_id}",
    summary="Get Block",
    responses={200: {"description": "Block details"}, 404: {"description": "Block not found"}},
)
async def get_block(
    block_id: int,
    db: DbSession,
    block_service: BlockService = Depends(get_block_service),
) -> BlockRead:
    try:
        return await block_service.get_block(block_id, db)
    except Exception as e:
        raise handle_exception(e)


@router.patch(
    "/{block_id}",
    summary="Update Block",
    description="""
    Updates a block's `type` and/or `content`. Changing the type without
    sending content clears the content.
    """,
    responses={200: {"description": "Block updated"}, 404: {"description": "Block not found"}},
)
async def update_block(
    block_id: int,
    update_data: BlockUpdate,
    db: DbSession,
    block_service: BlockService = Depends(get_block_service),
) -> BlockRead:
    try:
        return await block_service.update_block(block_id, update_data, db)
    except Exception as e:
        raise handle_exception(e)


@router.delete(
    "/{block_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Block",
    responses={204: {"description": "Block deleted"}, 404: {"description": "Block not found"}},
)
async def delete_block(
    block_id: int,
    db: DbSession,
    block_service: BlockService = Depends(get_block_service),
):
    try:
        await block_service.delete_block(block_id, db)
    except Exception as e:
        raise handle_exception(e)
