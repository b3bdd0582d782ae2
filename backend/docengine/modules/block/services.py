"""Block management service."""

from datetime import UTC, datetime
from typing import Any, List, Sequence

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ...infrastructure.ordering import in_key_order, insert_after, reorder
from ..common.exceptions import BlockNotFoundError, PageNotFoundError
from ..page.crud import page_crud
from .crud import block_crud
from .models import Block
from .schemas import BlockCreate, BlockCreateInternal, BlockRead, BlockUpdate

logger = get_logger(__name__)


class BlockService:
    """Service for the ordered blocks of a page."""

    async def _ensure_page(self, page_id: int, db: AsyncSession) -> None:
        if not await page_crud.exists(db=db, id=page_id):
            raise PageNotFoundError(f"Page with ID {page_id} not found")

    async def list_blocks(self, page_id: int, db: AsyncSession) -> List[BlockRead]:
        """Blocks of a page in display order.

        Raises:
            PageNotFoundError: If the page does not exist
        """
        await self._ensure_page(page_id, db)
        result = await block_crud.get_multi(db=db, page_id=page_id, limit=None)
        return in_key_order(BlockRead(**block) for block in result.get("data", []))

    async def get_block(self, block_id: int, db: AsyncSession) -> BlockRead:
        block = await block_crud.get(db=db, id=block_id)
        if not block:
            raise BlockNotFoundError(f"Block with ID {block_id} not found")
        return BlockRead(**block)

    async def create_block(self, page_id: int, block_data: BlockCreate, db: AsyncSession) -> BlockRead:
        """Create a block.

        With an explicit ``sort_order`` every sibling whose key is at or after
        it moves up by one, so keys stay unique. Without one the block is
        appended after the last sibling.

        Raises:
            PageNotFoundError: If the page does not exist
        """
        siblings = await self.list_blocks(page_id, db)

        if block_data.sort_order is None:
            placeholder = BlockRead(
                id=0, page_id=page_id, type=block_data.type, sort_order=0, created_at=datetime.now(UTC)
            )
            sort_order = insert_after(siblings, len(siblings) - 1, placeholder).items[-1].sort_order
        else:
            sort_order = block_data.sort_order
            if any(block.sort_order >= sort_order for block in siblings):
                await db.execute(
                    update(Block)
                    .where(Block.page_id == page_id, Block.sort_order >= sort_order)
                    .values(sort_order=Block.sort_order + 1)
                    .execution_options(synchronize_session=False)
                )

        block_internal = BlockCreateInternal(
            page_id=page_id, type=block_data.type, content=block_data.content, sort_order=sort_order
        )
        created_block: Any = await block_crud.create(db=db, object=block_internal)
        logger.info(
            "Block created",
            extra={"page_id": page_id, "block_id": created_block.id, "type": created_block.type},
        )

        return BlockRead.model_validate(created_block)

    async def update_block(self, block_id: int, update_data: BlockUpdate, db: AsyncSession) -> BlockRead:
        """Update a block's type and/or content.

        A type change that does not carry content resets the content to the
        empty string.

        Raises:
            BlockNotFoundError: If the block does not exist
        """
        current = await self.get_block(block_id, db)
        update_dict = update_data.model_dump(exclude_unset=True, exclude_none=True)

        if "type" in update_dict and update_dict["type"] != current.type and "content" not in update_dict:
            update_dict["content"] = ""

        if update_dict:
            await block_crud.update(db=db, id=block_id, object=update_dict)

        return await self.get_block(block_id, db)

    async def delete_block(self, block_id: int, db: AsyncSession) -> None:
        if not await block_crud.exists(db=db, id=block_id):
            raise BlockNotFoundError(f"Block with ID {block_id} not found")

        await block_crud.delete(db=db, id=block_id)
        logger.info("Block deleted", extra={"block_id": block_id})

    async def reorder_blocks(self, page_id: int, ordered_ids: Sequence[int], db: AsyncSession) -> List[BlockRead]:
        """Replace the order of a page's blocks with the given full id list.

        Raises:
            PageNotFoundError: If the page does not exist
            ValidationError: If the ids are not exactly the page's block ids
        """
        blocks = await self.list_blocks(page_id, db)
        result = reorder(blocks, ordered_ids)

        changed = set(result.changed_ids)
        now = datetime.now(UTC)
        rows = [
            {"id": block.id, "sort_order": block.sort_order, "updated_at": now}
            for block in result.items
            if block.id in changed
        ]
        if rows:
            await db.execute(update(Block), rows)
            await db.commit()

        logger.info("Blocks reordered", extra={"page_id": page_id, "changed": len(rows)})
        return result.items
