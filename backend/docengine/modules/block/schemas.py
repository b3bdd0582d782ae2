"""Pydantic schemas for block entities."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ...infrastructure.content.base import BlockType
from ..common.schemas import TimestampSchema


class BlockCreate(BaseModel):
    """Schema for creating a block at a position on a page."""

    model_config = ConfigDict(use_enum_values=True)

    type: BlockType = Field(default=BlockType.TEXT, validate_default=True, description="Block type")
    content: str = Field(default="", description="Plain-text payload")
    sort_order: Optional[int] = Field(
        default=None,
        ge=0,
        description="Order key for the new block; siblings at or after it shift up. Appended when omitted.",
    )


class BlockCreateInternal(BaseModel):
    page_id: int
    type: str
    content: str
    sort_order: int


class BlockUpdate(BaseModel):
    """Schema for updating a block. Changing the type without content clears the content."""

    model_config = ConfigDict(use_enum_values=True)

    type: Optional[BlockType] = None
    content: Optional[str] = None


class BlockRead(TimestampSchema):
    """Schema for reading block data."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    page_id: int
    type: str
    content: str = ""
    sort_order: int
