"""Pydantic schemas for page entities."""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..common.schemas import TimestampSchema


class PageCreate(BaseModel):
    """Schema for creating a page. Title and position are assigned by the server."""

    parent_page_id: Optional[int] = Field(default=None, description="Parent page, or null for a root page")


class PageCreateInternal(BaseModel):
    document_id: int
    title: str
    parent_page_id: Optional[int] = None
    sort_order: int = 0


class PageUpdate(BaseModel):
    """Schema for renaming a page. The title is trimmed and must not be blank."""

    title: Annotated[str, Field(max_length=255, description="New page title")]


class PageRead(TimestampSchema):
    """Schema for reading page data."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    document_id: int
    title: str
    parent_page_id: Optional[int] = None
    sort_order: int


class PageTreeItem(PageRead):
    """A page with its depth in the tree."""

    depth: int = Field(default=0, description="0 for root pages")


class PageSkeletonRead(BaseModel):
    """Navigation entry without timestamps or content."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    parent_page_id: Optional[int] = None
    sort_order: int
    depth: int = 0
