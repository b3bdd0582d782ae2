"""Pydantic schemas for the public viewer."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..block.schemas import BlockRead
from ..page.schemas import PageRead, PageSkeletonRead


class PublicDocument(BaseModel):
    """What readers see of a document before opening any page."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    cover_image_url: Optional[str] = None
    price_cents: int = 0
    kind: str
    product_id: Optional[str] = None


class PublicView(BaseModel):
    """Document overview: metadata, page skeleton and the access decision."""

    document: PublicDocument
    pages: List[PageSkeletonRead] = Field(description="Page tree skeleton in display order, without content")
    has_access: bool


class RenderedBlockRead(BaseModel):
    """Display form of a block. ``html`` is sanitized."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    html: str
    position: Optional[int] = None
    checked: Optional[bool] = None
    title_html: Optional[str] = None
    body_html: Optional[str] = None
    url: Optional[str] = None
    label: Optional[str] = None
    embed_url: Optional[str] = None
    collapsed: Optional[bool] = None


class PublicPage(BaseModel):
    """A readable page with its raw blocks and their rendered form."""

    page: PageRead
    blocks: List[BlockRead]
    rendered: List[RenderedBlockRead]
    html: str = Field(description="Full HTML fragment for the page")
