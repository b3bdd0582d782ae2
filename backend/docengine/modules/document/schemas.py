"""Pydantic schemas for document entities."""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...infrastructure.content.base import DocumentKind
from ..common.schemas import TimestampSchema


class DocumentBase(BaseModel):
    """Base schema for document data."""

    model_config = ConfigDict(use_enum_values=True)

    title: Annotated[str, Field(min_length=1, max_length=255, description="Document title")]
    description: Optional[str] = Field(default=None, description="Short description shown to readers")
    cover_image_url: Optional[Annotated[str, Field(max_length=2048)]] = Field(default=None, description="Cover image url")
    price_cents: Annotated[int, Field(ge=0, description="Price in cents, 0 for free documents")] = 0
    kind: DocumentKind = Field(
        default=DocumentKind.KNOWLEDGE_BASE, validate_default=True, description="Knowledge base or blog post"
    )
    product_id: Optional[Annotated[str, Field(max_length=255)]] = Field(
        default=None, description="Sellable product this document is delivered with"
    )


class DocumentCreate(DocumentBase):
    """Schema for creating a new document. Documents start unpublished."""

    pass


class DocumentUpdate(BaseModel):
    """Schema for updating document settings, including the publication flag."""

    model_config = ConfigDict(use_enum_values=True)

    title: Optional[Annotated[str, Field(min_length=1, max_length=255)]] = None
    description: Optional[str] = None
    cover_image_url: Optional[Annotated[str, Field(max_length=2048)]] = None
    price_cents: Optional[Annotated[int, Field(ge=0)]] = None
    kind: Optional[DocumentKind] = None
    product_id: Optional[Annotated[str, Field(max_length=255)]] = None
    is_published: Optional[bool] = None


class DocumentRead(TimestampSchema, DocumentBase):
    """Schema for reading document data."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: int
    is_published: bool = False
    page_count: int = Field(default=0, description="Number of pages in the document")
