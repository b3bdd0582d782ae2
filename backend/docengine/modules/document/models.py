"""SQLAlchemy models for document entities."""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.content.base import DocumentKind
from ...infrastructure.database.models import TimestampMixin
from ...infrastructure.database.session import Base


class Document(Base, TimestampMixin):
    """A knowledge base or blog post.

    A document owns a tree of pages. A price of zero makes it free to read;
    anything else requires an access grant.
    """

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    title: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, default=None)
    cover_image_url: Mapped[Optional[str]] = mapped_column(String(2048), default=None)
    price_cents: Mapped[int] = mapped_column(Integer, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    kind: Mapped[str] = mapped_column(String(32), default=DocumentKind.KNOWLEDGE_BASE.value)
    product_id: Mapped[Optional[str]] = mapped_column(String(255), default=None, index=True)
