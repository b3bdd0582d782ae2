"""SQLAlchemy models for page entities."""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import TimestampMixin
from ...infrastructure.database.session import Base


class Page(Base, TimestampMixin):
    """A node in a document's page tree.

    ``parent_page_id`` is null for root pages. ``sort_order`` orders a page
    among the siblings that share its parent.
    """

    __tablename__ = "pages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    document_id: Mapped[int] = mapped_column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(255))
    parent_page_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("pages.id", ondelete="SET NULL"), default=None, index=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
