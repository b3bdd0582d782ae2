"""SQLAlchemy models for block entities."""

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.content.base import BlockType
from ...infrastructure.database.models import TimestampMixin
from ...infrastructure.database.session import Base


class Block(Base, TimestampMixin):
    """A typed content unit on a page.

    ``content`` is always a plain string; todo, toggle and link blocks pack
    their extra state into it (see ``infrastructure.content.codec``).
    """

    __tablename__ = "blocks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    page_id: Mapped[int] = mapped_column(Integer, ForeignKey("pages.id", ondelete="CASCADE"), index=True)
    type: Mapped[str] = mapped_column(String(32), default=BlockType.TEXT.value)
    content: Mapped[str] = mapped_column(Text, default="")
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
