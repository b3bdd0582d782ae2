"""Schemas shared by every module."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TimestampSchema(BaseModel):
    """Timestamps exposed on every read schema."""

    created_at: datetime = Field(description="Creation time (UTC)")
    updated_at: Optional[datetime] = Field(default=None, description="Last update time (UTC)")


class OrderedIds(BaseModel):
    """Complete ordered id list sent by every reorder call."""

    ids: list[int] = Field(description="Every sibling id, in the new order")
