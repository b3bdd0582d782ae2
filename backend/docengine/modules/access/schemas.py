"""Pydantic schemas for access grants."""

from pydantic import BaseModel, ConfigDict

from ..common.schemas import TimestampSchema


class AccessGrantCreateInternal(BaseModel):
    document_id: int
    token: str


class AccessGrantRead(TimestampSchema):
    """Schema for reading an access grant."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    document_id: int
    token: str
    revoked: bool = False
