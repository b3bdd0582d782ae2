"""Access gate for paid documents."""

import secrets
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config import settings
from ...infrastructure.logging import get_logger
from ..common.exceptions import DocumentNotFoundError, ResourceNotFoundError
from ..document.crud import document_crud
from .crud import access_grant_crud
from .schemas import AccessGrantCreateInternal, AccessGrantRead

logger = get_logger(__name__)


def _price_of(document: Any) -> int:
    if isinstance(document, dict):
        return document.get("price_cents") or 0
    return getattr(document, "price_cents", 0) or 0


def _id_of(document: Any) -> int:
    return document["id"] if isinstance(document, dict) else document.id


class AccessService:
    """Decide whether a caller may read a document and manage grants.

    Free documents are readable by everyone. A paid document is readable
    with a token from a non-revoked grant issued for that same document.
    """

    async def has_access(self, document: Any, token: Optional[str], db: AsyncSession) -> bool:
        """Access decision for a document.

        Args:
            document: Document (model, schema or dict) with ``id`` and ``price_cents``
            token: Caller-supplied access token, if any
            db: Database session
        """
        if _price_of(document) == 0:
            return True
        if not token:
            return False
        return await access_grant_crud.exists(db=db, document_id=_id_of(document), token=token, revoked=False)

    async def issue_grant(self, document_id: int, db: AsyncSession) -> AccessGrantRead:
        """Issue a new access token for a document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        if not await document_crud.exists(db=db, id=document_id):
            raise DocumentNotFoundError(f"Document with ID {document_id} not found")

        grant_internal = AccessGrantCreateInternal(
            document_id=document_id, token=secrets.token_urlsafe(settings.ACCESS_TOKEN_BYTES)
        )
        created_grant: Any = await access_grant_crud.create(db=db, object=grant_internal)
        logger.info("Access grant issued", extra={"document_id": document_id, "grant_id": created_grant.id})

        return AccessGrantRead.model_validate(created_grant)

    async def revoke_grant(self, token: str, db: AsyncSession) -> AccessGrantRead:
        """Revoke a grant so its token no longer opens the document.

        Raises:
            ResourceNotFoundError: If no grant has this token
        """
        grant = await access_grant_crud.get(db=db, token=token)
        if not grant:
            raise ResourceNotFoundError("Access grant not found")

        await access_grant_crud.update(db=db, id=grant["id"], object={"revoked": True})
        logger.info("Access grant revoked", extra={"document_id": grant["document_id"], "grant_id": grant["id"]})

        return AccessGrantRead(**{**grant, "revoked": True})
