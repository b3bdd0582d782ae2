"""Access grant API endpoints."""

from fastapi import APIRouter, Depends

from ....modules.access.schemas import AccessGrantRead
from ....modules.access.services import AccessService
from ....modules.common.utils.error_handler import handle_exception
from ..dependencies import DbSession, get_access_service

router = APIRouter(prefix="/access-grant", tags=["Access"])


@router.delete(
    "/{token}",
    summary="Revoke Access Grant",
    description="Revokes a grant; its token no longer opens the document.",
    responses={200: {"description": "Grant revoked"}, 404: {"description": "Grant not found"}},
)
async def revoke_access_grant(
    token: str,
    db: DbSession,
    access_service: AccessService = Depends(get_access_service),
) -> AccessGrantRead:
    try:
        return await access_service.revoke_grant(token, db)
    except Exception as e:
        raise handle_exception(e)
