from fastapi import APIRouter

from .access import router as access_router
from .block import router as block_router
from .document import router as document_router
from .page import router as page_router
from .viewer import router as viewer_router

router = APIRouter(prefix="/v1")
router.include_router(document_router)
router.include_router(page_router)
router.include_router(block_router)
router.include_router(access_router)
router.include_router(viewer_router)


@router.get(
    "/health",
    summary="API Health Check",
    description="Simple health check endpoint for monitoring and container orchestration.",
    responses={
        200: {"description": "API is healthy and responding"},
    },
)
async def health_check():
    """Health check endpoint for Docker health checks."""
    return {"status": "healthy", "message": "Document Engine API is running"}
