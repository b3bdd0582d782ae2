from fastapi.responses import RedirectResponse

from ..infrastructure.app_factory import create_application
from ..infrastructure.config.settings import get_settings
from ..interfaces.api import router as api_router
from ..interfaces.ui import router as ui_router

settings = get_settings()

app = create_application(
    router=api_router,
    settings=settings,
    summary="Knowledge bases and blog posts built from pages of typed blocks",
    description="""
    # Document Engine API

    * **Documents**: knowledge bases and blog posts, free or paid
    * **Pages**: a tree of pages per document
    * **Blocks**: ordered, typed content on each page
    * **Viewer**: published documents rendered to sanitized HTML behind an access gate
    """,
)

app.include_router(ui_router)


@app.get("/", include_in_schema=False)
async def get_index():
    return RedirectResponse(url=settings.DOCS_URL)
