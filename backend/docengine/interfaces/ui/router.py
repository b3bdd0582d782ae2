"""Server-rendered public viewer."""

import html
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.database.session import async_session
from ...modules.common.exceptions import PermissionDeniedError, ResourceNotFoundError
from ...modules.viewer.schemas import PublicView
from ...modules.viewer.services import ViewerService

router = APIRouter(prefix="/ui", tags=["ui"])


def _layout(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{html.escape(title)}</title>
    <script src="https://cdn.tailwindcss.com"></script>
</head>
<body class="bg-gray-50 text-gray-900">
    <main class="max-w-5xl mx-auto px-4 py-8">
{body}
    </main>
</body>
</html>"""


def _page_url(document_id: int, page_id: int, token: Optional[str]) -> str:
    query = f"?{urlencode({'token': token})}" if token else ""
    return f"/ui/view/{document_id}/page/{page_id}{query}"


def _navigation(view: PublicView, token: Optional[str], current_page_id: Optional[int] = None) -> str:
    items = []
    for entry in view.pages:
        indent = entry.depth * 16
        weight = " font-semibold" if entry.id == current_page_id else ""
        items.append(
            f'<li style="padding-left: {indent}px"><a class="hover:underline{weight}" '
            f'href="{html.escape(_page_url(view.document.id, entry.id, token))}">{html.escape(entry.title)}</a></li>'
        )
    return f'<nav class="w-64 shrink-0"><ul class="space-y-1 text-sm">{"".join(items)}</ul></nav>'


def _not_found() -> HTMLResponse:
    return HTMLResponse(
        _layout("Not found", '<div class="text-center text-gray-500">This document does not exist.</div>'),
        status_code=status.HTTP_404_NOT_FOUND,
    )


@router.get("/view/{document_id}", response_class=HTMLResponse)
async def view_document_ui(
    document_id: int,
    token: Optional[str] = None,
    db: AsyncSession = Depends(async_session),
):
    """Document landing page, or the purchase placeholder when locked."""
    viewer_service = ViewerService()
    try:
        view = await viewer_service.get_public_view(document_id, token, db)
    except ResourceNotFoundError:
        return _not_found()

    if not view.has_access:
        return HTMLResponse(_layout(view.document.title, viewer_service.render_locked(view)))

    description = html.escape(view.document.description or "")
    body = f"""
        <div class="flex gap-8">
            {_navigation(view, token)}
            <article class="prose flex-1">
                <h1>{html.escape(view.document.title)}</h1>
                <p>{description}</p>
            </article>
        </div>"""
    return HTMLResponse(_layout(view.document.title, body))


@router.get("/view/{document_id}/page/{page_id}", response_class=HTMLResponse)
async def view_page_ui(
    document_id: int,
    page_id: int,
    token: Optional[str] = None,
    db: AsyncSession = Depends(async_session),
):
    """One page rendered to HTML; locked documents show the purchase placeholder."""
    viewer_service = ViewerService()
    try:
        view = await viewer_service.get_public_view(document_id, token, db)
        page = await viewer_service.get_public_page(document_id, page_id, token, db)
    except PermissionDeniedError:
        return HTMLResponse(_layout(view.document.title, viewer_service.render_locked(view)))
    except ResourceNotFoundError:
        return _not_found()

    body = f"""
        <div class="flex gap-8">
            {_navigation(view, token, current_page_id=page_id)}
            <article class="prose flex-1">
                <h1>{html.escape(page.page.title)}</h1>
                {page.html}
            </article>
        </div>"""
    return HTMLResponse(_layout(f"{page.page.title} · {view.document.title}", body))
