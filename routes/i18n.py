from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from schemas.locale import LocaleEntry, LocalePage, LocalePageLinks
from services.renderer import PageRenderer
from services.request_inspector import get_qs
from .common import get_renderer

router = APIRouter()

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100


def _page_link(path: str, page: int, per_page_qs: str) -> str:
    return f"{path}?page={page}{per_page_qs}"


@router.get("/v1/i18n/locales")
def locale_catalog(request: Request, renderer: PageRenderer = Depends(get_renderer)) -> dict[str, Any]:
    """Languages offered in the page selector, paginated."""
    query = request.query_params
    page, _ = get_qs(query, "page", 1)
    per_page, per_page_qs = get_qs(query, "per_page", DEFAULT_PER_PAGE)

    page = max(page, 1)
    if not 1 <= per_page <= MAX_PER_PAGE:
        per_page = min(max(per_page, 1), MAX_PER_PAGE)
        per_page_qs = f"&per_page={per_page}"

    entries = renderer.locale_entries()
    start = (page - 1) * per_page
    chunk = entries[start:start + per_page]

    path = request.url.path
    links = LocalePageLinks(
        next=_page_link(path, page + 1, per_page_qs) if start + per_page < len(entries) else None,
        prev=_page_link(path, page - 1, per_page_qs) if page > 1 else None,
    )
    body = LocalePage(
        locales=[LocaleEntry(**entry) for entry in chunk],
        total=len(entries),
        page=page,
        per_page=per_page,
        links=links,
    )
    return {"ok": True, "data": body.model_dump()}
