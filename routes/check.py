from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from core.errors import ClientAddressError
from schemas.check import ClientCheck
from services.renderer import INDEX_TEMPLATE, PageRenderer
from services.request_inspector import get_host, is_param_set, lang
from services.tbb import likely_tbb
from .common import get_renderer

router = APIRouter()
logger = logging.getLogger("tbb-check")


def _client_host(request: Request) -> Optional[str]:
    try:
        return get_host(request)
    except ClientAddressError:
        logger.warning(
            "client_address_unresolved",
            exc_info=True,
            extra={"request_id": getattr(request.state, "request_id", None), "path": request.url.path},
        )
        return None


def inspect_client(request: Request) -> ClientCheck:
    return ClientCheck(
        likely_tbb=likely_tbb(request.headers.get("user-agent")),
        ip=_client_host(request),
        lang=lang(request),
    )


@router.get("/", response_class=HTMLResponse)
def check_page(request: Request, renderer: PageRenderer = Depends(get_renderer)):
    """Main page: the browser verdict in the requested language."""
    check = inspect_client(request)
    context: dict[str, Any] = {
        "lang": check.lang,
        "ip": check.ip,
        "likely_tbb": check.likely_tbb,
        "small": is_param_set(request, "small"),
    }
    return HTMLResponse(renderer.render(INDEX_TEMPLATE, **context))


@router.get("/api/client")
async def client_check(request: Request) -> dict[str, Any]:
    """Same verdict as the main page, as JSON."""
    return {"ok": True, "data": inspect_client(request).model_dump()}
