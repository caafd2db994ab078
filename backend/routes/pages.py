"""Public page serving — GET /p/{template_id} serves a rendered template."""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, Response

from backend.config import settings
from backend.repos.template_repo import TemplateRepo
from engine.composer.renderer import render_page
from engine.composer.types import RenderOptions

router = APIRouter(tags=["pages"])
template_repo = TemplateRepo()

# Cache-Control TTL: 5 minutes for stale-while-revalidate, 1 hour shared cache
_CACHE_CONTROL = "public, max-age=300, s-maxage=3600, stale-while-revalidate=86400"


def page_seed(template_id: str) -> int:
    """Stable decorative seed per template, so a page looks the same on every load."""
    return int(hashlib.md5(template_id.encode(), usedforsecurity=False).hexdigest()[:8], 16)


@router.get("/p/{template_id}", response_class=HTMLResponse)
async def serve_page(template_id: str) -> Response:
    """
    Serve a storefront page rendered from a template.

    Returns 404 if the template does not exist.

    Cache headers:
    - Cache-Control: public, 5-min browser TTL, 1-hour CDN TTL, 24h stale-while-revalidate
    - ETag: MD5 of the HTML content for conditional requests
    """
    template = await template_repo.get(template_id)

    if template is None:
        return HTMLResponse(
            content="<html><body><h1>404 — Page not found</h1></body></html>",
            status_code=404,
        )

    opts = RenderOptions(
        seed=page_seed(template_id),
        base_url=f"{settings.PUBLIC_URL}/p/{template_id}",
        now=datetime.now(UTC),
    )
    html_bytes = render_page(template.to_page(), opts).encode("utf-8")
    etag = f'"{hashlib.md5(html_bytes, usedforsecurity=False).hexdigest()}"'

    return Response(
        content=html_bytes,
        media_type="text/html; charset=utf-8",
        headers={
            "Cache-Control": _CACHE_CONTROL,
            "ETag": etag,
            "X-Content-Type-Options": "nosniff",
        },
    )
