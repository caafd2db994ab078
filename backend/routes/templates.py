"""Template CRUD routes — list, create, get, update, delete, apply, render."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import HTMLResponse

from backend.models.template import (
    CreateTemplateRequest,
    MessageEnvelope,
    TemplateEnvelope,
    TemplateListEnvelope,
    TemplateResponse,
    UpdateTemplateRequest,
)
from backend.repos.template_repo import TemplateRepo
from engine.composer.renderer import render_page
from engine.composer.types import VIEWPORTS, RenderOptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/templates", tags=["templates"])
template_repo = TemplateRepo()


@router.get("", status_code=200)
async def list_templates() -> TemplateListEnvelope:
    """List all templates, defaults first, then most recently updated."""
    templates = await template_repo.list_all()
    return TemplateListEnvelope(templates=[TemplateResponse.from_model(t) for t in templates])


@router.post("", status_code=201)
async def create_template(req: CreateTemplateRequest) -> TemplateEnvelope:
    """Create a new (never default) template."""
    template = await template_repo.create(req)
    logger.info("template created id=%s name=%r", template.id, template.name)
    return TemplateEnvelope(template=TemplateResponse.from_model(template))


@router.get("/{template_id}", status_code=200)
async def get_template(template_id: str) -> TemplateEnvelope:
    template = await template_repo.get(template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    return TemplateEnvelope(template=TemplateResponse.from_model(template))


@router.put("/{template_id}", status_code=200)
async def update_template(template_id: str, req: UpdateTemplateRequest) -> TemplateEnvelope:
    """Replace the editable fields. Last write wins."""
    template = await template_repo.update(template_id, req)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    logger.info("template updated id=%s", template_id)
    return TemplateEnvelope(template=TemplateResponse.from_model(template))


@router.delete("/{template_id}", status_code=200)
async def delete_template(template_id: str) -> MessageEnvelope:
    """Delete a template. Default templates are protected."""
    template = await template_repo.get(template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    if template.is_default:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Default templates cannot be deleted")

    deleted = await template_repo.delete(template_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    logger.info("template deleted id=%s", template_id)
    return MessageEnvelope(message="Template deleted")


@router.post("/{template_id}/apply", status_code=200)
async def apply_template(template_id: str) -> TemplateEnvelope:
    """Record that a template was applied to a live page."""
    template = await template_repo.increment_usage(template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    return TemplateEnvelope(template=TemplateResponse.from_model(template))


@router.get("/{template_id}/render", response_class=HTMLResponse)
async def render_template(
    template_id: str,
    seed: int | None = None,
    viewport: str = Query(default="desktop"),
) -> HTMLResponse:
    """Render a template to a full HTML document (editor preview)."""
    if viewport not in VIEWPORTS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid viewport: {viewport}")
    template = await template_repo.get(template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")

    html = render_page(template.to_page(), RenderOptions(seed=seed, viewport=viewport))
    return HTMLResponse(content=html)
