"""
Pydantic models for the storefront pages service.

All data shapes defined here. No imports from db, repos, or routes.
"""

from backend.models.template import (
    ComponentModel,
    CreateTemplateRequest,
    MessageEnvelope,
    Template,
    TemplateEnvelope,
    TemplateListEnvelope,
    TemplateResponse,
    UpdateTemplateRequest,
)

__all__ = [
    "ComponentModel",
    "Template",
    "CreateTemplateRequest",
    "UpdateTemplateRequest",
    "TemplateResponse",
    "TemplateEnvelope",
    "TemplateListEnvelope",
    "MessageEnvelope",
]
