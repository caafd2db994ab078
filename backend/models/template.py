"""Page template models. Wire format is camelCase; Python attributes are snake_case."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from engine.composer.types import PageTemplate

TemplateCategory = Literal["homepage", "product", "category", "about", "custom"]

_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


class ComponentModel(BaseModel):
    """One component instance as stored and exchanged."""

    model_config = {"extra": "ignore"}

    id: str = Field(min_length=1, max_length=200)
    type: str = Field(min_length=1, max_length=100)
    props: dict[str, Any] = Field(default_factory=dict)
    style: dict[str, Any] | None = None


class Template(BaseModel):
    """Core template model. Represents a row in the page_templates table."""

    model_config = _CAMEL

    id: str
    name: str
    description: str = ""
    category: TemplateCategory = "custom"
    thumbnail: str
    components: list[ComponentModel] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    is_default: bool = False
    usage_count: int = 0

    def to_page(self) -> PageTemplate:
        """Convert to the composer's PageTemplate (for rendering)."""
        return PageTemplate.from_dict(TemplateResponse.from_model(self).model_dump(by_alias=True))


class CreateTemplateRequest(BaseModel):
    """What the client sends to create a template. System fields are ignored."""

    model_config = {**_CAMEL, "extra": "ignore"}

    name: str = Field(min_length=1, max_length=200, pattern=r"\S")
    description: str = Field(default="", max_length=2000)
    category: TemplateCategory
    thumbnail: str | None = Field(default=None, max_length=2000)
    components: list[ComponentModel] = Field(default_factory=list)


class UpdateTemplateRequest(CreateTemplateRequest):
    """
    Full replacement of the editable fields.
    isDefault and usageCount in the body are ignored; they stay as stored.
    """


class TemplateResponse(BaseModel):
    """What the API returns for one template."""

    model_config = _CAMEL

    id: str
    name: str
    description: str
    category: str
    thumbnail: str
    components: list[ComponentModel]
    created_at: str
    updated_at: str
    is_default: bool
    usage_count: int

    @classmethod
    def from_model(cls, template: Template) -> TemplateResponse:
        """Convert internal Template model to public API response."""
        return cls(
            id=template.id,
            name=template.name,
            description=template.description,
            category=template.category,
            thumbnail=template.thumbnail,
            components=template.components,
            created_at=template.created_at.isoformat(),
            updated_at=template.updated_at.isoformat(),
            is_default=template.is_default,
            usage_count=template.usage_count,
        )


class TemplateEnvelope(BaseModel):
    """{success, template} envelope."""

    success: bool = True
    template: TemplateResponse


class TemplateListEnvelope(BaseModel):
    """{success, templates} envelope."""

    success: bool = True
    templates: list[TemplateResponse]


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str
