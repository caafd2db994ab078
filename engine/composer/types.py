"""
Page Composer — Shared Types

Data classes used across the registry, editor, renderer, and gateway.
These are the contracts that bind the composer together.

Wire format is camelCase JSON (what the REST surface and the storefront
exchange). The dataclasses use snake_case attributes; to_dict/from_dict
translate between the two.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

TEMPLATE_CATEGORIES: tuple[str, ...] = ("homepage", "product", "category", "about", "custom")

CATEGORY_LABELS: dict[str, str] = {
    "homepage": "Homepage",
    "product": "Product page",
    "category": "Category page",
    "about": "About page",
    "custom": "Custom",
}

EDITOR_MODES: set[str] = {"edit", "preview"}

VIEWPORTS: set[str] = {"desktop", "tablet", "mobile"}

DIRECTIONS: set[str] = {"up", "down"}

DEFAULT_THUMBNAIL = "/placeholder.svg?height=200&width=300"


def now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()


def new_component_id() -> str:
    """Opaque, never-reused component identifier."""
    return f"component-{uuid.uuid4().hex}"


def new_template_id() -> str:
    return str(uuid.uuid4())


def parse_count(value: Any) -> int:
    """Non-negative int from a wire value; anything unparseable counts as 0."""
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError, OverflowError):
        return 0


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class ComponentInstance:
    """
    One configured building block of a page.

    `type` is fixed for the life of the instance; changing it means
    delete + add. `props` is an open bag of scalars whose meaningful keys
    depend on the type.
    """

    id: str
    type: str
    props: dict[str, Any] = field(default_factory=dict)
    style: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "props": copy.deepcopy(self.props),
        }
        if self.style is not None:
            d["style"] = copy.deepcopy(self.style)
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ComponentInstance:
        style = d.get("style")
        return cls(
            id=str(d.get("id") or new_component_id()),
            type=str(d.get("type", "")),
            props=copy.deepcopy(d.get("props") or {}),
            style=copy.deepcopy(style) if style is not None else None,
        )

    def clone(self) -> ComponentInstance:
        """Independent copy with a fresh id."""
        return ComponentInstance(
            id=new_component_id(),
            type=self.type,
            props=copy.deepcopy(self.props),
            style=copy.deepcopy(self.style),
        )


@dataclass
class PageTemplate:
    """
    A named, ordered collection of components — one page layout.

    Order of `components` is rendering order, top to bottom.
    `is_default` protects against deletion; `usage_count` only grows.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    category: str = "custom"
    thumbnail: str = DEFAULT_THUMBNAIL
    components: list[ComponentInstance] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
    is_default: bool = False
    usage_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "thumbnail": self.thumbnail,
            "components": [c.to_dict() for c in self.components],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "isDefault": self.is_default,
            "usageCount": self.usage_count,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PageTemplate:
        return cls(
            id=str(d.get("id") or ""),
            name=d.get("name", ""),
            description=d.get("description") or "",
            category=d.get("category") or "custom",
            thumbnail=d.get("thumbnail") or DEFAULT_THUMBNAIL,
            components=[ComponentInstance.from_dict(c) for c in d.get("components") or []],
            created_at=d.get("createdAt") or "",
            updated_at=d.get("updatedAt") or "",
            is_default=bool(d.get("isDefault", False)),
            usage_count=parse_count(d.get("usageCount")),
        )

    def copy(self) -> PageTemplate:
        return copy.deepcopy(self)

    def index_of(self, component_id: str) -> int:
        """Position of a component, or -1."""
        for i, comp in enumerate(self.components):
            if comp.id == component_id:
                return i
        return -1

    def find(self, component_id: str) -> ComponentInstance | None:
        i = self.index_of(component_id)
        return self.components[i] if i >= 0 else None


@dataclass
class EditorState:
    """
    Ephemeral editor session state. Created on editor mount, never persisted.

    mode:     edit | preview — preview hides mutation controls, no data change
    viewport: desktop | tablet | mobile — responsive preview width
    """

    selected_id: str | None = None
    mode: str = "edit"
    viewport: str = "desktop"
    active_drag_id: str | None = None


@dataclass
class RenderOptions:
    """
    Options for rendering.

    seed:        seeds the decorative random source (prices, badges);
                 None means nondeterministic
    preview:     editor live preview — marks the selected component
    now:         reference time for countdown components
    """

    seed: int | None = None
    preview: bool = False
    selected_id: str | None = None
    viewport: str = "desktop"
    base_url: str = "https://shop.example.com"
    now: datetime | None = None
