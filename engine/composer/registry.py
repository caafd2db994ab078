"""
Page Composer — Component Registry

The static catalog of valid component types: display name, description,
and the default property bag each new instance starts from.

Two palettes:
  storefront — the full set used by the template editor and public pages
  builder    — the simplified admin page builder (lighter defaults, plus
               the `container` wrapper)

Pure data. Never mutated at runtime.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UnknownTypeError(Exception):
    """Component type is not in the registry."""

    def __init__(self, component_type: str, palette: str = "storefront"):
        super().__init__(f"Unknown component type: {component_type!r} (palette {palette})")
        self.component_type = component_type
        self.palette = palette


# ---------------------------------------------------------------------------
# Specs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ComponentSpec:
    type: str
    display_name: str
    description: str
    default_props: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "displayName": self.display_name,
            "description": self.description,
            "defaultProps": copy.deepcopy(self.default_props),
        }


STOREFRONT_COMPONENTS: tuple[ComponentSpec, ...] = (
    ComponentSpec(
        "hero",
        "Hero banner",
        "Full-width banner for the top of a page",
        {
            "title": "Welcome to our store",
            "subtitle": "Discover quality products and enjoy shopping",
            "buttonText": "Shop now",
            "backgroundImage": "/placeholder.svg?height=400&width=800",
            "textAlign": "center",
            "backgroundColor": "#1e40af",
            "textColor": "#ffffff",
        },
    ),
    ComponentSpec(
        "categories",
        "Product categories",
        "Category navigation tiles",
        {
            "title": "Shop by category",
            "layout": "grid",
            "columns": 4,
            "showIcons": True,
            "backgroundColor": "#f8fafc",
        },
    ),
    ComponentSpec(
        "products",
        "Product grid",
        "List of products",
        {
            "title": "Best sellers",
            "limit": 8,
            "layout": "grid",
            "showPrice": True,
            "showRating": True,
            "columns": 4,
        },
    ),
    ComponentSpec(
        "banner",
        "Promo banner",
        "Promotional banner with a link",
        {
            "title": "Limited-time offer",
            "subtitle": "20% off everything",
            "image": "/placeholder.svg?height=200&width=800",
            "linkUrl": "/products",
            "backgroundColor": "#ec4899",
            "textColor": "#ffffff",
        },
    ),
    ComponentSpec(
        "text",
        "Text block",
        "Plain text content",
        {
            "content": "Your text goes here",
            "fontSize": "16px",
            "textAlign": "left",
            "color": "#333333",
            "fontWeight": "normal",
            "lineHeight": "1.6",
        },
    ),
    ComponentSpec(
        "image",
        "Image",
        "A single image",
        {
            "src": "/placeholder.svg?height=300&width=600",
            "alt": "Image description",
            "width": "100%",
            "height": "auto",
            "borderRadius": "8px",
        },
    ),
    ComponentSpec(
        "button",
        "Button",
        "A clickable call to action",
        {
            "text": "Click me",
            "style": "primary",
            "size": "medium",
            "linkUrl": "#",
            "backgroundColor": "#3b82f6",
            "textColor": "#ffffff",
        },
    ),
    ComponentSpec(
        "spacer",
        "Spacer",
        "Vertical spacing",
        {
            "height": "40px",
            "backgroundColor": "transparent",
        },
    ),
    ComponentSpec(
        "testimonials",
        "Testimonials",
        "Customer reviews and feedback",
        {
            "title": "What our customers say",
            "layout": "carousel",
            "showStars": True,
            "backgroundColor": "#f1f5f9",
        },
    ),
    ComponentSpec(
        "newsletter",
        "Newsletter signup",
        "Email subscription form",
        {
            "title": "Subscribe to our deals",
            "subtitle": "Be the first to hear about new offers and products",
            "placeholder": "Enter your email",
            "buttonText": "Subscribe",
            "backgroundColor": "#1e293b",
            "textColor": "#ffffff",
        },
    ),
    ComponentSpec(
        "features",
        "Features",
        "Highlights and selling points",
        {
            "title": "Why shop with us",
            "layout": "grid",
            "columns": 3,
            "showIcons": True,
        },
    ),
    ComponentSpec(
        "countdown",
        "Countdown",
        "Sale countdown timer",
        {
            "title": "Flash sale",
            "endTime": "2024-12-31T23:59:59",
            "backgroundColor": "#dc2626",
            "textColor": "#ffffff",
        },
    ),
    ComponentSpec(
        "gallery",
        "Gallery",
        "Multi-image gallery",
        {
            "title": "Gallery",
            "layout": "masonry",
            "columns": 3,
            "showTitles": True,
        },
    ),
    ComponentSpec(
        "contact",
        "Contact details",
        "Phone, email and address",
        {
            "title": "Contact us",
            "showPhone": True,
            "showEmail": True,
            "showAddress": True,
            "backgroundColor": "#f8fafc",
        },
    ),
    ComponentSpec(
        "faq",
        "FAQ",
        "Frequently asked questions",
        {
            "title": "Frequently asked questions",
            "layout": "accordion",
            "showSearch": True,
        },
    ),
)

BUILDER_COMPONENTS: tuple[ComponentSpec, ...] = (
    ComponentSpec(
        "text",
        "Text",
        "Plain text content",
        {"content": "This is a block of text", "fontSize": "16px", "color": "#000000"},
    ),
    ComponentSpec(
        "image",
        "Image",
        "A single image",
        {"src": "", "alt": "Image", "width": "100%", "height": "auto"},
    ),
    ComponentSpec(
        "button",
        "Button",
        "A clickable call to action",
        {"text": "Click me", "color": "#3B82F6", "textColor": "#FFFFFF"},
    ),
    ComponentSpec(
        "hero",
        "Hero section",
        "Headline with a subtitle",
        {"title": "Welcome to our site", "subtitle": "Discover more", "backgroundImage": ""},
    ),
    ComponentSpec(
        "products",
        "Product grid",
        "List of products",
        {"title": "Popular products", "limit": 8, "columns": 4},
    ),
    ComponentSpec(
        "container",
        "Container",
        "Plain wrapper section",
        {"backgroundColor": "#ffffff", "padding": "16px"},
    ),
)

PALETTES: dict[str, tuple[ComponentSpec, ...]] = {
    "storefront": STOREFRONT_COMPONENTS,
    "builder": BUILDER_COMPONENTS,
}

_INDEX: dict[str, dict[str, ComponentSpec]] = {
    name: {spec.type: spec for spec in specs} for name, specs in PALETTES.items()
}

COMPONENT_TYPES: frozenset[str] = frozenset(t for specs in _INDEX.values() for t in specs)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _palette(palette: str) -> dict[str, ComponentSpec]:
    try:
        return _INDEX[palette]
    except KeyError:
        raise ValueError(f"Unknown palette: {palette!r}") from None


def list_available(palette: str = "storefront") -> list[ComponentSpec]:
    """Ordered component specs for a palette."""
    _palette(palette)
    return list(PALETTES[palette])


def get_spec(component_type: str, palette: str = "storefront") -> ComponentSpec:
    spec = _palette(palette).get(component_type)
    if spec is None:
        raise UnknownTypeError(component_type, palette)
    return spec


def get_defaults(component_type: str, palette: str = "storefront") -> dict[str, Any]:
    """
    Default property bag for a type. Always a fresh copy, so callers can
    mutate the result without touching the registry.

    Raises:
        UnknownTypeError: type is not in the palette
    """
    return copy.deepcopy(get_spec(component_type, palette).default_props)


def is_known_type(component_type: str) -> bool:
    """True if any palette declares the type."""
    return component_type in COMPONENT_TYPES
