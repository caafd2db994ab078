"""
Page Composer — Property Editor model

Describes how each prop of a component is edited: which input kind, which
label, which group. Also the quick-theme presets and value coercion for
raw form input.

No UI here. A host surface turns PropertyGroup/PropertyField into widgets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from engine.composer.types import ComponentInstance

# ---------------------------------------------------------------------------
# Labels, groups, options
# ---------------------------------------------------------------------------

PROPERTY_LABELS: dict[str, str] = {
    "title": "Title",
    "subtitle": "Subtitle",
    "content": "Content",
    "description": "Description",
    "buttonText": "Button text",
    "text": "Text",
    "placeholder": "Placeholder",
    "linkUrl": "Link URL",
    "src": "Image URL",
    "alt": "Alt text",
    "backgroundColor": "Background color",
    "textColor": "Text color",
    "color": "Color",
    "fontSize": "Font size",
    "fontWeight": "Font weight",
    "textAlign": "Text alignment",
    "lineHeight": "Line height",
    "width": "Width",
    "height": "Height",
    "borderRadius": "Corner radius",
    "padding": "Padding",
    "layout": "Layout",
    "columns": "Columns",
    "limit": "Items shown",
    "style": "Style",
    "size": "Size",
    "showPrice": "Show price",
    "showRating": "Show rating",
    "showIcons": "Show icons",
    "showStars": "Show stars",
    "showPhone": "Show phone",
    "showEmail": "Show email",
    "showAddress": "Show address",
    "showTitles": "Show titles",
    "showSearch": "Show search",
    "endTime": "End time",
    "backgroundImage": "Background image",
    "image": "Image",
}

GROUP_ORDER: tuple[str, ...] = ("Content", "Style", "Layout", "Display", "Links & Media", "Other")

_CONTENT_KEYS = {"title", "subtitle", "content", "description", "buttonText", "text", "placeholder"}
_STYLE_KEYS = {"backgroundColor", "textColor", "color", "fontSize", "fontWeight", "textAlign", "lineHeight"}
_LAYOUT_KEYS = {"width", "height", "borderRadius", "padding", "layout", "columns", "limit", "size"}
_MEDIA_KEYS = {"linkUrl", "src", "alt", "endTime", "backgroundImage", "image"}

_DIMENSION_KEYS = {"fontSize", "height", "width", "borderRadius", "padding"}
_TEXTAREA_KEYS = {"content", "subtitle", "description"}
NUMERIC_KEYS = {"columns", "limit"}

SELECT_OPTIONS: dict[str, tuple[str, ...]] = {
    "textAlign": ("left", "center", "right", "justify"),
    "fontWeight": ("normal", "bold", "lighter", "bolder"),
    "layout": ("grid", "list", "carousel", "masonry", "accordion"),
    "size": ("small", "medium", "large"),
}

BUTTON_STYLES: tuple[str, ...] = ("primary", "secondary", "outline", "ghost")

NUMERIC_MIN = 1
NUMERIC_MAX = 12

QUICK_THEMES: dict[str, dict[str, str]] = {
    "blue": {"backgroundColor": "#3b82f6", "textColor": "#ffffff"},
    "pink": {"backgroundColor": "#ec4899", "textColor": "#ffffff"},
    "green": {"backgroundColor": "#10b981", "textColor": "#ffffff"},
    "light": {"backgroundColor": "#f8fafc", "textColor": "#1f2937"},
}


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class PropertyField:
    key: str
    label: str
    kind: str  # color | dimension | select | number | toggle | textarea | datetime | text
    value: Any
    options: tuple[str, ...] = ()


@dataclass
class PropertyGroup:
    name: str
    fields: list[PropertyField] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def _is_toggle(key: str) -> bool:
    return key.startswith("show") or "Show" in key


def property_label(key: str) -> str:
    return PROPERTY_LABELS.get(key, key)


def property_group(key: str) -> str:
    if key in _CONTENT_KEYS:
        return "Content"
    if key in _STYLE_KEYS:
        return "Style"
    if key in _LAYOUT_KEYS:
        return "Layout"
    if _is_toggle(key):
        return "Display"
    if key in _MEDIA_KEYS:
        return "Links & Media"
    return "Other"


def property_kind(key: str, component_type: str = "") -> tuple[str, tuple[str, ...]]:
    """Input kind and select options for a prop key."""
    if "Color" in key or key == "color":
        return "color", ()
    if key in _DIMENSION_KEYS:
        return "dimension", ()
    if key in SELECT_OPTIONS:
        return "select", SELECT_OPTIONS[key]
    if key == "style" and component_type == "button":
        return "select", BUTTON_STYLES
    if key in NUMERIC_KEYS:
        return "number", ()
    if _is_toggle(key):
        return "toggle", ()
    if key in _TEXTAREA_KEYS:
        return "textarea", ()
    if key == "endTime":
        return "datetime", ()
    return "text", ()


def describe_props(component: ComponentInstance) -> list[PropertyGroup]:
    """
    Group a component's props into editable fields.

    Groups come out in GROUP_ORDER; empty groups are omitted. Within a group
    fields keep the order of the props mapping.
    """
    groups: dict[str, PropertyGroup] = {}
    for key, value in component.props.items():
        kind, options = property_kind(key, component.type)
        name = property_group(key)
        groups.setdefault(name, PropertyGroup(name=name)).fields.append(
            PropertyField(key=key, label=property_label(key), kind=kind, value=value, options=options)
        )
    return [groups[name] for name in GROUP_ORDER if name in groups]


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------


def coerce_value(key: str, raw: Any) -> Any:
    """
    Convert raw form input to the stored prop value.

    columns/limit → int in [1, 12], falling back to 1 on garbage.
    show* → bool ("false", "0", "off", "" are False).
    Anything else passes through.
    """
    if key in NUMERIC_KEYS:
        try:
            n = int(raw)
        except (TypeError, ValueError):
            return NUMERIC_MIN
        return max(NUMERIC_MIN, min(NUMERIC_MAX, n))
    if _is_toggle(key):
        if isinstance(raw, str):
            return raw.strip().lower() not in {"", "false", "0", "off", "no"}
        return bool(raw)
    return raw


# ---------------------------------------------------------------------------
# Quick themes
# ---------------------------------------------------------------------------


def apply_theme(props: dict[str, Any], theme: str) -> dict[str, Any]:
    """
    Return a new props mapping with a quick theme applied.
    The input mapping is left untouched.

    Raises:
        KeyError: theme is not one of QUICK_THEMES
    """
    preset = QUICK_THEMES[theme]
    return {**props, **preset}
