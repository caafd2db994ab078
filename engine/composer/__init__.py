"""
Page Composer — the storefront page engine.

Components:
  registry    — catalog of component types and their default props
  editor      — PageEditor: in-memory mutation engine for one page
  renderer    — (component | template, options) → HTML  (pure)
  properties  — property-panel model, quick themes, value coercion
  gateway     — TemplateGateway: template CRUD over a pluggable store
"""

from engine.composer.editor import PageEditor, move_item, reorder_items
from engine.composer.gateway import (
    GatewayError,
    HttpTemplateStore,
    MemoryTemplateStore,
    NotFoundError,
    ProtectedTemplateError,
    TemplateGateway,
    TransportError,
    filter_templates,
    template_stats,
)
from engine.composer.registry import UnknownTypeError, get_defaults, is_known_type, list_available
from engine.composer.renderer import render_component, render_page
from engine.composer.types import ComponentInstance, EditorState, PageTemplate, RenderOptions

__all__ = [
    "ComponentInstance",
    "PageTemplate",
    "EditorState",
    "RenderOptions",
    "list_available",
    "get_defaults",
    "is_known_type",
    "UnknownTypeError",
    "PageEditor",
    "move_item",
    "reorder_items",
    "render_component",
    "render_page",
    "TemplateGateway",
    "MemoryTemplateStore",
    "HttpTemplateStore",
    "GatewayError",
    "NotFoundError",
    "ProtectedTemplateError",
    "TransportError",
    "filter_templates",
    "template_stats",
]
