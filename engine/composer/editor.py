"""
Page Composer — Editor

In-memory mutation engine for one page being edited. Owns its PageTemplate
(copied on construction) and the ephemeral EditorState.

Every mutation runs to completion synchronously. A mutation that targets a
component id that is no longer in the document is a no-op: stale references
happen whenever two panels race (delete in the canvas, edit in the property
panel) and must not corrupt the session.

Mutations return True/the new instance when they changed the document and
False/None when they did nothing.

Pure sequence helpers (move_item, reorder_items) are exported for callers
that keep their own lists.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, TypeVar

from engine.composer.properties import apply_theme as _theme_props
from engine.composer.registry import UnknownTypeError, get_defaults
from engine.composer.types import (
    DIRECTIONS,
    EDITOR_MODES,
    VIEWPORTS,
    ComponentInstance,
    EditorState,
    PageTemplate,
    new_component_id,
    now_iso,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

HISTORY_LIMIT = 50

# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def move_item(seq: list[T], index: int, direction: str) -> list[T]:
    """
    Swap seq[index] with its neighbour in `direction`.
    Returns a new list; at the boundary (or for a bad index) an unchanged copy.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be one of {sorted(DIRECTIONS)}, got {direction!r}")
    out = list(seq)
    target = index - 1 if direction == "up" else index + 1
    if 0 <= index < len(out) and 0 <= target < len(out):
        out[index], out[target] = out[target], out[index]
    return out


def reorder_items(seq: list[T], from_index: int, to_index: int) -> list[T]:
    """
    Remove the item at from_index and reinsert it at to_index, shifting the
    items in between. to_index is clamped to [0, len-1].
    """
    out = list(seq)
    if not 0 <= from_index < len(out):
        return out
    to_index = max(0, min(len(out) - 1, to_index))
    item = out.pop(from_index)
    out.insert(to_index, item)
    return out


# ---------------------------------------------------------------------------
# Editor
# ---------------------------------------------------------------------------


class PageEditor:
    """
    Editing session over one PageTemplate.

    States: edit <-> preview (mode), and independently no selection <->
    one selected component. Viewport (desktop/tablet/mobile) only affects
    preview rendering.
    """

    def __init__(self, template: PageTemplate | None = None, palette: str = "storefront"):
        self._template = template.copy() if template is not None else PageTemplate(created_at=now_iso())
        self.palette = palette
        self.state = EditorState()
        self.dirty = False
        self._undo: list[list[ComponentInstance]] = []
        self._redo: list[list[ComponentInstance]] = []

    # -- read access --

    @property
    def components(self) -> list[ComponentInstance]:
        return self._template.components

    @property
    def selected_component(self) -> ComponentInstance | None:
        if self.state.selected_id is None:
            return None
        return self._template.find(self.state.selected_id)

    @property
    def is_previewing(self) -> bool:
        return self.state.mode == "preview"

    def document(self) -> PageTemplate:
        """Copy of the edited template, ready to hand to the gateway."""
        doc = self._template.copy()
        doc.updated_at = now_iso()
        return doc

    def set_metadata(self, **fields: Any) -> None:
        """Update template-level fields (name, description, category, thumbnail)."""
        for key in ("name", "description", "category", "thumbnail"):
            if key in fields:
                setattr(self._template, key, fields[key])
                self.dirty = True

    # -- history --

    def _checkpoint(self) -> None:
        self._undo.append(copy.deepcopy(self._template.components))
        if len(self._undo) > HISTORY_LIMIT:
            self._undo.pop(0)
        self._redo.clear()
        self.dirty = True

    def _restore(self, components: list[ComponentInstance]) -> None:
        self._template.components = components
        if self.state.selected_id is not None and self._template.find(self.state.selected_id) is None:
            self.state.selected_id = None

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(copy.deepcopy(self._template.components))
        self._restore(self._undo.pop())
        self.dirty = True
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(copy.deepcopy(self._template.components))
        self._restore(self._redo.pop())
        self.dirty = True
        return True

    # -- mutations --

    def add_component(self, component_type: str) -> ComponentInstance | None:
        """Append a new component with registry defaults. Does not select it."""
        try:
            props = get_defaults(component_type, self.palette)
        except UnknownTypeError as e:
            logger.warning("add_component: %s", e)
            return None

        self._checkpoint()
        component = ComponentInstance(id=new_component_id(), type=component_type, props=props)
        self._template.components.append(component)
        return component

    def select_component(self, component_id: str) -> bool:
        if self._template.index_of(component_id) < 0:
            logger.debug("select_component: stale id %s", component_id)
            return False
        self.state.selected_id = component_id
        return True

    def clear_selection(self) -> None:
        self.state.selected_id = None

    def update_props(self, component_id: str, partial: dict[str, Any]) -> bool:
        """Shallow-merge `partial` into the component's props."""
        component = self._template.find(component_id)
        if component is None:
            logger.debug("update_props: stale id %s", component_id)
            return False
        self._checkpoint()
        component.props.update(partial)
        return True

    def apply_theme(self, component_id: str, theme: str) -> bool:
        """Apply a quick theme preset to one component."""
        component = self._template.find(component_id)
        if component is None:
            logger.debug("apply_theme: stale id %s", component_id)
            return False
        self._checkpoint()
        component.props = _theme_props(component.props, theme)
        return True

    def delete_component(self, component_id: str) -> bool:
        index = self._template.index_of(component_id)
        if index < 0:
            return False
        self._checkpoint()
        del self._template.components[index]
        if self.state.selected_id == component_id:
            self.state.selected_id = None
        return True

    def move_component(self, component_id: str, direction: str) -> bool:
        """Swap with the neighbour above/below. No-op at the edges."""
        index = self._template.index_of(component_id)
        if index < 0:
            logger.debug("move_component: stale id %s", component_id)
            return False
        moved = move_item(self._template.components, index, direction)
        if [c.id for c in moved] == [c.id for c in self._template.components]:
            return False
        self._checkpoint()
        self._template.components = moved
        return True

    def reorder(self, component_id: str, new_index: int) -> bool:
        """Drag-and-drop move to an absolute position (clamped)."""
        index = self._template.index_of(component_id)
        if index < 0:
            logger.debug("reorder: stale id %s", component_id)
            return False
        reordered = reorder_items(self._template.components, index, new_index)
        if [c.id for c in reordered] == [c.id for c in self._template.components]:
            return False
        self._checkpoint()
        self._template.components = reordered
        return True

    def duplicate_component(self, component_id: str) -> ComponentInstance | None:
        """Insert an independent copy (fresh id) right after the original."""
        index = self._template.index_of(component_id)
        if index < 0:
            logger.debug("duplicate_component: stale id %s", component_id)
            return None
        self._checkpoint()
        clone = self._template.components[index].clone()
        self._template.components.insert(index + 1, clone)
        return clone

    # -- drag gesture --

    def begin_drag(self, component_id: str) -> bool:
        if self._template.index_of(component_id) < 0:
            return False
        self.state.active_drag_id = component_id
        return True

    def end_drag(self, over_id: str | None) -> bool:
        """Drop the dragged component onto the position of `over_id`."""
        active = self.state.active_drag_id
        self.state.active_drag_id = None
        if active is None or over_id is None or over_id == active:
            return False
        target = self._template.index_of(over_id)
        if target < 0:
            return False
        return self.reorder(active, target)

    # -- view state --

    def set_mode(self, mode: str) -> None:
        if mode not in EDITOR_MODES:
            raise ValueError(f"mode must be one of {sorted(EDITOR_MODES)}, got {mode!r}")
        self.state.mode = mode

    def toggle_preview(self) -> str:
        self.state.mode = "edit" if self.state.mode == "preview" else "preview"
        return self.state.mode

    def set_viewport(self, viewport: str) -> None:
        if viewport not in VIEWPORTS:
            raise ValueError(f"viewport must be one of {sorted(VIEWPORTS)}, got {viewport!r}")
        self.state.viewport = viewport

    def set_preview_mode(self, mode: str) -> None:
        """Accepts either an editor mode (edit/preview) or a viewport."""
        if mode in EDITOR_MODES:
            self.set_mode(mode)
        else:
            self.set_viewport(mode)
