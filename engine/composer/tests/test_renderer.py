"""
Page Composer Renderer -- totality, defaults, clamping, escaping.

Contract:
  - every known type renders, anything else renders a placeholder naming it
  - missing props fall back to registry defaults
  - grids never exceed 4 columns
  - user content is always escaped
  - a failing component never takes the page down
  - same seed, same output
"""

from datetime import UTC, datetime, timedelta

import pytest

from engine.composer import renderer
from engine.composer.registry import BUILDER_COMPONENTS, STOREFRONT_COMPONENTS, get_defaults
from engine.composer.renderer import countdown_units, render_component, render_components, render_page
from engine.composer.types import ComponentInstance, PageTemplate, RenderOptions


def comp(component_type, cid="c1", **props):
    return ComponentInstance(id=cid, type=component_type, props=props)


# ============================================================================
# Totality
# ============================================================================


class TestTotality:
    @pytest.mark.parametrize("spec", STOREFRONT_COMPONENTS + BUILDER_COMPONENTS, ids=lambda s: s.type)
    def test_every_known_type_renders_with_defaults(self, spec):
        html = render_component(ComponentInstance(id="x", type=spec.type, props=dict(spec.default_props)))
        assert html.strip()
        assert "page-unknown" not in html
        assert "page-error" not in html

    @pytest.mark.parametrize("spec", STOREFRONT_COMPONENTS, ids=lambda s: s.type)
    def test_every_known_type_renders_with_empty_props(self, spec):
        html = render_component(comp(spec.type))
        assert "page-unknown" not in html
        assert "page-error" not in html

    def test_unknown_type_placeholder_names_type(self):
        html = render_component(comp("carousel"))
        assert "page-unknown" in html
        assert "carousel" in html

    def test_unknown_type_is_escaped(self):
        html = render_component(comp("<script>alert(1)</script>"))
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_failing_handler_degrades_to_error_placeholder(self, monkeypatch):
        def boom(props, opts, rng):
            raise RuntimeError("bad prop")

        monkeypatch.setitem(renderer._HANDLERS, "hero", boom)
        html = render_component(comp("hero"))
        assert "page-error" in html

    def test_failing_component_does_not_break_page(self, monkeypatch):
        def boom(props, opts, rng):
            raise RuntimeError("bad prop")

        monkeypatch.setitem(renderer._HANDLERS, "banner", boom)
        template = PageTemplate(id="t1", name="T", components=[comp("banner", "b"), comp("text", "t", content="still here")])
        html = render_page(template)
        assert "page-error" in html
        assert "still here" in html


# ============================================================================
# Defaults
# ============================================================================


class TestDefaults:
    def test_missing_props_use_registry_defaults(self):
        html = render_component(comp("hero"))
        assert get_defaults("hero")["title"] in html
        assert "text-align:center" in html

    def test_text_defaults_to_left(self):
        html = render_component(comp("text", content="Hi"))
        assert "text-align:left" in html

    def test_none_counts_as_absent(self):
        html = render_component(comp("banner", backgroundColor=None))
        assert "background-color:#ec4899" in html

    def test_explicit_prop_overrides_default(self):
        html = render_component(comp("hero", title="Sale"))
        assert "<h1>Sale</h1>" in html

    def test_builder_button_color_used_as_background(self):
        html = render_component(comp("button", color="#123456", text="Go"))
        assert "background-color:#123456" in html

    def test_image_without_src(self):
        html = render_component(comp("image", src=""))
        assert "No image selected" in html

    def test_contact_toggles(self):
        html = render_component(comp("contact", showPhone=False))
        assert "Phone" not in html
        assert "Email" in html


# ============================================================================
# Clamping
# ============================================================================


class TestClamping:
    def test_columns_clamped_to_four(self):
        html = render_component(comp("categories", columns=10))
        assert "cols-4" in html
        assert "cols-10" not in html

    def test_columns_clamped_to_one(self):
        html = render_component(comp("products", columns=0, limit=2))
        assert "cols-1" in html

    def test_garbage_columns_use_default(self):
        html = render_component(comp("features", columns="lots"))
        assert "cols-3" in html

    def test_infinite_columns_clamped(self):
        assert "cols-4" in render_component(comp("gallery", columns=float("inf")))
        assert "cols-1" in render_component(comp("features", columns=float("-inf")))

    def test_infinite_limit_clamped(self):
        html = render_component(comp("products", limit=float("inf")), RenderOptions(seed=1))
        assert "page-error" not in html
        assert html.count('class="page-card page-product"') == renderer.MAX_LIMIT

    def test_product_limit_clamped(self):
        html = render_component(comp("products", limit=500), RenderOptions(seed=1))
        assert html.count('class="page-card page-product"') == renderer.MAX_LIMIT

    def test_product_limit_respected(self):
        html = render_component(comp("products", limit=3), RenderOptions(seed=1))
        assert html.count('class="page-card page-product"') == 3


# ============================================================================
# Escaping
# ============================================================================


class TestEscaping:
    def test_title_escaped_in_plain_section(self):
        html = render_component(comp("hero", title="<b>Sale</b>"))
        assert "<b>Sale</b>" not in html
        assert "&lt;b&gt;Sale&lt;/b&gt;" in html

    def test_title_escaped_once_in_templated_section(self):
        html = render_component(comp("categories", title="Tom & Jerry"))
        assert "Tom &amp; Jerry" in html
        assert "&amp;amp;" not in html

    def test_style_value_cannot_break_attribute(self):
        html = render_component(comp("banner", backgroundColor='red" onclick="x'))
        assert 'onclick="x' not in html

    def test_link_href_escaped(self):
        html = render_component(comp("banner", linkUrl='/sale?a=1&b="2"'))
        assert 'href="/sale?a=1&amp;b=&quot;2&quot;"' in html


# ============================================================================
# Determinism
# ============================================================================


class TestDeterminism:
    def test_same_seed_same_output(self):
        c = comp("products", limit=12)
        first = render_component(c, RenderOptions(seed=42))
        for _ in range(20):
            assert render_component(c, RenderOptions(seed=42)) == first

    def test_full_page_deterministic_with_seed(self):
        template = PageTemplate(
            id="t1",
            name="Home",
            components=[comp(s.type, f"c{i}") for i, s in enumerate(STOREFRONT_COMPONENTS)],
        )
        opts = RenderOptions(seed=7, now=datetime(2024, 12, 1, tzinfo=UTC))
        assert render_page(template, opts) == render_page(template, opts)


# ============================================================================
# Countdown
# ============================================================================


class TestCountdown:
    def test_units_from_reference_time(self):
        now = datetime(2024, 12, 1, 0, 0, 0, tzinfo=UTC)
        end = now + timedelta(days=1, hours=2, minutes=3, seconds=4)
        units = countdown_units(end.isoformat(), now)
        assert [u["value"] for u in units] == ["01", "02", "03", "04"]
        assert [u["label"] for u in units] == ["days", "hours", "minutes", "seconds"]

    def test_naive_end_time_assumes_reference_zone(self):
        now = datetime(2024, 12, 31, 23, 0, 0, tzinfo=UTC)
        units = countdown_units("2024-12-31T23:59:59", now)
        assert [u["value"] for u in units] == ["00", "00", "59", "59"]

    def test_past_end_time_is_zero(self):
        now = datetime(2025, 1, 2, tzinfo=UTC)
        units = countdown_units("2024-12-31T23:59:59", now)
        assert all(u["value"] == "00" for u in units)

    def test_no_reference_time_uses_sample(self):
        units = countdown_units("2024-12-31T23:59:59", None)
        assert units[0] == {"value": "23", "label": "days"}

    def test_unparseable_end_time_uses_sample(self):
        units = countdown_units("next tuesday", datetime(2024, 1, 1, tzinfo=UTC))
        assert units[0]["value"] == "23"

    def test_rendered_countdown(self):
        now = datetime(2024, 12, 30, 23, 59, 59, tzinfo=UTC)
        html = render_component(comp("countdown", endTime="2024-12-31T23:59:59"), RenderOptions(now=now))
        assert "<strong>01</strong><span>days</span>" in html


# ============================================================================
# Page document
# ============================================================================


class TestRenderPage:
    def test_empty_page_message(self):
        html = render_page(PageTemplate(id="t1", name="Empty"))
        assert html.startswith("<!DOCTYPE html>")
        assert "page-empty" in html

    def test_components_in_order(self):
        template = PageTemplate(
            id="t1",
            name="Order",
            components=[comp("text", "a", content="first"), comp("text", "b", content="second")],
        )
        html = render_page(template)
        assert html.index("first") < html.index("second")
        assert 'data-component-id="a"' in html

    def test_title_and_template_id(self):
        html = render_page(PageTemplate(id="tpl-1", name="Fish & Chips"))
        assert "<title>Fish &amp; Chips</title>" in html
        assert 'data-template-id="tpl-1"' in html

    def test_viewport_width(self):
        html = render_page(PageTemplate(id="t", name="T"), RenderOptions(viewport="mobile"))
        assert "max-width:375px" in html

    def test_preview_marks_selected(self):
        components = [comp("text", "a"), comp("text", "b")]
        html = render_components(components, RenderOptions(preview=True, selected_id="b"))
        assert html.count('data-selected="true"') == 1
        assert 'data-component-id="b" data-type="text" data-selected="true"' in html

    def test_selection_ignored_outside_preview(self):
        html = render_components([comp("text", "a")], RenderOptions(selected_id="a"))
        assert "data-selected" not in html
