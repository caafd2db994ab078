"""
Page Composer — Renderer

Pure function: (component | template, options?) → HTML string
No IO. No navigation. Call-to-action elements are plain links; following
them is the host's business.

Total over the type set: every known type produces markup, anything else
produces a visible placeholder naming the type. A bad property never
raises out of here — a failing component degrades to an error placeholder
and the rest of the page still renders.

Decorative content (sample prices, "new" badges) comes from a random
source seeded by RenderOptions.seed.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable
from datetime import datetime
from html import escape as _html_escape
from typing import Any

import chevron

from engine.composer.registry import UnknownTypeError, get_defaults
from engine.composer.types import ComponentInstance, PageTemplate, RenderOptions

logger = logging.getLogger(__name__)

MAX_COLUMNS = 4
MAX_LIMIT = 24

VIEWPORT_WIDTHS: dict[str, str] = {
    "desktop": "100%",
    "tablet": "768px",
    "mobile": "375px",
}

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_component(component: ComponentInstance, options: RenderOptions | None = None) -> str:
    """
    Render one component to an HTML fragment.
    Never raises.
    """
    opts = options or RenderOptions()
    handler = _HANDLERS.get(component.type)
    if handler is None:
        return _unknown_html(component.type)

    props = effective_props(component)
    rng = random.Random(opts.seed)
    try:
        return handler(props, opts, rng)
    except Exception:
        logger.exception("render failed for component id=%s type=%s", component.id, component.type)
        return _error_html(component.type)


def render_components(components: Iterable[ComponentInstance], options: RenderOptions | None = None) -> str:
    """Render components in order, each inside its wrapper. Used by the live preview."""
    opts = options or RenderOptions()
    return "\n".join(_wrap(c, render_component(c, opts), opts) for c in components)


def render_page(template: PageTemplate, options: RenderOptions | None = None) -> str:
    """
    Render a complete HTML document for a template.
    Returns a UTF-8 HTML string.
    """
    opts = options or RenderOptions()
    parts: list[str] = []

    parts.append("<!DOCTYPE html>")
    parts.append('<html lang="en">')
    parts.append("<head>")
    parts.append('  <meta charset="utf-8">')
    parts.append('  <meta name="viewport" content="width=device-width, initial-scale=1">')
    parts.append(f"  <title>{escape(template.name or 'Page')}</title>")
    if template.description:
        parts.append(f'  <meta name="description" content="{escape(template.description)}">')
    parts.append(f'  <meta property="og:url" content="{escape(opts.base_url)}">')
    parts.append("  <style>")
    parts.append(BASE_CSS)
    parts.append("  </style>")
    parts.append("</head>")
    parts.append("<body>")

    width = VIEWPORT_WIDTHS.get(opts.viewport, "100%")
    parts.append(f'  <main class="page" data-template-id="{escape(template.id)}" style="max-width:{width}">')

    body_html = render_components(template.components, opts)
    if body_html:
        parts.append(body_html)
    else:
        parts.append('    <p class="page-empty">This page has no components yet.</p>')

    parts.append("  </main>")
    parts.append("</body>")
    parts.append("</html>")

    return "\n".join(parts)


def effective_props(component: ComponentInstance) -> dict[str, Any]:
    """
    Registry defaults overlaid with the instance's props.
    A prop explicitly set to None counts as absent.
    """
    try:
        base = get_defaults(component.type)
    except UnknownTypeError:
        try:
            base = get_defaults(component.type, palette="builder")
        except UnknownTypeError:
            base = {}
    base.update({k: v for k, v in component.props.items() if v is not None})
    return base


# ---------------------------------------------------------------------------
# Wrappers and placeholders
# ---------------------------------------------------------------------------


def _wrap(component: ComponentInstance, inner: str, opts: RenderOptions) -> str:
    attrs = f'class="page-component" data-component-id="{escape(component.id)}" data-type="{escape(component.type)}"'
    if opts.preview and opts.selected_id == component.id:
        attrs += ' data-selected="true"'
    return f"    <div {attrs}>\n{inner}\n    </div>"


def _unknown_html(component_type: str) -> str:
    t = escape(component_type)
    return f'<div class="page-unknown" data-type="{t}"><p>Unknown component type: {t}</p></div>'


def _error_html(component_type: str) -> str:
    t = escape(component_type)
    return f'<div class="page-error" data-type="{t}"><p>This {t} component could not be displayed.</p></div>'


# ---------------------------------------------------------------------------
# Prop helpers
# ---------------------------------------------------------------------------


def escape(text: Any) -> str:
    """HTML-escape user content."""
    return _html_escape(str(text), quote=True)


def _css(value: Any, default: str) -> str:
    """CSS value or default when blank. Escaped for use inside a style attribute."""
    if value is None or str(value).strip() == "":
        return escape(default)
    return escape(value)


def _int(value: Any, default: int, low: int, high: int) -> int:
    try:
        n = int(value)
    except OverflowError:
        # float infinity
        n = high if value > 0 else low
    except (TypeError, ValueError):
        n = default
    return max(low, min(high, n))


def _columns(props: dict[str, Any], default: int) -> int:
    return _int(props.get("columns"), default, 1, MAX_COLUMNS)


def _flag(props: dict[str, Any], key: str) -> bool:
    value = props.get(key)
    if isinstance(value, str):
        return value.strip().lower() not in {"", "false", "0", "off", "no"}
    return bool(value)


def _cta(text: Any, href: Any, cls: str, style: str = "") -> str:
    style_attr = f' style="{style}"' if style else ""
    return f'<a class="{cls}" href="{escape(href or "#")}"{style_attr}>{escape(text)}</a>'


def _heading(props: dict[str, Any], tag: str = "h2") -> str:
    title = props.get("title")
    if not title:
        return ""
    return f'<{tag} class="page-title">{escape(title)}</{tag}>'


# ---------------------------------------------------------------------------
# Sample content for presentational sections
# ---------------------------------------------------------------------------

_SAMPLE_CATEGORIES = [
    ("🏠", "Home"),
    ("🍳", "Kitchen"),
    ("🧴", "Personal care"),
    ("🧽", "Cleaning"),
    ("👕", "Apparel"),
    ("📱", "Accessories"),
    ("🎮", "Entertainment"),
    ("📚", "Stationery"),
]

_SAMPLE_TESTIMONIALS = [
    {"name": "María González", "rating": 5, "comment": "Great quality and fast delivery!"},
    {"name": "Carlos Rodríguez", "rating": 5, "comment": "Excellent value, I will buy again."},
    {"name": "Ana Martínez", "rating": 4, "comment": "Friendly service, recommended to my friends."},
]

_SAMPLE_FEATURES = [
    {"icon": "🚚", "title": "Fast shipping", "desc": "Ships within 24 hours, arrives in 3-5 days"},
    {"icon": "✅", "title": "Quality guaranteed", "desc": "Every item is inspected"},
    {"icon": "🔄", "title": "Easy returns", "desc": "7-day no-questions-asked returns"},
    {"icon": "💰", "title": "Great prices", "desc": "Direct from the manufacturer"},
    {"icon": "🎁", "title": "Rewards", "desc": "Earn points on every order"},
    {"icon": "📞", "title": "Support", "desc": "Customer service around the clock"},
]

_SAMPLE_FAQ = [
    {"q": "How do I place an order?", "a": "Add items to your cart, then complete payment at checkout."},
    {"q": "How long does delivery take?", "a": "Orders ship within 24 hours and arrive in 3-5 business days."},
    {"q": "Which payment methods are accepted?", "a": "Credit cards, debit cards and bank transfer."},
    {"q": "Can I return an item?", "a": "Yes, within 7 days in its original packaging."},
]

_SAMPLE_CONTACT = [
    ("showPhone", "📞", "Phone", "+52 55 1234 5678"),
    ("showEmail", "📧", "Email", "contact@example.com"),
    ("showAddress", "📍", "Address", "Mexico City, Mexico"),
]

_SAMPLE_COUNTDOWN = [("23", "days"), ("15", "hours"), ("42", "minutes"), ("08", "seconds")]

GALLERY_SIZE = 9

# ---------------------------------------------------------------------------
# Mustache templates for repeated-item sections
# ---------------------------------------------------------------------------

_CATEGORIES_TMPL = """\
<section class="page-categories" style="background-color:{{{bg}}}">
  {{{heading}}}
  <div class="page-grid cols-{{columns}}">
    {{#items}}
    <div class="page-card page-category">
      {{#show_icons}}<div class="page-icon">{{icon}}</div>{{/show_icons}}
      <h3>{{label}}</h3>
    </div>
    {{/items}}
  </div>
</section>"""

_PRODUCTS_TMPL = """\
<section class="page-products">
  {{{heading}}}
  <div class="page-grid cols-{{columns}}">
    {{#items}}
    <div class="page-card page-product">
      <div class="page-product-image">
        <img src="{{image}}" alt="{{name}}" loading="lazy">
        <span class="page-badge hot">Hot</span>
        {{#is_new}}<span class="page-badge new">New</span>{{/is_new}}
      </div>
      <h3>{{name}}</h3>
      {{#show_price}}
      <div class="page-price">
        <span class="page-price-now">${{price}}</span>
        <span class="page-price-was">${{original_price}}</span>
        {{#show_rating}}<span class="page-rating">★★★★★</span>{{/show_rating}}
      </div>
      {{/show_price}}
    </div>
    {{/items}}
  </div>
</section>"""

_TESTIMONIALS_TMPL = """\
<section class="page-testimonials layout-{{{layout}}}" style="background-color:{{{bg}}}">
  {{{heading}}}
  <div class="page-grid cols-3">
    {{#items}}
    <div class="page-card page-testimonial">
      <div class="page-avatar">{{initial}}</div>
      <h4>{{name}}</h4>
      {{#show_stars}}<div class="page-rating">{{stars}}</div>{{/show_stars}}
      <p>{{comment}}</p>
    </div>
    {{/items}}
  </div>
</section>"""

_FEATURES_TMPL = """\
<section class="page-features">
  {{{heading}}}
  <div class="page-grid cols-{{columns}}">
    {{#items}}
    <div class="page-feature">
      {{#show_icons}}<div class="page-icon">{{icon}}</div>{{/show_icons}}
      <h3>{{title}}</h3>
      <p>{{desc}}</p>
    </div>
    {{/items}}
  </div>
</section>"""

_COUNTDOWN_TMPL = """\
<section class="page-countdown" style="background-color:{{{bg}}};color:{{{fg}}}" data-end-time="{{end_time}}">
  {{{heading}}}
  <div class="page-countdown-units">
    {{#units}}
    <div class="page-countdown-unit"><strong>{{value}}</strong><span>{{label}}</span></div>
    {{/units}}
  </div>
</section>"""

_GALLERY_TMPL = """\
<section class="page-gallery layout-{{{layout}}}">
  {{{heading}}}
  <div class="page-grid cols-{{columns}}">
    {{#items}}
    <figure class="page-gallery-item">
      <img src="{{src}}" alt="{{caption}}" loading="lazy">
      {{#show_titles}}<figcaption>{{caption}}</figcaption>{{/show_titles}}
    </figure>
    {{/items}}
  </div>
</section>"""

_CONTACT_TMPL = """\
<section class="page-contact" style="background-color:{{{bg}}}">
  {{{heading}}}
  <div class="page-grid cols-3">
    {{#items}}
    <div class="page-contact-item">
      <div class="page-icon">{{icon}}</div>
      <h3>{{label}}</h3>
      <p>{{value}}</p>
    </div>
    {{/items}}
  </div>
</section>"""

_FAQ_TMPL = """\
<section class="page-faq layout-{{{layout}}}">
  {{{heading}}}
  {{#show_search}}<input class="page-faq-search" type="search" placeholder="Search questions...">{{/show_search}}
  {{#items}}
  <details class="page-faq-item">
    <summary>{{q}}</summary>
    <p>{{a}}</p>
  </details>
  {{/items}}
</section>"""


# ---------------------------------------------------------------------------
# Component renderers
# ---------------------------------------------------------------------------

Handler = Callable[[dict[str, Any], RenderOptions, random.Random], str]


def _render_hero(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    bg = _css(props.get("backgroundColor"), "#1e40af")
    fg = _css(props.get("textColor"), "#ffffff")
    align = _css(props.get("textAlign"), "center")
    style = f"background-color:{bg};color:{fg};text-align:{align}"
    image = props.get("backgroundImage")
    if image:
        style += f";background-image:url('{escape(image)}');background-size:cover;background-position:center"

    parts = [f'<section class="page-hero" style="{style}">']
    parts.append(f"  <h1>{escape(props.get('title') or '')}</h1>")
    if props.get("subtitle"):
        parts.append(f"  <p>{escape(props['subtitle'])}</p>")
    if props.get("buttonText"):
        parts.append("  " + _cta(props["buttonText"], props.get("linkUrl"), "page-cta"))
    parts.append("</section>")
    return "\n".join(parts)


def _render_categories(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    columns = _columns(props, 4)
    items = [{"icon": icon, "label": label} for icon, label in _SAMPLE_CATEGORIES[: columns * 2]]
    return chevron.render(
        _CATEGORIES_TMPL,
        {
            "bg": _css(props.get("backgroundColor"), "#f8fafc"),
            "heading": _heading(props),
            "columns": columns,
            "show_icons": _flag(props, "showIcons"),
            "items": items,
        },
    )


def _render_products(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    columns = _columns(props, 4)
    limit = _int(props.get("limit"), 8, 1, MAX_LIMIT)
    items = []
    for i in range(limit):
        price = rng.uniform(20, 120)
        original = price + rng.uniform(20, 70)
        items.append(
            {
                "name": f"Everyday essential {i + 1}",
                "image": f"/placeholder.svg?height=300&width=300&text=Product{i + 1}",
                "price": f"{price:.2f}",
                "original_price": f"{original:.2f}",
                "is_new": rng.random() > 0.7,
            }
        )
    return chevron.render(
        _PRODUCTS_TMPL,
        {
            "heading": _heading(props),
            "columns": columns,
            "show_price": _flag(props, "showPrice"),
            "show_rating": _flag(props, "showRating"),
            "items": items,
        },
    )


def _render_banner(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    bg = _css(props.get("backgroundColor"), "#ec4899")
    fg = _css(props.get("textColor"), "#ffffff")
    parts = [f'<section class="page-banner" style="background-color:{bg};color:{fg}">']
    parts.append(f"  <h2>{escape(props.get('title') or '')}</h2>")
    if props.get("subtitle"):
        parts.append(f"  <p>{escape(props['subtitle'])}</p>")
    if props.get("linkUrl"):
        parts.append("  " + _cta("View offer", props["linkUrl"], "page-cta"))
    parts.append("</section>")
    return "\n".join(parts)


def _render_text(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    style = (
        f"font-size:{_css(props.get('fontSize'), '16px')};"
        f"text-align:{_css(props.get('textAlign'), 'left')};"
        f"color:{_css(props.get('color'), '#333333')};"
        f"font-weight:{_css(props.get('fontWeight'), 'normal')};"
        f"line-height:{_css(props.get('lineHeight'), '1.6')}"
    )
    return f'<section class="page-text"><div style="{style}">{escape(props.get("content") or "")}</div></section>'


def _render_image(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    src = props.get("src")
    if not src:
        return '<section class="page-image"><div class="page-image-empty">No image selected</div></section>'
    style = (
        f"width:{_css(props.get('width'), '100%')};"
        f"height:{_css(props.get('height'), 'auto')};"
        f"border-radius:{_css(props.get('borderRadius'), '8px')}"
    )
    return (
        f'<section class="page-image">'
        f'<img src="{escape(src)}" alt="{escape(props.get("alt") or "")}" style="{style}" loading="lazy">'
        f"</section>"
    )


_BUTTON_SIZES = {"small": "size-small", "medium": "size-medium", "large": "size-large"}


def _render_button(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    # builder palette stores the background under `color`; storefront has no such key
    bg = _css(props.get("color") or props.get("backgroundColor"), "#3b82f6")
    fg = _css(props.get("textColor"), "#ffffff")
    size = _BUTTON_SIZES.get(str(props.get("size")), "size-medium")
    variant = escape(props.get("style") or "primary")
    link = _cta(
        props.get("text") or "Click me",
        props.get("linkUrl"),
        f"page-button {size} variant-{variant}",
        style=f"background-color:{bg};color:{fg}",
    )
    return f'<section class="page-button-row">{link}</section>'


def _render_spacer(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    height = _css(props.get("height"), "40px")
    bg = _css(props.get("backgroundColor"), "transparent")
    return f'<div class="page-spacer" style="height:{height};background-color:{bg}" aria-hidden="true"></div>'


def _render_testimonials(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    items = [
        {
            "name": t["name"],
            "initial": t["name"][0],
            "stars": "★" * t["rating"],
            "comment": t["comment"],
        }
        for t in _SAMPLE_TESTIMONIALS
    ]
    return chevron.render(
        _TESTIMONIALS_TMPL,
        {
            "bg": _css(props.get("backgroundColor"), "#f1f5f9"),
            "heading": _heading(props),
            "layout": escape(props.get("layout") or "carousel"),
            "show_stars": _flag(props, "showStars"),
            "items": items,
        },
    )


def _render_newsletter(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    bg = _css(props.get("backgroundColor"), "#1e293b")
    fg = _css(props.get("textColor"), "#ffffff")
    parts = [f'<section class="page-newsletter" style="background-color:{bg};color:{fg}">']
    parts.append(f"  <h2>{escape(props.get('title') or '')}</h2>")
    if props.get("subtitle"):
        parts.append(f"  <p>{escape(props['subtitle'])}</p>")
    parts.append('  <form class="page-newsletter-form" onsubmit="return false">')
    parts.append(f'    <input type="email" placeholder="{escape(props.get("placeholder") or "")}">')
    parts.append(f'    <button type="submit">{escape(props.get("buttonText") or "Subscribe")}</button>')
    parts.append("  </form>")
    parts.append("</section>")
    return "\n".join(parts)


def _render_features(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    columns = _columns(props, 3)
    return chevron.render(
        _FEATURES_TMPL,
        {
            "heading": _heading(props),
            "columns": columns,
            "show_icons": _flag(props, "showIcons"),
            "items": _SAMPLE_FEATURES[:columns],
        },
    )


def countdown_units(end_time: Any, now: datetime | None) -> list[dict[str, str]]:
    """
    Days/hours/minutes/seconds until end_time.
    Falls back to the static sample when either side is unknown or unparseable.
    """
    if now is None or not end_time:
        return [{"value": v, "label": label} for v, label in _SAMPLE_COUNTDOWN]
    try:
        end = datetime.fromisoformat(str(end_time))
    except ValueError:
        return [{"value": v, "label": label} for v, label in _SAMPLE_COUNTDOWN]
    if end.tzinfo is None and now.tzinfo is not None:
        end = end.replace(tzinfo=now.tzinfo)
    elif end.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=end.tzinfo)

    remaining = max(0, int((end - now).total_seconds()))
    days, rest = divmod(remaining, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    values = [days, hours, minutes, seconds]
    return [{"value": f"{v:02d}", "label": label} for v, (_, label) in zip(values, _SAMPLE_COUNTDOWN, strict=True)]


def _render_countdown(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    return chevron.render(
        _COUNTDOWN_TMPL,
        {
            "bg": _css(props.get("backgroundColor"), "#dc2626"),
            "fg": _css(props.get("textColor"), "#ffffff"),
            "heading": _heading(props),
            "end_time": props.get("endTime") or "",
            "units": countdown_units(props.get("endTime"), opts.now),
        },
    )


def _render_gallery(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    items = [
        {"src": f"/placeholder.svg?height=300&width=300&text=Image{i + 1}", "caption": f"Image {i + 1}"}
        for i in range(GALLERY_SIZE)
    ]
    return chevron.render(
        _GALLERY_TMPL,
        {
            "heading": _heading(props),
            "layout": escape(props.get("layout") or "masonry"),
            "columns": _columns(props, 3),
            "show_titles": _flag(props, "showTitles"),
            "items": items,
        },
    )


def _render_contact(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    items = [
        {"icon": icon, "label": label, "value": value}
        for key, icon, label, value in _SAMPLE_CONTACT
        if _flag(props, key)
    ]
    return chevron.render(
        _CONTACT_TMPL,
        {
            "bg": _css(props.get("backgroundColor"), "#f8fafc"),
            "heading": _heading(props),
            "items": items,
        },
    )


def _render_faq(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    return chevron.render(
        _FAQ_TMPL,
        {
            "heading": _heading(props),
            "layout": escape(props.get("layout") or "accordion"),
            "show_search": _flag(props, "showSearch"),
            "items": _SAMPLE_FAQ,
        },
    )


def _render_container(props: dict[str, Any], opts: RenderOptions, rng: random.Random) -> str:
    bg = _css(props.get("backgroundColor"), "#ffffff")
    padding = _css(props.get("padding"), "16px")
    return f'<section class="page-container" style="background-color:{bg};padding:{padding}"></section>'


_HANDLERS: dict[str, Handler] = {
    "hero": _render_hero,
    "categories": _render_categories,
    "products": _render_products,
    "banner": _render_banner,
    "text": _render_text,
    "image": _render_image,
    "button": _render_button,
    "spacer": _render_spacer,
    "testimonials": _render_testimonials,
    "newsletter": _render_newsletter,
    "features": _render_features,
    "countdown": _render_countdown,
    "gallery": _render_gallery,
    "contact": _render_contact,
    "faq": _render_faq,
    "container": _render_container,
}


# ---------------------------------------------------------------------------
# Base CSS
# ---------------------------------------------------------------------------

BASE_CSS = """
*, *::before, *::after { box-sizing: border-box; }
body { margin: 0; font-family: system-ui, -apple-system, sans-serif; color: #111827; background: #ffffff; }
.page { margin: 0 auto; }
.page-empty { padding: 48px 24px; text-align: center; color: #6b7280; }
.page-component[data-selected="true"] { outline: 2px solid #3b82f6; outline-offset: -2px; }
.page-hero, .page-banner, .page-newsletter, .page-countdown { padding: 64px 24px; text-align: center; }
.page-hero h1 { font-size: 3rem; margin: 0 0 16px; }
.page-title { text-align: center; font-size: 1.875rem; margin: 0 0 32px; }
.page-cta, .page-button { display: inline-block; padding: 12px 28px; border-radius: 9999px;
  background: #ffffff; color: #111827; text-decoration: none; font-weight: 600; }
.page-button { border-radius: 8px; }
.page-button.size-small { padding: 8px 16px; font-size: 0.875rem; }
.page-button.size-large { padding: 16px 32px; font-size: 1.125rem; }
.page-button-row, .page-image { padding: 32px 24px; text-align: center; }
.page-text { padding: 32px 24px; max-width: 56rem; margin: 0 auto; }
.page-categories, .page-products, .page-testimonials, .page-features,
.page-gallery, .page-contact, .page-faq { padding: 64px 24px; }
.page-grid { display: grid; gap: 24px; max-width: 72rem; margin: 0 auto; }
.page-grid.cols-1 { grid-template-columns: repeat(1, 1fr); }
.page-grid.cols-2 { grid-template-columns: repeat(2, 1fr); }
.page-grid.cols-3 { grid-template-columns: repeat(3, 1fr); }
.page-grid.cols-4 { grid-template-columns: repeat(4, 1fr); }
.page-card { background: #ffffff; border-radius: 8px; padding: 16px; box-shadow: 0 1px 2px rgba(0,0,0,0.08); }
.page-product-image { position: relative; }
.page-product-image img { width: 100%; aspect-ratio: 1; object-fit: cover; }
.page-badge { position: absolute; top: 8px; padding: 2px 8px; border-radius: 9999px; font-size: 0.75rem; color: #fff; }
.page-badge.hot { right: 8px; background: #ef4444; }
.page-badge.new { left: 8px; background: #f59e0b; }
.page-price-now { color: #dc2626; font-weight: 700; }
.page-price-was { color: #6b7280; text-decoration: line-through; margin-left: 6px; }
.page-rating { color: #facc15; }
.page-icon { font-size: 2.5rem; margin-bottom: 12px; }
.page-countdown-units { display: flex; justify-content: center; gap: 24px; }
.page-countdown-unit { background: rgba(255,255,255,0.2); border-radius: 8px; padding: 16px; min-width: 80px; }
.page-countdown-unit strong { display: block; font-size: 1.875rem; }
.page-faq-item { border: 1px solid #e5e7eb; border-radius: 8px; padding: 16px 24px; margin-bottom: 12px; }
.page-faq-search { width: 100%; padding: 12px 16px; margin-bottom: 24px; }
.page-unknown, .page-error { padding: 32px 24px; background: #f3f4f6; color: #4b5563; text-align: center; }
.page-image-empty { padding: 48px; border: 2px dashed #d1d5db; color: #9ca3af; }
@media (max-width: 768px) {
  .page-grid.cols-3, .page-grid.cols-4 { grid-template-columns: repeat(2, 1fr); }
  .page-hero h1 { font-size: 2rem; }
}
""".strip()
