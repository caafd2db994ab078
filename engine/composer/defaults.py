"""
Page Composer — Seed templates

Templates a fresh store starts with, and the gateway's fallback list when
the store cannot be reached on first load. Ids are stable so reseeding is
idempotent.
"""

from __future__ import annotations

from engine.composer.types import DEFAULT_THUMBNAIL, ComponentInstance, PageTemplate


def _c(component_id: str, component_type: str, **props) -> ComponentInstance:
    return ComponentInstance(id=component_id, type=component_type, props=props)


SEED_TEMPLATES: tuple[PageTemplate, ...] = (
    PageTemplate(
        id="tpl-classic-home",
        name="Classic homepage",
        description="Classic storefront homepage with a hero banner, best sellers and category navigation",
        category="homepage",
        thumbnail=DEFAULT_THUMBNAIL,
        components=[
            _c("hero-1", "hero", title="Quality essentials for everyday living", subtitle="Hand-picked products, fair prices"),
            _c("categories-1", "categories", title="Shop by category"),
            _c("products-1", "products", title="Best sellers", limit=8),
            _c("features-1", "features", title="Why shop with us"),
            _c("testimonials-1", "testimonials", title="What our customers say"),
            _c("newsletter-1", "newsletter"),
        ],
        created_at="2024-08-01T00:00:00+00:00",
        updated_at="2024-08-15T00:00:00+00:00",
        is_default=True,
        usage_count=25,
    ),
    PageTemplate(
        id="tpl-product-showcase",
        name="Product showcase",
        description="Product detail layout with a gallery, description and related products",
        category="product",
        components=[
            _c("gallery-1", "gallery", title="Product photos", columns=3),
            _c("text-1", "text", content="Describe the product here."),
            _c("products-1", "products", title="Related products", limit=4),
        ],
        created_at="2024-08-05T00:00:00+00:00",
        updated_at="2024-08-18T00:00:00+00:00",
        usage_count=18,
    ),
    PageTemplate(
        id="tpl-category-page",
        name="Category page",
        description="Category landing page with a header and a product grid",
        category="category",
        components=[
            _c("banner-1", "banner", title="Shop by category", subtitle="Everything in one place"),
            _c("products-1", "products", title="All products", columns=4, limit=12),
        ],
        created_at="2024-08-10T00:00:00+00:00",
        updated_at="2024-08-16T00:00:00+00:00",
        usage_count=12,
    ),
    PageTemplate(
        id="tpl-about-us",
        name="About us",
        description="Company introduction with a short story, values and contact details",
        category="about",
        components=[
            _c("hero-1", "hero", title="About us", subtitle="Who we are", buttonText=""),
            _c("text-1", "text", content="Tell your story here."),
            _c("features-1", "features", title="Our values"),
            _c("contact-1", "contact"),
        ],
        created_at="2024-08-12T00:00:00+00:00",
        updated_at="2024-08-17T00:00:00+00:00",
        usage_count=8,
    ),
    PageTemplate(
        id="tpl-promotion",
        name="Promotion",
        description="Sale page that highlights discounts and a limited-time countdown",
        category="custom",
        components=[
            _c("countdown-1", "countdown", title="Flash sale"),
            _c("banner-1", "banner", title="Up to 50% off", subtitle="While stocks last"),
            _c("products-1", "products", title="Sale items", limit=8),
            _c("faq-1", "faq"),
        ],
        created_at="2024-08-14T00:00:00+00:00",
        updated_at="2024-08-19T00:00:00+00:00",
        usage_count=5,
    ),
)


def seed_templates() -> list[PageTemplate]:
    """Fresh copies of the seed templates."""
    return [t.copy() for t in SEED_TEMPLATES]
