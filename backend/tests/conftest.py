"""
Pytest configuration and fixtures for the storefront pages service.

Route tests run against an in-memory FakeTemplateRepo patched into the route
modules. Repo tests need a real Postgres and skip when DATABASE_URL is unset.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("TESTING", "true")

from datetime import UTC, datetime, timedelta  # noqa: E402
from unittest.mock import patch  # noqa: E402
from uuid import uuid4  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from backend.main import app  # noqa: E402
from backend.models.template import ComponentModel, Template  # noqa: E402
from backend.routes import pages as pages_routes  # noqa: E402
from backend.routes import templates as template_routes  # noqa: E402


class FakeTemplateRepo:
    """Same contract as TemplateRepo, backed by a dict."""

    def __init__(self):
        self.templates: dict[str, Template] = {}

    def add(self, **fields) -> Template:
        now = datetime.now(UTC)
        data = {
            "id": str(uuid4()),
            "name": "Fixture",
            "description": "",
            "category": "custom",
            "thumbnail": "/placeholder.svg",
            "components": [],
            "created_at": now,
            "updated_at": now,
        }
        data.update(fields)
        template = Template(**data)
        self.templates[template.id] = template
        return template

    async def list_all(self):
        ordered = sorted(self.templates.values(), key=lambda t: t.updated_at, reverse=True)
        return sorted(ordered, key=lambda t: not t.is_default)

    async def get(self, template_id):
        return self.templates.get(template_id)

    async def create(self, req):
        return self.add(
            name=req.name,
            description=req.description,
            category=req.category,
            thumbnail=req.thumbnail or "/placeholder.svg?height=200&width=300",
            components=req.components,
        )

    async def update(self, template_id, req):
        stored = self.templates.get(template_id)
        if stored is None:
            return None
        updated = stored.model_copy(
            update={
                "name": req.name,
                "description": req.description,
                "category": req.category,
                "thumbnail": req.thumbnail or stored.thumbnail,
                "components": req.components,
                "updated_at": max(datetime.now(UTC), stored.updated_at + timedelta(microseconds=1)),
            }
        )
        self.templates[template_id] = updated
        return updated

    async def delete(self, template_id):
        stored = self.templates.get(template_id)
        if stored is None or stored.is_default:
            return False
        del self.templates[template_id]
        return True

    async def increment_usage(self, template_id):
        stored = self.templates.get(template_id)
        if stored is None:
            return None
        updated = stored.model_copy(update={"usage_count": stored.usage_count + 1})
        self.templates[template_id] = updated
        return updated


@pytest.fixture
def fake_repo():
    """Patch an in-memory repo into every route module."""
    repo = FakeTemplateRepo()
    repo.add(
        id="tpl-classic-home",
        name="Classic homepage",
        category="homepage",
        is_default=True,
        usage_count=25,
        components=[
            ComponentModel(id="hero-1", type="hero", props={"title": "Quality essentials"}),
            ComponentModel(id="products-1", type="products", props={"limit": 4}),
        ],
    )
    repo.add(id="tpl-promotion", name="Promotion", usage_count=5)
    with (
        patch.object(template_routes, "template_repo", repo),
        patch.object(pages_routes, "template_repo", repo),
    ):
        yield repo


@pytest_asyncio.fixture(loop_scope="session")
async def async_client():
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest_asyncio.fixture(loop_scope="session")
async def db_ready():
    """Real database pool for repo tests. Skips without DATABASE_URL."""
    from backend import db

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set")

    await db.init_pool(database_url)
    yield
    await db.close_pool()
