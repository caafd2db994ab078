"""
Composer test configuration.

Everything here is in-memory: MemoryTemplateStore stands in for the REST
service, so no database or network is needed.
"""

import pytest

from engine.composer.defaults import seed_templates
from engine.composer.editor import PageEditor
from engine.composer.gateway import MemoryTemplateStore, TemplateGateway, TransportError
from engine.composer.types import ComponentInstance, PageTemplate


class OfflineStore(MemoryTemplateStore):
    """Store that can be switched off to simulate an unreachable backend."""

    def __init__(self, templates=()):
        super().__init__(templates)
        self.offline = False

    def _check(self):
        if self.offline:
            raise TransportError("connection refused")

    async def list(self):
        self._check()
        return await super().list()

    async def get(self, template_id):
        self._check()
        return await super().get(template_id)

    async def create(self, template):
        self._check()
        return await super().create(template)

    async def update(self, template_id, template):
        self._check()
        return await super().update(template_id, template)

    async def delete(self, template_id):
        self._check()
        return await super().delete(template_id)

    async def apply(self, template_id):
        self._check()
        return await super().apply(template_id)


def make_template(**overrides) -> PageTemplate:
    fields = {
        "name": "Spring sale",
        "description": "Seasonal landing page",
        "category": "custom",
        "components": [
            ComponentInstance(id="c-hero", type="hero", props={"title": "Spring sale"}),
            ComponentInstance(id="c-products", type="products", props={"limit": 4}),
        ],
    }
    fields.update(overrides)
    return PageTemplate(**fields)


@pytest.fixture
def editor():
    return PageEditor()


@pytest.fixture
def store():
    return OfflineStore(seed_templates())


@pytest.fixture
def gateway(store):
    return TemplateGateway(store, fallback=seed_templates())


@pytest.fixture
def template_factory():
    return make_template
