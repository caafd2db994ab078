"""
Template Gateway -- persistence, protection, offline behaviour.

Uses MemoryTemplateStore (via the OfflineStore fixture) for the gateway and
httpx.MockTransport for HttpTemplateStore's status mapping.
"""

import json

import httpx
import pytest

from engine.composer.gateway import (
    COPY_SUFFIX,
    HttpTemplateStore,
    InvalidTemplateError,
    MemoryTemplateStore,
    NotFoundError,
    ProtectedTemplateError,
    TemplateGateway,
    TransportError,
    filter_templates,
    template_stats,
)
from engine.composer.types import ComponentInstance, PageTemplate

# ============================================================================
# Round trip
# ============================================================================


class TestRoundTrip:
    @pytest.mark.asyncio
    async def test_save_then_load(self, gateway, template_factory):
        created = await gateway.create(template_factory())
        loaded = await gateway.get(created.id)
        assert [c.id for c in loaded.components] == ["c-hero", "c-products"]
        assert [c.type for c in loaded.components] == ["hero", "products"]
        assert loaded.components[1].props == {"limit": 4}
        assert loaded.name == "Spring sale"

    @pytest.mark.asyncio
    async def test_create_assigns_system_fields(self, gateway, template_factory):
        created = await gateway.create(template_factory(id="mine", is_default=True, usage_count=9))
        assert created.id and created.id != "mine"
        assert created.is_default is False
        assert created.usage_count == 0
        assert created.created_at == created.updated_at

    @pytest.mark.asyncio
    async def test_create_requires_name(self, gateway, template_factory):
        with pytest.raises(InvalidTemplateError):
            await gateway.create(template_factory(name="  "))

    @pytest.mark.asyncio
    async def test_create_rejects_bad_category(self, gateway, template_factory):
        with pytest.raises(InvalidTemplateError):
            await gateway.create(template_factory(category="landing"))

    @pytest.mark.asyncio
    async def test_update_preserves_system_fields(self, gateway):
        original = await gateway.get("tpl-classic-home")
        edited = original.copy()
        edited.name = "Classic homepage v2"
        edited.is_default = False
        edited.usage_count = 0
        edited.components.append(ComponentInstance(id="extra", type="spacer"))

        updated = await gateway.update(original.id, edited)
        assert updated.name == "Classic homepage v2"
        assert updated.is_default is True
        assert updated.usage_count == original.usage_count
        assert updated.created_at == original.created_at
        assert updated.updated_at != original.updated_at
        assert updated.components[-1].id == "extra"

    @pytest.mark.asyncio
    async def test_get_missing(self, gateway):
        with pytest.raises(NotFoundError):
            await gateway.get("nope")

    @pytest.mark.asyncio
    async def test_update_missing(self, gateway, template_factory):
        with pytest.raises(NotFoundError):
            await gateway.update("nope", template_factory())


# ============================================================================
# Listing
# ============================================================================


class TestList:
    @pytest.mark.asyncio
    async def test_defaults_first_then_recent(self, gateway, template_factory):
        created = await gateway.create(template_factory())
        templates = await gateway.list()
        assert templates[0].id == "tpl-classic-home"
        assert templates[1].id == created.id

    @pytest.mark.asyncio
    async def test_list_returns_copies(self, gateway):
        templates = await gateway.list()
        templates[0].name = "mutated"
        again = await gateway.list()
        assert again[0].name == "Classic homepage"


# ============================================================================
# Protected deletion
# ============================================================================


class TestDelete:
    @pytest.mark.asyncio
    async def test_default_template_protected(self, gateway, store):
        await gateway.list()
        with pytest.raises(ProtectedTemplateError):
            await gateway.delete("tpl-classic-home")
        assert len(await gateway.list()) == 5
        assert "tpl-classic-home" in store.templates

    @pytest.mark.asyncio
    async def test_protected_check_fetches_uncached(self, gateway):
        with pytest.raises(ProtectedTemplateError):
            await gateway.delete("tpl-classic-home")

    @pytest.mark.asyncio
    async def test_non_default_removed(self, gateway):
        await gateway.delete("tpl-promotion")
        ids = [t.id for t in await gateway.list()]
        assert "tpl-promotion" not in ids
        assert len(ids) == 4

    @pytest.mark.asyncio
    async def test_delete_missing(self, gateway):
        with pytest.raises(NotFoundError):
            await gateway.delete("nope")

    @pytest.mark.asyncio
    async def test_store_enforces_protection_too(self, store):
        with pytest.raises(ProtectedTemplateError):
            await store.delete("tpl-classic-home")


# ============================================================================
# Duplicate and apply
# ============================================================================


class TestDuplicateAndApply:
    @pytest.mark.asyncio
    async def test_duplicate(self, gateway):
        source = await gateway.get("tpl-classic-home")
        clone = await gateway.duplicate("tpl-classic-home")
        assert clone.id != source.id
        assert clone.name == source.name + COPY_SUFFIX
        assert clone.is_default is False
        assert clone.usage_count == 0
        assert [c.to_dict() for c in clone.components] == [c.to_dict() for c in source.components]
        # the clone can be deleted even though its source cannot
        await gateway.delete(clone.id)

    @pytest.mark.asyncio
    async def test_apply_increments_usage(self, gateway):
        before = (await gateway.get("tpl-promotion")).usage_count
        after = await gateway.apply("tpl-promotion")
        assert after.usage_count == before + 1
        assert (await gateway.get("tpl-promotion")).usage_count == before + 1


# ============================================================================
# Transport failure
# ============================================================================


class TestOffline:
    @pytest.mark.asyncio
    async def test_list_served_from_cache(self, gateway, store):
        online = await gateway.list()
        store.offline = True
        offline = await gateway.list()
        assert [t.id for t in offline] == [t.id for t in online]
        assert gateway.warnings

    @pytest.mark.asyncio
    async def test_first_list_falls_back_to_seed(self, store):
        store.offline = True
        fallback = [PageTemplate(id="fb", name="Fallback", is_default=True)]
        gateway = TemplateGateway(store, fallback=fallback)
        assert [t.id for t in await gateway.list()] == ["fb"]

    @pytest.mark.asyncio
    async def test_get_from_cache(self, gateway, store):
        await gateway.list()
        store.offline = True
        assert (await gateway.get("tpl-promotion")).name == "Promotion"

    @pytest.mark.asyncio
    async def test_get_uncached_propagates(self, gateway, store):
        store.offline = True
        with pytest.raises(TransportError):
            await gateway.get("tpl-promotion")

    @pytest.mark.asyncio
    async def test_create_is_optimistic(self, gateway, store, template_factory):
        store.offline = True
        created = await gateway.create(template_factory())
        assert created.id in gateway.unsynced
        assert created.id not in store.templates
        assert any(t.id == created.id for t in await gateway.list())

    @pytest.mark.asyncio
    async def test_update_is_optimistic(self, gateway, store):
        template = await gateway.get("tpl-promotion")
        store.offline = True
        template.name = "Offline edit"
        updated = await gateway.update(template.id, template)
        assert updated.name == "Offline edit"
        assert "tpl-promotion" in gateway.unsynced
        assert len(gateway.warnings) == 1

    @pytest.mark.asyncio
    async def test_unsynced_edit_survives_reconnect(self, gateway, store):
        template = await gateway.get("tpl-promotion")
        store.offline = True
        template.name = "Offline edit"
        await gateway.update(template.id, template)
        store.offline = False
        listed = {t.id: t for t in await gateway.list()}
        assert listed["tpl-promotion"].name == "Offline edit"

    @pytest.mark.asyncio
    async def test_update_uncached_propagates(self, gateway, store, template_factory):
        store.offline = True
        with pytest.raises(TransportError):
            await gateway.update("tpl-promotion", template_factory())

    @pytest.mark.asyncio
    async def test_protected_delete_checked_offline(self, gateway, store):
        await gateway.list()
        store.offline = True
        with pytest.raises(ProtectedTemplateError):
            await gateway.delete("tpl-classic-home")
        assert gateway.warnings == []

    @pytest.mark.asyncio
    async def test_delete_is_optimistic(self, gateway, store):
        await gateway.list()
        store.offline = True
        await gateway.delete("tpl-promotion")
        assert "tpl-promotion" not in [t.id for t in gateway.cached()]
        assert "tpl-promotion" in gateway.unsynced

    @pytest.mark.asyncio
    async def test_delete_replayed_after_reconnect(self, gateway, store):
        await gateway.list()
        store.offline = True
        await gateway.delete("tpl-promotion")
        store.offline = False
        listed = [t.id for t in await gateway.list()]
        assert "tpl-promotion" not in listed
        assert "tpl-promotion" not in store.templates
        assert gateway.unsynced == set()

    @pytest.mark.asyncio
    async def test_get_after_offline_delete_is_not_found(self, gateway, store):
        await gateway.list()
        store.offline = True
        await gateway.delete("tpl-promotion")
        with pytest.raises(NotFoundError):
            await gateway.get("tpl-promotion")

    @pytest.mark.asyncio
    async def test_offline_create_sent_on_first_update(self, gateway, store, template_factory):
        store.offline = True
        created = await gateway.create(template_factory())
        store.offline = False
        edited = created.copy()
        edited.name = "Summer sale"
        updated = await gateway.update(created.id, edited)
        assert updated.name == "Summer sale"
        assert updated.id != created.id
        assert gateway.renamed == {created.id: updated.id}
        assert store.templates[updated.id]["name"] == "Summer sale"
        assert gateway.unsynced == set()
        assert [t.id for t in gateway.cached() if t.name == "Summer sale"] == [updated.id]

    @pytest.mark.asyncio
    async def test_offline_create_edited_offline_keeps_local_copy(self, gateway, store, template_factory):
        store.offline = True
        created = await gateway.create(template_factory())
        edited = created.copy()
        edited.name = "Still offline"
        updated = await gateway.update(created.id, edited)
        assert updated.id == created.id
        assert updated.name == "Still offline"
        assert created.id in gateway.unsynced
        assert (await gateway.get(created.id)).name == "Still offline"

    @pytest.mark.asyncio
    async def test_offline_create_replayed_by_list(self, gateway, store, template_factory):
        store.offline = True
        created = await gateway.create(template_factory())
        await gateway.apply(created.id)
        store.offline = False
        listed = {t.name: t for t in await gateway.list() if t.name == "Spring sale"}
        server_id = gateway.renamed[created.id]
        assert listed["Spring sale"].id == server_id
        assert store.templates[server_id]["usageCount"] == 1
        assert gateway.unsynced == set()

    @pytest.mark.asyncio
    async def test_delete_of_offline_create_never_reaches_store(self, gateway, store, template_factory):
        store.offline = True
        created = await gateway.create(template_factory())
        await gateway.delete(created.id)
        store.offline = False
        before = set(store.templates)
        await gateway.list()
        assert set(store.templates) == before
        assert gateway.unsynced == set()

    @pytest.mark.asyncio
    async def test_offline_apply_replayed(self, gateway, store):
        await gateway.list()
        store.offline = True
        assert (await gateway.apply("tpl-promotion")).usage_count == 6
        store.offline = False
        assert await gateway.sync() is True
        assert store.templates["tpl-promotion"]["usageCount"] == 6

    @pytest.mark.asyncio
    async def test_sync_while_offline_reports_pending(self, gateway, store):
        await gateway.list()
        store.offline = True
        await gateway.delete("tpl-promotion")
        assert await gateway.sync() is False
        assert "tpl-promotion" in gateway.unsynced

    @pytest.mark.asyncio
    async def test_update_not_found_keeps_unsynced_copy(self, gateway, store):
        template = await gateway.get("tpl-promotion")
        store.offline = True
        template.name = "Offline edit"
        await gateway.update(template.id, template)
        store.offline = False
        del store.templates["tpl-promotion"]
        with pytest.raises(NotFoundError):
            await gateway.get("tpl-promotion")
        assert any(t.name == "Offline edit" for t in gateway.cached())


# ============================================================================
# HTTP store
# ============================================================================


def http_store(handler, token="tok"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTemplateStore("http://api.test/", token=token, client=client)


def wire(**overrides):
    data = PageTemplate(id="t1", name="Remote", category="custom").to_dict()
    data.update(overrides)
    return data


class TestHttpStore:
    @pytest.mark.asyncio
    async def test_list_sends_bearer_token(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"success": True, "templates": [wire()]})

        store = http_store(handler)
        templates = await store.list()
        assert [t.id for t in templates] == ["t1"]
        assert seen["url"] == "http://api.test/api/templates"
        assert seen["auth"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_no_token_no_header(self):
        def handler(request):
            assert "authorization" not in request.headers
            return httpx.Response(200, json={"success": True, "templates": []})

        assert await http_store(handler, token=None).list() == []

    @pytest.mark.asyncio
    async def test_create_posts_wire_body_without_id(self):
        def handler(request):
            body = json.loads(request.content)
            assert "id" not in body
            assert body["name"] == "Remote"
            return httpx.Response(201, json={"success": True, "template": wire(id="new")})

        created = await http_store(handler).create(PageTemplate(id="t1", name="Remote"))
        assert created.id == "new"

    @pytest.mark.asyncio
    async def test_404_maps_to_not_found(self):
        store = http_store(lambda r: httpx.Response(404, json={"success": False, "error": "Template not found"}))
        with pytest.raises(NotFoundError):
            await store.get("t1")

    @pytest.mark.asyncio
    async def test_400_on_delete_maps_to_protected(self):
        store = http_store(lambda r: httpx.Response(400, json={"success": False, "error": "Default"}))
        with pytest.raises(ProtectedTemplateError):
            await store.delete("t1")

    @pytest.mark.asyncio
    async def test_400_on_create_maps_to_invalid(self):
        store = http_store(lambda r: httpx.Response(400, json={"success": False, "error": "Name required"}))
        with pytest.raises(InvalidTemplateError, match="Name required"):
            await store.create(PageTemplate(name=""))

    @pytest.mark.asyncio
    async def test_500_maps_to_transport(self):
        store = http_store(lambda r: httpx.Response(500, text="oops"))
        with pytest.raises(TransportError):
            await store.list()

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_maps_to_transport(self):
        store = http_store(lambda r: httpx.Response(200, json={"success": False, "error": "db down"}))
        with pytest.raises(TransportError, match="db down"):
            await store.list()

    @pytest.mark.asyncio
    async def test_connection_error_maps_to_transport(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError):
            await http_store(handler).list()

    @pytest.mark.asyncio
    async def test_gateway_falls_back_when_http_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        gateway = TemplateGateway(http_store(handler), fallback=[PageTemplate(id="fb", name="Fallback")])
        assert [t.id for t in await gateway.list()] == ["fb"]
        assert gateway.warnings


# ============================================================================
# Filtering and stats
# ============================================================================


class TestFilterAndStats:
    @pytest.mark.asyncio
    async def test_filter_by_search_and_category(self):
        templates = await MemoryTemplateStore(
            [
                PageTemplate(id="a", name="Summer sale", category="custom"),
                PageTemplate(id="b", name="Home", description="Seasonal SALE banner", category="homepage"),
                PageTemplate(id="c", name="About", category="about"),
            ]
        ).list()
        assert {t.id for t in filter_templates(templates, "sale")} == {"a", "b"}
        assert [t.id for t in filter_templates(templates, "sale", "homepage")] == ["b"]
        assert [t.id for t in filter_templates(templates, category="about")] == ["c"]
        assert len(filter_templates(templates)) == 3

    def test_stats(self):
        templates = [
            PageTemplate(id="a", is_default=True, usage_count=25),
            PageTemplate(id="b", usage_count=5),
        ]
        assert template_stats(templates) == {"total": 2, "defaults": 1, "usage": 30}
