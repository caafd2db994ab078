"""
Page Composer — Template Persistence Gateway

Sits between the editor and the remote template store. CRUD for named,
categorised templates, with:

  - default templates protected from deletion (checked locally before the
    delete call goes out)
  - usage counting when a template is applied to a live page
  - a last-known-good cache: when the store is unreachable, reads are served
    from the cache and writes are applied optimistically to it, with a
    visible warning, rather than losing the operator's edits; those pending
    changes are replayed once the store answers again

Storage is pluggable: MemoryTemplateStore in-process (tests, offline),
HttpTemplateStore against the REST API.

This is where IO happens. The editor and renderer are pure.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from typing import Any

import httpx

from engine.composer.types import (
    DEFAULT_THUMBNAIL,
    TEMPLATE_CATEGORIES,
    PageTemplate,
    new_template_id,
    now_iso,
)

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (copy)"

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GatewayError(Exception):
    """Base class for template persistence failures."""


class NotFoundError(GatewayError):
    """Template does not exist in the store."""

    def __init__(self, template_id: str):
        super().__init__(f"Template not found: {template_id}")
        self.template_id = template_id


class ProtectedTemplateError(GatewayError):
    """Delete attempted on a default template."""

    def __init__(self, template_id: str):
        super().__init__(f"Default templates cannot be deleted: {template_id}")
        self.template_id = template_id


class InvalidTemplateError(GatewayError):
    """Store rejected the template body (missing name or category)."""


class TransportError(GatewayError):
    """Network or storage failure talking to the store."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def sort_templates(templates: Iterable[PageTemplate]) -> list[PageTemplate]:
    """Default templates first, then most recently updated."""
    by_recency = sorted(templates, key=lambda t: t.updated_at, reverse=True)
    return sorted(by_recency, key=lambda t: not t.is_default)


def validate_template(template: PageTemplate) -> None:
    if not template.name or not template.name.strip():
        raise InvalidTemplateError("Template name is required")
    if template.category not in TEMPLATE_CATEGORIES:
        raise InvalidTemplateError(f"Invalid template category: {template.category!r}")


def duplicate_template(source: PageTemplate) -> PageTemplate:
    """Copy of `source` as a fresh, non-default, unused template."""
    clone = source.copy()
    now = now_iso()
    clone.id = ""
    clone.name = f"{source.name}{COPY_SUFFIX}"
    clone.is_default = False
    clone.usage_count = 0
    clone.created_at = now
    clone.updated_at = now
    return clone


def merge_update(stored: PageTemplate, incoming: PageTemplate) -> PageTemplate:
    """
    Apply an update body to a stored template.
    id, created_at, is_default and usage_count are system-managed and stay
    as stored; updated_at is refreshed.
    """
    merged = incoming.copy()
    merged.id = stored.id
    merged.created_at = stored.created_at
    merged.is_default = stored.is_default
    merged.usage_count = stored.usage_count
    merged.thumbnail = incoming.thumbnail or DEFAULT_THUMBNAIL
    merged.updated_at = now_iso()
    return merged


def filter_templates(
    templates: Iterable[PageTemplate],
    search: str = "",
    category: str = "all",
) -> list[PageTemplate]:
    """Case-insensitive search over name/description, plus category filter."""
    term = search.strip().lower()
    out = []
    for t in templates:
        if category != "all" and t.category != category:
            continue
        if term and term not in t.name.lower() and term not in t.description.lower():
            continue
        out.append(t)
    return out


def template_stats(templates: Iterable[PageTemplate]) -> dict[str, int]:
    items = list(templates)
    return {
        "total": len(items),
        "defaults": sum(1 for t in items if t.is_default),
        "usage": sum(t.usage_count for t in items),
    }


# ---------------------------------------------------------------------------
# Storage protocol
# ---------------------------------------------------------------------------


class TemplateStore:
    """
    Abstract template store.
    Implement over HTTP for production, or in-memory for tests.
    """

    async def list(self) -> list[PageTemplate]:
        raise NotImplementedError

    async def get(self, template_id: str) -> PageTemplate:
        """Raises NotFoundError if absent."""
        raise NotImplementedError

    async def create(self, template: PageTemplate) -> PageTemplate:
        """Store assigns id and timestamps. Caller-supplied id is ignored."""
        raise NotImplementedError

    async def update(self, template_id: str, template: PageTemplate) -> PageTemplate:
        raise NotImplementedError

    async def delete(self, template_id: str) -> None:
        raise NotImplementedError

    async def apply(self, template_id: str) -> PageTemplate:
        """Increment usage_count and return the updated template."""
        raise NotImplementedError


class MemoryTemplateStore(TemplateStore):
    """
    In-memory store with the same semantics as the REST service.
    Templates are kept in wire format, so every read is a fresh object.
    """

    def __init__(self, templates: Iterable[PageTemplate] = ()) -> None:
        self.templates: dict[str, dict[str, Any]] = {}
        for t in templates:
            if not t.id:
                t = t.copy()
                t.id = new_template_id()
            self.templates[t.id] = t.to_dict()

    def _load(self, template_id: str) -> PageTemplate:
        data = self.templates.get(template_id)
        if data is None:
            raise NotFoundError(template_id)
        return PageTemplate.from_dict(copy.deepcopy(data))

    async def list(self) -> list[PageTemplate]:
        return sort_templates(PageTemplate.from_dict(copy.deepcopy(d)) for d in self.templates.values())

    async def get(self, template_id: str) -> PageTemplate:
        return self._load(template_id)

    async def create(self, template: PageTemplate) -> PageTemplate:
        validate_template(template)
        created = template.copy()
        now = now_iso()
        created.id = new_template_id()
        created.created_at = now
        created.updated_at = now
        created.is_default = False
        created.usage_count = 0
        created.thumbnail = template.thumbnail or DEFAULT_THUMBNAIL
        self.templates[created.id] = created.to_dict()
        return created.copy()

    async def update(self, template_id: str, template: PageTemplate) -> PageTemplate:
        validate_template(template)
        stored = self._load(template_id)
        merged = merge_update(stored, template)
        self.templates[template_id] = merged.to_dict()
        return merged.copy()

    async def delete(self, template_id: str) -> None:
        stored = self._load(template_id)
        if stored.is_default:
            raise ProtectedTemplateError(template_id)
        del self.templates[template_id]

    async def apply(self, template_id: str) -> PageTemplate:
        stored = self._load(template_id)
        stored.usage_count += 1
        self.templates[template_id] = stored.to_dict()
        return stored.copy()


class HttpTemplateStore(TemplateStore):
    """
    Template store backed by the REST API (`/api/templates`).

    Single attempt per call, no retry. Bearer token attached when given.
    Status mapping: 404 → NotFoundError, 400 on DELETE → ProtectedTemplateError,
    400/422 otherwise → InvalidTemplateError, anything else failing → TransportError.
    """

    PREFIX = "/api/templates"

    def __init__(
        self,
        api_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.token = token
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        template_id: str | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.api_url}{self.PREFIX}{path}"
        try:
            res = await self._client.request(method, url, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        try:
            data = res.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        error = data.get("error") or res.reason_phrase

        if res.status_code == 404 and template_id is not None:
            raise NotFoundError(template_id)
        if res.status_code == 400 and method == "DELETE" and template_id is not None:
            raise ProtectedTemplateError(template_id)
        if res.status_code in (400, 422):
            raise InvalidTemplateError(str(error))
        if res.status_code >= 400:
            raise TransportError(f"{method} {url} returned {res.status_code}: {error}")
        if not data.get("success"):
            raise TransportError(f"{method} {url} was not successful: {error}")
        return data

    async def list(self) -> list[PageTemplate]:
        data = await self._request("GET", "")
        return [PageTemplate.from_dict(t) for t in data.get("templates", [])]

    async def get(self, template_id: str) -> PageTemplate:
        data = await self._request("GET", f"/{template_id}", template_id)
        return PageTemplate.from_dict(data["template"])

    async def create(self, template: PageTemplate) -> PageTemplate:
        body = template.to_dict()
        body.pop("id", None)
        data = await self._request("POST", "", body=body)
        return PageTemplate.from_dict(data["template"])

    async def update(self, template_id: str, template: PageTemplate) -> PageTemplate:
        data = await self._request("PUT", f"/{template_id}", template_id, template.to_dict())
        return PageTemplate.from_dict(data["template"])

    async def delete(self, template_id: str) -> None:
        await self._request("DELETE", f"/{template_id}", template_id)

    async def apply(self, template_id: str) -> PageTemplate:
        data = await self._request("POST", f"/{template_id}/apply", template_id)
        return PageTemplate.from_dict(data["template"])

    async def aclose(self) -> None:
        await self._client.aclose()


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------


class TemplateGateway:
    """
    The editor-facing persistence API.

    NotFoundError, ProtectedTemplateError and InvalidTemplateError always
    propagate and leave the cache as it was. TransportError is absorbed
    where the cache can stand in (see module docstring): the change is kept
    as a pending operation, its id shows up in `unsynced` and a message
    lands in `warnings`.

    Pending operations are replayed against the store, in the order
    deletes, updates, creates, applies, on the next `list()` or explicit
    `sync()`. Templates created offline only get their real id at that
    point; `renamed` maps each local id to the id the store assigned.
    """

    def __init__(self, store: TemplateStore, fallback: Iterable[PageTemplate] = ()):
        self._store = store
        self._fallback = [t.copy() for t in fallback]
        self._cache: dict[str, PageTemplate] = {}
        self._pending_creates: set[str] = set()
        self._pending_updates: set[str] = set()
        self._pending_deletes: set[str] = set()
        self._pending_applies: dict[str, int] = {}
        self.renamed: dict[str, str] = {}
        self.warnings: list[str] = []

    @property
    def unsynced(self) -> set[str]:
        """Ids with local changes the store has not seen yet."""
        return (
            self._pending_creates
            | self._pending_updates
            | self._pending_deletes
            | set(self._pending_applies)
        )

    # -- cache --

    def cached(self) -> list[PageTemplate]:
        """Last-known-good templates, sorted."""
        return [t.copy() for t in sort_templates(self._cache.values())]

    def _remember(self, template: PageTemplate) -> PageTemplate:
        self._cache[template.id] = template.copy()
        return template

    def _forget(self, template_id: str) -> None:
        """Drop a template the store says is gone, unless local changes are pending for it."""
        if template_id not in self.unsynced:
            self._cache.pop(template_id, None)

    def _discard_pending(self, template_id: str) -> None:
        self._pending_creates.discard(template_id)
        self._pending_updates.discard(template_id)
        self._pending_deletes.discard(template_id)
        self._pending_applies.pop(template_id, None)

    def _warn(self, operation: str, error: Exception) -> None:
        message = f"{operation} could not reach the template store; change kept locally ({error})"
        logger.warning("template gateway: %s", message)
        self.warnings.append(message)

    def _resolve(self, template_id: str) -> str:
        return self.renamed.get(template_id, template_id)

    # -- replay --

    async def _replay(self) -> None:
        """Push pending operations to the store. Raises TransportError if it goes away again."""
        for template_id in sorted(self._pending_deletes):
            try:
                await self._store.delete(template_id)
            except NotFoundError:
                logger.info("template gateway: %s already gone from the store", template_id)
            self._pending_deletes.discard(template_id)

        for template_id in sorted(self._pending_updates):
            try:
                updated = await self._store.update(template_id, self._cache[template_id])
            except NotFoundError:
                # Removed on the store meanwhile; keep the operator's copy as a new template
                logger.warning("template gateway: %s vanished from the store, recreating it", template_id)
                self._pending_creates.add(template_id)
            else:
                self._remember(updated)
            self._pending_updates.discard(template_id)

        for local_id in sorted(self._pending_creates):
            created = await self._store.create(self._cache[local_id])
            self._pending_creates.discard(local_id)
            self._cache.pop(local_id, None)
            self._remember(created)
            self.renamed[local_id] = created.id
            applies = self._pending_applies.pop(local_id, 0)
            if applies:
                self._pending_applies[created.id] = applies

        for template_id in sorted(self._pending_applies):
            while self._pending_applies.get(template_id, 0) > 0:
                try:
                    applied = await self._store.apply(template_id)
                except NotFoundError:
                    logger.warning("template gateway: dropping uses recorded for missing %s", template_id)
                    self._pending_applies.pop(template_id, None)
                    break
                self._remember(applied)
                self._pending_applies[template_id] -= 1
            self._pending_applies.pop(template_id, None)

    async def sync(self) -> bool:
        """Replay changes kept locally while the store was unreachable. True when nothing is left pending."""
        if not self.unsynced:
            return True
        try:
            await self._replay()
        except TransportError as e:
            self._warn("sync", e)
        return not self.unsynced

    # -- reads --

    async def list(self) -> list[PageTemplate]:
        try:
            if self.unsynced:
                await self._replay()
            templates = await self._store.list()
        except TransportError as e:
            self._warn("list", e)
            if not self._cache:
                for t in self._fallback:
                    self._cache[t.id] = t.copy()
            return self.cached()

        fresh = {t.id: t.copy() for t in templates if t.id not in self._pending_deletes}
        # Keep optimistic local changes that the store has not seen yet
        for template_id in self.unsynced:
            if template_id in self._cache:
                fresh[template_id] = self._cache[template_id]
        self._cache = fresh
        return self.cached()

    async def get(self, template_id: str) -> PageTemplate:
        template_id = self._resolve(template_id)
        if template_id in self._pending_deletes:
            raise NotFoundError(template_id)
        if template_id in self._pending_creates:
            return self._cache[template_id].copy()
        try:
            template = await self._store.get(template_id)
        except NotFoundError:
            self._forget(template_id)
            raise
        except TransportError as e:
            cached = self._cache.get(template_id)
            if cached is None:
                raise
            self._warn("get", e)
            return cached.copy()
        return self._remember(template)

    # -- writes --

    async def create(self, template: PageTemplate) -> PageTemplate:
        try:
            created = await self._store.create(template)
        except TransportError as e:
            validate_template(template)
            created = template.copy()
            now = now_iso()
            created.id = new_template_id()
            created.created_at = now
            created.updated_at = now
            created.is_default = False
            created.usage_count = 0
            self._pending_creates.add(created.id)
            self._warn("create", e)
        return self._remember(created)

    async def update(self, template_id: str, template: PageTemplate) -> PageTemplate:
        template_id = self._resolve(template_id)
        if template_id in self._pending_deletes:
            raise NotFoundError(template_id)
        if template_id in self._pending_creates:
            # Never reached the store: fold the edit into the pending create and try to send it
            validate_template(template)
            self._cache[template_id] = merge_update(self._cache[template_id], template)
            await self.sync()
            return self._cache[self._resolve(template_id)].copy()

        try:
            updated = await self._store.update(template_id, template)
        except NotFoundError:
            self._forget(template_id)
            raise
        except TransportError as e:
            stored = self._cache.get(template_id)
            if stored is None:
                raise
            validate_template(template)
            updated = merge_update(stored, template)
            self._pending_updates.add(template_id)
            self._warn("update", e)
        else:
            self._pending_updates.discard(template_id)
            # usage recorded offline is still pending; keep showing it
            updated.usage_count += self._pending_applies.get(template_id, 0)
        return self._remember(updated)

    async def delete(self, template_id: str) -> None:
        template_id = self._resolve(template_id)
        if template_id in self._pending_deletes:
            raise NotFoundError(template_id)
        if template_id in self._pending_creates:
            # Only ever existed locally
            self._discard_pending(template_id)
            self._cache.pop(template_id, None)
            return

        target = self._cache.get(template_id)
        if target is None:
            target = await self.get(template_id)
        if target.is_default:
            raise ProtectedTemplateError(template_id)

        try:
            await self._store.delete(template_id)
        except NotFoundError:
            self._discard_pending(template_id)
            self._cache.pop(template_id, None)
            raise
        except TransportError as e:
            self._discard_pending(template_id)
            self._pending_deletes.add(template_id)
            self._warn("delete", e)
        else:
            self._discard_pending(template_id)
        self._cache.pop(template_id, None)

    async def duplicate(self, template_id: str) -> PageTemplate:
        source = await self.get(template_id)
        return await self.create(duplicate_template(source))

    async def apply(self, template_id: str) -> PageTemplate:
        """Record one use of a template on a live page."""
        template_id = self._resolve(template_id)
        if template_id in self._pending_deletes:
            raise NotFoundError(template_id)
        if template_id not in self._pending_creates:
            try:
                applied = await self._store.apply(template_id)
            except NotFoundError:
                self._forget(template_id)
                raise
            except TransportError as e:
                if template_id not in self._cache:
                    raise
                self._warn("apply", e)
            else:
                applied.usage_count += self._pending_applies.get(template_id, 0)
                return self._remember(applied)

        updated = self._cache[template_id].copy()
        updated.usage_count += 1
        self._pending_applies[template_id] = self._pending_applies.get(template_id, 0) + 1
        return self._remember(updated)
