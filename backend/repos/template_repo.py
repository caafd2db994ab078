"""Repository for page template operations."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

import asyncpg

from backend.config import settings
from backend.db import conn
from backend.models.template import ComponentModel, CreateTemplateRequest, Template, UpdateTemplateRequest
from engine.composer.types import PageTemplate


def _row_to_template(row: asyncpg.Record) -> Template:
    """Convert a database row to a Template model."""
    return Template(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        category=row["category"],
        thumbnail=row["thumbnail"],
        components=[ComponentModel(**c) for c in row["components"] or []],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        is_default=row["is_default"],
        usage_count=row["usage_count"],
    )


def _components_json(components: list[ComponentModel]) -> list[dict]:
    return [c.model_dump(exclude_none=True) for c in components]


class TemplateRepo:
    """All template-related database operations."""

    async def list_all(self) -> list[Template]:
        """
        List every template.

        Returns:
            Templates, defaults first, then most recently updated
        """
        async with conn() as c:
            rows = await c.fetch(
                """
                SELECT * FROM page_templates
                ORDER BY is_default DESC, updated_at DESC
                """
            )
            return [_row_to_template(r) for r in rows]

    async def get(self, template_id: str) -> Template | None:
        async with conn() as c:
            row = await c.fetchrow(
                "SELECT * FROM page_templates WHERE id = $1",
                template_id,
            )
            return _row_to_template(row) if row else None

    async def create(self, req: CreateTemplateRequest) -> Template:
        """
        Create a new template. Never a default, usage starts at zero.

        Args:
            req: CreateTemplateRequest with template details

        Returns:
            Newly created Template
        """
        now = datetime.now(UTC)
        async with conn() as c:
            row = await c.fetchrow(
                """
                INSERT INTO page_templates
                    (id, name, description, category, thumbnail, components,
                     created_at, updated_at, is_default, usage_count)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $7, false, 0)
                RETURNING *
                """,
                str(uuid4()),
                req.name,
                req.description,
                req.category,
                req.thumbnail or settings.DEFAULT_THUMBNAIL,
                _components_json(req.components),
                now,
            )
            return _row_to_template(row)

    async def update(self, template_id: str, req: UpdateTemplateRequest) -> Template | None:
        """
        Replace the editable fields of a template.
        is_default, usage_count and created_at are never touched.

        Returns:
            Updated Template, or None if it does not exist
        """
        async with conn() as c:
            row = await c.fetchrow(
                """
                UPDATE page_templates
                SET name = $2, description = $3, category = $4, thumbnail = $5,
                    components = $6, updated_at = now()
                WHERE id = $1
                RETURNING *
                """,
                template_id,
                req.name,
                req.description,
                req.category,
                req.thumbnail or settings.DEFAULT_THUMBNAIL,
                _components_json(req.components),
            )
            return _row_to_template(row) if row else None

    async def delete(self, template_id: str) -> bool:
        """
        Delete a non-default template.

        Returns:
            True if deleted, False if not found or a default template
        """
        async with conn() as c:
            result = await c.execute(
                "DELETE FROM page_templates WHERE id = $1 AND is_default = false",
                template_id,
            )
            return result == "DELETE 1"

    async def increment_usage(self, template_id: str) -> Template | None:
        async with conn() as c:
            row = await c.fetchrow(
                """
                UPDATE page_templates
                SET usage_count = usage_count + 1
                WHERE id = $1
                RETURNING *
                """,
                template_id,
            )
            return _row_to_template(row) if row else None

    async def insert_seed(self, template: PageTemplate) -> bool:
        """
        Insert a seed template keeping its id, flags and timestamps.
        Existing rows are left alone.

        Returns:
            True if inserted, False if the id already existed
        """
        async with conn() as c:
            result = await c.execute(
                """
                INSERT INTO page_templates
                    (id, name, description, category, thumbnail, components,
                     created_at, updated_at, is_default, usage_count)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                ON CONFLICT (id) DO NOTHING
                """,
                template.id,
                template.name,
                template.description,
                template.category,
                template.thumbnail,
                [comp.to_dict() for comp in template.components],
                datetime.fromisoformat(template.created_at),
                datetime.fromisoformat(template.updated_at),
                template.is_default,
                template.usage_count,
            )
            return result == "INSERT 0 1"
