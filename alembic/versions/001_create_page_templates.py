"""Page templates table.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.execute("""
        CREATE TABLE page_templates (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL CHECK (length(btrim(name)) > 0),
            description TEXT NOT NULL DEFAULT '',
            category TEXT NOT NULL DEFAULT 'custom'
                CHECK (category IN ('homepage', 'product', 'category', 'about', 'custom')),
            thumbnail TEXT NOT NULL DEFAULT '/placeholder.svg?height=200&width=300',
            components JSONB NOT NULL DEFAULT '[]'::jsonb,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            is_default BOOLEAN NOT NULL DEFAULT false,
            usage_count INTEGER NOT NULL DEFAULT 0 CHECK (usage_count >= 0)
        );
    """)

    # List ordering: defaults first, then most recently updated
    op.execute("""
        CREATE INDEX idx_page_templates_listing
        ON page_templates (is_default DESC, updated_at DESC);
    """)

    op.execute("""
        CREATE INDEX idx_page_templates_category ON page_templates (category);
    """)


def downgrade():
    op.execute("DROP INDEX IF EXISTS idx_page_templates_category")
    op.execute("DROP INDEX IF EXISTS idx_page_templates_listing")
    op.execute("DROP TABLE IF EXISTS page_templates CASCADE")
