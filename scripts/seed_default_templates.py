#!/usr/bin/env python3
"""
Seed the page_templates table with the built-in templates.

Usage:
    python scripts/seed_default_templates.py

Idempotent: templates whose id already exists are left untouched, so edits
and usage counts made in production survive a reseed.
"""

import asyncio

from backend.db import close_pool, init_pool
from backend.repos.template_repo import TemplateRepo
from engine.composer.defaults import seed_templates


async def main():
    await init_pool()
    repo = TemplateRepo()

    try:
        inserted = 0
        for template in seed_templates():
            if await repo.insert_seed(template):
                inserted += 1
                print(f"Seeded: {template.id} ({template.name})")
            else:
                print(f"Exists: {template.id}")
        print(f"{inserted} template(s) inserted")
    finally:
        await close_pool()


if __name__ == "__main__":
    asyncio.run(main())
