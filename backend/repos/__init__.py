"""
Repository layer for the storefront pages service.

All SQL lives here and ONLY here. No database access outside this module.
"""

from backend.repos.template_repo import TemplateRepo

__all__ = [
    "TemplateRepo",
]
