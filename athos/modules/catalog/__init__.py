"""Catalog Module - Read-only lesson content and quizzes.

Usage:
    from athos.modules.catalog import ContentQuery, InMemoryCatalog

    catalog = InMemoryCatalog(content=items, quizzes=quizzes)
    items = await catalog.find_content(ContentQuery(module_id="module1"))
"""

from athos.modules.catalog.interface import (
    Answer,
    ContentItem,
    ContentOrder,
    ContentQuery,
    ICatalog,
    Question,
    Quiz,
    normalize_answer,
)
from athos.modules.catalog.service import InMemoryCatalog, load_catalog_document, seed_catalog
from athos.modules.catalog.db_service import DatabaseCatalog

__all__ = [
    # Interface types
    "Answer",
    "ContentItem",
    "ContentOrder",
    "ContentQuery",
    "ICatalog",
    "Question",
    "Quiz",
    "normalize_answer",
    # Implementations
    "DatabaseCatalog",
    "InMemoryCatalog",
    # Seeding
    "load_catalog_document",
    "seed_catalog",
]
