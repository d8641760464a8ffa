"""Server route handlers."""

from __future__ import annotations

from .file_routes import FileRoutes
from .index_routes import IndexRoutes
from .snippet_routes import SnippetRoutes

__all__ = [
    "FileRoutes",
    "IndexRoutes",
    "SnippetRoutes",
]
