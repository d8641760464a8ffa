"""Index route -- GET / lists recent snippets and the uploads directory."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path

from aiohttp import web

from ...state.files import FileRegistry
from ...state.snippets import SnippetStore
from ...util.async_helpers import run_sync
from ..views import FileEntry, IndexView, build_snippet_list

logger = logging.getLogger(__name__)


class IndexRoutes:
    """Landing page data: newest snippets plus every file on disk."""

    def __init__(self, store: SnippetStore, registry: FileRegistry, uploads_dir: Path) -> None:
        self._store = store
        self._registry = registry
        self._uploads = uploads_dir

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_get("/", self._index)

    async def _index(self, _req: web.Request) -> web.Response:
        view = IndexView(
            snippets=build_snippet_list(self._store.list()),
            files=await run_sync(self._list_files),
        )
        return web.json_response(asdict(view))

    def _list_files(self) -> list[FileEntry]:
        try:
            children = sorted(self._uploads.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            logger.warning("Error reading uploads directory: %s", exc)
            return []
        return [
            FileEntry(id=p.name, name=self._registry.display_name(p.name))
            for p in children
            if not p.is_dir()
        ]
