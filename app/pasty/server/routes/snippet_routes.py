"""Snippet routes -- /save, /display/{snippet_id}, /delete/{snippet_id}."""

from __future__ import annotations

import logging
from dataclasses import asdict

from aiohttp import web

from ...state.snapshot import SnapshotFile
from ...state.snippets import SnippetStore
from ...util.async_helpers import run_sync
from ..views import snippet_view

logger = logging.getLogger(__name__)


def _form_str(form, key: str) -> str:
    value = form.get(key, "")
    return value if isinstance(value, str) else ""


class SnippetRoutes:
    """Create, show and delete text snippets; every mutation is persisted."""

    def __init__(self, store: SnippetStore, snapshot: SnapshotFile) -> None:
        self._store = store
        self._snapshot = snapshot

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_post("/save", self._save)
        router.add_get("/display/{snippet_id}", self._display)
        router.add_post("/delete/{snippet_id}", self._delete)

    async def _persist(self) -> None:
        # Failures are logged by SnapshotFile; the request still succeeds.
        await run_sync(self._snapshot.save, self._store)

    async def _save(self, req: web.Request) -> web.Response:
        try:
            form = await req.post()
        except ValueError as exc:
            logger.warning("Malformed snippet form from %s: %s", req.remote, exc)
            return web.json_response(
                {"status": "error", "message": "Error parsing form"}, status=400
            )
        snippet = self._store.create(
            title=_form_str(form, "title"),
            text=_form_str(form, "text"),
            burn_after_reading=_form_str(form, "burn") == "true",
        )
        logger.info("Saved snippet %s (burn=%s)", snippet.id, snippet.burn_after_reading)
        await self._persist()
        raise web.HTTPSeeOther(f"/display/{snippet.id}")

    async def _display(self, req: web.Request) -> web.Response:
        snippet_id = req.match_info["snippet_id"]
        snippet = self._store.consume_if_burn(snippet_id)
        if snippet is None:
            raise web.HTTPSeeOther("/")
        resp = web.json_response(asdict(snippet_view(snippet)))
        if snippet.burn_after_reading:
            logger.info("Burned snippet %s after reading", snippet_id)
            await self._persist()
        return resp

    async def _delete(self, req: web.Request) -> web.Response:
        snippet_id = req.match_info["snippet_id"]
        if self._store.delete(snippet_id):
            logger.info("Deleted snippet %s", snippet_id)
        await self._persist()
        raise web.HTTPSeeOther("/")
