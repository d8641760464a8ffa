"""Range-aware file streaming for the download, stream and view endpoints."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import BinaryIO

from aiohttp import hdrs, web

from ..errors import NotFoundError
from ..util.async_helpers import run_sync
from .ranges import FullRange, PartialRange, Unparsable, parse_range

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _disposition(declared_name: str, inline: bool) -> str:
    name = declared_name.replace("\r", "").replace("\n", "").replace('"', '\\"')
    kind = "inline" if inline else "attachment"
    return f'{kind}; filename="{name}"'


class RangeFileServer:
    """Streams a backing file, honouring a single-range ``Range`` header.

    An unparsable or unsatisfiable range is not an error: the whole object
    is served with status 200 instead of answering 416. HEAD requests get
    the same headers and no body.
    """

    def __init__(self, cache_max_age: int = 3600, chunk_size: int = CHUNK_SIZE) -> None:
        self._cache_max_age = cache_max_age
        self._chunk_size = chunk_size

    async def serve(
        self,
        req: web.Request,
        path: Path,
        declared_name: str,
        mime_type: str,
        *,
        inline: bool,
    ) -> web.StreamResponse:
        try:
            fh: BinaryIO = await run_sync(open, path, "rb")
        except OSError as exc:
            logger.info("File not found: %s (%s)", path.name, exc.__class__.__name__)
            raise NotFoundError(path.name) from exc

        try:
            size = os.fstat(fh.fileno()).st_size
            requested = parse_range(req.headers.get(hdrs.RANGE), size)
            if isinstance(requested, Unparsable):
                logger.debug(
                    "Ignoring range %r for %s (%s); serving full content",
                    req.headers.get(hdrs.RANGE), declared_name, requested.reason,
                )
                requested = FullRange()

            headers = {
                hdrs.CONTENT_TYPE: mime_type,
                hdrs.CONTENT_DISPOSITION: _disposition(declared_name, inline),
                hdrs.ACCEPT_RANGES: "bytes",
                hdrs.CACHE_CONTROL: f"public, max-age={self._cache_max_age}",
            }
            if isinstance(requested, PartialRange):
                status, start, length = 206, requested.start, requested.length
                headers[hdrs.CONTENT_RANGE] = requested.content_range(size)
                logger.debug(
                    "Serving range request for %s: bytes %d-%d/%d",
                    declared_name, requested.start, requested.end, size,
                )
            else:
                status, start, length = 200, 0, size
                logger.info(
                    "Serving file: %s (size: %d bytes, inline: %s)",
                    declared_name, size, inline,
                )

            resp = web.StreamResponse(status=status, headers=headers)
            resp.content_length = length
            await resp.prepare(req)
            try:
                if req.method != hdrs.METH_HEAD:
                    await self._copy(fh, resp, start, length)
                await resp.write_eof()
            except ConnectionResetError:
                logger.info("Client disconnected while streaming %s", declared_name)
            except asyncio.CancelledError:
                logger.info("Client disconnected while streaming %s", declared_name)
                raise
            return resp
        finally:
            fh.close()

    async def _copy(
        self, fh: BinaryIO, resp: web.StreamResponse, start: int, length: int
    ) -> None:
        if start:
            await run_sync(fh.seek, start)
        remaining = length
        while remaining > 0:
            chunk = await run_sync(fh.read, min(self._chunk_size, remaining))
            if not chunk:
                break
            await resp.write(chunk)
            remaining -= len(chunk)
