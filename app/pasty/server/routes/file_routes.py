"""Uploaded file routes -- /upload, /file, /view, /stream and /download."""

from __future__ import annotations

import base64
import logging
import shutil
from dataclasses import asdict
from pathlib import Path
from typing import BinaryIO

from aiohttp import web

from ...errors import NotFoundError, StorageError
from ...media.classify import classify
from ...media.qr import QREncoder
from ...media.serve import RangeFileServer
from ...state.files import FileRecord, FileRegistry
from ...util.async_helpers import run_sync
from ...util.ids import new_file_id, sanitize_name
from ..views import FileShareView, FileViewerView, file_url

logger = logging.getLogger(__name__)

_MAX_TEXT_PREVIEW = 1024 * 1024


class FileRoutes:
    """Upload handling and id-addressed access to the uploads directory.

    Ids are resolved against the registry for the original file name; ids
    that were never uploaded through the server but exist on disk are served
    under their raw name.
    """

    def __init__(
        self,
        registry: FileRegistry,
        uploads_dir: Path,
        file_server: RangeFileServer,
        qr_encoder: QREncoder,
        public_url: str = "",
    ) -> None:
        self._registry = registry
        self._uploads = uploads_dir
        self._server = file_server
        self._qr = qr_encoder
        self._public_url = public_url.rstrip("/")

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_post("/upload", self._upload)
        router.add_get("/file/{file_id}", self._share)
        router.add_get("/view/{file_id}", self._view)
        router.add_get("/stream/{file_id}", self._stream)
        router.add_get("/download/{file_id}", self._download)

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    async def _upload(self, req: web.Request) -> web.Response:
        try:
            form = await req.post()
        except ValueError as exc:
            logger.warning("Malformed upload body from %s: %s", req.remote, exc)
            return web.json_response(
                {"status": "error", "message": "Error retrieving file"}, status=400
            )

        field = form.get("file")
        if not isinstance(field, web.FileField):
            logger.warning("Upload request without a 'file' part from %s", req.remote)
            return web.json_response(
                {"status": "error", "message": "Error retrieving file"}, status=400
            )

        file_id = new_file_id(field.filename or "")
        try:
            await run_sync(self._write_upload, field.file, file_id)
        except OSError as exc:
            raise StorageError(f"cannot save upload {file_id}") from exc

        self._registry.put(
            FileRecord(id=file_id, original_name=field.filename or file_id, stored_name=file_id)
        )
        logger.info("Stored upload %r as %s", field.filename, file_id)
        raise web.HTTPSeeOther(file_url("file", file_id))

    def _write_upload(self, src: BinaryIO, file_id: str) -> None:
        self._uploads.mkdir(parents=True, exist_ok=True)
        dest = self._uploads / file_id
        # "x" refuses to clobber an existing object with the same id.
        with open(dest, "xb") as dst:
            try:
                shutil.copyfileobj(src, dst)
            except OSError:
                dst.close()
                dest.unlink(missing_ok=True)
                raise

    # ------------------------------------------------------------------
    # Id-addressed reads
    # ------------------------------------------------------------------

    def _resolve(self, req: web.Request) -> tuple[str, Path, str]:
        file_id = sanitize_name(req.match_info["file_id"])
        if not file_id:
            raise NotFoundError(req.match_info["file_id"])
        return file_id, self._uploads / file_id, self._registry.display_name(file_id)

    async def _require_file(self, path: Path) -> None:
        if not await run_sync(path.is_file):
            raise NotFoundError(path.name)

    def _base_url(self, req: web.Request) -> str:
        return self._public_url or f"{req.scheme}://{req.host}"

    async def _share(self, req: web.Request) -> web.Response:
        file_id, path, name = self._resolve(req)
        await self._require_file(path)

        view_url = self._base_url(req) + file_url("view", file_id)
        try:
            png = await run_sync(self._qr.encode, view_url)
        except Exception:
            logger.exception("QR code generation failed for %s", view_url)
            return web.json_response(
                {"status": "error", "message": "Failed to generate QR code"}, status=500
            )

        view = FileShareView(
            file_name=name,
            view_url=file_url("view", file_id),
            download_url=file_url("download", file_id),
            qr_code=base64.b64encode(png).decode("ascii"),
        )
        return web.json_response(asdict(view))

    async def _view(self, req: web.Request) -> web.Response:
        file_id, path, name = self._resolve(req)
        await self._require_file(path)

        kind = classify(name)
        text_content = ""
        if kind.is_text:
            text_content = await run_sync(self._read_preview, path)

        view = FileViewerView(
            file_name=name,
            stream_url=file_url("stream", file_id),
            download_url=file_url("download", file_id),
            content_type=kind.mime_type,
            category=kind.category,
            is_video=kind.is_video,
            is_audio=kind.is_audio,
            is_image=kind.is_image,
            is_pdf=kind.is_pdf,
            is_text=kind.is_text,
            text_content=text_content,
        )
        return web.json_response(asdict(view))

    @staticmethod
    def _read_preview(path: Path) -> str:
        try:
            if path.stat().st_size >= _MAX_TEXT_PREVIEW:
                return ""
            return path.read_bytes().decode("utf-8", errors="replace")
        except OSError:
            return ""

    async def _stream(self, req: web.Request) -> web.StreamResponse:
        return await self._serve(req, inline=True)

    async def _download(self, req: web.Request) -> web.StreamResponse:
        return await self._serve(req, inline=False)

    async def _serve(self, req: web.Request, *, inline: bool) -> web.StreamResponse:
        _file_id, path, name = self._resolve(req)
        return await self._server.serve(
            req, path, name, classify(name).mime_type, inline=inline
        )
