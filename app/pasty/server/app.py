"""Web server -- app factory, lifecycle and entry point."""

from __future__ import annotations

import logging
import ssl

from aiohttp import web
from aiohttp.abc import AbstractAccessLogger

from .. import __version__
from ..config import settings as settings_module
from ..config.settings import Settings
from ..errors import NotFoundError, SnapshotError, StorageError
from ..media.qr import PngQREncoder, QREncoder
from ..media.serve import RangeFileServer
from ..state.files import FileRegistry
from ..state.snapshot import SnapshotFile
from ..state.snippets import SnippetStore
from ..util.result import Result
from .routes.file_routes import FileRoutes
from .routes.index_routes import IndexRoutes
from .routes.snippet_routes import SnippetRoutes

logger = logging.getLogger(__name__)

_QUIET_PATHS = frozenset({"/health"})
_QUIET_PREFIXES = ("/stream/",)


# ---------------------------------------------------------------------------
# Access logger
# ---------------------------------------------------------------------------


class QuietAccessLogger(AbstractAccessLogger):
    """Demotes health checks and media-player range polling to DEBUG."""

    def log(self, request: web.BaseRequest, response: web.StreamResponse, time: float) -> None:
        quiet = request.path in _QUIET_PATHS or request.path.startswith(_QUIET_PREFIXES)
        self.logger.log(
            logging.DEBUG if quiet else logging.INFO,
            "%s %s %s %s %.3fs",
            request.remote,
            request.method,
            request.path,
            response.status,
            time,
        )


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------


@web.middleware
async def error_middleware(request: web.Request, handler):  # type: ignore[type-arg]
    try:
        return await handler(request)
    except NotFoundError:
        return web.json_response(
            {"status": "error", "message": "Not found"}, status=404
        )
    except StorageError:
        logger.exception("Storage failure handling %s %s", request.method, request.path)
        return web.json_response(
            {"status": "error", "message": "Storage failure"}, status=500
        )


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


async def create_app() -> web.Application:
    factory = AppFactory()
    return await factory.build()


class AppFactory:
    """Builds the aiohttp application with stores, snapshot and routes wired.

    ``load_state`` and ``save_state`` are the lifecycle hooks: the first runs
    during ``build`` and the second after every snippet mutation and once
    more from ``on_cleanup`` when the server shuts down (SIGINT/SIGTERM).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        qr_encoder: QREncoder | None = None,
    ) -> None:
        self._cfg = settings or settings_module.cfg
        self._qr = qr_encoder or PngQREncoder()
        self.snippets = SnippetStore()
        self.files = FileRegistry()
        self.snapshot = SnapshotFile(self._cfg.snapshot_path)

    async def build(self) -> web.Application:
        self._cfg.ensure_dirs()
        self.load_state()

        app = web.Application(
            middlewares=[error_middleware],
            client_max_size=self._cfg.max_upload_bytes,
        )
        self._register_routes(app)
        app.on_cleanup.append(self._on_cleanup)
        return app

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load_state(self) -> None:
        """Hydrate the snippet store; raises :class:`SnapshotError` if corrupt."""
        self.snapshot.load(self.snippets)

    def save_state(self) -> Result:
        return self.snapshot.save(self.snippets)

    async def _on_cleanup(self, _app: web.Application) -> None:
        logger.info("Gracefully shutting down...")
        self.save_state()

    # ------------------------------------------------------------------
    # Route registration
    # ------------------------------------------------------------------

    def _register_routes(self, app: web.Application) -> None:
        router = app.router
        uploads = self._cfg.uploads_dir

        IndexRoutes(self.snippets, self.files, uploads).register(router)
        SnippetRoutes(self.snippets, self.snapshot).register(router)
        FileRoutes(
            self.files,
            uploads,
            RangeFileServer(cache_max_age=self._cfg.cache_max_age),
            self._qr,
            public_url=self._cfg.public_url,
        ).register(router)
        router.add_get("/health", _health)


async def _health(_req: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "version": __version__})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_ssl_context(cfg: Settings) -> ssl.SSLContext | None:
    if not cfg.ssl_enabled:
        return None
    ctx = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    ctx.load_cert_chain(str(cfg.ssl_cert_path), str(cfg.ssl_key_path))
    return ctx


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(name)s  %(levelname)s  %(message)s",
    )
    cfg = settings_module.cfg
    ssl_context = build_ssl_context(cfg)
    logger.info(
        "Starting %s server on %s:%d ...",
        "HTTPS" if ssl_context else "HTTP", cfg.host, cfg.port,
    )
    try:
        web.run_app(
            create_app(),
            host=cfg.host,
            port=cfg.port,
            ssl_context=ssl_context,
            access_log_class=QuietAccessLogger,
        )
    except SnapshotError as exc:
        logger.critical("Refusing to start: %s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
