"""Application settings -- reads from environment and ``.env`` file.

All configuration is consolidated here.  Values are re-read by ``reload()``;
paths derive from the data directory so tests can redirect everything with
a single ``PASTY_DATA_DIR`` override.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar

from ..util.env_file import EnvFile
from ..util.singletons import register_singleton

_TRUTHY = ("1", "true", "yes", "on")


class Settings:
    """Runtime configuration sourced from environment variables and ``.env``."""

    _DATA_DIR_ENV: ClassVar[str] = "PASTY_DATA_DIR"

    def __init__(self) -> None:
        # Resolve .env path: explicit DOTENV_PATH > data_dir/.env > CWD/.env
        dotenv = os.getenv("DOTENV_PATH")
        if not dotenv:
            data_dir = os.getenv(self._DATA_DIR_ENV)
            dotenv = str(Path(data_dir) / ".env") if data_dir else ".env"
        self.env = EnvFile(dotenv)
        self.reload()

    def reload(self) -> None:
        """Re-read the ``.env`` file and environment variables."""
        e = self._read

        self.host: str = e("PASTY_HOST") or "0.0.0.0"
        self.port: int = int(e("PASTY_PORT") or "8090")
        self.public_url: str = e("PASTY_PUBLIC_URL").rstrip("/")

        self.max_upload_mb: int = int(e("PASTY_MAX_UPLOAD_MB") or "10")
        self.cache_max_age: int = int(e("PASTY_CACHE_MAX_AGE") or "3600")

        self.ssl_enabled: bool = e("PASTY_SSL_ENABLED").lower() in _TRUTHY
        self._ssl_cert: str = e("PASTY_SSL_CERT")
        self._ssl_key: str = e("PASTY_SSL_KEY")

    # -- derived values ----------------------------------------------------

    @property
    def data_dir(self) -> Path:
        return Path(os.getenv(self._DATA_DIR_ENV, str(Path.home() / ".pasty")))

    @property
    def uploads_dir(self) -> Path:
        return self.data_dir / "uploads"

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / "snippets.json"

    @property
    def ssl_cert_path(self) -> Path:
        return Path(self._ssl_cert) if self._ssl_cert else self.data_dir / "server_cert.pem"

    @property
    def ssl_key_path(self) -> Path:
        return Path(self._ssl_key) if self._ssl_key else self.data_dir / "server_key.pem"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb << 20

    # -- helpers -----------------------------------------------------------

    def _read(self, key: str) -> str:
        return self.env.read(key) or os.getenv(key, "")

    def ensure_dirs(self) -> None:
        for d in (self.data_dir, self.uploads_dir):
            d.mkdir(parents=True, exist_ok=True)


# Module-level singleton
cfg = Settings()


def _reset_cfg() -> None:
    global cfg
    cfg = Settings()


register_singleton(_reset_cfg)
