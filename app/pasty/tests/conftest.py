"""Shared pytest fixtures for pasty tests."""

from __future__ import annotations

from pathlib import Path

import pytest

_SETTING_KEYS = (
    "PASTY_HOST",
    "PASTY_PORT",
    "PASTY_PUBLIC_URL",
    "PASTY_MAX_UPLOAD_MB",
    "PASTY_CACHE_MAX_AGE",
    "PASTY_SSL_ENABLED",
    "PASTY_SSL_CERT",
    "PASTY_SSL_KEY",
)


@pytest.fixture(autouse=True)
def _isolate_data_dir(
    tmp_path: Path, tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    data_dir = tmp_path_factory.mktemp("data")
    monkeypatch.setenv("PASTY_DATA_DIR", str(data_dir))
    monkeypatch.setenv("DOTENV_PATH", str(tmp_path / ".env"))
    for key in _SETTING_KEYS:
        monkeypatch.delenv(key, raising=False)
    return data_dir


@pytest.fixture(autouse=True)
def _reset_singletons(_isolate_data_dir: Path):
    from app.pasty.util.singletons import reset_all_singletons

    reset_all_singletons()
    yield
    reset_all_singletons()


@pytest.fixture()
def data_dir(_isolate_data_dir: Path) -> Path:
    return _isolate_data_dir


@pytest.fixture()
def uploads_dir(data_dir: Path) -> Path:
    path = data_dir / "uploads"
    path.mkdir()
    return path


class FakeQREncoder:
    """Records encoded URLs and returns fixed bytes."""

    def __init__(self) -> None:
        self.urls: list[str] = []

    def encode(self, url: str) -> bytes:
        self.urls.append(url)
        return b"qr:" + url.encode()


@pytest.fixture()
def qr_encoder() -> FakeQREncoder:
    return FakeQREncoder()
