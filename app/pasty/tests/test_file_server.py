"""Tests for RangeFileServer using aiohttp TestClient."""

from __future__ import annotations

import asyncio
import builtins
import logging
from pathlib import Path
from typing import BinaryIO

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from app.pasty.errors import NotFoundError
from app.pasty.media import serve as serve_module
from app.pasty.media.serve import CHUNK_SIZE, RangeFileServer

CONTENT = bytes(range(10))


def _build_app(path: Path, *, inline: bool = False, chunk_size: int = 4) -> web.Application:
    server = RangeFileServer(cache_max_age=60, chunk_size=chunk_size)

    async def handler(req: web.Request) -> web.StreamResponse:
        try:
            return await server.serve(req, path, "clip.mp4", "video/mp4", inline=inline)
        except NotFoundError:
            return web.Response(status=404, text="nf")

    app = web.Application()
    app.router.add_get("/f", handler)
    return app


@pytest.fixture()
def blob(tmp_path: Path) -> Path:
    path = tmp_path / "blob"
    path.write_bytes(CONTENT)
    return path


class TestFullResponse:
    @pytest.mark.asyncio
    async def test_no_range(self, blob: Path) -> None:
        async with TestClient(TestServer(_build_app(blob))) as client:
            resp = await client.get("/f")
            assert resp.status == 200
            assert await resp.read() == CONTENT
            assert resp.headers["Content-Length"] == "10"
            assert resp.headers["Content-Type"] == "video/mp4"
            assert resp.headers["Accept-Ranges"] == "bytes"
            assert resp.headers["Cache-Control"] == "public, max-age=60"
            assert resp.headers["Content-Disposition"] == 'attachment; filename="clip.mp4"'
            assert "Content-Range" not in resp.headers

    @pytest.mark.asyncio
    async def test_inline_disposition(self, blob: Path) -> None:
        async with TestClient(TestServer(_build_app(blob, inline=True))) as client:
            resp = await client.get("/f")
            assert resp.headers["Content-Disposition"] == 'inline; filename="clip.mp4"'

    @pytest.mark.asyncio
    async def test_missing_file_is_not_found(self, tmp_path: Path) -> None:
        async with TestClient(TestServer(_build_app(tmp_path / "gone"))) as client:
            resp = await client.get("/f")
            assert resp.status == 404

    @pytest.mark.asyncio
    async def test_directory_is_not_found(self, tmp_path: Path) -> None:
        async with TestClient(TestServer(_build_app(tmp_path))) as client:
            resp = await client.get("/f")
            assert resp.status == 404

    @pytest.mark.asyncio
    async def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty"
        path.write_bytes(b"")
        async with TestClient(TestServer(_build_app(path))) as client:
            resp = await client.get("/f", headers={"Range": "bytes=0-"})
            assert resp.status == 200
            assert await resp.read() == b""


class TestPartialResponse:
    @pytest.mark.asyncio
    async def test_explicit_range(self, blob: Path) -> None:
        async with TestClient(TestServer(_build_app(blob))) as client:
            resp = await client.get("/f", headers={"Range": "bytes=2-5"})
            assert resp.status == 206
            assert resp.headers["Content-Range"] == "bytes 2-5/10"
            assert resp.headers["Content-Length"] == "4"
            assert await resp.read() == CONTENT[2:6]
            assert resp.headers["Cache-Control"] == "public, max-age=60"

    @pytest.mark.asyncio
    async def test_suffix_range(self, blob: Path) -> None:
        async with TestClient(TestServer(_build_app(blob))) as client:
            resp = await client.get("/f", headers={"Range": "bytes=-3"})
            assert resp.status == 206
            assert resp.headers["Content-Range"] == "bytes 7-9/10"
            assert await resp.read() == CONTENT[-3:]

    @pytest.mark.asyncio
    async def test_suffix_longer_than_object(self, blob: Path) -> None:
        async with TestClient(TestServer(_build_app(blob))) as client:
            resp = await client.get("/f", headers={"Range": "bytes=-100"})
            assert resp.status == 206
            assert resp.headers["Content-Range"] == "bytes 0-9/10"
            assert await resp.read() == CONTENT

    @pytest.mark.asyncio
    async def test_open_ended_range(self, blob: Path) -> None:
        async with TestClient(TestServer(_build_app(blob))) as client:
            resp = await client.get("/f", headers={"Range": "bytes=6-"})
            assert resp.status == 206
            assert await resp.read() == CONTENT[6:]

    @pytest.mark.asyncio
    async def test_every_valid_slice(self, blob: Path) -> None:
        async with TestClient(TestServer(_build_app(blob, chunk_size=3))) as client:
            for start in range(len(CONTENT)):
                for end in range(start, len(CONTENT)):
                    resp = await client.get("/f", headers={"Range": f"bytes={start}-{end}"})
                    assert resp.status == 206
                    assert resp.headers["Content-Range"] == f"bytes {start}-{end}/10"
                    assert await resp.read() == CONTENT[start:end + 1]


class TestUnparsableFallback:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", ["bytes=20-", "bytes=5-2", "lines=0-1", "bytes=0-1,3-4"])
    async def test_serves_full_content(self, blob: Path, header: str) -> None:
        async with TestClient(TestServer(_build_app(blob))) as client:
            resp = await client.get("/f", headers={"Range": header})
            assert resp.status == 200
            assert await resp.read() == CONTENT
            assert "Content-Range" not in resp.headers


class TestHead:
    @pytest.mark.asyncio
    async def test_headers_without_body(self, blob: Path) -> None:
        async with TestClient(TestServer(_build_app(blob))) as client:
            resp = await client.head("/f")
            assert resp.status == 200
            assert resp.headers["Content-Length"] == "10"
            assert resp.headers["Accept-Ranges"] == "bytes"
            assert await resp.read() == b""

            # Same keep-alive connection still parses the next response.
            resp = await client.get("/f", headers={"Range": "bytes=0-1"})
            assert resp.status == 206
            assert await resp.read() == CONTENT[:2]


class TestClientDisconnect:
    @pytest.mark.asyncio
    async def test_abort_mid_stream_closes_file(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        big = tmp_path / "big"
        with open(big, "wb") as fh:
            fh.truncate(32 << 20)

        opened: list[BinaryIO] = []

        def tracking_open(path, mode):
            fh = builtins.open(path, mode)
            opened.append(fh)
            return fh

        monkeypatch.setattr(serve_module, "open", tracking_open, raising=False)
        caplog.set_level(logging.INFO, logger=serve_module.__name__)

        async with TestServer(_build_app(big, chunk_size=CHUNK_SIZE)) as server:
            reader, writer = await asyncio.open_connection(server.host, server.port)
            writer.write(b"GET /f HTTP/1.1\r\nHost: localhost\r\n\r\n")
            await writer.drain()
            await reader.readexactly(1000)
            writer.transport.abort()

            for _ in range(500):
                if opened and opened[0].closed:
                    break
                await asyncio.sleep(0.01)

        assert len(opened) == 1
        assert opened[0].closed
        ours = [r for r in caplog.records if r.name.startswith("app.pasty")]
        assert any(r.getMessage().startswith("Client disconnected") for r in ours)
        assert not [r for r in ours if r.levelno >= logging.ERROR]
