"""QR code collaborator for share links."""

from __future__ import annotations

import io
from typing import Protocol

import qrcode
from qrcode.constants import ERROR_CORRECT_M


class QREncoder(Protocol):
    def encode(self, url: str) -> bytes: ...


class PngQREncoder:
    """Renders *url* as a PNG QR code (error correction level M)."""

    def __init__(self, box_size: int = 8, border: int = 4) -> None:
        self._box_size = box_size
        self._border = border

    def encode(self, url: str) -> bytes:
        if not url:
            raise ValueError("cannot encode an empty URL")
        qr = qrcode.QRCode(
            error_correction=ERROR_CORRECT_M,
            box_size=self._box_size,
            border=self._border,
        )
        qr.add_data(url)
        qr.make(fit=True)
        buf = io.BytesIO()
        qr.make_image().save(buf)
        return buf.getvalue()
