"""Media handling -- classification, range parsing, file streaming, QR codes."""

from .classify import EXTENSION_TO_MIME, Classification, classify
from .qr import PngQREncoder, QREncoder
from .ranges import FullRange, PartialRange, RangeSpec, Unparsable, parse_range
from .serve import RangeFileServer

__all__ = [
    "EXTENSION_TO_MIME",
    "Classification",
    "FullRange",
    "PartialRange",
    "PngQREncoder",
    "QREncoder",
    "RangeFileServer",
    "RangeSpec",
    "Unparsable",
    "classify",
    "parse_range",
]
