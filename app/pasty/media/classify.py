"""Media type classification by filename extension."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MIME = "application/octet-stream"

VIDEO = "video"
AUDIO = "audio"
IMAGE = "image"
PDF = "pdf"
TEXT = "text"
OTHER = "other"

EXTENSION_TO_MIME: dict[str, str] = {
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".webm": "video/webm",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".html": "text/html",
    ".htm": "text/html",
    ".json": "application/json",
    ".xml": "application/xml",
}

EXTENSION_TO_CATEGORY: dict[str, str] = {
    **dict.fromkeys((".mp4", ".mov", ".avi", ".webm"), VIDEO),
    **dict.fromkeys((".mp3", ".wav", ".ogg"), AUDIO),
    **dict.fromkeys((".jpg", ".jpeg", ".png", ".gif", ".webp"), IMAGE),
    ".pdf": PDF,
    **dict.fromkeys((".txt", ".html", ".htm", ".json", ".xml"), TEXT),
}


@dataclass(frozen=True, slots=True)
class Classification:
    mime_type: str
    category: str

    @property
    def is_video(self) -> bool:
        return self.category == VIDEO

    @property
    def is_audio(self) -> bool:
        return self.category == AUDIO

    @property
    def is_image(self) -> bool:
        return self.category == IMAGE

    @property
    def is_pdf(self) -> bool:
        return self.category == PDF

    @property
    def is_text(self) -> bool:
        return self.category == TEXT


def _extension(filename: str) -> str:
    # Last dot of the final path segment; a leading dot counts.
    base = filename.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def classify(filename: str) -> Classification:
    """Map *filename* to its MIME type and category.

    Only the extension is consulted, case-sensitively; unknown or missing
    extensions yield ``application/octet-stream`` / ``other``.
    """
    ext = _extension(filename)
    return Classification(
        mime_type=EXTENSION_TO_MIME.get(ext, DEFAULT_MIME),
        category=EXTENSION_TO_CATEGORY.get(ext, OTHER),
    )
