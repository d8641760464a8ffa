"""View models returned by the page endpoints.

Each endpoint gets a named structure; handlers serialise them with
``asdict`` and leave presentation to the client.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from urllib.parse import quote

from ..state.snippets import Snippet

TRUNCATE_AT = 10
INDEX_SNIPPET_LIMIT = 10


def truncate_text(text: str, max_len: int = TRUNCATE_AT) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def file_url(kind: str, file_id: str) -> str:
    return f"/{kind}/{quote(file_id)}"


@dataclass
class SnippetSummary:
    id: str
    title: str
    truncated_text: str


@dataclass
class FileEntry:
    id: str
    name: str


@dataclass
class IndexView:
    snippets: list[SnippetSummary] = field(default_factory=list)
    files: list[FileEntry] = field(default_factory=list)


@dataclass
class SnippetView:
    id: str
    title: str
    text: str
    link: str
    burn_after_reading: bool = False


@dataclass
class FileShareView:
    file_name: str
    view_url: str
    download_url: str
    qr_code: str  # base64 PNG of the absolute view URL


@dataclass
class FileViewerView:
    file_name: str
    stream_url: str
    download_url: str
    content_type: str
    category: str
    is_video: bool = False
    is_audio: bool = False
    is_image: bool = False
    is_pdf: bool = False
    is_text: bool = False
    text_content: str = ""


def build_snippet_list(
    snippets: Iterable[Snippet], max_results: int = INDEX_SNIPPET_LIMIT
) -> list[SnippetSummary]:
    """Summaries for the index page; ``max_results <= 0`` means no limit."""
    results = [
        SnippetSummary(id=s.id, title=s.title, truncated_text=truncate_text(s.text))
        for s in snippets
    ]
    if max_results > 0:
        results = results[:max_results]
    return results


def snippet_view(snippet: Snippet) -> SnippetView:
    return SnippetView(
        id=snippet.id,
        title=snippet.title,
        text=snippet.text,
        link=f"/display/{snippet.id}",
        burn_after_reading=snippet.burn_after_reading,
    )
