"""Shared utilities."""

from .async_helpers import run_sync
from .env_file import EnvFile
from .ids import new_file_id, new_snippet_id, sanitize_name
from .result import Result
from .singletons import register_singleton, reset_all_singletons

__all__ = [
    "EnvFile",
    "Result",
    "new_file_id",
    "new_snippet_id",
    "register_singleton",
    "reset_all_singletons",
    "run_sync",
    "sanitize_name",
]
