"""pasty -- local-network paste bin and file drop with range-aware streaming."""

__version__ = "0.1.0"
