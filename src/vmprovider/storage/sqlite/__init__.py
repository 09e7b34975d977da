from __future__ import annotations

"""
Low-level SQLite helpers: connections, schema and the single-writer queue.
"""

__all__: list[str] = []
