"""Grid storage backends (the spreadsheet host lives behind these)."""

from .store import InMemoryWorkbook, JsonWorkbook

__all__ = ["InMemoryWorkbook", "JsonWorkbook"]
