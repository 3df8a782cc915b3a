"""Data input/output helpers.

Disk-level concerns are kept out of the rest of the application:
:mod:`json_store` keeps the latest reading as a single JSON document and
copies it to the export destination the user picks.
"""

from .json_store import EXPORT_MIME_TYPE, ExportError, ReadingStore

__all__ = ["EXPORT_MIME_TYPE", "ExportError", "ReadingStore"]
