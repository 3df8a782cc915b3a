"""Single-document JSON store for the most recent reading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import BinaryIO, Union

from ..core.models import Reading

logger = logging.getLogger(__name__)

EXPORT_MIME_TYPE = "application/json"

ExportDestination = Union[str, Path, BinaryIO]


class ExportError(OSError):
    """Raised when the stored document cannot be copied to the export destination."""


class ReadingStore:
    """
    Persist the latest :class:`Reading` as one JSON object in a fixed file.

    Every :meth:`save` overwrites the file wholesale; there is no history.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @property
    def filename(self) -> str:
        return self.path.name

    def save(self, reading: Reading) -> None:
        """
        Overwrite the file with ``reading``.

        Directories are created as needed. ``OSError`` propagates.
        """
        payload = json.dumps(reading.to_document(), ensure_ascii=False, separators=(",", ":"))
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(payload, encoding="utf-8")

    def read(self) -> str:
        """Return the file contents, or an empty string if nothing was saved yet."""
        if not self.path.exists():
            return ""
        return self.path.read_text(encoding="utf-8")

    def clear(self) -> None:
        """Remove the stored document if present."""
        self.path.unlink(missing_ok=True)

    def export_to(self, destination: ExportDestination) -> int:
        """
        Copy the current document verbatim to ``destination``.

        ``destination`` is either a file path or a writable binary stream.
        Returns the number of bytes written. Any failure to write, including
        a closed or text-only stream, is raised as :class:`ExportError`;
        nothing is retried.
        """
        try:
            data = self.path.read_bytes() if self.path.exists() else b""
            if hasattr(destination, "write"):
                destination.write(data)  # type: ignore[union-attr]
                flush = getattr(destination, "flush", None)
                if callable(flush):
                    flush()
            else:
                with Path(destination).open("wb") as fh:  # type: ignore[arg-type]
                    fh.write(data)
        except (OSError, ValueError, TypeError) as exc:
            raise ExportError(f"Failed to export {self.path} to {destination!r}: {exc}") from exc

        logger.info("Exported %d bytes from %s", len(data), self.path)
        return len(data)
