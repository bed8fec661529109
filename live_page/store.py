"""Append-only persistence for the single page document.

The document lives in one file. Every mutation writes a sibling temp file,
fsyncs it and renames it over the original, so a concurrent reader sees
either the old bytes or the new bytes and a failed write leaves the old file
in place.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
import tempfile

from .core.errors import DocumentNotFound, StoreUnavailable
from .core.types import Document, Entry, seed_markup
from .utils.logging import get_logger, log_event

SEPARATOR = "\n<hr />\n"


class ContentStore:
    """Owns the on-disk document.

    Only `init` and `append` write the file. Appends are expected to be
    serialized by the caller (the refresh scheduler runs one cycle at a time).
    """

    def __init__(self, path: Path, logger: logging.Logger | None = None):
        self.path = Path(path)
        self.logger = logger or get_logger("store")

    def init(self, brand: str) -> bool:
        """Create the seed document if none exists.

        The seed is linked into place, so a document that appears between the
        existence check and the write is never replaced.

        Returns:
            True when the seed was written, False when a document already existed

        Raises:
            StoreUnavailable: the path cannot be inspected or written
        """
        try:
            present = self.path.exists()
        except OSError as exc:
            raise StoreUnavailable(f"Cannot inspect {self.path}: {exc}") from exc
        if present or not self._write_atomic(seed_markup(brand), exclusive=True):
            log_event(self.logger, "Document already present", event="store_init_skipped", path=str(self.path))
            return False
        log_event(self.logger, "Seed document created", event="store_initialized", path=str(self.path))
        return True

    def read(self) -> Document:
        try:
            body = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise DocumentNotFound(f"No document at {self.path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreUnavailable(f"Cannot read {self.path}: {exc}") from exc
        return Document(body=body)

    def append(self, entry: Entry, brand: str | None = None) -> Document:
        """Append one rendered entry and return the new document.

        When the document is missing the seed is written first so the new
        entry never becomes the whole page without its header article.
        """
        try:
            existing = self.read().body
        except DocumentNotFound:
            log_event(
                self.logger,
                "Document missing at append time, recreating seed",
                level=logging.WARNING,
                event="store_reseeded",
                path=str(self.path),
            )
            existing = seed_markup(brand or "")

        updated = f"{existing}{SEPARATOR}{entry.render()}"
        self._write_atomic(updated)
        document = Document(body=updated)
        log_event(
            self.logger,
            "Entry appended",
            event="entry_appended",
            path=str(self.path),
            bytes=document.byte_length,
        )
        return document

    def _write_atomic(self, body: str, exclusive: bool = False) -> bool:
        """Write `body` through a synced temp file.

        With `exclusive` the temp file is hard-linked to the target instead of
        renamed over it; returns False when the target already exists.
        """
        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(body)
                handle.flush()
                os.fsync(handle.fileno())
            # mkstemp creates 0600 files; keep the page world-readable like a plain write would.
            os.chmod(tmp_path, 0o644)
            if exclusive:
                try:
                    os.link(tmp_path, self.path)
                except FileExistsError:
                    return False
            else:
                os.replace(tmp_path, self.path)
            return True
        except (OSError, UnicodeError) as exc:
            raise StoreUnavailable(f"Cannot write {self.path}: {exc}") from exc
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
