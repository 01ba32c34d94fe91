"""PDF loading helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
import shutil
import tempfile

import fitz

from pdffill.model.document import PdfDocument

logger = logging.getLogger(__name__)


class PdfLoadError(RuntimeError):
    """Raised when a PDF cannot be opened."""


def load_pdf(path: str | Path) -> PdfDocument:
    """Open ``path`` through a private working copy.

    PyMuPDF only appends incremental updates to the file it opened, so the
    engine works on a temporary copy and the source is never touched.
    """
    source_path = Path(path)
    if not source_path.is_file():
        raise PdfLoadError(f"File not found: {source_path}")

    fd, temp_path = tempfile.mkstemp(prefix=".pdffill_", suffix=".pdf")
    os.close(fd)
    working_path = Path(temp_path)

    try:
        shutil.copy2(source_path, working_path)
        handle = fitz.open(working_path)
    except Exception as exc:
        working_path.unlink(missing_ok=True)
        raise PdfLoadError(f"Failed to open PDF: {source_path}") from exc

    reason = None
    if not handle.is_pdf:
        reason = "not a PDF"
    elif handle.needs_pass:
        reason = "password protected"
    if reason is not None:
        handle.close()
        working_path.unlink(missing_ok=True)
        raise PdfLoadError(f"Cannot use {source_path}: {reason}")

    logger.debug("Opened %s (%d pages) via %s", source_path, handle.page_count, working_path)
    return PdfDocument(path=source_path, working_path=working_path, handle=handle)
