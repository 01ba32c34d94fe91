"""Incremental write-back of a modified document."""

from __future__ import annotations

import logging
from pathlib import Path
import shutil
from typing import BinaryIO

from pdffill.model.document import PdfDocument

logger = logging.getLogger(__name__)


class PdfWriteError(RuntimeError):
    """Raised when output generation fails."""


def write_pdf_with_changes(document: PdfDocument, output: str | Path | BinaryIO) -> None:
    """Append the changed objects to the working copy and deliver it.

    The original bytes stay in front; the update section and its new xref
    follow. ``output`` is a path or a binary stream such as stdout.

    A source the engine had to repair on open has no usable xref to append
    to, so it is written out in full instead.
    """
    try:
        handle = document.handle
        if handle.can_save_incrementally() and not handle.is_repaired:
            handle.saveIncr()
            document.close_handle()
        else:
            logger.debug("%s was repaired on open, writing a full copy", document.path)
            data = handle.tobytes()
            document.close_handle()
            document.working_path.write_bytes(data)
        _deliver(document.working_path, output)
    except Exception as exc:
        raise PdfWriteError(f"Failed to write output PDF: {output}") from exc

    logger.debug("Wrote %s to %s", document.path, output)


def _deliver(source: Path, output: str | Path | BinaryIO) -> None:
    if isinstance(output, (str, Path)):
        shutil.copy2(source, output)
        return
    with source.open("rb") as handle:
        shutil.copyfileobj(handle, output)
    output.flush()
