"""Document model for source PDF metadata and handles."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import logging
import os
from pathlib import Path

import fitz

from pdffill.model.field import FormField

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PdfDocument:
    path: Path
    working_path: Path
    handle: fitz.Document

    @property
    def page_count(self) -> int:
        return self.handle.page_count

    def fields(self, page_index: int) -> Iterator[FormField]:
        """Yield the fields of one page in annotation order.

        Each field holds its page, so fields stay usable after iteration ends.
        """
        page = self.handle.load_page(page_index)
        for widget in page.widgets():
            yield FormField(widget, page, page_index)

    def close_handle(self) -> None:
        if not self.handle.is_closed:
            self.handle.close()

    def close(self) -> None:
        self.close_handle()
        if self.working_path != self.path and self.working_path.exists():
            try:
                os.remove(self.working_path)
            except OSError:
                logger.debug("Could not remove working copy %s", self.working_path)

    def __enter__(self) -> PdfDocument:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
