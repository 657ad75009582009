"""
Document Assembler Module
Owns the output PDF: page size and orientation, image placement and the
single terminal save.
"""

import io
import os
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from reportlab.pdfgen import canvas
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader

from . import config
from .error_handling import (
    DocumentClosedError,
    ErrorHandler,
    PersistenceError,
    ProcessingError,
    ValidationError,
)
from .page_fitter import PageGeometry
from .slice_paginator import PageImage


@dataclass(frozen=True)
class Placement:
    """Image placement in millimetres from the top-left page corner"""
    x: float
    y: float
    width: float
    height: float
    byte_size: int


class PdfDocument:
    """Append-only image-per-page PDF backed by a ReportLab canvas"""

    def __init__(self, page: PageGeometry, title: Optional[str] = None, log_callback=None):
        """
        Initialize an empty document with one open page

        Args:
            page (PageGeometry): Size and margin shared by every page
            title (str): Optional PDF title metadata
            log_callback: Optional callback function for logging messages
        """
        self.page = page
        self.log_callback = log_callback
        self.logger = logging.getLogger(__name__)
        self.error_handler = ErrorHandler(logger=self.logger, log_callback=log_callback)

        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(
            self._buffer,
            pagesize=(page.page_width * mm, page.page_height * mm),
        )
        self._canvas.setCreator("raster-pdf-export")
        if title:
            self._canvas.setTitle(title)

        self.placements: List[Optional[Placement]] = [None]
        self.saved_path: Optional[Path] = None
        self._closed = False

    def log(self, message, level=logging.INFO):
        self.logger.log(level, message)
        if self.log_callback:
            self.log_callback(message)

    @property
    def orientation(self) -> str:
        return self.page.orientation

    @property
    def page_count(self) -> int:
        return len(self.placements)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _ensure_open(self, operation):
        if self._closed:
            raise DocumentClosedError(f"Cannot {operation}: document was already saved")

    def add_page(self):
        """Finish the current page and open a new one with the same geometry"""
        self._ensure_open("add a page")
        self._canvas.showPage()
        self.placements.append(None)

    def place_image(self, image_bytes: bytes, x: float, y: float, width: float, height: float):
        """
        Draw encoded image bytes on the current page

        Coordinates are millimetres measured from the top-left corner of the
        page. Each page holds exactly one image.
        """
        self._ensure_open("place an image")
        if self.placements[-1] is not None:
            raise ProcessingError(f"Page {self.page_count} already holds an image")
        if width <= 0 or height <= 0:
            raise ValidationError(f"Image placement needs a positive size, got {width}x{height}")

        reader = ImageReader(io.BytesIO(image_bytes))
        # PDF space has its origin at the bottom-left corner
        bottom = self.page.page_height - y - height
        self._canvas.drawImage(reader, x * mm, bottom * mm, width=width * mm, height=height * mm)

        self.placements[-1] = Placement(x, y, width, height, len(image_bytes))
        self.logger.debug("Placed %d bytes on page %d at (%.2f, %.2f) size %.2fx%.2f mm",
                          len(image_bytes), self.page_count, x, y, width, height)

    def place_pages(self, page_images: Iterable[PageImage]) -> int:
        """
        Place paginated images; the first uses the current page and each later
        one a newly appended page

        Returns:
            int: number of images placed
        """
        placed = 0
        for page_image in page_images:
            if placed:
                self.add_page()
            self.place_image(page_image.image_bytes, page_image.x, page_image.y,
                             page_image.width, page_image.height)
            placed += 1
        return placed

    def save(self, filename: Union[str, Path]) -> Path:
        """
        Render the document and write it to filename

        The file is written to a temporary sibling and moved into place, so the
        target is either a complete PDF or untouched. Saving closes the
        document whether or not the write succeeds.

        Raises:
            PersistenceError: if the target cannot be written
            ProcessingError: if a page has no image; the document stays open
            DocumentClosedError: if the document was already saved
        """
        self._ensure_open("save")
        empty_pages = [index + 1 for index, placement in enumerate(self.placements) if placement is None]
        if empty_pages:
            raise ProcessingError(f"Cannot save: page(s) {empty_pages} hold no image")

        try:
            path = self.error_handler.validate_output_path(filename)

            self._canvas.showPage()
            self._canvas.save()
            data = self._buffer.getvalue()

            self.error_handler.safe_file_operation(self._write_atomically, "save document", path, data)
        except PersistenceError as e:
            self.log(f"Failed to save {filename}: {e}", logging.ERROR)
            raise
        finally:
            self._closed = True
            self._buffer = None

        self.saved_path = path
        self.log(f"Saved {self.page_count} page(s) to {path} ({len(data)} bytes)")
        return path

    def _write_atomically(self, path: Path, data: bytes):
        directory = path.parent if str(path.parent) else Path(".")
        fd, temp_name = tempfile.mkstemp(suffix=".tmp", prefix=f".{path.stem}_", dir=str(directory))
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(str(temp_path), str(path))
        finally:
            self.error_handler.cleanup_temporary_files([temp_path])


def create_document(orientation: str, page: PageGeometry, title: Optional[str] = None,
                    log_callback=None) -> PdfDocument:
    """Create a document whose page geometry matches the requested orientation"""
    if orientation not in (config.PORTRAIT, config.LANDSCAPE):
        raise ValidationError(f"Unknown orientation: {orientation!r}")
    if page.orientation != orientation and page.page_width != page.page_height:
        page = PageGeometry(page.page_height, page.page_width, page.margin)
    return PdfDocument(page, title=title, log_callback=log_callback)


def add_page(doc: PdfDocument):
    doc.add_page()


def place_image(doc: PdfDocument, image_bytes: bytes, x: float, y: float, w: float, h: float):
    doc.place_image(image_bytes, x, y, w, h)


def save(doc: PdfDocument, filename: Union[str, Path]) -> Path:
    return doc.save(filename)
