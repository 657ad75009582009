"""
Rasterizers
Capture sources (image references, PDF pages, Qt widgets) as Bitmaps
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from . import config
from .bitmap import Bitmap
from .error_handling import DependenciesUnavailableError, InvalidBitmapError

logger = logging.getLogger(__name__)


class Rasterizer(ABC):
    """Turns an element reference into a Bitmap"""

    @abstractmethod
    def capture(self, element_ref, scale: float = config.CAPTURE_SCALE) -> Bitmap:
        """Render element_ref at the given scale"""
        pass

    def describe(self, element_ref) -> str:
        return str(element_ref)


def _validate_scale(scale: float):
    if scale <= 0:
        raise InvalidBitmapError(f"Capture scale must be positive, got {scale}")


class ImageRasterizer(Rasterizer):
    """Decodes image files, raw bytes, data URLs or Pillow images"""

    def capture(self, element_ref, scale: float = 1.0) -> Bitmap:
        _validate_scale(scale)
        bitmap = self._decode(element_ref)

        if scale != 1.0 and not bitmap.is_empty:
            size = (max(1, round(bitmap.width * scale)), max(1, round(bitmap.height * scale)))
            bitmap = Bitmap(bitmap.image.resize(size, Image.Resampling.LANCZOS))

        logger.debug("Decoded image source into %r", bitmap)
        return bitmap

    def _decode(self, element_ref) -> Bitmap:
        if element_ref is None:
            raise InvalidBitmapError("No image source provided")
        if isinstance(element_ref, Bitmap):
            return element_ref
        if isinstance(element_ref, Image.Image):
            return Bitmap.from_image(element_ref)
        if isinstance(element_ref, (bytes, bytearray)):
            return Bitmap.from_bytes(bytes(element_ref))
        if isinstance(element_ref, str) and element_ref.startswith("data:"):
            return Bitmap.from_data_url(element_ref)
        if isinstance(element_ref, (str, Path)):
            path = Path(element_ref)
            if not path.is_file():
                raise InvalidBitmapError(f"Image file does not exist: {path}")
            try:
                with Image.open(path) as img:
                    img.load()
                    return Bitmap(img.convert("RGBA"))
            except (UnidentifiedImageError, OSError) as e:
                raise InvalidBitmapError(f"Could not decode image {path.name}: {e}") from e
        raise InvalidBitmapError(f"Unsupported image source: {type(element_ref).__name__}")

    def describe(self, element_ref) -> str:
        if isinstance(element_ref, str) and element_ref.startswith("data:"):
            return element_ref.split(",", 1)[0]
        if isinstance(element_ref, (bytes, bytearray)):
            return f"<{len(element_ref)} bytes>"
        return super().describe(element_ref)


PdfPageRef = Union[str, Path, Tuple[Union[str, Path], int]]


class PdfPageRasterizer(Rasterizer):
    """Renders one page of an existing PDF with PyMuPDF.

    The element reference is a path (first page) or a ``(path, page_index)``
    tuple. A scale of 1.0 renders at 72 DPI.
    """

    def capture(self, element_ref: PdfPageRef, scale: float = config.CAPTURE_SCALE) -> Bitmap:
        _validate_scale(scale)
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise DependenciesUnavailableError("PyMuPDF is required to rasterize PDF pages") from e

        path, page_index = self._split_ref(element_ref)
        if not path.is_file():
            raise InvalidBitmapError(f"PDF file does not exist: {path}")

        try:
            with fitz.open(str(path)) as doc:
                if not 0 <= page_index < doc.page_count:
                    raise InvalidBitmapError(
                        f"Page {page_index} out of range for {path.name} ({doc.page_count} pages)"
                    )
                pixmap = doc[page_index].get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
        except InvalidBitmapError:
            raise
        except RuntimeError as e:
            # PyMuPDF raises RuntimeError subclasses for unreadable documents
            raise InvalidBitmapError(f"Could not render {path.name}: {e}") from e

        pixels = np.frombuffer(pixmap.samples, dtype=np.uint8).reshape(
            pixmap.height, pixmap.stride
        )[:, :pixmap.width * pixmap.n].reshape(pixmap.height, pixmap.width, pixmap.n)

        logger.debug("Rasterized %s page %d: %dx%d", path.name, page_index, pixmap.width, pixmap.height)
        return Bitmap(Image.fromarray(pixels.copy()))

    def _split_ref(self, element_ref: PdfPageRef) -> Tuple[Path, int]:
        if isinstance(element_ref, tuple):
            path, page_index = element_ref
            return Path(path), int(page_index)
        return Path(element_ref), 0


class WidgetRasterizer(Rasterizer):
    """Renders a PyQt6 QWidget onto a white background at the given scale"""

    def __init__(self, background=config.BACKGROUND_COLOR):
        self.background = background

    def capture(self, element_ref, scale: float = config.CAPTURE_SCALE) -> Bitmap:
        _validate_scale(scale)
        try:
            from PyQt6.QtCore import QPoint
            from PyQt6.QtGui import QColor, QImage, QPainter, QRegion
            from PyQt6.QtWidgets import QWidget
        except ImportError as e:
            raise DependenciesUnavailableError("PyQt6 is required to capture widgets") from e

        if not isinstance(element_ref, QWidget):
            raise InvalidBitmapError(f"Expected a QWidget, got {type(element_ref).__name__}")

        width = round(element_ref.width() * scale)
        height = round(element_ref.height() * scale)
        if width <= 0 or height <= 0:
            raise InvalidBitmapError(f"Widget has no visible area ({width}x{height})")

        image = QImage(width, height, QImage.Format.Format_RGBA8888)
        image.fill(QColor(*self.background))
        painter = QPainter(image)
        try:
            painter.scale(scale, scale)
            # Children only; the window background would cover the white fill
            element_ref.render(painter, QPoint(), QRegion(), QWidget.RenderFlag.DrawChildren)
        finally:
            painter.end()

        return Bitmap(Image.fromarray(self._qimage_to_array(image)))

    def _qimage_to_array(self, image) -> np.ndarray:
        ptr = image.constBits()
        ptr.setsize(image.sizeInBytes())
        rows = np.frombuffer(ptr, dtype=np.uint8).reshape(image.height(), image.bytesPerLine())
        return rows[:, :image.width() * 4].reshape(image.height(), image.width(), 4).copy()

    def describe(self, element_ref) -> str:
        name = element_ref.objectName() if hasattr(element_ref, "objectName") else ""
        return f"{type(element_ref).__name__}({name})" if name else type(element_ref).__name__
