"""
Slice Paginator
Cuts a bitmap taller than one page into horizontal slices that each fill
exactly one page's usable height at the shared draw width.
"""

import math
import logging
from dataclasses import dataclass
from typing import Iterator, List

from PIL import Image

from . import config
from .bitmap import Bitmap, encode_jpeg
from .error_handling import ErrorHandler, ValidationError
from .page_fitter import PageGeometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slice:
    """A band of source rows and its height on the page in millimetres"""
    offset: int
    rows: int
    draw_height: float


@dataclass(frozen=True)
class PageImage:
    """Encoded image for one output page and where to place it"""
    image_bytes: bytes
    x: float
    y: float
    width: float
    height: float
    slice: Slice


class SliceBuffer:
    """Working image reused across slices; cleared before every draw"""

    def __init__(self, width: int, height: int):
        self.image = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    @property
    def size(self):
        return self.image.size

    def clear(self):
        self.image.paste((0, 0, 0, 0), (0, 0) + self.image.size)

    def draw(self, bitmap: Bitmap, offset: int, rows: int) -> Image.Image:
        """Copy rows [offset, offset + rows) to the top of the buffer and return that band"""
        self.clear()
        band = bitmap.image.crop((0, offset, bitmap.width, offset + rows))
        self.image.paste(band, (0, 0))
        return self.image.crop((0, 0, self.image.width, rows))


def slice_pixel_height(bitmap_width: int, page: PageGeometry, draw_width: float) -> int:
    """Source rows that, scaled to draw_width, fill one usable page height"""
    return max(1, math.floor(page.usable_height * bitmap_width / draw_width))


def plan_slices(bitmap_width: int, bitmap_height: int, page: PageGeometry,
                draw_width: float) -> List[Slice]:
    """
    Split bitmap_height rows into page-sized slices, top to bottom

    The slice rows always sum to bitmap_height and every slice has at least
    one row.
    """
    ErrorHandler().validate_bitmap_dimensions(bitmap_width, bitmap_height)
    if draw_width <= 0:
        raise ValidationError(f"Draw width must be positive, got {draw_width}")

    step = slice_pixel_height(bitmap_width, page, draw_width)
    slices = []
    offset = 0
    while offset < bitmap_height:
        rows = min(step, bitmap_height - offset)
        slices.append(Slice(offset, rows, rows * draw_width / bitmap_width))
        offset += rows
    return slices


def paginate(bitmap: Bitmap, page: PageGeometry, draw_width: float,
             quality: float = config.JPEG_QUALITY) -> Iterator[PageImage]:
    """
    Yield one centred JPEG page image per slice, in source order

    Raises:
        InvalidBitmapError: for a zero-area bitmap (before anything is yielded)
    """
    slices = plan_slices(bitmap.width, bitmap.height, page, draw_width)
    logger.debug("Paginating %r into %d slices of up to %d rows",
                 bitmap, len(slices), slices[0].rows)
    return _render_slices(bitmap, page, draw_width, slices, quality)


def _render_slices(bitmap, page, draw_width, slices, quality):
    buffer = SliceBuffer(bitmap.width, slices[0].rows)
    for part in slices:
        band = buffer.draw(bitmap, part.offset, part.rows)
        x, y = page.centered(draw_width, part.draw_height)
        yield PageImage(encode_jpeg(band, quality), x, y, draw_width, part.draw_height, part)
