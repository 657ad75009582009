"""
Page Fitter
Page geometry and the scale-to-width placement of a bitmap on a page
"""

from dataclasses import dataclass
from typing import Tuple, Union

from . import config
from .bitmap import Bitmap
from .error_handling import ErrorHandler, InvalidBitmapError, ValidationError


@dataclass(frozen=True)
class PageGeometry:
    """Page size and margin in millimetres"""
    page_width: float
    page_height: float
    margin: float = 0.0

    def __post_init__(self):
        errors = ErrorHandler().validate_page_geometry(self.page_width, self.page_height, self.margin)
        if errors:
            raise ValidationError("; ".join(errors))

    @property
    def usable_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def usable_height(self) -> float:
        return self.page_height - 2 * self.margin

    @property
    def orientation(self) -> str:
        return config.LANDSCAPE if self.page_width > self.page_height else config.PORTRAIT

    @classmethod
    def a4(cls, orientation: str = config.PORTRAIT, margin: float = None) -> "PageGeometry":
        """A4 page in the given orientation with the default margin for it"""
        if orientation == config.PORTRAIT:
            default_margin = config.PORTRAIT_MARGIN_MM
            width, height = config.A4_WIDTH_MM, config.A4_HEIGHT_MM
        elif orientation == config.LANDSCAPE:
            default_margin = config.LANDSCAPE_MARGIN_MM
            width, height = config.A4_HEIGHT_MM, config.A4_WIDTH_MM
        else:
            raise ValidationError(f"Unknown orientation: {orientation!r}")
        return cls(width, height, default_margin if margin is None else margin)

    def centered(self, draw_width: float, draw_height: float) -> Tuple[float, float]:
        """Top-left corner that centres a draw box on the page"""
        return (self.page_width - draw_width) / 2, (self.page_height - draw_height) / 2


@dataclass(frozen=True)
class FitResult:
    draw_width: float
    draw_height: float
    needs_pagination: bool
    x: float
    y: float


BitmapDims = Union[Bitmap, Tuple[int, int]]


def _dimensions(bitmap_dims: BitmapDims) -> Tuple[int, int]:
    if isinstance(bitmap_dims, Bitmap):
        width, height = bitmap_dims.size
    else:
        try:
            width, height = bitmap_dims
        except (TypeError, ValueError) as e:
            raise InvalidBitmapError(f"Malformed bitmap dimensions: {bitmap_dims!r}") from e
    ErrorHandler().validate_bitmap_dimensions(width, height)
    return width, height


def fit(bitmap_dims: BitmapDims, page: PageGeometry) -> FitResult:
    """
    Scale a bitmap to the usable page width, preserving aspect ratio

    When the scaled height fits the usable height the result is a single
    centred page; otherwise needs_pagination is set and y is 0 (the slice
    paginator positions each slice itself).

    Raises:
        InvalidBitmapError: for zero or malformed dimensions
    """
    width, height = _dimensions(bitmap_dims)

    draw_width = page.usable_width
    draw_height = height * draw_width / width

    if draw_height <= page.usable_height:
        x, y = page.centered(draw_width, draw_height)
        return FitResult(draw_width, draw_height, False, x, y)

    x, _ = page.centered(draw_width, draw_height)
    return FitResult(draw_width, draw_height, True, x, 0.0)


def fit_within(bitmap_dims: BitmapDims, page: PageGeometry) -> FitResult:
    """
    Scale a bitmap to fit entirely inside the usable area, centred

    Scales to width first and falls back to scaling to height when the
    content is too tall. Never paginates.
    """
    width, height = _dimensions(bitmap_dims)

    draw_width = page.usable_width
    draw_height = height * draw_width / width
    if draw_height > page.usable_height:
        draw_height = page.usable_height
        draw_width = width * draw_height / height

    x, y = page.centered(draw_width, draw_height)
    return FitResult(draw_width, draw_height, False, x, y)
