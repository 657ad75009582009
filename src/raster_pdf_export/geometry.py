"""
Geometry Transformer
Rotates bitmaps into their circumscribing bounding box so no corner is clipped
"""

import math
import logging
from typing import Tuple

from PIL import Image

from .bitmap import Bitmap
from .error_handling import InvalidBitmapError

logger = logging.getLogger(__name__)

# Lossless transposes for the axis-aligned clockwise angles
_AXIS_ALIGNED = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}

# Decimal places kept before rounding up, so cos(90°) ~ 6e-17 does not add a pixel
_BOUNDS_PRECISION = 6


def rotated_bounds(width: int, height: int, degrees_clockwise: float) -> Tuple[int, int]:
    """
    Size of the rectangle circumscribing a width x height box rotated by the angle

    Returns:
        tuple: (ceil(|w cos| + |h sin|), ceil(|w sin| + |h cos|)), each at least 1
    """
    rad = math.radians(degrees_clockwise)
    cos_a = abs(math.cos(rad))
    sin_a = abs(math.sin(rad))
    new_width = math.ceil(round(width * cos_a + height * sin_a, _BOUNDS_PRECISION))
    new_height = math.ceil(round(width * sin_a + height * cos_a, _BOUNDS_PRECISION))
    return max(1, new_width), max(1, new_height)


def _axis_aligned_angle(degrees_clockwise: float):
    """Return 0/90/180/270 when the angle is a multiple of 90 degrees, else None"""
    normalized = degrees_clockwise % 360
    quarter = round(normalized / 90)
    if math.isclose(normalized, quarter * 90, abs_tol=1e-9):
        return (quarter * 90) % 360
    return None


def rotate(bitmap: Bitmap, degrees_clockwise: float) -> Bitmap:
    """
    Rotate a bitmap clockwise about its centre

    The result is sized to the rotated bounding box and the source is drawn
    centred in it; uncovered pixels are transparent. The source is untouched.

    Raises:
        InvalidBitmapError: if the bitmap has zero area
    """
    if bitmap.is_empty:
        raise InvalidBitmapError(f"Cannot rotate a zero-area bitmap ({bitmap.width}x{bitmap.height})")

    width, height = bitmap.size
    new_width, new_height = rotated_bounds(width, height, degrees_clockwise)

    quadrant = _axis_aligned_angle(degrees_clockwise)
    if quadrant == 0:
        rotated = bitmap.image.copy()
    elif quadrant is not None:
        rotated = bitmap.image.transpose(_AXIS_ALIGNED[quadrant])
    else:
        rad = math.radians(degrees_clockwise)
        cos_a, sin_a = math.cos(rad), math.sin(rad)
        src_cx, src_cy = width / 2, height / 2
        dst_cx, dst_cy = new_width / 2, new_height / 2

        # Inverse mapping: destination pixel -> source pixel
        matrix = (
            cos_a, sin_a, src_cx - cos_a * dst_cx - sin_a * dst_cy,
            -sin_a, cos_a, src_cy + sin_a * dst_cx - cos_a * dst_cy,
        )
        rotated = bitmap.image.transform(
            (new_width, new_height),
            Image.Transform.AFFINE,
            matrix,
            resample=Image.Resampling.BICUBIC,
            fillcolor=(0, 0, 0, 0),
        )

    logger.debug("Rotated %dx%d by %s° -> %dx%d", width, height, degrees_clockwise,
                 rotated.width, rotated.height)
    return Bitmap(rotated)
