"""
Orientation Corrector

The PDF writer's own per-image rotation produced blank pages, so orientation
is baked into the pixels instead: the content is turned 90° clockwise and the
composite turned back 90° counter-clockwise before insertion. The result is
visually upright and is never rotated again by the writer.
"""

import logging

from .bitmap import Bitmap
from .geometry import rotate

logger = logging.getLogger(__name__)

CONTENT_ROTATION = 90
SHEET_ROTATION = -90


def normalize_upright(bitmap: Bitmap) -> Bitmap:
    """
    Apply the double rotation and return the upright bitmap

    The returned size may exceed the source size by bounding-box padding;
    callers treat the padded result as canonical.
    """
    turned = rotate(bitmap, CONTENT_ROTATION)
    upright = rotate(turned, SHEET_ROTATION)
    logger.debug("Upright normalization %dx%d -> %dx%d",
                 bitmap.width, bitmap.height, upright.width, upright.height)
    return upright
