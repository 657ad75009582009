"""
Rotated Pipeline

Normalizes the capture upright with pixel-level rotation, then lays it out on
landscape A4 pages: one centred page when it fits, horizontal slices across
several pages when it does not. The PDF writer's own image rotation is never
used.
"""
from .. import config
from ..bitmap import encode_jpeg
from ..orientation import normalize_upright
from ..page_fitter import fit
from ..slice_paginator import paginate
from .base_pipeline import BasePipeline


class RotatedPipeline(BasePipeline):
    """Pipeline for upright-normalized, paginated landscape exports"""

    default_filename = config.DEFAULT_ROTATED_FILENAME

    def get_pipeline_type(self):
        return "Rotated"

    def get_pipeline_name(self):
        return "Upright Landscape"

    def get_orientation(self):
        return config.LANDSCAPE

    def prepare_bitmap(self, bitmap):
        upright = normalize_upright(bitmap)
        if self.logger_manager:
            self.logger_manager.log_bitmap("Upright bitmap", upright.width, upright.height)
        return upright

    def place_content(self, document, bitmap):
        result = fit(bitmap, document.page)

        if not result.needs_pagination:
            document.place_image(encode_jpeg(bitmap, self.jpeg_quality),
                                 result.x, result.y, result.draw_width, result.draw_height)
            return

        placed = document.place_pages(
            paginate(bitmap, document.page, result.draw_width, self.jpeg_quality)
        )
        self.log(f"Paginated {bitmap.width}x{bitmap.height}px across {placed} pages")
