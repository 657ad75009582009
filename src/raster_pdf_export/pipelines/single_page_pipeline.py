"""
Single Page Pipeline
Fits the whole capture on one portrait A4 page, shrinking it if needed
"""
from .. import config
from ..bitmap import encode_jpeg
from ..page_fitter import fit_within
from .base_pipeline import BasePipeline


class SinglePagePipeline(BasePipeline):
    """Pipeline for exporting a capture as one centred portrait page"""

    default_filename = config.DEFAULT_SINGLE_FILENAME

    def get_pipeline_type(self):
        return "SinglePage"

    def get_pipeline_name(self):
        return "Single Page"

    def get_orientation(self):
        return config.PORTRAIT

    def place_content(self, document, bitmap):
        result = fit_within(bitmap, document.page)
        document.place_image(encode_jpeg(bitmap, self.jpeg_quality),
                             result.x, result.y, result.draw_width, result.draw_height)
