"""
Exporter Module
Entry points that pick a rasterizer and pipeline for the common exports
"""

from . import config
from .pipelines import ExportResult, RotatedPipeline, SinglePagePipeline
from .rasterizers import ImageRasterizer, Rasterizer, WidgetRasterizer


def export_single_element(element, filename=config.DEFAULT_SINGLE_FILENAME,
                          rasterizer: Rasterizer = None, logger_manager=None) -> ExportResult:
    """Capture element and fit it on a single portrait page"""
    pipeline = SinglePagePipeline(rasterizer or WidgetRasterizer(), logger_manager)
    return pipeline.export(element, filename)


def export_element_double_rotated(element, filename=config.DEFAULT_ROTATED_FILENAME,
                                  rasterizer: Rasterizer = None, logger_manager=None) -> ExportResult:
    """Capture element at double scale, normalize it upright and paginate it on landscape pages"""
    pipeline = RotatedPipeline(rasterizer or WidgetRasterizer(), logger_manager,
                               capture_scale=config.CAPTURE_SCALE)
    return pipeline.export(element, filename)


def export_image_url_double_rotated(image_ref, filename=config.DEFAULT_IMAGE_FILENAME,
                                    logger_manager=None) -> ExportResult:
    """Decode an image reference (data URL, bytes or path) at natural size and export it like
    export_element_double_rotated"""
    pipeline = RotatedPipeline(ImageRasterizer(), logger_manager, capture_scale=1.0)
    return pipeline.export(image_ref, filename)
