from .base_pipeline import BasePipeline, ExportResult
from .rotated_pipeline import RotatedPipeline
from .single_page_pipeline import SinglePagePipeline

__all__ = ["BasePipeline", "ExportResult", "RotatedPipeline", "SinglePagePipeline"]
