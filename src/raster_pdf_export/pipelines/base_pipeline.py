"""
Base Pipeline class for PDF exports

A pipeline captures an element through its rasterizer, prepares the bitmap,
lays it out on one or more pages and saves the document. Subclasses decide
the page orientation, the bitmap preparation and the layout.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .. import config
from ..bitmap import Bitmap
from ..dependency_checker import ensure_pdf_libs
from ..document_assembler import PdfDocument, create_document
from ..error_handling import ErrorHandler, ExportError
from ..page_fitter import PageGeometry
from ..rasterizers import Rasterizer


@dataclass(frozen=True)
class ExportResult:
    """Outcome of one export"""
    path: Path
    page_count: int
    pipeline_type: str
    source_size: Tuple[int, int]
    placed_size: Tuple[int, int]


class BasePipeline(ABC):
    """Base class for all export pipelines"""

    default_filename = config.DEFAULT_SINGLE_FILENAME

    def __init__(self, rasterizer: Rasterizer, logger_manager=None,
                 capture_scale: float = config.CAPTURE_SCALE,
                 jpeg_quality: float = config.JPEG_QUALITY,
                 margin: Optional[float] = None):
        self.rasterizer = rasterizer
        self.logger_manager = logger_manager
        self.capture_scale = capture_scale
        self.jpeg_quality = jpeg_quality
        self.margin = margin
        self.error_handler = ErrorHandler(log_callback=self._log_callback())

    def _log_callback(self):
        if self.logger_manager and hasattr(self.logger_manager, 'log'):
            return self.logger_manager.log
        return None

    def log(self, message, level='INFO'):
        if self.logger_manager:
            self.logger_manager.log(message, level)

    @abstractmethod
    def get_pipeline_type(self):
        """Return the pipeline type identifier"""
        pass

    @abstractmethod
    def get_pipeline_name(self):
        """Return the human-readable pipeline name"""
        pass

    @abstractmethod
    def get_orientation(self):
        """Return config.PORTRAIT or config.LANDSCAPE"""
        pass

    def get_page_geometry(self) -> PageGeometry:
        return PageGeometry.a4(self.get_orientation(), self.margin)

    def prepare_bitmap(self, bitmap: Bitmap) -> Bitmap:
        """Transform the captured bitmap before layout; identity by default"""
        return bitmap

    @abstractmethod
    def place_content(self, document: PdfDocument, bitmap: Bitmap):
        """Place the prepared bitmap on the document's pages"""
        pass

    def export(self, element_ref, filename=None) -> ExportResult:
        """
        Capture element_ref and save it as a PDF

        Args:
            element_ref: Source understood by this pipeline's rasterizer
            filename (str | Path): Output path, defaults to the pipeline's name

        Returns:
            ExportResult: saved path and page count

        Raises:
            ExportError: any validation, dependency or persistence failure;
            nothing is written when the export fails
        """
        filename = Path(filename or self.default_filename)
        pipeline_type = self.get_pipeline_type()
        if self.logger_manager:
            self.logger_manager.log_export_started(
                pipeline_type, self.rasterizer.describe(element_ref), filename
            )

        operation = "load libraries"
        try:
            ensure_pdf_libs()

            operation = "capture"
            bitmap = self.rasterizer.capture(element_ref, scale=self.capture_scale)
            if bitmap.is_empty:
                # Rasterizers may hand back an empty grid for a collapsed element
                self.error_handler.validate_bitmap_dimensions(bitmap.width, bitmap.height)
            self.error_handler.check_system_resources(bitmap.width, bitmap.height)
            if self.logger_manager:
                self.logger_manager.log_bitmap("Captured bitmap", bitmap.width, bitmap.height)

            operation = "prepare"
            prepared = self.prepare_bitmap(bitmap)

            operation = "layout"
            document = create_document(self.get_orientation(), self.get_page_geometry(),
                                       title=filename.stem, log_callback=self._log_callback())
            self.place_content(document, prepared)

            operation = "save"
            path = document.save(filename)
        except ExportError as e:
            if self.logger_manager:
                self.logger_manager.log_export_error(filename, e, operation)
            raise

        if self.logger_manager:
            for page_number, placement in enumerate(document.placements, start=1):
                if placement is not None:
                    self.logger_manager.log_page_placed(path, page_number, placement)
            self.logger_manager.log_file_saved(path, document.page_count)

        return ExportResult(path, document.page_count, pipeline_type, bitmap.size, prepared.size)
