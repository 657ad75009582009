"""
Raster PDF Export
Turns rendered bitmaps into paginated image-per-page PDF documents
"""

from .version import VERSION
from .bitmap import Bitmap
from .document_assembler import PdfDocument, add_page, create_document, place_image, save
from .error_handling import (
    DependenciesUnavailableError,
    DocumentClosedError,
    ExportError,
    InvalidBitmapError,
    PersistenceError,
)
from .exporter import (
    export_element_double_rotated,
    export_image_url_double_rotated,
    export_single_element,
)
from .geometry import rotate
from .orientation import normalize_upright
from .page_fitter import FitResult, PageGeometry, fit, fit_within
from .slice_paginator import paginate

__version__ = VERSION
