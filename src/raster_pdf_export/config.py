"""
Centralized configuration for Raster PDF Export
Contains all shared constants and settings
"""

# Page configuration - A4 in millimetres
PAGE_SIZE_NAME = "A4"
A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0

PORTRAIT = "portrait"
LANDSCAPE = "landscape"

# Margins (in millimetres, applied on every side)
PORTRAIT_MARGIN_MM = 10.0
LANDSCAPE_MARGIN_MM = 8.0

# Image encoding
JPEG_QUALITY = 0.92  # Quality factor 0..1, mapped to Pillow's 1..95 scale
BACKGROUND_COLOR = (255, 255, 255)  # White, used to flatten transparency

# Capture
CAPTURE_SCALE = 2.0

# Default output filenames
DEFAULT_SINGLE_FILENAME = "visualizacion.pdf"
DEFAULT_ROTATED_FILENAME = "visualizacion_rotada.pdf"
DEFAULT_IMAGE_FILENAME = "grafico.pdf"

# Resource checks
MEMORY_WARNING_PERCENT = 85.0
BYTES_PER_PIXEL = 4  # RGBA
