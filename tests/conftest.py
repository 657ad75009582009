"""
Pytest configuration and fixtures for Raster PDF Export tests
"""

import io
import os
import sys
import pytest
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

from PIL import Image

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Qt widgets are rendered without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from raster_pdf_export.bitmap import Bitmap  # noqa: E402


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def mock_log_callback():
    """Mock callback for logging"""
    return MagicMock()


@pytest.fixture
def bitmap_factory():
    """Factory for solid-colour bitmaps"""
    def _create_bitmap(width, height, color=(30, 120, 200, 255)):
        return Bitmap(Image.new("RGBA", (width, height), color))

    return _create_bitmap


@pytest.fixture
def striped_bitmap_factory():
    """Factory for bitmaps whose every row has a distinct grey level"""
    def _create_striped(width, height):
        image = Image.new("RGBA", (width, height))
        for row in range(height):
            level = row % 256
            image.paste((level, level, level, 255), (0, row, width, row + 1))
        return Bitmap(image)

    return _create_striped


@pytest.fixture
def sample_png_path(temp_dir):
    """A 300x600 PNG with a red top half and a blue bottom half"""
    image = Image.new("RGB", (300, 600), (255, 0, 0))
    image.paste((0, 0, 255), (0, 300, 300, 600))
    path = temp_dir / "sample.png"
    image.save(path, "PNG")
    yield path


@pytest.fixture
def sample_png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), (0, 200, 0)).save(buffer, "PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_pdf_path(temp_dir):
    """Create a two page A4 PDF with ReportLab"""
    from reportlab.lib.pagesizes import A4
    from reportlab.pdfgen import canvas

    pdf_path = temp_dir / "sample.pdf"
    c = canvas.Canvas(str(pdf_path), pagesize=A4)
    for label in ("first", "second"):
        c.setFillColorRGB(0.2, 0.4, 0.8)
        c.rect(72, 72, 200, 300, fill=1)
        c.drawString(72, 400, f"{label} page")
        c.showPage()
    c.save()
    yield pdf_path


@pytest.fixture
def logger_manager_factory(mock_log_callback):
    """Factory to create logger managers for testing"""
    from raster_pdf_export.logger_manager import LoggerManager

    created = []

    def _create_logger_manager(**kwargs):
        defaults = {'log_callback': mock_log_callback}
        defaults.update(kwargs)
        manager = LoggerManager(**defaults)
        created.append(manager)
        return manager

    yield _create_logger_manager

    for manager in created:
        manager.close()
