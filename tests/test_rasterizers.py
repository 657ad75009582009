"""Tests for image and PDF rasterizers"""

import base64

import pytest

from raster_pdf_export.bitmap import Bitmap
from raster_pdf_export.error_handling import InvalidBitmapError
from raster_pdf_export.rasterizers import ImageRasterizer, PdfPageRasterizer


def test_image_file_is_decoded_at_natural_size(sample_png_path):
    bitmap = ImageRasterizer().capture(sample_png_path)

    assert bitmap.size == (300, 600)
    assert bitmap.image.mode == "RGBA"
    assert bitmap.image.getpixel((10, 10)) == (255, 0, 0, 255)
    assert bitmap.image.getpixel((10, 590)) == (0, 0, 255, 255)


def test_image_scale_resizes(sample_png_path):
    bitmap = ImageRasterizer().capture(str(sample_png_path), scale=0.5)

    assert bitmap.size == (150, 300)


def test_raw_bytes_and_data_url_decode_the_same(sample_png_bytes):
    data_url = "data:image/png;base64," + base64.b64encode(sample_png_bytes).decode("ascii")

    from_bytes = ImageRasterizer().capture(sample_png_bytes)
    from_url = ImageRasterizer().capture(data_url)

    assert from_bytes.size == from_url.size == (40, 20)
    assert from_bytes.image.tobytes() == from_url.image.tobytes()


@pytest.mark.parametrize("source", [
    b"not an image",
    "data:image/png;base64,!!!!",
    "data:text/plain;base64,aGVsbG8=",
    "data:image/png,rawdata",
    None,
    12345,
])
def test_undecodable_sources_fail(source):
    with pytest.raises(InvalidBitmapError):
        ImageRasterizer().capture(source)


def test_missing_file_fails(temp_dir):
    with pytest.raises(InvalidBitmapError):
        ImageRasterizer().capture(temp_dir / "nope.png")


def test_bitmap_passes_through(bitmap_factory):
    bitmap = bitmap_factory(12, 34)

    assert ImageRasterizer().capture(bitmap) is bitmap


def test_non_positive_scale_fails(sample_png_path):
    with pytest.raises(InvalidBitmapError):
        ImageRasterizer().capture(sample_png_path, scale=0)


def test_describe_hides_data_url_payload(sample_png_bytes):
    data_url = "data:image/png;base64," + base64.b64encode(sample_png_bytes).decode("ascii")

    assert ImageRasterizer().describe(data_url) == "data:image/png;base64"


def test_pdf_page_renders_at_scale(sample_pdf_path):
    bitmap = PdfPageRasterizer().capture((sample_pdf_path, 1), scale=1.0)

    assert isinstance(bitmap, Bitmap)
    assert abs(bitmap.width - 595) <= 1
    assert abs(bitmap.height - 842) <= 1

    doubled = PdfPageRasterizer().capture(sample_pdf_path, scale=2.0)
    assert abs(doubled.width - 2 * bitmap.width) <= 2


def test_pdf_page_out_of_range_fails(sample_pdf_path):
    with pytest.raises(InvalidBitmapError):
        PdfPageRasterizer().capture((sample_pdf_path, 5))


def test_missing_pdf_fails(temp_dir):
    with pytest.raises(InvalidBitmapError):
        PdfPageRasterizer().capture(temp_dir / "missing.pdf")
