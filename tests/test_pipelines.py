"""End-to-end tests for the export pipelines"""

import base64
import io

import fitz
import pytest
from PIL import Image

from raster_pdf_export import config
from raster_pdf_export.bitmap import Bitmap
from raster_pdf_export.error_handling import (
    DependenciesUnavailableError,
    InvalidBitmapError,
    PersistenceError,
)
from raster_pdf_export.exporter import (
    export_element_double_rotated,
    export_image_url_double_rotated,
    export_single_element,
)
from raster_pdf_export.page_fitter import PageGeometry
from raster_pdf_export.pipelines import RotatedPipeline, SinglePagePipeline
from raster_pdf_export.rasterizers import ImageRasterizer
from raster_pdf_export.slice_paginator import plan_slices


def _page_count(path):
    with fitz.open(str(path)) as pdf:
        return pdf.page_count


def test_tall_capture_is_split_across_landscape_pages(temp_dir, striped_bitmap_factory):
    pipeline = RotatedPipeline(ImageRasterizer(), capture_scale=1.0)
    result = pipeline.export(striped_bitmap_factory(400, 2000), temp_dir / "tall.pdf")

    page = PageGeometry.a4(config.LANDSCAPE)
    width, height = result.placed_size
    expected_pages = len(plan_slices(width, height, page, page.usable_width))

    assert expected_pages > 1
    assert result.page_count == expected_pages
    assert _page_count(result.path) == expected_pages
    with fitz.open(str(result.path)) as pdf:
        assert all(p.rect.width > p.rect.height for p in pdf)
        assert all(len(p.get_images()) == 1 for p in pdf)


def test_wide_capture_fits_one_landscape_page(temp_dir, bitmap_factory):
    result = RotatedPipeline(ImageRasterizer(), capture_scale=1.0).export(
        bitmap_factory(800, 400), temp_dir / "wide.pdf"
    )

    assert result.page_count == 1
    assert result.pipeline_type == "Rotated"
    assert result.source_size == (800, 400)
    assert result.placed_size[0] >= 800 and result.placed_size[1] >= 400


def test_single_page_pipeline_never_paginates(temp_dir, striped_bitmap_factory):
    result = SinglePagePipeline(ImageRasterizer(), capture_scale=1.0).export(
        striped_bitmap_factory(300, 3000), temp_dir / "single.pdf"
    )

    assert result.page_count == 1
    with fitz.open(str(result.path)) as pdf:
        page = pdf[0]
        assert page.rect.height > page.rect.width
        x0, y0, x1, y1 = page.get_image_info()[0]["bbox"]
    # Scaled to the usable height of a portrait page with 10mm margins
    assert y1 - y0 == pytest.approx(277 * 72 / 25.4, abs=0.1)


def test_zero_width_capture_creates_no_document(temp_dir, logger_manager_factory):
    logger_manager = logger_manager_factory()
    pipeline = RotatedPipeline(ImageRasterizer(), logger_manager, capture_scale=1.0)

    with pytest.raises(InvalidBitmapError):
        pipeline.export(Bitmap.blank(0, 100), temp_dir / "empty.pdf")

    assert not (temp_dir / "empty.pdf").exists()
    errors = logger_manager.export_log['export_errors']
    assert len(errors) == 1
    assert errors[0]['error_type'] == "InvalidBitmapError"
    assert errors[0]['operation'] == "capture"


def test_save_failure_leaves_nothing_behind(temp_dir, bitmap_factory):
    pipeline = RotatedPipeline(ImageRasterizer(), capture_scale=1.0)

    with pytest.raises(PersistenceError):
        pipeline.export(bitmap_factory(100, 100), temp_dir / "no_such_dir" / "out.pdf")

    assert list(temp_dir.iterdir()) == []


def test_unavailable_libraries_abort_export(temp_dir, bitmap_factory, monkeypatch):
    from raster_pdf_export.pipelines import base_pipeline

    def unavailable():
        raise DependenciesUnavailableError("PDF libraries not available: ReportLab")

    monkeypatch.setattr(base_pipeline, "ensure_pdf_libs", unavailable)

    with pytest.raises(DependenciesUnavailableError):
        RotatedPipeline(ImageRasterizer()).export(bitmap_factory(10, 10), temp_dir / "x.pdf")
    assert not (temp_dir / "x.pdf").exists()


def test_successful_export_is_logged(temp_dir, bitmap_factory, logger_manager_factory):
    logger_manager = logger_manager_factory()
    pipeline = RotatedPipeline(ImageRasterizer(), logger_manager, capture_scale=1.0)

    result = pipeline.export(bitmap_factory(200, 1000), temp_dir / "logged.pdf")

    log = logger_manager.export_log
    assert len(log['exports_started']) == 1
    assert len(log['files_saved']) == 1
    assert log['files_saved'][0]['pages'] == result.page_count
    assert len(log['pages_placed']) == result.page_count


def test_export_image_url_uses_default_filename(temp_dir, monkeypatch):
    buffer = io.BytesIO()
    Image.new("RGB", (640, 360), (250, 200, 10)).save(buffer, "JPEG")
    data_url = "data:image/jpeg;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")
    monkeypatch.chdir(temp_dir)

    result = export_image_url_double_rotated(data_url)

    assert result.path.name == config.DEFAULT_IMAGE_FILENAME
    assert (temp_dir / config.DEFAULT_IMAGE_FILENAME).exists()
    assert result.source_size == (640, 360)
    assert result.page_count == 1


def test_export_single_element_with_image_rasterizer(temp_dir, sample_png_path):
    result = export_single_element(sample_png_path, temp_dir / config.DEFAULT_SINGLE_FILENAME,
                                   rasterizer=ImageRasterizer())

    assert result.pipeline_type == "SinglePage"
    # Element exports capture at double scale
    assert result.source_size == (600, 1200)
    assert _page_count(result.path) == 1


def test_export_element_double_rotated_with_pdf_page(temp_dir, sample_pdf_path):
    from raster_pdf_export.rasterizers import PdfPageRasterizer

    result = export_element_double_rotated(sample_pdf_path, temp_dir / config.DEFAULT_ROTATED_FILENAME,
                                           rasterizer=PdfPageRasterizer())

    # A portrait page on landscape sheets needs more than one page
    assert result.page_count > 1
    assert _page_count(result.path) == result.page_count
