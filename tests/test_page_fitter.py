"""Tests for page geometry and fitting"""

import pytest

from raster_pdf_export import config
from raster_pdf_export.error_handling import InvalidBitmapError, ValidationError
from raster_pdf_export.page_fitter import PageGeometry, fit, fit_within


@pytest.fixture
def a4_portrait():
    return PageGeometry(210, 297, 10)


def test_usable_area_subtracts_margins_on_both_sides(a4_portrait):
    assert a4_portrait.usable_width == 190
    assert a4_portrait.usable_height == 277
    assert a4_portrait.orientation == config.PORTRAIT


def test_a4_landscape_defaults():
    page = PageGeometry.a4(config.LANDSCAPE)

    assert (page.page_width, page.page_height) == (297, 210)
    assert page.margin == config.LANDSCAPE_MARGIN_MM
    assert page.usable_width == pytest.approx(281)
    assert page.usable_height == pytest.approx(194)
    assert page.orientation == config.LANDSCAPE


def test_a4_rejects_unknown_orientation():
    with pytest.raises(ValidationError):
        PageGeometry.a4("diagonal")


@pytest.mark.parametrize("width,height,margin", [
    (0, 297, 10),
    (210, -1, 10),
    (210, 297, -5),
    (210, 297, 105),
])
def test_invalid_geometry_is_rejected(width, height, margin):
    with pytest.raises(ValidationError):
        PageGeometry(width, height, margin)


def test_tall_bitmap_needs_pagination(a4_portrait):
    result = fit((1000, 2000), a4_portrait)

    assert result.draw_width == pytest.approx(190)
    assert result.draw_height == pytest.approx(380)
    assert result.needs_pagination is True


def test_short_bitmap_is_centred_on_single_page(a4_portrait):
    result = fit((800, 400), a4_portrait)

    assert result.needs_pagination is False
    assert result.draw_width == pytest.approx(190)
    assert result.draw_height == pytest.approx(95)
    assert result.x == pytest.approx(10)
    assert result.y == pytest.approx(101)


def test_bitmap_exactly_filling_usable_height_is_single_page(a4_portrait):
    result = fit((190, 277), a4_portrait)

    assert result.needs_pagination is False
    assert result.y == pytest.approx(10)


def test_fit_accepts_bitmaps(a4_portrait, bitmap_factory):
    result = fit(bitmap_factory(800, 400), a4_portrait)

    assert result.draw_height == pytest.approx(95)


@pytest.mark.parametrize("dims", [(0, 100), (100, 0), (-5, 10), (10.5, 20), None, (1, 2, 3)])
def test_degenerate_dimensions_fail(a4_portrait, dims):
    with pytest.raises(InvalidBitmapError):
        fit(dims, a4_portrait)


def test_fit_within_scales_tall_content_to_height(a4_portrait):
    result = fit_within((1000, 2000), a4_portrait)

    assert result.needs_pagination is False
    assert result.draw_height == pytest.approx(277)
    assert result.draw_width == pytest.approx(138.5)
    assert result.x == pytest.approx(35.75)
    assert result.y == pytest.approx(10)


def test_fit_within_keeps_scale_to_width_when_it_fits(a4_portrait):
    assert fit_within((800, 400), a4_portrait) == fit((800, 400), a4_portrait)
