"""Tests for the Skia and resvg picture bindings."""

from pathlib import Path

import numpy as np
import pytest

from svgbuild.errors import LoadError
from svgbuild.geometry import Rect, TargetSize
from svgbuild.image_utils import RasterImage
from svgbuild.picture import ResvgPicture, SkiaPicture, load_picture
from svgbuild.rasterizer import render

from .conftest import OPAQUE_BLUE, OPAQUE_RED, TRANSPARENT, get_fixture

BACKENDS = ["skia", "resvg"]


@pytest.mark.parametrize("backend", BACKENDS)
@pytest.mark.parametrize(
    "fixture, expected",
    [
        ("square.svg", Rect(0, 0, 100, 100)),
        ("wide.svg", Rect(0, 0, 100, 50)),
    ],
)
def test_bounding_box(backend: str, fixture: str, expected: Rect) -> None:
    with load_picture(get_fixture(fixture), backend=backend) as picture:
        assert picture.bounding_box() == expected


@pytest.mark.parametrize("backend", BACKENDS)
def test_bounding_box_is_viewport_at_origin(backend: str) -> None:
    with load_picture(get_fixture("offset_viewbox.svg"), backend=backend) as picture:
        assert picture.bounding_box() == Rect(0, 0, 40, 40)


@pytest.mark.parametrize("backend", BACKENDS)
def test_bounding_box_uses_width_height_over_viewbox(backend: str) -> None:
    with load_picture(get_fixture("scaled_viewbox.svg"), backend=backend) as picture:
        assert picture.bounding_box() == Rect(0, 0, 32, 32)


def filled_columns(image: RasterImage) -> int:
    """Number of columns with any painted pixel."""
    return int((image.pixels[..., 3] > 0).any(axis=0).sum())


@pytest.mark.parametrize("backend", BACKENDS)
@pytest.mark.parametrize("size", [32, 64])
def test_render_scaled_viewbox(backend: str, size: int) -> None:
    """The left half of the viewBox covers the left half of the canvas."""
    with load_picture(get_fixture("scaled_viewbox.svg"), backend=backend) as picture:
        with render(picture, TargetSize.square(size)) as image:
            half = size // 2
            assert filled_columns(image) == half
            assert image.pixels[half, half - 1].tolist() == OPAQUE_RED
            assert image.pixels[half, half].tolist() == TRANSPARENT


@pytest.mark.parametrize("backend", BACKENDS)
def test_bounding_box_without_size_is_empty(backend: str) -> None:
    with load_picture(get_fixture("no_size.svg"), backend=backend) as picture:
        assert picture.bounding_box().is_empty()


@pytest.mark.parametrize("backend", BACKENDS)
def test_render_wide_document(backend: str) -> None:
    with load_picture(get_fixture("wide.svg"), backend=backend) as picture:
        with render(picture, TargetSize(64, 64)) as image:
            pixels = image.pixels
            assert image.size == TargetSize(64, 64)
            assert pixels[32, 32].tolist() == OPAQUE_RED
            assert pixels[20, 5].tolist() == OPAQUE_RED
            assert pixels[4, 32].tolist() == TRANSPARENT
            assert pixels[60, 32].tolist() == TRANSPARENT


@pytest.mark.parametrize("backend", BACKENDS)
def test_render_offset_viewbox_fills_canvas(backend: str) -> None:
    with load_picture(get_fixture("offset_viewbox.svg"), backend=backend) as picture:
        with render(picture, TargetSize(32, 32)) as image:
            assert image.pixels[1, 1].tolist() == OPAQUE_BLUE
            assert image.pixels[16, 16].tolist() == OPAQUE_BLUE
            assert image.pixels[30, 30].tolist() == OPAQUE_BLUE


@pytest.mark.parametrize("fixture", ["square.svg", "wide.svg", "scaled_viewbox.svg"])
def test_backends_agree_on_solid_content(fixture: str) -> None:
    with load_picture(get_fixture(fixture), backend="skia") as skia_picture:
        with render(skia_picture, TargetSize(48, 48)) as skia_image:
            skia_pixels = skia_image.pixels.copy()
    with load_picture(get_fixture(fixture), backend="resvg") as resvg_picture:
        with render(resvg_picture, TargetSize(48, 48)) as resvg_image:
            resvg_pixels = resvg_image.pixels.copy()
    assert np.array_equal(skia_pixels, resvg_pixels)


@pytest.mark.parametrize("backend", BACKENDS)
@pytest.mark.parametrize(
    "fixture, message",
    [
        ("empty.svg", "does not contain drawable content"),
        ("malformed.svg", "Failed to load SVG"),
        ("not_svg.xml", "not <svg>"),
        ("missing.svg", "Failed to load SVG"),
    ],
)
def test_load_errors(backend: str, fixture: str, message: str) -> None:
    path = get_fixture(fixture)
    with pytest.raises(LoadError, match=message) as excinfo:
        load_picture(path, backend=backend)
    assert path in str(excinfo.value)


def test_load_file_size_limit(tmp_path: Path) -> None:
    path = tmp_path / "big.svg"
    path.write_text(Path(get_fixture("square.svg")).read_text() + " " * 1024)
    with pytest.raises(LoadError, match="exceeds the limit"):
        load_picture(str(path), max_file_size=512)
    with load_picture(str(path), max_file_size=0) as picture:
        assert picture.bounding_box() == Rect(0, 0, 100, 100)


def test_load_unknown_backend() -> None:
    with pytest.raises(ValueError, match="Unknown backend"):
        load_picture(get_fixture("square.svg"), backend="cairo")


def test_from_string() -> None:
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" width="20" height="10">'
        '<rect width="20" height="10" fill="red"/></svg>'
    )
    with SkiaPicture.from_string(svg) as skia_picture:
        assert skia_picture.bounding_box() == Rect(0, 0, 20, 10)
    with ResvgPicture.from_string(svg) as resvg_picture:
        assert resvg_picture.bounding_box() == Rect(0, 0, 20, 10)


def test_skia_picture_close() -> None:
    picture = load_picture(get_fixture("square.svg"))
    picture.close()
    with pytest.raises(ValueError, match="closed"):
        picture.bounding_box()


def test_resvg_font_file_extraction() -> None:
    svg = """<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10">
    <style>@font-face { font-family: A; src: url("file:///fonts/a.ttf"); }</style>
    <text x="0" y="10" font-family="A">x</text>
</svg>"""
    picture = ResvgPicture.from_string(svg)
    assert picture.font_files == ["/fonts/a.ttf"]


@pytest.mark.parametrize("factory", [SkiaPicture.from_string, ResvgPicture.from_string])
def test_physical_units_resolve_at_96_dpi(factory) -> None:  # type: ignore[no-untyped-def]
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" width="0.25in" height="1pc">'
        '<rect width="100%" height="100%" fill="red"/></svg>'
    )
    with factory(svg) as picture:
        assert picture.bounding_box() == Rect(0, 0, 24, 16)
        with render(picture, TargetSize(24, 16)) as image:
            assert (image.pixels == OPAQUE_RED).all()
