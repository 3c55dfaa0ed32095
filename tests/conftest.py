import logging
import os

import pytest
import skia

from svgbuild.geometry import Rect
from svgbuild.picture import VectorPicture

logger = logging.getLogger(__name__)

# Premultiplied BGRA pixel values.
TRANSPARENT = [0, 0, 0, 0]
OPAQUE_RED = [0, 0, 255, 255]
OPAQUE_GREEN = [0, 255, 0, 255]
OPAQUE_BLUE = [255, 0, 0, 255]


def get_fixture(name: str) -> str:
    """Get a fixture by name."""
    return os.path.join(os.path.dirname(__file__), "fixtures", name)


class RectPicture(VectorPicture):
    """Picture that fills its whole bounding box with one opaque color.

    Drawing is not anti-aliased, so edges that land on pixel boundaries
    produce exact pixel values.
    """

    def __init__(self, bounds: Rect, color: int = skia.ColorRED) -> None:
        self.bounds = bounds
        self.color = color
        self.render_count = 0
        self.closed = False

    def bounding_box(self) -> Rect:
        return self.bounds

    def render(self, canvas: skia.Canvas) -> None:
        self.render_count += 1
        paint = skia.Paint(Color=self.color, AntiAlias=False)
        canvas.drawRect(
            skia.Rect.MakeXYWH(
                self.bounds.left,
                self.bounds.top,
                max(self.bounds.width, 1.0),
                max(self.bounds.height, 1.0),
            ),
            paint,
        )

    def close(self) -> None:
        self.closed = True


class FailingPicture(RectPicture):
    """Picture that raises when drawn onto a canvas of a given width."""

    def __init__(self, bounds: Rect, fail_width: int) -> None:
        super().__init__(bounds)
        self.fail_width = fail_width

    def render(self, canvas: skia.Canvas) -> None:
        if canvas.getBaseLayerSize().width() == self.fail_width:
            raise RuntimeError(f"cannot draw {self.fail_width} pixels wide")
        super().render(canvas)


@pytest.fixture
def wide_picture() -> RectPicture:
    """100x50 opaque red picture."""
    return RectPicture(Rect(0.0, 0.0, 100.0, 50.0))


@pytest.fixture
def square_svg() -> str:
    return get_fixture("square.svg")
