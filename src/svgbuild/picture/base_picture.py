import logging
import os
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

import skia

from svgbuild import svg_utils
from svgbuild.errors import LoadError
from svgbuild.geometry import Rect

logger = logging.getLogger(__name__)


class VectorPicture(ABC):
    """Parsed, immutable vector scene.

    A picture knows its bounding box and can draw itself onto a
    ``skia.Canvas``. The canvas carries the transform to apply, so callers
    position the content by translating and scaling the canvas before calling
    :py:meth:`render`.

    Pictures hold native resources and should be closed once the last render
    for a conversion has completed; they support the context manager protocol
    for that purpose.
    """

    @abstractmethod
    def bounding_box(self) -> Rect:
        """Smallest rectangle enclosing the drawable content."""
        raise NotImplementedError

    @abstractmethod
    def render(self, canvas: skia.Canvas) -> None:
        """Draw the picture through the canvas' current transform."""
        raise NotImplementedError

    def close(self) -> None:
        """Release native resources held by the picture."""

    def __enter__(self) -> "VectorPicture":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()


def read_document(path: str, max_file_size: int = 0) -> bytes:
    """Read SVG markup from disk, honoring an optional size limit."""
    try:
        if max_file_size > 0:
            file_size = os.path.getsize(path)
            if file_size > max_file_size:
                raise LoadError(
                    f"Failed to load SVG '{path}': file size {file_size} bytes "
                    f"exceeds the limit of {max_file_size} bytes."
                )
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise LoadError(f"Failed to load SVG '{path}': {e}") from e


def parse_document(data: bytes, name: str) -> ET.Element:
    """Parse SVG markup and reject documents with nothing to draw.

    Args:
        data: Raw SVG markup.
        name: Path or label used in error messages.

    Returns:
        Root ``<svg>`` element.

    Raises:
        LoadError: If the markup is malformed, not SVG, or empty.
    """
    try:
        svg = svg_utils.fromstring(data)
    except ET.ParseError as e:
        raise LoadError(f"Failed to load SVG '{name}': {e}") from e
    if not svg_utils.is_svg_root(svg):
        raise LoadError(
            f"Failed to load SVG '{name}': root element is "
            f"<{svg_utils.local_name(svg.tag)}>, not <svg>."
        )
    if not svg_utils.has_drawable_content(svg):
        raise LoadError(
            f"Failed to load SVG '{name}': The SVG '{name}' does not contain "
            "drawable content."
        )
    return svg
