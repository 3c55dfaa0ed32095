"""Skia-based picture binding.

The document is parsed with Skia's SVG module and recorded once into an
immutable ``skia.Picture``. Rendering replays that recording, so the same
picture can be drawn onto several canvases, including from worker threads.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Optional

import skia

from svgbuild import svg_utils
from svgbuild.errors import LoadError
from svgbuild.geometry import Rect

from .base_picture import VectorPicture, parse_document

logger = logging.getLogger(__name__)


class SkiaPicture(VectorPicture):
    """Vector picture backed by ``skia.SVGDOM``.

    Example:
        >>> with SkiaPicture.from_string(svg_markup) as picture:
        ...     picture.bounding_box()
    """

    def __init__(self, picture: skia.Picture) -> None:
        self._picture: Optional[skia.Picture] = picture

    @classmethod
    def from_string(cls, data: bytes | str, name: str = "<string>") -> "SkiaPicture":
        """Parse SVG markup and record it into a picture."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        svg = parse_document(data, name)
        return cls.from_element(svg, data, name)

    @classmethod
    def from_element(cls, svg: ET.Element, data: bytes, name: str) -> "SkiaPicture":
        """Record an already validated document."""
        dom = skia.SVGDOM.MakeFromStream(skia.MemoryStream(data))
        if dom is None:
            raise LoadError(f"Failed to load SVG '{name}': Skia could not parse it.")

        bounds = svg_utils.intrinsic_box(svg)
        width = max(bounds.width, 0.0)
        height = max(bounds.height, 0.0)
        dom.setContainerSize(skia.Size(width, height))

        recorder = skia.PictureRecorder()
        canvas = recorder.beginRecording(skia.Rect.MakeWH(width, height))
        dom.render(canvas)
        picture = recorder.finishRecordingAsPicture()
        if picture is None:
            raise LoadError(
                f"Failed to load SVG '{name}': The SVG '{name}' does not contain "
                "drawable content."
            )
        logger.debug("Recorded '%s' with container size %gx%g", name, width, height)
        return cls(picture)

    @property
    def picture(self) -> skia.Picture:
        if self._picture is None:
            raise ValueError("Picture has been closed")
        return self._picture

    def bounding_box(self) -> Rect:
        rect = self.picture.cullRect()
        return Rect(rect.left(), rect.top(), rect.width(), rect.height())

    def render(self, canvas: skia.Canvas) -> None:
        canvas.drawPicture(self.picture)

    def close(self) -> None:
        self._picture = None
