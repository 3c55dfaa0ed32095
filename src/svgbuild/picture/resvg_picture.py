"""Resvg-based picture binding.

resvg only renders whole documents, so the canvas transform is expressed in
markup: the document is nested inside a wrapper ``<svg>`` the size of the
canvas, under a group carrying the canvas' total matrix. The resulting bitmap
is then drawn onto the canvas untransformed.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Union

import numpy as np
import resvg_py
import skia

from svgbuild import image_utils, svg_utils
from svgbuild.geometry import Rect

from .base_picture import VectorPicture, parse_document

logger = logging.getLogger(__name__)


class ResvgPicture(VectorPicture):
    """Vector picture rendered with resvg.

    Note:
        Resvg does not support CSS @font-face rules with embedded fonts (data URIs).
        Font file paths given as ``src: url("file://...")`` declarations are
        extracted and passed to resvg's native font loading API instead.
    """

    def __init__(self, svg: ET.Element) -> None:
        """Wrap a parsed document.

        Args:
            svg: Root ``<svg>`` element, already validated.
        """
        self._svg = svg
        self._bounds = svg_utils.intrinsic_box(svg)
        self.font_files = self._extract_font_file_paths(svg_utils.tostring(svg))
        if self.font_files:
            logger.debug(f"Extracted {len(self.font_files)} font file(s) from SVG")

    @classmethod
    def from_string(
        cls, data: Union[str, bytes], name: str = "<string>"
    ) -> "ResvgPicture":
        if isinstance(data, str):
            data = data.encode("utf-8")
        return cls(parse_document(data, name))

    @staticmethod
    def _extract_font_file_paths(svg_content: str) -> list[str]:
        """Extract font file paths from @font-face CSS rules in SVG."""
        pattern = re.compile(r'src:\s*url\(["\']?(file://[^"\')]+)["\']?\)')
        return [match.replace("file://", "") for match in pattern.findall(svg_content)]

    def bounding_box(self) -> Rect:
        return self._bounds

    def render(self, canvas: skia.Canvas) -> None:
        size = canvas.getBaseLayerSize()
        width, height = size.width(), size.height()
        matrix = canvas.getTotalMatrix()
        wrapper = svg_utils.wrap_with_transform(
            self._svg,
            self._bounds,
            width,
            height,
            (
                matrix.getScaleX(),
                matrix.getSkewY(),
                matrix.getSkewX(),
                matrix.getScaleY(),
                matrix.getTranslateX(),
                matrix.getTranslateY(),
            ),
        )
        png_bytes = resvg_py.svg_to_bytes(
            svg_string=svg_utils.tostring(wrapper),
            font_files=self.font_files or None,
        )
        layer = image_utils.decode_image(bytes(png_bytes), mode="RGBA")
        image = skia.Image.fromarray(
            np.ascontiguousarray(np.asarray(layer)),
            colorType=skia.kRGBA_8888_ColorType,
            alphaType=skia.kUnpremul_AlphaType,
        )
        canvas.save()
        try:
            canvas.resetMatrix()
            canvas.drawImage(image, 0, 0)
        finally:
            canvas.restore()
