"""Vector picture bindings.

This module provides the :py:class:`VectorPicture` interface consumed by the
rasterizer, and two bindings: :py:class:`SkiaPicture` (default) backed by
Skia's SVG module, and :py:class:`ResvgPicture` backed by resvg.
"""

import logging

from .base_picture import VectorPicture, parse_document, read_document
from .resvg_picture import ResvgPicture
from .skia_picture import SkiaPicture

logger = logging.getLogger(__name__)

BACKENDS = ("skia", "resvg")
DEFAULT_BACKEND = "skia"


def load_picture(
    path: str, backend: str = DEFAULT_BACKEND, max_file_size: int = 0
) -> VectorPicture:
    """Load an SVG file into a picture.

    Args:
        path: Path to the SVG file.
        backend: Rendering backend, ``"skia"`` or ``"resvg"``.
        max_file_size: Maximum accepted file size in bytes. 0 disables the check.

    Returns:
        VectorPicture ready for rasterization.

    Raises:
        LoadError: If the file cannot be read or parsed, or has nothing to draw.
        ValueError: If the backend is unknown.
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend {backend!r}. Use one of {BACKENDS}.")
    logger.debug("Loading '%s' with %s backend", path, backend)
    data = read_document(path, max_file_size=max_file_size)
    svg = parse_document(data, path)
    if backend == "resvg":
        return ResvgPicture(svg)
    return SkiaPicture.from_element(svg, data, path)


__all__ = [
    "BACKENDS",
    "DEFAULT_BACKEND",
    "ResvgPicture",
    "SkiaPicture",
    "VectorPicture",
    "load_picture",
]
