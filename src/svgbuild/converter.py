"""SVG to PNG / ICO conversion pipeline.

load -> render -> encode -> write. Each stage raises a
:py:class:`~svgbuild.errors.SvgBuildError` subclass; the first error aborts the
remaining stages, and for ICO output no byte reaches the destination unless
every size rendered and encoded.
"""

import dataclasses
import enum
import logging
import os
from typing import Optional

from svgbuild import picture as pictures
from svgbuild.errors import LoadError, RenderError, UnsupportedFormat
from svgbuild.geometry import TargetSize, natural_size
from svgbuild.ico import ICON_SIZES, write_ico
from svgbuild.image_utils import encode_frame
from svgbuild.picture import VectorPicture
from svgbuild.rasterizer import render, render_all
from svgbuild.resource_limits import ResourceLimits
from svgbuild.storage import FileSystemStorage
from svgbuild.timeout_utils import with_timeout

logger = logging.getLogger(__name__)


class OutputFormat(str, enum.Enum):
    """Recognized output kinds."""

    PNG = "png"
    ICO = "ico"

    @classmethod
    def parse(cls, value: "str | OutputFormat") -> "OutputFormat":
        """Parse a format name, ignoring case and surrounding whitespace.

        Raises:
            UnsupportedFormat: If the name is not recognized.
        """
        if isinstance(value, OutputFormat):
            return value
        name = value.strip().lower()
        for member in cls:
            if member.value == name:
                return member
        raise UnsupportedFormat(
            f"Output format '{value.strip().upper()}' is not supported. "
            "Use 'png' or 'ico'."
        )

    @classmethod
    def from_path(cls, path: str) -> "OutputFormat":
        """Infer the format from a file name suffix."""
        suffix = os.path.splitext(path)[1].lstrip(".")
        if not suffix:
            raise UnsupportedFormat(
                f"Cannot infer the output format of '{path}'. Use 'png' or 'ico'."
            )
        return cls.parse(suffix)


@dataclasses.dataclass(frozen=True)
class ConversionRequest:
    """One conversion: source SVG, output kind, and destination path."""

    input_path: str
    output_format: str
    output_path: str

    def normalize(self) -> "ConversionRequest":
        return ConversionRequest(
            os.path.abspath(self.input_path),
            self.output_format.strip().lower(),
            os.path.abspath(self.output_path),
        )

    def validate(self) -> "ConversionRequest":
        """Check the request before any work is done.

        Raises:
            LoadError: If the input file does not exist.
            UnsupportedFormat: If the output format is not recognized.
        """
        if not os.path.isfile(self.input_path):
            raise LoadError(f"Input file '{self.input_path}' does not exist.")
        OutputFormat.parse(self.output_format)
        return self

    @property
    def format(self) -> OutputFormat:
        return OutputFormat.parse(self.output_format)


def convert(
    input_path: str,
    output_path: str,
    output_format: Optional[str] = None,
    backend: str = pictures.DEFAULT_BACKEND,
    limits: Optional[ResourceLimits] = None,
    max_workers: Optional[int] = None,
    storage: Optional[FileSystemStorage] = None,
) -> str:
    """Convert an SVG file to a PNG image or a multi-resolution ICO file.

    Args:
        input_path: Path to the input SVG file.
        output_path: Path to the output file. Parent directories are created.
        output_format: ``"png"`` (natural size) or ``"ico"`` (16 to 256 pixel
            frames). Inferred from the output suffix when None.
        backend: Vector rendering backend, ``"skia"`` (default) or ``"resvg"``.
        limits: Resource limits. Defaults to :py:meth:`ResourceLimits.default`.
        max_workers: Render ICO frames on this many threads when greater than 1.
        storage: Destination writer. Defaults to atomic file system writes.

    Returns:
        Absolute path of the written file.

    Raises:
        LoadError: If the SVG cannot be read or has no drawable content.
        UnsupportedFormat: If the output format is not recognized.
        RenderError: If a size fails to rasterize.
        EncodeError: If a frame fails to encode.
        OutputError: If the destination cannot be written.
        TimeoutError: If the conversion exceeds the configured timeout.
    """
    if output_format is None:
        output_format = OutputFormat.from_path(output_path).value
    request = ConversionRequest(input_path, output_format, output_path)
    request = request.normalize().validate()
    limits = limits or ResourceLimits.default()
    storage = storage or FileSystemStorage()

    with_timeout(_run, limits.timeout, request, backend, limits, max_workers, storage)
    logger.info(
        "Converted '%s' to '%s'", request.input_path, request.output_path
    )
    return request.output_path


def _run(
    request: ConversionRequest,
    backend: str,
    limits: ResourceLimits,
    max_workers: Optional[int],
    storage: FileSystemStorage,
) -> None:
    with pictures.load_picture(
        request.input_path, backend=backend, max_file_size=limits.max_file_size
    ) as picture:
        if request.format is OutputFormat.ICO:
            save_ico(picture, request.output_path, max_workers, storage)
        else:
            save_png(picture, request.output_path, limits, storage)


def get_natural_size(
    picture: VectorPicture, limits: Optional[ResourceLimits] = None
) -> TargetSize:
    """Output size for single-image conversion.

    Raises:
        RenderError: If the size exceeds the configured dimension limit.
    """
    size = natural_size(picture.bounding_box())
    if limits is not None and limits.is_image_dimension_limited():
        if max(size.width, size.height) > limits.max_image_dimension:
            raise RenderError(
                f"Natural size {size} exceeds the limit of "
                f"{limits.max_image_dimension} pixels. To process: set "
                "SVGBUILD_MAX_IMAGE_DIMENSION or use "
                "ResourceLimits(max_image_dimension=...)."
            )
    return size


def save_png(
    picture: VectorPicture,
    output_path: str,
    limits: Optional[ResourceLimits] = None,
    storage: Optional[FileSystemStorage] = None,
) -> None:
    """Render at natural size and write a PNG file."""
    storage = storage or FileSystemStorage()
    size = get_natural_size(picture, limits)
    with render(picture, size) as image:
        frame = encode_frame(image)
    storage.put(output_path, frame.data)


def save_ico(
    picture: VectorPicture,
    output_path: str,
    max_workers: Optional[int] = None,
    storage: Optional[FileSystemStorage] = None,
) -> None:
    """Render every icon size and write an ICO file.

    Nothing is written unless every size rendered and encoded.
    """
    images = render_all(picture, ICON_SIZES, max_workers=max_workers)
    try:
        frames = [encode_frame(image) for image in images]
    finally:
        for image in images:
            image.release()
    write_ico(frames, output_path, storage=storage)
