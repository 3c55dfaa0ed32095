from logging import getLogger

from svgbuild.converter import ConversionRequest, OutputFormat, convert
from svgbuild.errors import (
    ConfigurationError,
    EncodeError,
    LoadError,
    OutputError,
    RenderError,
    SvgBuildError,
    UnsupportedFormat,
)
from svgbuild.geometry import Rect, TargetSize
from svgbuild.ico import ICON_SIZES
from svgbuild.image_utils import EncodedFrame, RasterImage
from svgbuild.picture import VectorPicture, load_picture
from svgbuild.resource_limits import ResourceLimits
from svgbuild.version import __version__ as __version__

logger = getLogger(__name__)

__all__ = [
    "ICON_SIZES",
    "ConfigurationError",
    "ConversionRequest",
    "EncodeError",
    "EncodedFrame",
    "LoadError",
    "OutputError",
    "OutputFormat",
    "RasterImage",
    "Rect",
    "RenderError",
    "ResourceLimits",
    "SvgBuildError",
    "TargetSize",
    "UnsupportedFormat",
    "VectorPicture",
    "convert",
    "load_picture",
]
