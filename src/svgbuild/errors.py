"""Exceptions raised by the conversion pipeline.

Every stage raises one of these, naming the input or output it failed on.
The first raised error aborts the remaining stages.
"""


class SvgBuildError(Exception):
    """Base class for conversion failures."""


class LoadError(SvgBuildError):
    """The SVG source cannot be read, parsed, or has nothing to draw."""


class UnsupportedFormat(SvgBuildError):
    """The requested output format is not recognized."""


class RenderError(SvgBuildError):
    """A target size could not be rasterized."""


class EncodeError(SvgBuildError):
    """The frame codec or container encoder failed on valid pixel data."""


class OutputError(SvgBuildError, OSError):
    """The destination cannot be created or written."""


class ConfigurationError(SvgBuildError, ValueError):
    """The conversion was configured with unusable parameters."""
