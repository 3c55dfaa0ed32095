"""Resource limits for untrusted SVG input.

This module provides configurable limits that keep a single conversion from
exhausting memory or CPU on malicious or malformed input files.
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 64 * 1024 * 1024
DEFAULT_TIMEOUT = 60
# Upper bound on the width or height of a natural-size canvas.
DEFAULT_MAX_IMAGE_DIMENSION = 16384


@dataclass
class ResourceLimits:
    """Resource limits for SVG conversion operations.

    These limits constrain:
    - File size of the SVG source (prevents memory exhaustion while parsing)
    - Conversion timeout (prevents CPU exhaustion)
    - Natural image dimensions (prevents huge canvases for PNG output)

    A value of 0 disables the corresponding limit. Constructor parameters take
    precedence over environment variables.

    Environment variables:
        SVGBUILD_MAX_FILE_SIZE: Maximum file size in bytes (default: 67108864 = 64MB)
        SVGBUILD_TIMEOUT: Conversion timeout in seconds (default: 60)
        SVGBUILD_MAX_IMAGE_DIMENSION: Maximum width or height in pixels
            (default: 16384)

    Example:
        >>> limits = ResourceLimits.default()
        >>> limits = ResourceLimits(max_file_size=1024 * 1024, timeout=10)
        >>> limits = ResourceLimits(timeout=0)  # No timeout
    """

    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    timeout: int = DEFAULT_TIMEOUT
    max_image_dimension: int = DEFAULT_MAX_IMAGE_DIMENSION

    @classmethod
    def default(cls) -> "ResourceLimits":
        """Create ResourceLimits from environment variables.

        Raises:
            ValueError: If environment variable contains invalid integer value.

        Note:
            Negative values are treated as 0 (disabled limit) with a warning logged.
        """

        def parse_env_int(key: str, default: int) -> int:
            value_str = os.environ.get(key)
            if value_str is None:
                return default

            try:
                value = int(value_str)
            except ValueError as e:
                raise ValueError(
                    f"Environment variable {key}={value_str!r} is not a valid integer"
                ) from e

            if value < 0:
                logger.warning(
                    f"Environment variable {key}={value} is negative, "
                    f"treating as 0 (disabled limit). "
                    f"Consider using ResourceLimits.unlimited() instead."
                )
                return 0

            return value

        return cls(
            max_file_size=parse_env_int("SVGBUILD_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE),
            timeout=parse_env_int("SVGBUILD_TIMEOUT", DEFAULT_TIMEOUT),
            max_image_dimension=parse_env_int(
                "SVGBUILD_MAX_IMAGE_DIMENSION", DEFAULT_MAX_IMAGE_DIMENSION
            ),
        )

    @classmethod
    def unlimited(cls) -> "ResourceLimits":
        """Create ResourceLimits with all limits disabled.

        Warning:
            Only use this for trusted input files in controlled environments.
        """
        return cls(max_file_size=0, timeout=0, max_image_dimension=0)

    def is_file_size_limited(self) -> bool:
        return self.max_file_size > 0

    def is_timeout_enabled(self) -> bool:
        return self.timeout > 0

    def is_image_dimension_limited(self) -> bool:
        return self.max_image_dimension > 0
