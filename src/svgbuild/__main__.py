import argparse
import logging
import sys
from typing import Optional, Sequence

from svgbuild import convert
from svgbuild.errors import SvgBuildError
from svgbuild.picture import BACKENDS, DEFAULT_BACKEND

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Convert SVG file to PNG or ICO")
    parser.add_argument("input", metavar="INPUT", type=str, help="Input SVG file path")
    parser.add_argument("output", metavar="PATH", type=str, help="Output file.")
    parser.add_argument(
        "--format",
        dest="output_format",
        metavar="FORMAT",
        type=str,
        default=None,
        help="Output format (png, ico). Default: inferred from the output suffix",
    )
    parser.add_argument(
        "--backend",
        metavar="TYPE",
        type=str,
        choices=BACKENDS,
        default=DEFAULT_BACKEND,
        help=f"Vector rendering backend ({', '.join(BACKENDS)}). "
        f"Default: {DEFAULT_BACKEND}",
    )
    parser.add_argument(
        "--jobs",
        metavar="N",
        type=int,
        default=None,
        help="Number of threads used to render icon sizes. Default: 1",
    )
    parser.add_argument(
        "--loglevel",
        metavar="LEVEL",
        default="INFO",
        help="Logging level, default INFO",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Convert one SVG file, reporting a single outcome."""
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.loglevel.upper(), "INFO"))
    try:
        convert(
            args.input,
            args.output,
            output_format=args.output_format,
            backend=args.backend,
            max_workers=args.jobs,
        )
    except (SvgBuildError, TimeoutError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
