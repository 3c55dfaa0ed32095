import logging
import re
import xml.etree.ElementTree as ET
from copy import deepcopy
from re import Pattern
from typing import Sequence

from svgbuild.geometry import Rect

logger = logging.getLogger(__name__)

NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"

DEFAULT_NUMBER_DIGITS = 6

# CSS absolute units in user units (px) at 96 DPI.
UNIT_SCALES = {
    "": 1.0,
    "px": 1.0,
    "pt": 96.0 / 72.0,
    "pc": 16.0,
    "in": 96.0,
    "cm": 96.0 / 2.54,
    "mm": 96.0 / 25.4,
    "q": 96.0 / 101.6,
}

LENGTH_RE: Pattern[str] = re.compile(
    r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*([a-zA-Z%]*)\s*$"
)
SEPARATOR_RE: Pattern[str] = re.compile(r"[\s,]+")

# Elements that paint something when rendered.
DRAWABLE_TAGS = frozenset(
    [
        "path",
        "rect",
        "circle",
        "ellipse",
        "line",
        "polyline",
        "polygon",
        "text",
        "image",
        "use",
        "foreignObject",
    ]
)

# Containers whose children are never rendered directly.
NON_RENDERED_TAGS = frozenset(
    [
        "defs",
        "clipPath",
        "mask",
        "marker",
        "pattern",
        "symbol",
        "metadata",
        "title",
        "desc",
        "style",
        "script",
        "linearGradient",
        "radialGradient",
        "filter",
    ]
)

ET.register_namespace("", NAMESPACE)
ET.register_namespace("xlink", XLINK_NAMESPACE)


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def num2str(num: int | float, digit: int = DEFAULT_NUMBER_DIGITS) -> str:
    """Convert a number to a string, trimming trailing zeros of floats."""
    if isinstance(num, bool):
        raise ValueError(f"Unsupported type: {type(num)}")
    if isinstance(num, int):
        return str(num)
    if isinstance(num, float):
        if num.is_integer():
            return str(int(num))
        number = f"{num:.{digit}f}"
        return number.rstrip("0").rstrip(".")
    raise ValueError(f"Unsupported type: {type(num)}")


def seq2str(seq: Sequence[int | float], sep: str = " ") -> str:
    """Convert a sequence of numbers to a string."""
    return sep.join(num2str(n) for n in seq)


def fromstring(data: str | bytes) -> ET.Element:
    return ET.fromstring(data)


def tostring(node: ET.Element) -> str:
    return ET.tostring(node, encoding="unicode")


def parse_length(value: str | None) -> float | None:
    """Parse an absolute SVG length into user units.

    Returns None for missing values and for relative units such as ``%``
    or ``em`` that cannot be resolved without a viewport.
    """
    if value is None:
        return None
    match = LENGTH_RE.match(value)
    if match is None:
        logger.debug("Unparsable length: %r", value)
        return None
    number, unit = match.groups()
    scale = UNIT_SCALES.get(unit.lower())
    if scale is None:
        logger.debug("Unsupported length unit: %r", value)
        return None
    return float(number) * scale


def parse_viewbox(value: str | None) -> Rect | None:
    """Parse a ``viewBox`` attribute into a rectangle."""
    if not value:
        return None
    try:
        numbers = [float(v) for v in SEPARATOR_RE.split(value.strip()) if v]
    except ValueError:
        logger.debug("Invalid viewBox: %r", value)
        return None
    if len(numbers) != 4:
        logger.debug("Invalid viewBox: %r", value)
        return None
    return Rect(*numbers)


def intrinsic_box(svg: ET.Element) -> Rect:
    """Viewport of the document in pixels, at origin 0.

    Absolute ``width`` and ``height`` on the root element win. A missing or
    relative dimension comes from the ``viewBox``, keeping its aspect ratio
    when the other dimension is absolute. Anything unresolvable yields an
    empty rectangle.
    """
    width = parse_length(svg.attrib.get("width"))
    height = parse_length(svg.attrib.get("height"))
    if width is None or height is None:
        viewbox = parse_viewbox(svg.attrib.get("viewBox"))
        if viewbox is None or viewbox.is_empty():
            logger.debug("SVG has no usable intrinsic size")
            return Rect()
        if width is not None:
            height = width * viewbox.height / viewbox.width
        elif height is not None:
            width = height * viewbox.width / viewbox.height
        else:
            width, height = viewbox.width, viewbox.height
    return Rect(0.0, 0.0, width, height)


def is_svg_root(node: ET.Element) -> bool:
    return local_name(node.tag) == "svg"


def has_drawable_content(node: ET.Element) -> bool:
    """Check whether any rendered descendant paints something."""
    for child in node:
        name = local_name(child.tag)
        if name in NON_RENDERED_TAGS:
            continue
        if name in DRAWABLE_TAGS:
            return True
        if has_drawable_content(child):
            return True
    return False


def matrix_to_string(matrix: Sequence[float]) -> str:
    """Format an affine ``(a, b, c, d, e, f)`` tuple as an SVG transform."""
    return f"matrix({seq2str(matrix)})"


def wrap_with_transform(
    svg: ET.Element,
    viewport: Rect,
    width: int,
    height: int,
    matrix: Sequence[float],
) -> ET.Element:
    """Embed a document into a new viewport under an affine transform.

    The returned root is ``width`` x ``height`` pixels. The original document
    is nested as a ``viewport``-sized element with its own ``viewBox`` left
    intact, so it lays out exactly as it would standalone before ``matrix``
    is applied.
    """
    wrapper = ET.Element(
        f"{{{NAMESPACE}}}svg",
        {
            "width": str(width),
            "height": str(height),
            "viewBox": f"0 0 {width} {height}",
        },
    )
    group = ET.SubElement(
        wrapper, f"{{{NAMESPACE}}}g", {"transform": matrix_to_string(matrix)}
    )
    inner = deepcopy(svg)
    inner.set("x", num2str(float(viewport.left)))
    inner.set("y", num2str(float(viewport.top)))
    inner.set("width", num2str(float(max(viewport.width, 1.0))))
    inner.set("height", num2str(float(max(viewport.height, 1.0))))
    group.append(inner)
    return wrapper
