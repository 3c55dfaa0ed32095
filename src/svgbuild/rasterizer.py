"""Rasterize vector pictures into fixed-size transparent canvases.

:py:func:`render` fits a picture into one target size, preserving its aspect
ratio and centering it. :py:func:`render_all` renders an ordered list of sizes
and either returns every image or none of them.
"""

import contextlib
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable, Optional

import skia

from svgbuild.errors import ConfigurationError, RenderError, SvgBuildError
from svgbuild.geometry import TargetSize, compute_placement
from svgbuild.image_utils import RasterImage
from svgbuild.picture import VectorPicture

logger = logging.getLogger(__name__)


def render(picture: VectorPicture, target: TargetSize) -> RasterImage:
    """Render a picture into a transparent canvas of exactly ``target`` pixels.

    The content is scaled uniformly by ``min(W / w, H / h)`` of its bounding
    box and centered, so opposite margins are equal.

    Args:
        picture: Picture to draw.
        target: Output size in pixels.

    Returns:
        Premultiplied BGRA raster image of size ``target``.

    Raises:
        RenderError: If the canvas cannot be allocated or drawing fails.
    """
    bounds = picture.bounding_box()
    placement = compute_placement(bounds, target)
    logger.debug(
        "Rendering %s: scale=%g offset=(%g, %g)",
        target,
        placement.scale,
        placement.offset_x,
        placement.offset_y,
    )

    try:
        info = skia.ImageInfo.MakeN32Premul(target.width, target.height)
        surface = skia.Surface.MakeRaster(info)
    except Exception as e:
        raise RenderError(f"Failed to allocate a {target} canvas: {e}") from e
    if surface is None:
        raise RenderError(f"Failed to allocate a {target} canvas.")

    canvas = snapshot = None
    try:
        canvas = surface.getCanvas()
        canvas.clear(skia.ColorTRANSPARENT)
        canvas.translate(placement.offset_x, placement.offset_y)
        canvas.scale(placement.scale, placement.scale)
        canvas.translate(-bounds.left, -bounds.top)
        picture.render(canvas)

        snapshot = surface.makeImageSnapshot()
        pixels = snapshot.toarray(
            colorType=skia.kBGRA_8888_ColorType,
            alphaType=skia.kPremul_AlphaType,
        )
    except SvgBuildError:
        raise
    except Exception as e:
        raise RenderError(f"Failed to render {target} image: {e}") from e
    finally:
        # The pixels were copied out; drop the native surface now.
        del canvas, snapshot, surface

    return RasterImage(pixels)


def render_all(
    picture: VectorPicture,
    sizes: Iterable[TargetSize],
    max_workers: Optional[int] = None,
) -> list[RasterImage]:
    """Render a picture at every size, in order, all or nothing.

    Args:
        picture: Picture to draw.
        sizes: Ordered target sizes. Must not be empty.
        max_workers: Render on a thread pool of this size when greater than 1.
            The result order always follows ``sizes``.

    Returns:
        Raster images in the order of ``sizes``.

    Raises:
        ConfigurationError: If ``sizes`` is empty.
        RenderError: The first failing size in list order. Every image
            rendered before the failure is released.
    """
    sizes = list(sizes)
    if not sizes:
        raise ConfigurationError("No target sizes were given.")

    with contextlib.ExitStack() as stack:
        if max_workers is not None and max_workers > 1:
            images = _render_concurrently(picture, sizes, max_workers, stack)
        else:
            images = []
            for size in sizes:
                image = render(picture, size)
                stack.callback(image.release)
                images.append(image)
        stack.pop_all()
    logger.debug("Rendered %d sizes", len(images))
    return images


def _render_concurrently(
    picture: VectorPicture,
    sizes: list[TargetSize],
    max_workers: int,
    stack: contextlib.ExitStack,
) -> list[RasterImage]:
    executor = ThreadPoolExecutor(max_workers=max_workers)
    futures = [executor.submit(render, picture, size) for size in sizes]
    for future in futures:
        stack.callback(_release_future, future)
    try:
        return [future.result() for future in futures]
    except BaseException:
        executor.shutdown(wait=True, cancel_futures=True)
        raise
    finally:
        executor.shutdown(wait=True)


def _release_future(future: "Future[RasterImage]") -> None:
    if future.cancelled() or future.exception() is not None:
        return
    future.result().release()
