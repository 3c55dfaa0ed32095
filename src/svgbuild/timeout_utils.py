"""Timeout utilities for resource-limited operations."""

import signal
import threading
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def _timeout_message(timeout_seconds: int) -> str:
    return (
        f"SVG conversion timed out after {timeout_seconds} seconds. "
        f"To process: set SVGBUILD_TIMEOUT={timeout_seconds * 2} environment variable, "
        f"or use ResourceLimits(timeout={timeout_seconds * 2}) in Python API."
    )


def with_timeout(
    func: Callable[..., T], timeout_seconds: int, *args: Any, **kwargs: Any
) -> T:
    """Execute function with timeout protection (cross-platform).

    Args:
        func: Function to execute with timeout.
        timeout_seconds: Maximum execution time in seconds.
            If 0 or negative, no timeout is applied.
        *args: Positional arguments to pass to func.
        **kwargs: Keyword arguments to pass to func.

    Returns:
        Return value from func.

    Raises:
        TimeoutError: If function execution exceeds timeout_seconds.

    Note:
        - On Unix/macOS in the main thread: uses signal.SIGALRM
        - Elsewhere: uses a worker thread (may not interrupt native code)
    """
    if timeout_seconds <= 0:
        return func(*args, **kwargs)

    if (
        hasattr(signal, "SIGALRM")
        and threading.current_thread() is threading.main_thread()
    ):

        def timeout_handler(signum: int, frame: Any) -> None:
            raise TimeoutError(_timeout_message(timeout_seconds))

        old_handler = signal.signal(signal.SIGALRM, timeout_handler)
        signal.alarm(timeout_seconds)
        try:
            return func(*args, **kwargs)
        finally:
            signal.alarm(0)
            signal.signal(signal.SIGALRM, old_handler)

    result: list[Any] = [None]
    exception: list[BaseException | None] = [None]

    def target() -> None:
        try:
            result[0] = func(*args, **kwargs)
        except BaseException as e:
            exception[0] = e

    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    thread.join(timeout=timeout_seconds)

    if thread.is_alive():
        raise TimeoutError(_timeout_message(timeout_seconds))
    if exception[0] is not None:
        raise exception[0]
    return result[0]  # type: ignore[return-value]
