import logging
import os
import tempfile

from svgbuild.errors import OutputError

logger = logging.getLogger(__name__)


class FileSystemStorage:
    """Writes output files under a base directory.

    Missing parent directories are created on demand. With ``atomic=True``
    (default) data goes to a temporary file next to the destination, which is
    then renamed over it, so a failed write never leaves a truncated file.
    """

    def __init__(self, basedir: str = "", atomic: bool = True) -> None:
        self.basedir = basedir or "."
        self.atomic = atomic

    def url(self, path: str = "") -> str:
        return os.path.abspath(os.path.join(self.basedir, path))

    def exists(self, filename: str) -> bool:
        return os.path.exists(self.url(filename))

    def _ensure_dir(self, dirname: str) -> None:
        if not os.path.exists(dirname):
            logger.debug("Creating directory: %s", dirname)
            os.makedirs(dirname, exist_ok=True)

    def put(self, filename: str, value: bytes) -> str:
        """Create or replace ``filename`` with ``value``.

        Returns:
            Absolute path of the written file.

        Raises:
            OutputError: If the file cannot be created or written.
        """
        path = self.url(filename)
        try:
            self._ensure_dir(os.path.dirname(path))
            if self.atomic:
                self._put_atomic(path, value)
            else:
                with open(path, "wb") as f:
                    f.write(value)
        except OSError as e:
            raise OutputError(f"Failed to write '{path}': {e}") from e
        logger.debug("Wrote %d bytes to %s", len(value), path)
        return path

    def _put_atomic(self, path: str, value: bytes) -> None:
        fd, temp_path = tempfile.mkstemp(
            prefix=f".{os.path.basename(path)}.", dir=os.path.dirname(path)
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.chmod(temp_path, 0o644)
            os.replace(temp_path, path)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
