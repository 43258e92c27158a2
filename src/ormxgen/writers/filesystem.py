import contextlib
import logging
import os
import shutil
import tempfile
from pathlib import Path

from ormxgen.core.errors import SourceWriteError

logger = logging.getLogger(__name__)


class FileSystemSourceWriter:
    """Write files through a sibling temporary file and ``os.replace``.

    A crash mid-write leaves either the old or the new content, never a
    truncated file. Permissions of an existing target are kept.
    """

    def write(self, path: Path, content: bytes) -> None:
        temp_path: Path | None = None
        try:
            fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            temp_path = Path(temp_name)
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            if path.exists():
                shutil.copymode(path, temp_path)
            else:
                temp_path.chmod(0o644)
            os.replace(temp_path, path)
        except OSError as exc:
            if temp_path is not None:
                with contextlib.suppress(OSError):
                    temp_path.unlink(missing_ok=True)
            raise SourceWriteError(path, f"write error: {exc}") from exc
        logger.debug("Wrote %d bytes to %s", len(content), path)
