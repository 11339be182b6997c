"""Concrete implementation of the CacheStorage interface on a local directory.

Each key is one regular file directly under the directory. Writes go through
a hidden temporary file that is moved over the target with os.replace, so a
reader sees either the old or the new blob, never a partial one.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Union

from filepool.domain.interfaces.storage import CacheStorage
from filepool.domain.models.common import CacheKey

logger = logging.getLogger(__name__)

TEMP_FILE_PREFIX = "."
TEMP_FILE_SUFFIX = ".tmp"


class LocalDirectoryStorage(CacheStorage):
    """Implementation of CacheStorage for a directory on the local disk."""

    def __init__(self, directory: Union[str, Path]):
        """Initializes the adapter, creating the directory if needed."""
        self.directory = Path(directory)
        self._setup_directory()
        logger.debug(f"LocalDirectoryStorage initialized at {self.directory}")

    def _setup_directory(self) -> None:
        """Creates the cache directory if it doesn't exist."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create cache directory {self.directory}: {e}")
            raise

    def _path(self, key: CacheKey) -> Path:
        return self.directory / key

    def exists(self, key: CacheKey) -> bool:
        path = self._path(key)
        try:
            return path.is_file()
        except OSError as e:
            logger.warning(f"Cannot check cache file {path}: {e}. Treating as absent.")
            return False

    def read(self, key: CacheKey) -> bytes:
        return self._path(key).read_bytes()

    def write_exclusive(self, key: CacheKey, data: bytes) -> bool:
        target = self._path(key)
        temp_path = None
        try:
            fd, temp_path = tempfile.mkstemp(
                dir=self.directory, prefix=TEMP_FILE_PREFIX, suffix=TEMP_FILE_SUFFIX
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            # Atomic on POSIX and Windows; last writer wins
            os.replace(temp_path, target)
            logger.debug(f"Wrote {len(data)} bytes to {target}")
            return True
        except OSError as e:
            logger.error(f"Failed to write cache file {target}: {e}")
            if temp_path is not None:
                try:
                    Path(temp_path).unlink(missing_ok=True)
                except OSError as cleanup_err:
                    logger.warning(f"Failed to remove temporary file {temp_path}: {cleanup_err}")
            return False

    def remove(self, key: CacheKey) -> bool:
        path = self._path(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            logger.debug(f"Cannot remove {path}: no such cache file")
            return False
        except OSError as e:
            logger.warning(f"Failed to delete cache file {path}: {e}")
            return False

    def list_keys(self) -> List[CacheKey]:
        try:
            with os.scandir(self.directory) as entries:
                return [
                    CacheKey(entry.name)
                    for entry in entries
                    if not entry.name.startswith(TEMP_FILE_PREFIX)
                    and entry.is_file(follow_symlinks=False)
                ]
        except FileNotFoundError:
            logger.debug(f"Cache directory {self.directory} does not exist, nothing to list.")
            return []
        except OSError as e:
            logger.error(f"Failed to list cache directory {self.directory}: {e}")
            raise

    def __repr__(self) -> str:
        return f"LocalDirectoryStorage({str(self.directory)!r})"
