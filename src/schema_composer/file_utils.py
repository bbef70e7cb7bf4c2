"""File utility functions."""

import os
import tempfile
from pathlib import Path
from typing import Union

from loguru import logger


class FileError(Exception):
    """Base class for file-related errors."""


class FileWriteError(FileError):
    """Error writing to a file."""


def ensure_directory(path: Union[str, Path]) -> None:
    """Create directory if it doesn't exist.

    Args:
        path: Path to directory to create
    """
    Path(path).mkdir(parents=True, exist_ok=True)


def write_file_atomic(path: Union[str, Path], content: str) -> None:
    """Write file atomically using a temporary file.

    Args:
        path: Path to write to
        content: Content to write

    Raises:
        FileWriteError: If the directory cannot be created or the write fails
    """
    path = Path(path)
    try:
        ensure_directory(path.parent)
        # Create temp file in same directory
        fd, temp_path = tempfile.mkstemp(dir=str(path.parent))
    except OSError as e:
        raise FileWriteError(f"Failed to write {path}: {e}") from e

    success = False
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        # Atomic rename
        Path(temp_path).replace(path)
        success = True
    except OSError as e:
        raise FileWriteError(f"Failed to write {path}: {e}") from e
    finally:
        if not success:
            try:
                Path(temp_path).unlink()
            except OSError:
                pass

    logger.debug(f"Wrote {path}")
