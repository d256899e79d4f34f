# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Safe filesystem operations for strenc.

Bundle files are written atomically: content goes to a temporary file in the
target's directory and is then renamed over the target. Rename on the same
filesystem is atomic on POSIX, so a crash mid-write leaves a stray temp file
rather than a half-written state file that would later fail to decode.
"""

import tempfile
from pathlib import Path
from typing import IO


def _write_via_temp(target_path: Path, payload: str | bytes, binary: bool, encoding: str) -> None:
    target_path.parent.mkdir(parents=True, exist_ok=True)

    # delete=False so the file survives closing and can be renamed.
    temp_fd: IO = tempfile.NamedTemporaryFile(
        mode="wb" if binary else "w",
        encoding=None if binary else encoding,
        dir=str(target_path.parent),
        prefix=".strenc_tmp_",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(payload)
        temp_fd.flush()
        temp_fd.close()
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write text to a file atomically.

    Args:
        target_path: Where the final file should end up.
        content: The string content to write.
        encoding: Text encoding to use.

    Raises:
        OSError: If the write or rename fails.
    """
    _write_via_temp(target_path, content, False, encoding)


def atomic_write_bytes(target_path: Path, data: bytes) -> None:
    """Write binary data to a file atomically. Same approach as atomic_write."""
    _write_via_temp(target_path, data, True, "utf-8")


def safe_read(file_path: Path, encoding: str = "utf-8") -> str:
    """
    Read a text file with proper error context.

    Raises:
        FileNotFoundError: If the path doesn't exist.
        IsADirectoryError: If the path is a directory.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    if not file_path.is_file():
        raise IsADirectoryError(f"Expected a file, got a directory: {file_path}")
    return file_path.read_text(encoding=encoding)
