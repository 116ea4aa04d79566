"""
Flat on-disk namespace of stored objects.

Every key maps to exactly one regular file directly under ``root``. Uploads
are streamed into a private staging directory first and committed with a
hard link, which the OS refuses when the target already exists. That gives
at-most-one-winner semantics for concurrent creates of the same name and
guarantees a half-written payload is never visible under its final name.
"""

from __future__ import annotations

import errno
import os
import shutil
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO

from file_service.errors import AlreadyExistsError, InvalidNameError, NotFoundError, StorageIOError
from file_service.log import logger

STAGING_DIR = ".incoming"
DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class StoredObject:
    name: str
    size: int
    modified_time: datetime


class StorageDirectory:
    def __init__(self, root: str | os.PathLike[str], *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.root = Path(root).resolve()
        self.staging = self.root / STAGING_DIR
        self.chunk_size = chunk_size
        self.staging.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        path = self.root / name
        # direct children of root only
        if path.parent != self.root or name in ("", ".", "..", STAGING_DIR):
            raise InvalidNameError(name)
        return path

    def check(self) -> None:
        """Raise StorageIOError unless the root is a writable directory."""
        if not self.root.is_dir():
            raise StorageIOError("Storage unavailable", f"{self.root} is not a directory")
        if not os.access(self.root, os.W_OK | os.X_OK):
            raise StorageIOError("Storage unavailable", f"{self.root} is not writable")

    def _is_file(self, path: Path, message: str) -> bool:
        try:
            return path.is_file()
        except OSError as exc:
            if exc.errno == errno.ENAMETOOLONG:
                return False
            raise StorageIOError(message, str(exc)) from exc

    def exists(self, name: str) -> bool:
        return self._is_file(self._path(name), "Upload failed")

    def create(self, name: str, stream: BinaryIO) -> None:
        target = self._path(name)
        if self._is_file(target, "Upload failed"):
            raise AlreadyExistsError(name)

        tmp = self.staging / f"{uuid.uuid4().hex}.part"
        try:
            with open(tmp, "xb") as fh:
                shutil.copyfileobj(stream, fh, self.chunk_size)
                size = fh.tell()
                fh.flush()
                os.fsync(fh.fileno())
            os.link(tmp, target)
        except FileExistsError:
            raise AlreadyExistsError(name) from None
        except OSError as exc:
            raise StorageIOError("Upload failed", str(exc)) from exc
        finally:
            tmp.unlink(missing_ok=True)

        logger.info(f"storage.create: {name!r} committed ({size} bytes)")

    def list(self) -> list[StoredObject]:
        out: list[StoredObject] = []
        try:
            with os.scandir(self.root) as entries:
                for entry in entries:
                    if not _is_utf8(entry.name):
                        logger.warning(f"storage.list: skipping undecodable name {entry.name!r}")
                        continue
                    try:
                        if not entry.is_file(follow_symlinks=False):
                            continue
                        st = entry.stat(follow_symlinks=False)
                    except FileNotFoundError:
                        # deleted while we were enumerating
                        continue
                    out.append(
                        StoredObject(
                            name=entry.name,
                            size=st.st_size,
                            modified_time=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
                        )
                    )
        except OSError as exc:
            raise StorageIOError("Unable to read uploads", str(exc)) from exc
        return out

    def open(self, name: str) -> BinaryIO:
        path = self._path(name)
        if not self._is_file(path, "Unable to read file"):
            raise NotFoundError(name)
        try:
            return open(path, "rb")
        except (FileNotFoundError, IsADirectoryError):
            raise NotFoundError(name) from None
        except OSError as exc:
            raise StorageIOError("Unable to read file", str(exc)) from exc

    def delete(self, name: str) -> None:
        path = self._path(name)
        if not self._is_file(path, "Failed to delete file"):
            raise NotFoundError(name)
        try:
            path.unlink()
        except FileNotFoundError:
            raise NotFoundError(name) from None
        except OSError as exc:
            raise StorageIOError("Failed to delete file", str(exc)) from exc
        logger.info(f"storage.delete: {name!r} removed")


def _is_utf8(name: str) -> bool:
    # operator-created entries may carry surrogate-escaped bytes
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


__all__ = ["STAGING_DIR", "StorageDirectory", "StoredObject"]
