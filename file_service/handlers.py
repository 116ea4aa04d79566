from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, BinaryIO
from urllib.parse import quote

from file_service.errors import AlreadyExistsError, InvalidNameError, MissingPayloadError
from file_service.log import logger
from file_service.names import is_safe
from file_service.storage import StorageDirectory

DOWNLOAD_PREFIX = "/download/"

# same unreserved set as JavaScript's encodeURIComponent
_URL_SAFE = "!*'()"


@dataclass(frozen=True, slots=True)
class ListingEntry:
    name: str
    url: str
    size: int
    mtime: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def download_reference(name: str) -> str:
    return DOWNLOAD_PREFIX + quote(name, safe=_URL_SAFE)


def format_mtime(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class FileHandlers:
    """The four operations of the service, independent of HTTP."""

    def __init__(self, storage: StorageDirectory) -> None:
        self.storage = storage

    def _checked(self, name: str) -> str:
        if not is_safe(name):
            logger.warning(f"rejected unsafe name {name!r}")
            raise InvalidNameError(name)
        return name

    def upload(self, name: str | None, stream: BinaryIO | None) -> str:
        if stream is None or not name:
            raise MissingPayloadError()
        self._checked(name)
        # reject before the body is copied
        if self.storage.exists(name):
            raise AlreadyExistsError(name)
        self.storage.create(name, stream)
        return name

    def list_files(self) -> list[ListingEntry]:
        entries = [
            ListingEntry(
                name=obj.name,
                url=download_reference(obj.name),
                size=obj.size,
                mtime=format_mtime(obj.modified_time),
            )
            for obj in self.storage.list()
        ]
        entries.sort(key=lambda e: e.name)
        return entries

    def retrieve(self, name: str) -> BinaryIO:
        return self.storage.open(self._checked(name))

    def delete(self, name: str) -> None:
        self.storage.delete(self._checked(name))


__all__ = ["DOWNLOAD_PREFIX", "FileHandlers", "ListingEntry", "download_reference", "format_mtime"]
