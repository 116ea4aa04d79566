"""Flat-namespace file storage service over HTTP."""

from file_service.app import create_app
from file_service.storage import StorageDirectory, StoredObject

__all__ = ["StorageDirectory", "StoredObject", "create_app"]
