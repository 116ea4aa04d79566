from __future__ import annotations

import os
from http import HTTPStatus
from typing import BinaryIO

from flask import Blueprint, jsonify, request, send_file

from file_service.errors import StorageIOError
from file_service.handlers import FileHandlers
from file_service.log import logger

UPLOAD_FIELD = "file"


class _LoggedReader:
    """Read-through wrapper that logs an I/O error and ends the body early."""

    def __init__(self, fh: BinaryIO, name: str) -> None:
        self._fh = fh
        self._name = name

    def read(self, size: int = -1) -> bytes:
        try:
            return self._fh.read(size)
        except OSError as exc:
            logger.error(f"Download error for {self._name!r}: {exc}")
            return b""

    def close(self) -> None:
        self._fh.close()


class FilesController:
    def __init__(self, handlers: FileHandlers) -> None:
        self.handlers = handlers

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("files", __name__)
        bp.add_url_rule("/upload", view_func=self.upload, methods=["POST"])
        bp.add_url_rule("/files", view_func=self.list_files, methods=["GET"])
        bp.add_url_rule("/download/<filename>", view_func=self.download, methods=["GET"])
        bp.add_url_rule("/delete/<filename>", view_func=self.delete, methods=["DELETE"])
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        return bp

    def upload(self):
        part = request.files.get(UPLOAD_FIELD)
        name = self.handlers.upload(
            part.filename if part else None,
            part.stream if part else None,
        )
        return jsonify({"message": "Uploaded", "filename": name})

    def list_files(self):
        return jsonify([entry.to_dict() for entry in self.handlers.list_files()])

    def download(self, filename: str):
        fh = self.handlers.retrieve(filename)
        try:
            size = os.fstat(fh.fileno()).st_size
            response = send_file(
                _LoggedReader(fh, filename),
                as_attachment=True,
                download_name=filename,
                conditional=False,
                etag=False,
            )
        except Exception:
            fh.close()
            raise
        response.content_length = size
        return response

    def delete(self, filename: str):
        self.handlers.delete(filename)
        return jsonify({"message": "Deleted"})

    def health(self):
        try:
            self.handlers.storage.check()
        except StorageIOError as exc:
            return jsonify({"ok": False, "storage": f"error: {exc.details}"}), HTTPStatus.SERVICE_UNAVAILABLE
        return jsonify({"ok": True, "storage": "ok"})


__all__ = ["FilesController", "UPLOAD_FIELD"]
