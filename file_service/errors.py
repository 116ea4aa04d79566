"""Error taxonomy shared by the storage layer, the handlers and the HTTP surface."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from file_service.log import logger


@dataclass(eq=False)
class FileServiceError(Exception):
    code: str
    message: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.context:
            payload.update(self.context)
        return payload


class InvalidNameError(FileServiceError):
    def __init__(self, name: str) -> None:
        super().__init__(
            code="invalid_name",
            message="Invalid filename",
            status=HTTPStatus.BAD_REQUEST,
        )
        self.name = name


class AlreadyExistsError(FileServiceError):
    def __init__(self, name: str) -> None:
        super().__init__(
            code="already_exists",
            message="File already exists",
            status=HTTPStatus.CONFLICT,
            context={"filename": name},
        )
        self.name = name


class NotFoundError(FileServiceError):
    def __init__(self, name: str) -> None:
        super().__init__(
            code="not_found",
            message="File not found",
            status=HTTPStatus.NOT_FOUND,
        )
        self.name = name


class MissingPayloadError(FileServiceError):
    def __init__(self) -> None:
        super().__init__(
            code="missing_payload",
            message="No file uploaded",
            status=HTTPStatus.BAD_REQUEST,
        )


class StorageIOError(FileServiceError):
    """Underlying filesystem failure; ``details`` is kept for operators."""

    def __init__(self, message: str, details: str) -> None:
        super().__init__(
            code="io_failure",
            message=message,
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            context={"details": details},
        )
        self.details = details


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(FileServiceError)
    def _handle_service_error(exc: FileServiceError):
        if isinstance(exc, StorageIOError):
            logger.error(f"{exc.message} on {request.method} {request.path}: {exc.details}")
        else:
            logger.warning(f"{exc.code} on {request.method} {request.path}")
        return jsonify(exc.to_dict()), exc.status

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({"error": "internal_error"}), HTTPStatus.INTERNAL_SERVER_ERROR


__all__ = [
    "AlreadyExistsError",
    "FileServiceError",
    "InvalidNameError",
    "MissingPayloadError",
    "NotFoundError",
    "StorageIOError",
    "register_error_handlers",
]
