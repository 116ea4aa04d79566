from __future__ import annotations

from flask import Flask

from file_service.config import AppConfig, load_config
from file_service.controller import FilesController
from file_service.errors import register_error_handlers
from file_service.handlers import FileHandlers
from file_service.log import configure_request_logging, logger
from file_service.storage import StorageDirectory


def create_app(config: AppConfig | None = None, storage: StorageDirectory | None = None) -> Flask:
    config = config or load_config()
    if storage is None:
        storage = StorageDirectory(config.files_dir, chunk_size=config.chunk_size)

    app = Flask(__name__)
    app.config.update(MAX_CONTENT_LENGTH=config.max_content_length)

    register_error_handlers(app)
    configure_request_logging(app, debug_mode=config.debug_logging)

    handlers = FileHandlers(storage)
    app.extensions["file_service"] = handlers
    app.register_blueprint(FilesController(handlers).as_blueprint())

    logger.info(f"file service ready, storing under {storage.root}")
    return app


__all__ = ["create_app"]
