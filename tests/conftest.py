from __future__ import annotations

from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from file_service.app import create_app
from file_service.config import AppConfig
from file_service.storage import StorageDirectory


@pytest.fixture()
def root(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def storage(root: Path) -> StorageDirectory:
    return StorageDirectory(root)


@pytest.fixture()
def config(root: Path) -> AppConfig:
    return AppConfig(files_dir=root)


@pytest.fixture()
def app(config: AppConfig, storage: StorageDirectory) -> Flask:
    app = create_app(config, storage=storage)
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
