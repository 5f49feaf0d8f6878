"""Fixtures for REST API tests."""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from graphserver.api.app import create_app
from graphserver.container.modules import RestApiModule
from graphserver.graph.database import SqlGraphDatabase


@pytest.fixture
def app(graph: SqlGraphDatabase) -> FastAPI:
    """Application with the REST API at the default mount point."""
    app = create_app(graph)
    RestApiModule().start(app, {})
    return app


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client
