"""Pytest fixtures for web exporter testing."""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from nmeastat.publisher import SnapshotPublisher
from nmeastat_server import create_app


@pytest.fixture
def publisher() -> Iterator[SnapshotPublisher]:
    publisher = SnapshotPublisher()
    yield publisher
    publisher.close()


@pytest.fixture
def app(publisher: SnapshotPublisher) -> FastAPI:
    return create_app(publisher)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client
