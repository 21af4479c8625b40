"""
API test fixtures.

Builds the application with service dependencies overridden to use the
in-memory store and deterministic embedder.
"""

import pytest
from fastapi.testclient import TestClient

from restaurant_rag.api.deps import (
    get_csv_service,
    get_document_service,
    get_search_service,
)
from restaurant_rag.api.main import create_app


@pytest.fixture
def app(document_service, search_service, csv_service):
    app = create_app()
    app.dependency_overrides[get_document_service] = lambda: document_service
    app.dependency_overrides[get_search_service] = lambda: search_service
    app.dependency_overrides[get_csv_service] = lambda: csv_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
