import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from vectorsearch.api.app import create_app
from vectorsearch.api.routes.search import get_embedder, get_gateway
from vectorsearch.util.mongo_client import VectorSearchGateway


@pytest.fixture
def embedder(query_vector):
    mock = MagicMock()
    mock.model = "text-embedding-ada-002"
    mock.embed = AsyncMock(return_value=query_vector)
    return mock


@pytest.fixture
def gateway(settings, fake_mongo_client):
    return VectorSearchGateway.from_settings(settings, client=fake_mongo_client)


@pytest.fixture
def app(settings, embedder, gateway):
    app = create_app(settings)
    app.dependency_overrides[get_embedder] = lambda: embedder
    app.dependency_overrides[get_gateway] = lambda: gateway
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    # Not used as a context manager: the lifespan (real clients) is skipped.
    return TestClient(app)
