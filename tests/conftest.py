import pytest

from ndvi_service import create_app
from service_config import Settings
from tests.fakes import FakeSampler


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def sampler():
    return FakeSampler()


@pytest.fixture
def app(settings, sampler):
    app = create_app(settings=settings, sampler=sampler)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
