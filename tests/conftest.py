import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from boilerplate import BoilerplateConfig, BoilerplateProvider, MemoryUserProvider
from boilerplate.core.log import DAILY_CHANNEL

from tests.helpers import ADMIN_PASSWORD, login


@pytest.fixture(autouse=True)
def _reset_daily_channel():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == DAILY_CHANNEL:
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def config(tmp_path):
    return BoilerplateConfig(**{
        "app": {"secret_key": "test-secret", "log_dir": str(tmp_path / "logs")},
        "auth": {"admin_user": "admin", "admin_password": ADMIN_PASSWORD},
    })


@pytest.fixture
def users(config):
    return MemoryUserProvider(config)


@pytest.fixture
def provider(config, users):
    return BoilerplateProvider(config=config, user_provider=users)


@pytest.fixture
def app(provider):
    app = FastAPI()
    provider.boot(app)
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_client(client):
    response = login(client)
    assert response.status_code == 200
    return client
