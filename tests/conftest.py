import pytest
from fastapi.testclient import TestClient

from user_rpc_api.app.core.config import Settings
from user_rpc_api.app.main import create_app
from user_rpc_api.app.services.user_service import UserService
from user_rpc_api.app.services.user_store import UserStore


@pytest.fixture
def store():
    return UserStore()


@pytest.fixture
def service(store):
    return UserService(store)


@pytest.fixture
def settings():
    return Settings(environment="production", debug=False, log_level="INFO")


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.hookimpl(hookwrapper=True, trylast=True)
def pytest_runtest_call(item):
    # Pytest's logging plugin attaches its capture handlers to the root logger
    # when the test body starts, after fixtures ran; give tests that request
    # ``bare_root_logger`` a root logger with no handlers inside the call phase.
    if "bare_root_logger" not in getattr(item, "fixturenames", ()):
        yield
        return
    import logging

    mp = pytest.MonkeyPatch()
    mp.setattr(logging.getLogger(), "handlers", [])
    try:
        yield
    finally:
        for handler in logging.getLogger().handlers:
            handler.close()
        mp.undo()
