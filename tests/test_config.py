import logging

import pytest

from user_rpc_api.app.core.config import Settings
from user_rpc_api.app.core.logging_config import setup_logging
from user_rpc_api.app.main import create_app


def test_development_mode():
    assert Settings(environment="development", debug=False).is_development
    assert Settings(environment="production", debug=True).is_development
    assert not Settings(environment="production", debug=False).is_development


def test_cors_origins_default_to_any(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    assert Settings().cors_origins == ["*"]


def test_cors_origins_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, https://example.org")
    assert Settings().cors_origins == ["http://localhost:5173", "https://example.org"]


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    setup_logging("DEBUG")
    setup_logging("DEBUG")
    assert len(root.handlers) <= len(before) + 1


@pytest.fixture
def bare_root_logger(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    original_level = root.level
    yield root
    root.setLevel(original_level)
    for handler in root.handlers:
        handler.close()


def test_setup_logging_attaches_file_handler(bare_root_logger, tmp_path):
    log_path = tmp_path / "logs" / "api.log"
    setup_logging("WARNING", logfile=str(log_path))

    file_handlers = [h for h in bare_root_logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].baseFilename == str(log_path.resolve())
    assert bare_root_logger.level == logging.WARNING

    logging.getLogger("user_rpc_api.test").warning("written to file")
    file_handlers[0].flush()
    assert "written to file" in log_path.read_text(encoding="utf-8")


def test_setup_logging_without_file(bare_root_logger):
    setup_logging("nonsense")
    assert len(bare_root_logger.handlers) == 1
    assert not isinstance(bare_root_logger.handlers[0], logging.FileHandler)
    assert bare_root_logger.level == logging.INFO


def test_create_app_passes_log_file(bare_root_logger, tmp_path):
    log_path = tmp_path / "app.log"
    create_app(settings=Settings(log_file=str(log_path)))
    assert any(
        isinstance(h, logging.FileHandler) and h.baseFilename == str(log_path.resolve())
        for h in bare_root_logger.handlers
    )
