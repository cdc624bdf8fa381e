import logging

import pytest

from fmodgen import logging as fmodgen_logging


@pytest.fixture
def namespace_logger(monkeypatch):
    monkeypatch.delenv("FMODGEN_LOG_LEVEL", raising=False)
    logger = fmodgen_logging.get_logger()
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_get_logger_namespaces_names():
    assert fmodgen_logging.get_logger().name == "fmodgen"
    assert fmodgen_logging.get_logger("lowering").name == "fmodgen.lowering"
    assert fmodgen_logging.get_logger("fmodgen.api").name == "fmodgen.api"


def test_configure_logging_writes_no_files_by_default(namespace_logger):
    state = fmodgen_logging.configure_logging({"logging": {"console_level": "WARNING", "dir": ""}})

    assert state.text_log_path is None
    assert state.jsonl_log_path is None
    assert state.console_level == logging.WARNING
    assert fmodgen_logging.is_configured()
    assert not any(isinstance(handler, logging.FileHandler) for handler in namespace_logger.handlers)


def test_configure_logging_replaces_previous_handlers(namespace_logger):
    fmodgen_logging.configure_logging({})
    fmodgen_logging.configure_logging({})

    assert len(namespace_logger.handlers) == 2


def test_environment_level_wins_over_config(namespace_logger, monkeypatch):
    monkeypatch.setenv("FMODGEN_LOG_LEVEL", "debug")

    state = fmodgen_logging.configure_logging({"logging": {"console_level": "ERROR"}})

    assert state.console_level == logging.DEBUG


def test_configure_logging_file_and_jsonl(namespace_logger, tmp_path):
    state = fmodgen_logging.configure_logging(
        {"logging": {"dir": str(tmp_path), "jsonl": True, "color": False, "console_level": "ERROR"}},
    )
    fmodgen_logging.get_logger("fmodgen.generators.lib").info("Global function: %s", "FMOD_Memory_GetStats")
    for handler in namespace_logger.handlers:
        handler.flush()

    assert state.text_log_path.endswith(".log")
    assert state.jsonl_log_path.endswith(".jsonl")
    with open(state.text_log_path, encoding="utf-8") as f:
        assert "Global function: FMOD_Memory_GetStats" in f.read()
    with open(state.jsonl_log_path, encoding="utf-8") as f:
        assert '"logger": "fmodgen.generators.lib"' in f.read()


def test_configure_logging_rejects_unknown_level(namespace_logger):
    with pytest.raises(ValueError):
        fmodgen_logging.configure_logging({"logging": {"console_level": "LOUD"}})
