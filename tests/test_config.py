import logging

import pytest

from pqueue.config import (
    RuntimeConfig,
    configure_logging,
    reset_runtime_config,
    runtime_config,
)


@pytest.fixture(autouse=True)
def _clear_config_cache():
    reset_runtime_config()
    yield
    reset_runtime_config()


class TestRuntimeConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PQUEUE_HEAPIFY_THRESHOLD", raising=False)
        monkeypatch.delenv("PQUEUE_LOG_LEVEL", raising=False)
        config = RuntimeConfig.from_env()
        assert config.heapify_threshold == 0.5
        assert config.log_level == "WARNING"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PQUEUE_HEAPIFY_THRESHOLD", "0.25")
        monkeypatch.setenv("PQUEUE_LOG_LEVEL", "debug")
        config = RuntimeConfig.from_env()
        assert config.heapify_threshold == 0.25
        assert config.log_level == "DEBUG"

    def test_blank_values_use_defaults(self, monkeypatch):
        monkeypatch.setenv("PQUEUE_HEAPIFY_THRESHOLD", " ")
        monkeypatch.setenv("PQUEUE_LOG_LEVEL", "")
        assert RuntimeConfig.from_env() == RuntimeConfig()

    @pytest.mark.parametrize("raw", ["abc", "0", "-0.5", "1.5"])
    def test_invalid_heapify_threshold(self, monkeypatch, raw):
        monkeypatch.setenv("PQUEUE_HEAPIFY_THRESHOLD", raw)
        with pytest.raises(ValueError):
            RuntimeConfig.from_env()

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("PQUEUE_LOG_LEVEL", "chatty")
        with pytest.raises(ValueError, match="Unsupported log level"):
            RuntimeConfig.from_env()

    def test_runtime_config_is_cached(self, monkeypatch):
        monkeypatch.setenv("PQUEUE_HEAPIFY_THRESHOLD", "0.75")
        first = runtime_config()
        monkeypatch.setenv("PQUEUE_HEAPIFY_THRESHOLD", "0.1")
        assert runtime_config() is first

        reset_runtime_config()
        assert runtime_config().heapify_threshold == 0.1

    def test_configure_logging_sets_level(self):
        logger = configure_logging(RuntimeConfig(log_level="DEBUG"))
        try:
            assert logger is logging.getLogger("pqueue")
            assert logger.level == logging.DEBUG
            assert logging.getLogger("pqueue.priority_queue").isEnabledFor(
                logging.DEBUG
            )
        finally:
            logger.setLevel(logging.NOTSET)
