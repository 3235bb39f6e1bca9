from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

_LOGGER = logging.getLogger("pqueue")

_DEFAULT_HEAPIFY_THRESHOLD = 0.5
_DEFAULT_LOG_LEVEL = "WARNING"
_SUPPORTED_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _parse_heapify_threshold(raw: str | None) -> float:
    if raw is None or raw.strip() == "":
        return _DEFAULT_HEAPIFY_THRESHOLD
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid heapify threshold '{raw}'") from exc
    if not 0.0 < value <= 1.0:
        raise ValueError(
            f"Heapify threshold must be in (0, 1], got '{raw}'"
        )
    return value


def _parse_log_level(raw: str | None) -> str:
    if raw is None or raw.strip() == "":
        return _DEFAULT_LOG_LEVEL
    level = raw.strip().upper()
    if level not in _SUPPORTED_LOG_LEVELS:
        raise ValueError(
            f"Unsupported log level '{raw}'. Expected one of {sorted(_SUPPORTED_LOG_LEVELS)}."
        )
    return level


@dataclass(frozen=True)
class RuntimeConfig:
    heapify_threshold: float = _DEFAULT_HEAPIFY_THRESHOLD
    log_level: str = _DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        return cls(
            heapify_threshold=_parse_heapify_threshold(
                os.getenv("PQUEUE_HEAPIFY_THRESHOLD")
            ),
            log_level=_parse_log_level(os.getenv("PQUEUE_LOG_LEVEL")),
        )


@lru_cache(maxsize=None)
def runtime_config() -> RuntimeConfig:
    return RuntimeConfig.from_env()


def reset_runtime_config() -> None:
    runtime_config.cache_clear()


def configure_logging(config: RuntimeConfig | None = None) -> logging.Logger:
    """Apply the configured level to the ``pqueue`` logger.

    A stream handler is attached only when neither the ``pqueue`` logger nor
    the root logger has one, so applications keep control of their output.
    """

    config = config or runtime_config()
    _LOGGER.setLevel(config.log_level)
    if not _LOGGER.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        _LOGGER.addHandler(handler)
    return _LOGGER


__all__ = [
    "RuntimeConfig",
    "configure_logging",
    "reset_runtime_config",
    "runtime_config",
]
