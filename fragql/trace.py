"""Diagnostic trace of built queries.

Every query produced by :func:`fragql.sql` and friends is reported on the
``fragql.query`` logger.  Nothing is printed unless tracing is switched on,
either through the standard :mod:`logging` configuration of the host
application or with :func:`configure_tracing`::

    from fragql.trace import TraceConfig, configure_tracing

    configure_tracing(TraceConfig(enabled=True, include_values=False))

    # or from the environment:
    #   FRAGQL_TRACE_ENABLED=1 FRAGQL_TRACE_INCLUDE_VALUES=0
    configure_tracing()

Tracing only reads the finished :class:`~fragql.compile.base.QueryConfig`;
it never changes it.
"""
from __future__ import annotations

import logging
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from fragql.compile.base import QueryConfig

QUERY_LOGGER_NAME = "fragql.query"

query_logger = logging.getLogger(QUERY_LOGGER_NAME)

_HANDLER_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class TraceConfig(BaseSettings):
    """Settings for the query trace.

    Fields left out of the constructor are read from ``FRAGQL_TRACE_*``
    environment variables (``FRAGQL_TRACE_ENABLED``, ``FRAGQL_TRACE_LEVEL``,
    ``FRAGQL_TRACE_INCLUDE_VALUES``).  Booleans accept pydantic's spellings
    (``1``/``0``, ``true``/``false``, ``yes``/``no``, ``on``/``off``, ...);
    anything else raises :class:`pydantic.ValidationError`.

    Attributes:
        enabled: Attach a stream handler to ``fragql.query``.
        level: Level the trace records are emitted at.
        include_values: Log bind values; when ``False`` only their count is
            logged.
    """

    model_config = SettingsConfigDict(
        env_prefix="FRAGQL_TRACE_",
        extra="forbid",
        frozen=True,
    )

    enabled: bool = False
    level: Literal["DEBUG", "INFO"] = "DEBUG"
    include_values: bool = True

    @classmethod
    def from_env(cls) -> TraceConfig:
        """Build a config from the ``FRAGQL_TRACE_*`` environment variables."""
        return cls()

    @property
    def log_level(self) -> int:
        return logging.getLevelName(self.level)


_active = TraceConfig.model_construct()

# Level and propagate flag of ``fragql.query`` before the trace handler was
# attached; ``None`` while no handler is attached.
_saved_logger_state: tuple[int, bool] | None = None


def get_trace_config() -> TraceConfig:
    """Return the config installed by the last :func:`configure_tracing` call."""
    return _active


def configure_tracing(config: TraceConfig | None = None) -> TraceConfig:
    """Install ``config`` for the query trace.

    Calling it again replaces the previous handler, so it is safe to call
    repeatedly.  ``None`` reads the config from the environment.

    While the handler is attached the logger does not propagate, so each
    record is printed once.  Disabling restores the level and propagation
    the logger had before, leaving levels set by the application alone.

    Returns:
        The config now in effect.
    """
    global _active, _saved_logger_state
    config = TraceConfig.from_env() if config is None else config

    for handler in list(query_logger.handlers):
        if getattr(handler, "_fragql_trace", False):
            query_logger.removeHandler(handler)
    if _saved_logger_state is not None:
        level, propagate = _saved_logger_state
        query_logger.setLevel(level)
        query_logger.propagate = propagate
        _saved_logger_state = None

    if config.enabled:
        _saved_logger_state = (query_logger.level, query_logger.propagate)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_HANDLER_FORMAT))
        handler._fragql_trace = True  # type: ignore[attr-defined]
        query_logger.addHandler(handler)
        query_logger.setLevel(config.log_level)
        query_logger.propagate = False

    _active = config
    return config


def trace_query(query: QueryConfig) -> None:
    """Report ``query`` on the ``fragql.query`` logger."""
    config = _active
    level = config.log_level
    if not query_logger.isEnabledFor(level):
        return
    if config.include_values:
        query_logger.log(level, "query: %s values: %r", query.text, query.values)
    else:
        query_logger.log(level, "query: %s (%d value(s))", query.text, len(query.values))
