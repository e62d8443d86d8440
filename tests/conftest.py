"""Shared pytest fixtures for fragQL unit tests."""
from __future__ import annotations

import logging

import pytest

from fragql.schema.table import TableRegistry
from fragql.trace import TraceConfig, configure_tracing, query_logger
from tests.fixtures import USERS


@pytest.fixture(autouse=True)
def _clean_table_registry():
    """Every test starts without registered tables."""
    TableRegistry.clear()
    yield
    TableRegistry.clear()


@pytest.fixture(autouse=True)
def _clean_trace_environment(monkeypatch):
    """Tests never see FRAGQL_TRACE_* variables from the calling shell."""
    for name in ("FRAGQL_TRACE_ENABLED", "FRAGQL_TRACE_LEVEL", "FRAGQL_TRACE_INCLUDE_VALUES"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_tracing():
    """Undo any tracing a test switched on."""
    yield
    configure_tracing(TraceConfig(enabled=False, level="DEBUG", include_values=True))
    query_logger.setLevel(logging.NOTSET)
    query_logger.propagate = True


@pytest.fixture()
def users() -> list[dict]:
    """Two same-shaped user records."""
    return [dict(user) for user in USERS]
