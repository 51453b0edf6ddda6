from __future__ import annotations

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def clear_accountlib_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("ACCOUNTLIB_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_accountlib_logger():
    yield
    logger = logging.getLogger("accountlib")
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            continue
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    recorded: list[float] = []
    monkeypatch.setattr("accountlib.core.http.client.time.sleep", lambda seconds: recorded.append(seconds))
    return recorded
