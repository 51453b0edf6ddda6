from __future__ import annotations

import logging

import accountlib


def test_package_installs_null_handler() -> None:
    logger = logging.getLogger("accountlib")

    assert accountlib.__all__
    assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)
