"""Global test configuration for swift-test-doubles tests."""

import logging
from collections.abc import Iterator

import pytest

_PACKAGE_LOGGER = "swift_test_doubles"


@pytest.fixture(autouse=True)
def isolate_logging_configuration() -> Iterator[None]:
    """Automatically preserve and restore logging state for each test.

    CLI commands apply a dictConfig that stops the package logger from
    propagating, which would hide records from ``caplog`` in later tests.
    """
    root = logging.getLogger()
    package = logging.getLogger(_PACKAGE_LOGGER)
    saved = [
        (logger, list(logger.handlers), logger.level, logger.propagate, logger.disabled)
        for logger in (root, package)
    ]

    yield

    for logger, handlers, level, propagate, disabled in saved:
        logger.handlers[:] = handlers
        logger.setLevel(level)
        logger.propagate = propagate
        logger.disabled = disabled


@pytest.fixture(autouse=True)
def clear_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's logging environment out of tests."""
    monkeypatch.delenv("SWIFT_TEST_DOUBLES_ENV", raising=False)
