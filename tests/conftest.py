import logging

import pytest


def by_slow_marker(item):
    # Unit tests first, then slow ones
    return 0 if item.get_closest_marker("slow") is None else 1


def pytest_addoption(parser):
    parser.addoption("--slow-last", action="store_true", default=False)


def pytest_collection_modifyitems(items, config):
    if config.getoption("--slow-last"):
        items.sort(key=by_slow_marker)


@pytest.fixture(autouse=True)
def configure_logging_for_tests(caplog):
    """Configure logging to work properly with caplog fixture.

    Cinestream loggers are set up with propagate=False; re-enable propagation so caplog can capture them.
    """
    caplog.set_level(logging.DEBUG)

    root_logger = logging.getLogger()
    original_level = root_logger.level
    root_logger.setLevel(logging.DEBUG)

    cinestream_logger = logging.getLogger("cinestream")
    original_propagate = cinestream_logger.propagate
    cinestream_logger.propagate = True

    yield

    root_logger.setLevel(original_level)
    cinestream_logger.propagate = original_propagate
