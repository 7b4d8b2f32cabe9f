"""Shared fixtures for gexreg tests."""

import logging

import pytest

from common import http_client
from constants import Constants
from registry import InMemoryPackageIndex, Package, VersionedRelease

_TUNABLES = (
    "API_BASE_URL",
    "INDEX_FILE",
    "REQUEST_TIMEOUT",
    "HTTP_RETRY_MAX",
    "HTTP_RETRY_BASE_DELAY_SEC",
    "HTTP_CACHE_TTL_SEC",
)


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo runtime overrides applied to Constants by a test."""
    saved = {name: getattr(Constants, name) for name in _TUNABLES}
    yield
    for name, value in saved.items():
        setattr(Constants, name, value)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Put back root handlers replaced by configure_logging()."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture(autouse=True)
def empty_http_cache():
    """Start every test with an empty HTTP response cache."""
    http_client.clear_cache()
    yield
    http_client.clear_cache()


def make_package(name, versions, dependencies=None):
    """Build a Package with bare releases."""
    return Package(
        name=name,
        dependencies=dict(dependencies or {}),
        versions=[VersionedRelease(version=v) for v in versions],
    )


def make_index(*packages):
    """Build an in-memory index from Package objects."""
    return InMemoryPackageIndex(packages)
