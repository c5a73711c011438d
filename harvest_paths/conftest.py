import pytest

from harvest_paths.testing.sandbox import (  # noqa: F401
    auction_auth,
    keeper_auth,
    management_auth,
    sandbox,
    strategy,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "smoke: mark test as a smoke test")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "smoke" in item.nodeid:
            item.add_marker(pytest.mark.smoke)
