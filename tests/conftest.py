"""Pytest configuration for shared test markers."""

import pytest


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: exercises rendering and delivery end to end with in-memory collaborators.",
    )


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "integration" in item.nodeid.split("/"):
            item.add_marker(pytest.mark.integration)
