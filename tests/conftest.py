# Copyright 2024-2025 Amiable Development
# SPDX-License-Identifier: Apache-2.0

"""
Root pytest configuration with shared fixtures and markers.

This file is automatically loaded by pytest and provides:
- Custom markers for test categories
- Shared fixtures for registries and recording callbacks
"""

import pytest

from extension_points import ExtensionRegistry, reset_default_registry


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Mark test as integration test (registry + points end to end)",
    )
    config.addinivalue_line(
        "markers",
        "slow: Mark test as slow-running (may be skipped in quick runs)",
    )


# ============================================================================
# Shared Fixtures
# ============================================================================


@pytest.fixture
def registry():
    """A fresh, explicitly owned registry."""
    return ExtensionRegistry()


@pytest.fixture(autouse=True)
def reset_default():
    """Reset the default registry before and after each test."""
    reset_default_registry()
    yield
    reset_default_registry()


@pytest.fixture
def calls():
    """List that recording callbacks append to."""
    return []


@pytest.fixture
def recorder(calls):
    """Build a sync callback that records its id and input, then transforms it."""

    def make(extension_id, transform=lambda x: x):
        def callback(value):
            calls.append((extension_id, value))
            return transform(value)

        return callback

    return make


# ============================================================================
# Test Collection Hooks
# ============================================================================


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add automatic markers based on paths."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
