"""Shared fixtures for query_values tests."""

from __future__ import annotations

import pytest

from query_values import Encoder, RecordRegistry


@pytest.fixture
def registry():
    """Fresh record registry, isolated from ``default_registry``."""
    return RecordRegistry()


@pytest.fixture
def encoder(registry):
    """Encoder with default configuration and a private registry."""
    return Encoder(registry=registry)
