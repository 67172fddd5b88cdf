"""Pytest configuration and shared fixtures."""

import logging

import pytest
import structlog

from topdisk.models.disk import DiskDescriptor
from topdisk.utils.logging import remove_handlers


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo logging configured by CLI tests so later tests don't log to closed streams."""
    level = logging.getLogger().level
    yield
    structlog.reset_defaults()
    remove_handlers()
    logging.getLogger().setLevel(level)


@pytest.fixture
def two_pool_inventory():
    """Four disks across two pools, one healing and one scanning."""
    return [
        DiskDescriptor(endpoint="http://node1/d1", pool_index=0, total_space=1000, used_space=250),
        DiskDescriptor(endpoint="http://node1/d2", pool_index=0, total_space=1000, used_space=900, healing=True),
        DiskDescriptor(endpoint="http://node2/d1", pool_index=1, total_space=2000, used_space=500, scanning=True),
        DiskDescriptor(endpoint="http://node2/d2", pool_index=1, total_space=0, used_space=0),
    ]
