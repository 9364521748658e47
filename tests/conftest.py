"""Pytest configuration for dataknobs_timeliness tests."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_timeliness import FormatRegistry, Record  # noqa: E402

# Stands in for "now" in restriction tests
NOW = datetime(2008, 1, 1, 12, 0, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def registry():
    """A fresh registry that tests may mutate."""
    return FormatRegistry(century=2000)


@pytest.fixture
def person():
    return Record()
