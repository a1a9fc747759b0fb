"""Pytest configuration for dataknobs_validation tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def person():
    """A nested record used across rule tests."""
    return {
        "name": "Alice",
        "email": "alice@example.com",
        "age": 30,
        "role": "user",
        "terms": True,
        "address": {"street": "Main", "zip": "12345"},
    }
