# tests/conftest.py

"""Shared pytest fixtures."""

from collections.abc import Generator
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def mock_sleep() -> Generator[None, None, None]:
    """Patch time.sleep globally so retry back-off runs instantly."""
    with patch("time.sleep"):
        yield
