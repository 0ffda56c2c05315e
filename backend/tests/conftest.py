"""Root conftest — shared test configuration."""

import os
from datetime import time

import pytest

# Never reach a real database from tests
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

from app.core.period_calculator import OperatingWindow  # noqa: E402


@pytest.fixture
def window() -> OperatingWindow:
    """Default 03:30–15:32 UTC operating window."""
    return OperatingWindow(start=time(3, 30), end=time(15, 32))
