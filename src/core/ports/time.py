"""
Time port.

All timestamps are produced in UTC; components take the clock as a port so
tests can pin "now".
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time (timezone-aware)."""
        ...
