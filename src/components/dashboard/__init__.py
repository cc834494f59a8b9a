"""
Dashboard component - Admin overview.
"""

from .component import run_dashboard
from .models import DashboardInput, DashboardOutput, DashboardTotals, TypeStat

__all__ = [
    "run_dashboard",
    "DashboardInput",
    "DashboardOutput",
    "DashboardTotals",
    "TypeStat",
]
