"""
Dashboard services module
"""

from .farm_dashboard import FarmDashboardService

__all__ = [
    'FarmDashboardService',
]
