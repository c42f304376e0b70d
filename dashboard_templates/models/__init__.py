"""SQLAlchemy models package."""

from .base import Base
from .dashboard_template import DashboardTemplate

__all__ = [
    "Base",
    "DashboardTemplate",
]
