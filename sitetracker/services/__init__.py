"""Business logic services package."""

from .dashboard import DashboardService, compute_site_stats
from .production_entry import EntryState, ProductionEntryWorkflow, WorkflowError
from .production_site import ProductionSiteService

__all__ = [
    "DashboardService",
    "EntryState",
    "ProductionEntryWorkflow",
    "ProductionSiteService",
    "WorkflowError",
    "compute_site_stats",
]
