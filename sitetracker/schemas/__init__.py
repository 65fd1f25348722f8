"""Pydantic schemas package."""

from .dashboard import DashboardSummary
from .production import (
    DeleteResponse,
    ProductionHistoryResponse,
    ProductionRecord,
    ProductionRecordCreate,
    ProductionRecordLookup,
    ProductionRecordUpdate,
)
from .production_site import (
    ProductionSite,
    ProductionSiteCreate,
    ProductionSiteDetail,
    ProductionSiteUpdate,
)

__all__ = [
    "DashboardSummary",
    "DeleteResponse",
    "ProductionHistoryResponse",
    "ProductionRecord",
    "ProductionRecordCreate",
    "ProductionRecordLookup",
    "ProductionRecordUpdate",
    "ProductionSite",
    "ProductionSiteCreate",
    "ProductionSiteDetail",
    "ProductionSiteUpdate",
]
