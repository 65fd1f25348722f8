"""Data-access layer package."""

from .base import BaseDAL
from .production import ProductionDAL
from .production_site import ProductionSiteDAL

__all__ = ["BaseDAL", "ProductionDAL", "ProductionSiteDAL"]
