"""Dependency injection utilities."""

from fastapi import Depends, Request

from sitetracker.core.config import Settings, get_settings
from sitetracker.core.store import DocumentStore
from sitetracker.dal.production import ProductionDAL
from sitetracker.dal.production_site import ProductionSiteDAL


def get_store(request: Request) -> DocumentStore:
    """Document store built during application startup."""
    return request.app.state.store


def get_site_dal(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> ProductionSiteDAL:
    return ProductionSiteDAL(store, settings.PRODUCTION_SITES_TABLE)


def get_production_dal(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> ProductionDAL:
    return ProductionDAL(store, settings.PRODUCTION_TABLE)
