"""Main API router."""

from fastapi import APIRouter

from sitetracker.api.endpoints import dashboard, production_sites, production_units

api_router = APIRouter()

api_router.include_router(
    production_sites.router, prefix="/production-site", tags=["production-sites"]
)
api_router.include_router(
    production_units.router, prefix="/production-unit", tags=["production-units"]
)
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
