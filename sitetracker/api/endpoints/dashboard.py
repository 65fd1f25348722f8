from fastapi import APIRouter, Depends

from sitetracker.core.deps import get_production_dal, get_site_dal
from sitetracker.dal.production import ProductionDAL
from sitetracker.dal.production_site import ProductionSiteDAL
from sitetracker.schemas.dashboard import DashboardSummary
from sitetracker.services.dashboard import DashboardService

router = APIRouter()


@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    sites: ProductionSiteDAL = Depends(get_site_dal),
    productions: ProductionDAL = Depends(get_production_dal),
):
    """Site and production totals for the dashboard cards"""
    return await DashboardService(sites, productions).get_summary()
