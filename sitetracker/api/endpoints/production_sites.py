from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from sitetracker.core.deps import get_production_dal, get_site_dal
from sitetracker.core.exceptions import NotFoundException
from sitetracker.dal.production import ProductionDAL
from sitetracker.dal.production_site import ProductionSiteDAL
from sitetracker.schemas.production_site import (
    ProductionSite,
    ProductionSiteCreate,
    ProductionSiteDetail,
    ProductionSiteUpdate,
    SiteStatus,
    SiteType,
)
from sitetracker.services.production_site import ProductionSiteService

router = APIRouter()


@router.get("", response_model=List[ProductionSite])
async def get_production_sites(
    company_id: Optional[int] = Query(None, alias="companyId", ge=0),
    site_type: Optional[SiteType] = Query(None, alias="type"),
    site_status: Optional[SiteStatus] = Query(None, alias="status"),
    sites: ProductionSiteDAL = Depends(get_site_dal),
):
    """List production sites, optionally narrowed to one company, type or status"""
    filters = {}
    if site_type:
        filters["type"] = site_type
    if site_status:
        filters["status"] = site_status

    if company_id is not None:
        return await sites.list_by_company(company_id, filters)

    records = await sites.list_all()
    return [
        site for site in records
        if all(site.get(name) == value for name, value in filters.items())
    ]


@router.post("", response_model=ProductionSite, status_code=status.HTTP_201_CREATED)
async def create_production_site(
    site_in: ProductionSiteCreate,
    sites: ProductionSiteDAL = Depends(get_site_dal),
):
    """Create a production site"""
    return await sites.create(site_in.model_dump(by_alias=True, exclude_none=True))


@router.get("/{company_id}/{production_site_id}", response_model=ProductionSiteDetail)
async def get_production_site(
    company_id: int,
    production_site_id: int,
    sites: ProductionSiteDAL = Depends(get_site_dal),
    productions: ProductionDAL = Depends(get_production_dal),
):
    """Get a production site together with its production history"""
    detail = await ProductionSiteService(sites, productions).get_site_detail(
        company_id, production_site_id
    )
    if detail is None:
        raise NotFoundException("Production site not found")
    return detail


@router.put("/{company_id}/{production_site_id}", response_model=ProductionSite)
async def update_production_site(
    company_id: int,
    production_site_id: int,
    site_in: ProductionSiteUpdate,
    sites: ProductionSiteDAL = Depends(get_site_dal),
):
    """Update a production site"""
    fields = site_in.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
    return await sites.update(company_id, production_site_id, fields)


@router.delete("/{company_id}/{production_site_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_production_site(
    company_id: int,
    production_site_id: int,
    sites: ProductionSiteDAL = Depends(get_site_dal),
):
    """Delete a production site; its production records are left in place"""
    removed = await sites.remove(company_id, production_site_id)
    if removed is None:
        raise NotFoundException("Production site not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
