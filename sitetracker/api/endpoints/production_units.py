from typing import List

import structlog
from fastapi import APIRouter, Depends, status

from sitetracker.core.deps import get_production_dal
from sitetracker.core.exceptions import NotFoundException
from sitetracker.dal.production import ProductionDAL, split_partition_key
from sitetracker.schemas.production import (
    DeleteResponse,
    ProductionHistoryResponse,
    ProductionRecord,
    ProductionRecordCreate,
    ProductionRecordLookup,
    ProductionRecordUpdate,
)

logger = structlog.get_logger()

router = APIRouter()


@router.get("", response_model=List[ProductionRecord], response_model_exclude_none=True)
async def get_production_records(productions: ProductionDAL = Depends(get_production_dal)):
    """Get every production record"""
    return await productions.list_all()


@router.get(
    "/{company_id}/{production_site_id}",
    response_model=ProductionHistoryResponse,
    response_model_exclude_none=True,
)
async def get_site_production(
    company_id: int,
    production_site_id: int,
    productions: ProductionDAL = Depends(get_production_dal),
):
    """Get the production history of one site, oldest month first"""
    records = await productions.list_by_partition(company_id, production_site_id)
    message = (
        f"Found {len(records)} production records"
        if records
        else "No production data found for this site"
    )
    return {"data": records, "message": message}


@router.get(
    "/{company_id}/{production_site_id}/{month}",
    response_model=ProductionRecordLookup,
    response_model_exclude_none=True,
)
async def get_production_record(
    company_id: int,
    production_site_id: int,
    month: str,
    productions: ProductionDAL = Depends(get_production_dal),
):
    """Check whether a month already has a record"""
    record = await productions.check_existing(company_id, production_site_id, month)
    if record is None:
        raise NotFoundException("Production data not found")
    return {"data": record}


@router.post(
    "",
    response_model=ProductionRecord,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_production_record(
    record_in: ProductionRecordCreate,
    productions: ProductionDAL = Depends(get_production_dal),
):
    """Record one month of production; 409 when the month already exists"""
    company_id, production_site_id = split_partition_key(record_in.pk)
    fields = record_in.model_dump(exclude={"pk", "sk"}, exclude_none=True)
    return await productions.create(company_id, production_site_id, record_in.sk, fields)


@router.put(
    "/{company_id}/{production_site_id}/{month}",
    response_model=ProductionRecord,
    response_model_exclude_none=True,
)
async def update_production_record(
    company_id: int,
    production_site_id: int,
    month: str,
    record_in: ProductionRecordUpdate,
    productions: ProductionDAL = Depends(get_production_dal),
):
    """Overwrite one month of production"""
    fields = record_in.model_dump(exclude_none=True)
    return await productions.update(company_id, production_site_id, month, fields)


@router.delete("/{company_id}/{production_site_id}/{month}", response_model=DeleteResponse)
async def delete_production_record(
    company_id: int,
    production_site_id: int,
    month: str,
    productions: ProductionDAL = Depends(get_production_dal),
):
    """Delete one month of production"""
    removed = await productions.remove(company_id, production_site_id, month)
    if removed is None:
        raise NotFoundException("Production data not found")
    logger.info("Production record deleted", pk=removed["pk"], sk=removed["sk"])
    return {"success": True, "message": "Production data deleted successfully"}
