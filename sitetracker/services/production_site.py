"""Site detail view: a site joined with its production history."""

from typing import Any, Dict, List, Optional

import structlog

from sitetracker.core.exceptions import StoreException
from sitetracker.core.matrices import CHARGE_FIELDS, UNIT_FIELDS
from sitetracker.core.month_key import format_month_label, month_name, parse_sort_key
from sitetracker.dal.production import ProductionDAL, chronological_order
from sitetracker.dal.production_site import ProductionSiteDAL

logger = structlog.get_logger()


def to_data_point(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Reshape a production record for the site detail view.

    Returns ``None`` for records whose sort key cannot be parsed.
    """
    try:
        _, year = parse_sort_key(record["sk"])
    except (KeyError, ValueError):
        return None

    return {
        "date": record["sk"],
        "sk": record["sk"],
        "matrices": {
            "unit": {name: record.get(name, 0) for name in UNIT_FIELDS},
            "charge": {name: record.get(name) or 0.0 for name in CHARGE_FIELDS},
        },
        "totalUnit": record["totalUnit"],
        "totalCharge": record["totalCharge"],
        "month": month_name(record["sk"]),
        "year": year,
        "label": format_month_label(record["sk"]),
    }


def summarize(site: Dict[str, Any], data_points: List[Dict[str, Any]]) -> Dict[str, Any]:
    count = len(data_points)
    summary = None
    if count:
        total_units = sum(point["totalUnit"] for point in data_points)
        total_charges = sum(point["totalCharge"] for point in data_points)
        summary = {
            "totalUnits": total_units,
            "totalCharges": round(total_charges, 2),
            "averageUnits": total_units / count,
            "averageCharges": round(total_charges / count, 2),
        }
    return {
        "hasProductionData": count > 0,
        "lastUpdated": site.get("updatedAt"),
        "dataPoints": count,
        "summary": summary,
    }


class ProductionSiteService:
    """Combines the site and production DALs for the detail endpoint."""

    def __init__(self, sites: ProductionSiteDAL, productions: ProductionDAL):
        self.sites = sites
        self.productions = productions

    async def get_site_detail(
        self, company_id: int, production_site_id: int
    ) -> Optional[Dict[str, Any]]:
        site = await self.sites.get_one(company_id, production_site_id)
        if site is None:
            return None

        # A failing history lookup still returns the site itself.
        try:
            records = await self.productions.list_by_partition(company_id, production_site_id)
        except StoreException as e:
            logger.warning(
                "Production history unavailable",
                company_id=company_id,
                production_site_id=production_site_id,
                error=e.message,
            )
            records = []

        records.sort(key=chronological_order, reverse=True)
        data_points = [point for point in map(to_data_point, records) if point is not None]

        return {
            **site,
            "productionData": data_points,
            "metadata": summarize(site, data_points),
        }
