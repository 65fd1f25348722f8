"""Dashboard summary statistics."""

from typing import Any, Dict, Iterable, List, Mapping

from sitetracker.core.matrices import to_float, to_int
from sitetracker.dal.production import ProductionDAL
from sitetracker.dal.production_site import ProductionSiteDAL


def compute_site_stats(
    sites: Iterable[Mapping[str, Any]],
    records: Iterable[Mapping[str, Any]] = (),
) -> Dict[str, Any]:
    """Aggregate normalized sites and production records into card values.

    Capacities are in MW, annual production in lakh units and the injection
    voltage average in KV; an empty site list yields zeros throughout.
    """
    sites = list(sites)
    records = list(records)
    wind = [site for site in sites if site.get("type") == "Wind"]
    solar = [site for site in sites if site.get("type") == "Solar"]

    def capacity(group: List[Mapping[str, Any]]) -> float:
        return round(sum(to_float(site.get("capacity_MW")) for site in group), 3)

    voltages = [to_float(site.get("injectionVoltage_KV")) for site in sites]

    return {
        "totalSites": len(sites),
        "activeSites": sum(1 for site in sites if site.get("status") == "Active"),
        "windSites": len(wind),
        "solarSites": len(solar),
        "bankedSites": sum(1 for site in sites if site.get("banking")),
        "totalCapacity": capacity(sites),
        "windCapacity": capacity(wind),
        "solarCapacity": capacity(solar),
        "avgInjectionVoltage": round(sum(voltages) / len(voltages), 2) if voltages else 0.0,
        "totalAnnualProduction": round(
            sum(to_float(site.get("annualProduction_L")) for site in sites), 3
        ),
        "productionRecords": len(records),
        "totalProductionUnits": sum(to_int(record.get("totalUnit")) for record in records),
        "totalProductionCharges": round(
            sum(to_float(record.get("totalCharge")) for record in records), 2
        ),
    }


class DashboardService:
    def __init__(self, sites: ProductionSiteDAL, productions: ProductionDAL):
        self.sites = sites
        self.productions = productions

    async def get_summary(self) -> Dict[str, Any]:
        sites = await self.sites.list_all()
        records = await self.productions.list_all()
        return compute_site_stats(sites, records)
