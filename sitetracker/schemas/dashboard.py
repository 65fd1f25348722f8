from pydantic import BaseModel, Field


class DashboardSummary(BaseModel):
    """Aggregate statistics shown on the dashboard cards."""

    total_sites: int = Field(..., alias="totalSites")
    active_sites: int = Field(..., alias="activeSites")
    wind_sites: int = Field(..., alias="windSites")
    solar_sites: int = Field(..., alias="solarSites")
    banked_sites: int = Field(..., alias="bankedSites")
    total_capacity: float = Field(..., alias="totalCapacity")
    wind_capacity: float = Field(..., alias="windCapacity")
    solar_capacity: float = Field(..., alias="solarCapacity")
    avg_injection_voltage: float = Field(..., alias="avgInjectionVoltage")
    total_annual_production: float = Field(..., alias="totalAnnualProduction")
    production_records: int = Field(..., alias="productionRecords")
    total_production_units: int = Field(..., alias="totalProductionUnits")
    total_production_charges: float = Field(..., alias="totalProductionCharges")

    class Config:
        populate_by_name = True
