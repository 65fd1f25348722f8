from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

SiteType = Literal["Wind", "Solar"]
SiteStatus = Literal["Active", "Inactive"]


class _SiteModel(BaseModel):
    @field_validator("htsc_no", mode="before", check_fields=False)
    @classmethod
    def coerce_htsc_no(cls, v: Any) -> Any:
        # HTSC numbers are identifiers even when posted as numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


class ProductionSiteCreate(_SiteModel):
    company_id: Optional[int] = Field(None, alias="companyId", ge=0)
    production_site_id: Optional[int] = Field(None, alias="productionSiteId", ge=0)
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    type: SiteType
    status: SiteStatus = "Active"
    capacity_mw: float = Field(0, alias="capacity_MW", ge=0)
    banking: bool = False
    htsc_no: Optional[str] = Field(None, alias="htscNo", max_length=100)
    injection_voltage_kv: float = Field(0, alias="injectionVoltage_KV", ge=0)
    annual_production_l: float = Field(0, alias="annualProduction_L", ge=0)


class ProductionSiteUpdate(_SiteModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[SiteType] = None
    status: Optional[SiteStatus] = None
    capacity_mw: Optional[float] = Field(None, alias="capacity_MW", ge=0)
    banking: Optional[bool] = None
    htsc_no: Optional[str] = Field(None, alias="htscNo", max_length=100)
    injection_voltage_kv: Optional[float] = Field(None, alias="injectionVoltage_KV", ge=0)
    annual_production_l: Optional[float] = Field(None, alias="annualProduction_L", ge=0)


class ProductionSite(BaseModel):
    company_id: int = Field(..., alias="companyId")
    production_site_id: int = Field(..., alias="productionSiteId")
    name: str
    location: str
    type: str
    status: str
    banking: bool
    capacity_mw: float = Field(..., alias="capacity_MW")
    annual_production_l: float = Field(..., alias="annualProduction_L")
    htsc_no: str = Field("", alias="htscNo")
    injection_voltage_kv: float = Field(..., alias="injectionVoltage_KV")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True


class ProductionMatrices(BaseModel):
    unit: Dict[str, int]
    charge: Dict[str, float]


class ProductionDataPoint(BaseModel):
    """One month of a site's history as shown on the site detail view."""

    date: str
    sk: str
    matrices: ProductionMatrices
    total_unit: int = Field(..., alias="totalUnit")
    total_charge: float = Field(..., alias="totalCharge")
    month: str
    year: int
    label: str

    class Config:
        populate_by_name = True


class ProductionSummary(BaseModel):
    total_units: float = Field(..., alias="totalUnits")
    total_charges: float = Field(..., alias="totalCharges")
    average_units: float = Field(..., alias="averageUnits")
    average_charges: float = Field(..., alias="averageCharges")

    class Config:
        populate_by_name = True


class ProductionSiteMetadata(BaseModel):
    has_production_data: bool = Field(..., alias="hasProductionData")
    last_updated: Optional[str] = Field(None, alias="lastUpdated")
    data_points: int = Field(..., alias="dataPoints")
    summary: Optional[ProductionSummary] = None

    class Config:
        populate_by_name = True


class ProductionSiteDetail(ProductionSite):
    production_data: List[ProductionDataPoint] = Field(default_factory=list, alias="productionData")
    metadata: ProductionSiteMetadata
