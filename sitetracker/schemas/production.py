from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from sitetracker.core.month_key import normalize_sort_key


class ProductionMatrixInput(BaseModel):
    """Unit matrix (``c1..c5``) and charge matrix (``c001..c010``) values."""

    c1: Optional[float] = None
    c2: Optional[float] = None
    c3: Optional[float] = None
    c4: Optional[float] = None
    c5: Optional[float] = None
    c001: Optional[float] = None
    c002: Optional[float] = None
    c003: Optional[float] = None
    c004: Optional[float] = None
    c005: Optional[float] = None
    c006: Optional[float] = None
    c007: Optional[float] = None
    c008: Optional[float] = None
    c009: Optional[float] = None
    c010: Optional[float] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_as_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ProductionRecordCreate(ProductionMatrixInput):
    pk: str = Field(..., pattern=r"^\d+_\d+$", description="'{companyId}_{productionSiteId}'")
    sk: str = Field(..., description="Month as MMYYYY")

    @field_validator("sk")
    @classmethod
    def validate_sk(cls, v: str) -> str:
        return normalize_sort_key(v)


class ProductionRecordUpdate(ProductionMatrixInput):
    pass


class ProductionRecord(BaseModel):
    pk: str
    sk: str
    company_id: int = Field(..., alias="companyId")
    production_site_id: int = Field(..., alias="productionSiteId")
    c1: int = 0
    c2: int = 0
    c3: int = 0
    c4: int = 0
    c5: int = 0
    c001: Optional[float] = None
    c002: Optional[float] = None
    c003: Optional[float] = None
    c004: Optional[float] = None
    c005: Optional[float] = None
    c006: Optional[float] = None
    c007: Optional[float] = None
    c008: Optional[float] = None
    c009: Optional[float] = None
    c010: Optional[float] = None
    total_unit: int = Field(..., alias="totalUnit")
    total_charge: float = Field(0, alias="totalCharge")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True


class ProductionHistoryResponse(BaseModel):
    data: List[ProductionRecord]
    message: str


class ProductionRecordLookup(BaseModel):
    data: ProductionRecord


class DeleteResponse(BaseModel):
    success: bool
    message: Optional[str] = None
