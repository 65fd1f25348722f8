"""Data access for monthly production records.

Records are keyed by ``pk = "{companyId}_{productionSiteId}"`` and
``sk = "MMYYYY"``.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog

from sitetracker.core.exceptions import ValidationException
from sitetracker.core.matrices import (
    CHARGE_FIELDS,
    ChargeMatrix,
    UnitMatrix,
    has_charge_values,
    to_float,
    to_int,
)
from sitetracker.core.month_key import normalize_sort_key, sort_key_ordinal
from sitetracker.core.store import ATTRIBUTE_NOT_EXISTS, DocumentStore, KeySchema
from sitetracker.dal.base import BaseDAL
from sitetracker.dal.production_site import parse_id, utc_now

logger = structlog.get_logger()

PRODUCTION_KEY_SCHEMA = KeySchema("pk", "sk")


def partition_key(company_id: int, production_site_id: int) -> str:
    return f"{company_id}_{production_site_id}"


def split_partition_key(pk: Any) -> Tuple[int, int]:
    """``"5_12"`` -> ``(5, 12)``."""
    parts = str(pk or "").split("_")
    if len(parts) != 2:
        raise ValidationException("pk must have the form '{companyId}_{productionSiteId}'")
    return parse_id(parts[0], "companyId"), parse_id(parts[1], "productionSiteId")


def parse_sort_key(sk: Any) -> str:
    try:
        return normalize_sort_key(sk)
    except ValueError as e:
        raise ValidationException(str(e))


def chronological_order(item: Mapping[str, Any]) -> int:
    try:
        return sort_key_ordinal(item.get("sk"))
    except ValueError:
        return 0


class ProductionDAL(BaseDAL):
    """Monthly unit and charge measurements per production site."""

    def __init__(self, store: DocumentStore, table_name: str):
        super().__init__(store, table_name)
        store.register(table_name, PRODUCTION_KEY_SCHEMA)

    partition_key = staticmethod(partition_key)

    def key(self, company_id: Any, production_site_id: Any, sk: Any) -> Dict[str, str]:
        return {
            "pk": partition_key(
                parse_id(company_id, "companyId"),
                parse_id(production_site_id, "productionSiteId"),
            ),
            "sk": parse_sort_key(sk),
        }

    @staticmethod
    def normalize(item: Mapping[str, Any]) -> Dict[str, Any]:
        """Map a stored item to the wire shape with derived totals."""
        company_id = item.get("companyId")
        production_site_id = item.get("productionSiteId")
        if company_id is None or production_site_id is None:
            parts = str(item.get("pk") or "").split("_")
            if len(parts) == 2:
                company_id, production_site_id = parts

        unit = UnitMatrix.from_item(item)
        record = {
            "pk": item.get("pk"),
            "sk": item.get("sk"),
            "companyId": to_int(company_id),
            "productionSiteId": to_int(production_site_id),
            **unit.to_item(),
        }
        total_charge = 0.0
        if has_charge_values(item):
            charge = ChargeMatrix.from_item(item)
            record.update(charge.to_item())
            total_charge = charge.total

        record["totalUnit"] = unit.total
        record["totalCharge"] = total_charge
        record["createdAt"] = item.get("createdAt")
        record["updatedAt"] = item.get("updatedAt")
        return record

    async def list_all(self) -> List[Dict[str, Any]]:
        items = await self.scan_all()
        return [self.normalize(item) for item in items]

    async def list_by_partition(
        self, company_id: Any, production_site_id: Any
    ) -> List[Dict[str, Any]]:
        """Full production history of one site, oldest month first."""
        pk = partition_key(
            parse_id(company_id, "companyId"),
            parse_id(production_site_id, "productionSiteId"),
        )
        items = await self.query_by_partition(pk)
        items.sort(key=chronological_order)
        return [self.normalize(item) for item in items]

    async def get_one(
        self, company_id: Any, production_site_id: Any, sk: Any
    ) -> Optional[Dict[str, Any]]:
        item = await self.get_by_key(self.key(company_id, production_site_id, sk))
        return self.normalize(item) if item is not None else None

    async def check_existing(
        self, company_id: Any, production_site_id: Any, sk: Any
    ) -> Optional[Dict[str, Any]]:
        """Read-before-write probe used ahead of creating a month's record."""
        record = await self.get_one(company_id, production_site_id, sk)
        logger.debug(
            "Checked for existing production record",
            company_id=company_id,
            production_site_id=production_site_id,
            sk=sk,
            exists=record is not None,
        )
        return record

    async def create(
        self,
        company_id: Any,
        production_site_id: Any,
        sk: Any,
        fields: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Create one month's record; an existing ``(pk, sk)`` raises
        :class:`ConflictException`."""
        company_id = parse_id(company_id, "companyId")
        production_site_id = parse_id(production_site_id, "productionSiteId")
        now = utc_now()

        item = {
            "pk": partition_key(company_id, production_site_id),
            "sk": parse_sort_key(sk),
            "companyId": company_id,
            "productionSiteId": production_site_id,
            **UnitMatrix.from_item(fields).to_item(),
            "createdAt": now,
            "updatedAt": now,
        }
        if has_charge_values(fields):
            item.update(ChargeMatrix.from_item(fields).to_item())

        stored = await self.put(item, condition=ATTRIBUTE_NOT_EXISTS)
        logger.info("Production record created", pk=item["pk"], sk=item["sk"])
        return self.normalize(stored)

    async def update(  # type: ignore[override]
        self,
        company_id: Any,
        production_site_id: Any,
        sk: Any,
        fields: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Overwrite the unit matrix (missing values become 0) and any
        supplied charge values."""
        key = self.key(company_id, production_site_id, sk)
        updates: Dict[str, Any] = UnitMatrix.from_item(fields).to_item()
        for name in CHARGE_FIELDS:
            if fields.get(name) is not None:
                updates[name] = to_float(fields[name])
        updates["updatedAt"] = utc_now()

        item = await super().update(key, updates)
        logger.info("Production record updated", pk=key["pk"], sk=key["sk"])
        return self.normalize(item)

    async def remove(
        self, company_id: Any, production_site_id: Any, sk: Any
    ) -> Optional[Dict[str, Any]]:
        item = await self.delete(self.key(company_id, production_site_id, sk))
        return self.normalize(item) if item is not None else None
