"""Data access for production sites, keyed by ``(companyId, productionSiteId)``."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import structlog

from sitetracker.core.exceptions import ValidationException
from sitetracker.core.matrices import to_float, to_int
from sitetracker.core.store import ATTRIBUTE_NOT_EXISTS, DocumentStore, KeySchema
from sitetracker.dal.base import BaseDAL

logger = structlog.get_logger()

SITE_KEY_SCHEMA = KeySchema("companyId", "productionSiteId", numeric=True)

DEFAULT_COMPANY_ID = 1
REQUIRED_FIELDS = ("name", "location", "type")
TEXT_FIELDS = ("name", "location", "type", "status", "htscNo")
NUMERIC_FIELDS = ("capacity_MW", "injectionVoltage_KV", "annualProduction_L")


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_id(value: Any, name: str) -> int:
    """Parse a key id, raising :class:`ValidationException` when it is missing
    or not a non-negative integer."""
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationException(f"{name} is required")
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationException(f"{name} must be a number")
    if number < 0:
        raise ValidationException(f"{name} must not be negative")
    return number


def parse_measure(value: Any, name: str) -> float:
    """Validate a numeric site attribute on write (blank means ``0``)."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise ValidationException(f"{name} must be a valid number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationException(f"{name} must be a valid number")
    if number != number or number < 0:
        raise ValidationException(f"{name} must be a non-negative number")
    return number


def encode_banking(value: Any) -> int:
    """Store ``banking`` as 0/1."""
    if isinstance(value, str):
        return 1 if value.strip().lower() in ("1", "true", "yes", "on") else 0
    if isinstance(value, bool):
        return int(value)
    return 1 if to_int(value) else 0


class ProductionSiteDAL(BaseDAL):
    """Production-site records with wire/storage coercion."""

    def __init__(self, store: DocumentStore, table_name: str):
        super().__init__(store, table_name)
        store.register(table_name, SITE_KEY_SCHEMA)

    @staticmethod
    def key(company_id: int, production_site_id: int) -> Dict[str, int]:
        return {"companyId": company_id, "productionSiteId": production_site_id}

    @staticmethod
    def normalize(item: Mapping[str, Any]) -> Dict[str, Any]:
        """Map a stored item to the wire shape.

        Unparseable fields fall back to ``0``/``False``/``""`` so one bad
        record never breaks a listing.
        """
        return {
            "companyId": to_int(item.get("companyId")),
            "productionSiteId": to_int(item.get("productionSiteId")),
            "name": str(item.get("name") or ""),
            "location": str(item.get("location") or ""),
            "type": str(item.get("type") or ""),
            "status": str(item.get("status") or "Active"),
            "banking": bool(encode_banking(item.get("banking"))),
            "capacity_MW": to_float(item.get("capacity_MW")),
            "annualProduction_L": to_float(item.get("annualProduction_L")),
            "htscNo": str(item.get("htscNo") or ""),
            "injectionVoltage_KV": to_float(item.get("injectionVoltage_KV")),
            "createdAt": item.get("createdAt"),
            "updatedAt": item.get("updatedAt"),
        }

    async def list_all(self) -> List[Dict[str, Any]]:
        items = await self.scan_all()
        return [self.normalize(item) for item in items]

    async def list_by_company(
        self, company_id: Any, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        company_id = parse_id(company_id, "companyId")
        items = await self.query_by_partition(company_id, filters=filters)
        return [self.normalize(item) for item in items]

    async def get_one(self, company_id: Any, production_site_id: Any) -> Optional[Dict[str, Any]]:
        key = self.key(
            parse_id(company_id, "companyId"),
            parse_id(production_site_id, "productionSiteId"),
        )
        item = await self.get_by_key(key)
        return self.normalize(item) if item is not None else None

    async def next_site_id(self, company_id: int) -> int:
        """Next free ``productionSiteId`` within a company (highest + 1)."""
        items = await self.query_by_partition(company_id)
        return max((to_int(item.get("productionSiteId")) for item in items), default=0) + 1

    async def create(self, site: Mapping[str, Any]) -> Dict[str, Any]:
        """Create a site.

        ``companyId`` defaults to 1 and a missing ``productionSiteId`` is
        allocated with :meth:`next_site_id`. Writing to a key that already
        holds a site raises :class:`ConflictException`.
        """
        missing = [name for name in REQUIRED_FIELDS if not str(site.get(name) or "").strip()]
        if missing:
            raise ValidationException(f"Missing required fields: {', '.join(missing)}")

        company_id = site.get("companyId")
        if company_id in (None, ""):
            company_id = DEFAULT_COMPANY_ID
        company_id = parse_id(company_id, "companyId")
        if site.get("productionSiteId") in (None, ""):
            production_site_id = await self.next_site_id(company_id)
            logger.info(
                "Allocated production site id",
                company_id=company_id,
                production_site_id=production_site_id,
            )
        else:
            production_site_id = parse_id(site.get("productionSiteId"), "productionSiteId")

        now = utc_now()
        item = {
            "companyId": company_id,
            "productionSiteId": production_site_id,
            "name": str(site["name"]).strip(),
            "location": str(site["location"]).strip(),
            "type": str(site["type"]).strip(),
            "status": str(site.get("status") or "Active"),
            "banking": encode_banking(site.get("banking")),
            "htscNo": str(site.get("htscNo") or ""),
            "createdAt": now,
            "updatedAt": now,
        }
        for name in NUMERIC_FIELDS:
            item[name] = parse_measure(site.get(name), name)

        stored = await self.put(item, condition=ATTRIBUTE_NOT_EXISTS)
        logger.info(
            "Production site created",
            company_id=company_id,
            production_site_id=production_site_id,
        )
        return self.normalize(stored)

    async def update(  # type: ignore[override]
        self, company_id: Any, production_site_id: Any, fields: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Overwrite the supplied attributes and return the full record."""
        key = self.key(
            parse_id(company_id, "companyId"),
            parse_id(production_site_id, "productionSiteId"),
        )

        updates: Dict[str, Any] = {}
        for name in TEXT_FIELDS:
            if fields.get(name) is not None:
                updates[name] = str(fields[name])
        for name in REQUIRED_FIELDS:
            if name in updates and not updates[name].strip():
                raise ValidationException(f"{name} cannot be empty")
        for name in NUMERIC_FIELDS:
            if fields.get(name) is not None:
                updates[name] = parse_measure(fields[name], name)
        if fields.get("banking") is not None:
            updates["banking"] = encode_banking(fields["banking"])
        if not updates:
            raise ValidationException("No fields to update")
        updates["updatedAt"] = utc_now()

        item = await super().update(key, updates)
        return self.normalize(item)

    async def remove(self, company_id: Any, production_site_id: Any) -> Optional[Dict[str, Any]]:
        key = self.key(
            parse_id(company_id, "companyId"),
            parse_id(production_site_id, "productionSiteId"),
        )
        item = await self.delete(key)
        return self.normalize(item) if item is not None else None
