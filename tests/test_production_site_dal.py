"""Tests for the production-site data-access layer."""

import pytest

from sitetracker.core.exceptions import (
    ConflictException,
    NotFoundException,
    StoreException,
    ValidationException,
)
from sitetracker.dal.production_site import ProductionSiteDAL


async def test_create_applies_defaults(site_dal):
    site = await site_dal.create({"name": "Site A", "location": "Loc", "type": "Wind"})

    assert site["companyId"] == 1
    assert site["productionSiteId"] == 1
    assert site["banking"] is False
    assert site["capacity_MW"] == 0
    assert site["status"] == "Active"
    assert site["createdAt"] == site["updatedAt"]


async def test_list_all_empty(site_dal):
    assert await site_dal.list_all() == []


async def test_create_keeps_company_zero(site_dal, sample_site):
    site = await site_dal.create({**sample_site, "companyId": 0})

    assert site["companyId"] == 0
    assert await site_dal.get_one(0, 1) is not None
    assert await site_dal.get_one(1, 1) is None


async def test_create_allocates_next_site_id(site_dal, sample_site):
    await site_dal.create({**sample_site, "productionSiteId": 7})

    site = await site_dal.create({"name": "Next", "location": "Loc", "type": "Solar"})

    assert site["productionSiteId"] == 8


async def test_create_existing_key_conflicts(site_dal, sample_site):
    await site_dal.create(sample_site)

    with pytest.raises(ConflictException):
        await site_dal.create({**sample_site, "name": "Other"})

    stored = await site_dal.get_one(1, 1)
    assert stored["name"] == sample_site["name"]


@pytest.mark.parametrize("missing", ["name", "location", "type"])
async def test_create_requires_fields(site_dal, sample_site, missing):
    site = {**sample_site, missing: ""}
    with pytest.raises(ValidationException):
        await site_dal.create(site)
    assert await site_dal.list_all() == []


async def test_create_rejects_negative_capacity(site_dal, sample_site):
    with pytest.raises(ValidationException):
        await site_dal.create({**sample_site, "capacity_MW": -1})


async def test_create_stores_banking_as_flag(site_dal, store, sample_site):
    await site_dal.create(sample_site)

    raw = await store.get_item(site_dal.table_name, {"companyId": 1, "productionSiteId": 1})

    assert raw["banking"] == 1
    assert raw["htscNo"] == "79204721131"


async def test_get_one_missing(site_dal):
    assert await site_dal.get_one(1, 99) is None


async def test_get_one_rejects_bad_id(site_dal):
    with pytest.raises(ValidationException):
        await site_dal.get_one("abc", 1)


async def test_update_merges_fields(site_dal, sample_site):
    created = await site_dal.create(sample_site)

    updated = await site_dal.update(1, 1, {"status": "Inactive", "capacity_MW": "1.5"})

    assert updated["status"] == "Inactive"
    assert updated["capacity_MW"] == 1.5
    assert updated["name"] == sample_site["name"]
    assert updated["createdAt"] == created["createdAt"]


async def test_update_missing_site(site_dal):
    with pytest.raises(NotFoundException):
        await site_dal.update(1, 99, {"name": "Ghost"})
    assert await site_dal.get_one(1, 99) is None


async def test_update_rejects_blank_required_field(site_dal, sample_site):
    await site_dal.create(sample_site)
    with pytest.raises(ValidationException):
        await site_dal.update(1, 1, {"name": "   "})


async def test_update_without_fields(site_dal, sample_site):
    await site_dal.create(sample_site)
    with pytest.raises(ValidationException):
        await site_dal.update(1, 1, {"name": None})


async def test_list_by_company_with_filters(site_dal, sample_site):
    await site_dal.create(sample_site)
    await site_dal.create({**sample_site, "productionSiteId": 2, "type": "Solar"})
    await site_dal.create({**sample_site, "companyId": 2, "productionSiteId": 1})

    company_one = await site_dal.list_by_company(1)
    solar = await site_dal.list_by_company(1, {"type": "Solar"})

    assert [site["productionSiteId"] for site in company_one] == [1, 2]
    assert [site["productionSiteId"] for site in solar] == [2]
    assert len(await site_dal.list_all()) == 3


async def test_remove(site_dal, sample_site):
    await site_dal.create(sample_site)

    removed = await site_dal.remove(1, 1)

    assert removed["name"] == sample_site["name"]
    assert await site_dal.get_one(1, 1) is None
    assert await site_dal.remove(1, 1) is None


def test_normalize_tolerates_bad_values():
    site = ProductionSiteDAL.normalize(
        {"companyId": "x", "productionSiteId": 3, "capacity_MW": "abc", "banking": "true"}
    )

    assert site["companyId"] == 0
    assert site["capacity_MW"] == 0.0
    assert site["banking"] is True
    assert site["status"] == "Active"


async def test_store_failure_surfaces_as_store_exception(unavailable_store):
    sites = ProductionSiteDAL(unavailable_store, "ProductionSiteTable")
    with pytest.raises(StoreException):
        await sites.list_all()


def test_table_name_is_required(store):
    with pytest.raises(ValueError):
        ProductionSiteDAL(store, "")
