"""Tests for the production-site endpoints."""

import httpx

BASE = "/api/production-site"


async def create_site(client: httpx.AsyncClient, **overrides):
    payload = {"name": "Site A", "location": "Loc", "type": "Wind", **overrides}
    response = await client.post(BASE, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_site_with_defaults(client):
    response = await client.post(BASE, json={"name": "Site A", "location": "Loc", "type": "Wind"})

    assert response.status_code == 201
    data = response.json()
    assert data["companyId"] == 1
    assert data["productionSiteId"] == 1
    assert data["banking"] is False
    assert data["capacity_MW"] == 0
    assert data["status"] == "Active"


async def test_create_site_for_company_zero(client):
    response = await client.post(
        BASE,
        json={"companyId": 0, "productionSiteId": 5, "name": "Z", "location": "L", "type": "Wind"},
    )

    assert response.status_code == 201
    assert response.json()["companyId"] == 0
    assert (await client.get(f"{BASE}/0/5")).status_code == 200
    assert (await client.get(f"{BASE}/1/5")).status_code == 404


async def test_list_sites_empty(client):
    response = await client.get(BASE)

    assert response.status_code == 200
    assert response.json() == []


async def test_create_site_with_all_fields(client, sample_site):
    response = await client.post(BASE, json={**sample_site, "htscNo": 79204721131})

    assert response.status_code == 201
    data = response.json()
    assert data["banking"] is True
    assert data["capacity_MW"] == 0.6
    assert data["htscNo"] == "79204721131"
    assert data["injectionVoltage_KV"] == 33


async def test_create_site_missing_required_field(client):
    response = await client.post(BASE, json={"location": "Loc", "type": "Wind"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["type"] == "ValidationException"
    assert "request_id" in error


async def test_create_site_invalid_type(client):
    response = await client.post(BASE, json={"name": "A", "location": "B", "type": "Hydro"})
    assert response.status_code == 400


async def test_create_site_negative_capacity(client):
    response = await client.post(
        BASE, json={"name": "A", "location": "B", "type": "Solar", "capacity_MW": -2}
    )
    assert response.status_code == 400


async def test_create_site_existing_key(client, sample_site):
    await client.post(BASE, json=sample_site)

    response = await client.post(BASE, json={**sample_site, "name": "Duplicate"})

    assert response.status_code == 409
    assert response.json()["error"]["message"] == "Data already exists"


async def test_get_site_without_production(client):
    await create_site(client)

    response = await client.get(f"{BASE}/1/1")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Site A"
    assert data["productionData"] == []
    assert data["metadata"]["hasProductionData"] is False
    assert data["metadata"]["dataPoints"] == 0
    assert data["metadata"]["summary"] is None


async def test_get_site_with_production_history(client, unit_matrix):
    await create_site(client)
    for sk in ("122023", "012024"):
        response = await client.post(
            "/api/production-unit", json={"pk": "1_1", "sk": sk, **unit_matrix, "c001": 10}
        )
        assert response.status_code == 201

    data = (await client.get(f"{BASE}/1/1")).json()

    history = data["productionData"]
    assert [point["sk"] for point in history] == ["012024", "122023"]
    assert history[0]["label"] == "Jan 2024"
    assert history[0]["month"] == "January"
    assert history[0]["year"] == 2024
    assert history[0]["matrices"]["unit"]["c5"] == 500
    assert history[0]["matrices"]["charge"]["c001"] == 10
    assert data["metadata"]["hasProductionData"] is True
    assert data["metadata"]["summary"]["totalUnits"] == 3000
    assert data["metadata"]["summary"]["averageCharges"] == 10


async def test_get_missing_site(client):
    response = await client.get(f"{BASE}/1/99")

    assert response.status_code == 404
    assert response.json()["error"]["type"] == "NotFoundException"


async def test_get_site_non_numeric_id(client):
    response = await client.get(f"{BASE}/abc/1")
    assert response.status_code == 400


async def test_list_sites_with_filters(client):
    await create_site(client)
    await create_site(client, type="Solar", status="Inactive")
    await create_site(client, companyId=2)

    everything = (await client.get(BASE)).json()
    solar = (await client.get(BASE, params={"type": "Solar"})).json()
    company_two = (await client.get(BASE, params={"companyId": 2})).json()
    active_company_one = (
        await client.get(BASE, params={"companyId": 1, "status": "Active"})
    ).json()

    assert len(everything) == 3
    assert [site["productionSiteId"] for site in solar] == [2]
    assert [(site["companyId"], site["productionSiteId"]) for site in company_two] == [(2, 1)]
    assert [site["productionSiteId"] for site in active_company_one] == [1]


async def test_update_site(client):
    await create_site(client)

    response = await client.put(f"{BASE}/1/1", json={"name": "Renamed", "banking": True})

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["banking"] is True
    assert data["location"] == "Loc"


async def test_update_missing_site(client):
    response = await client.put(f"{BASE}/1/99", json={"name": "Ghost"})

    assert response.status_code == 404
    assert (await client.get(f"{BASE}/1/99")).status_code == 404


async def test_delete_site(client):
    await create_site(client)

    response = await client.delete(f"{BASE}/1/1")

    assert response.status_code == 204
    assert (await client.get(f"{BASE}/1/1")).status_code == 404
    assert (await client.delete(f"{BASE}/1/1")).status_code == 404
