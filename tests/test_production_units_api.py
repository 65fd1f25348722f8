"""Tests for the production-unit endpoints."""

BASE = "/api/production-unit"


async def test_create_record(client, unit_matrix):
    response = await client.post(BASE, json={"pk": "1_1", "sk": "012024", **unit_matrix})

    assert response.status_code == 201
    data = response.json()
    assert data["pk"] == "1_1"
    assert data["sk"] == "012024"
    assert data["totalUnit"] == 1500
    assert data["totalCharge"] == 0
    assert "c001" not in data


async def test_create_record_twice_conflicts(client, unit_matrix):
    payload = {"pk": "1_1", "sk": "012024", **unit_matrix}
    await client.post(BASE, json=payload)

    response = await client.post(BASE, json={**payload, "c1": 1})

    assert response.status_code == 409
    assert response.json()["error"]["type"] == "ConflictException"
    record = (await client.get(f"{BASE}/1/1/012024")).json()["data"]
    assert record["c1"] == 100


async def test_create_record_validation(client):
    assert (await client.post(BASE, json={"sk": "012024"})).status_code == 400
    assert (await client.post(BASE, json={"pk": "1_1"})).status_code == 400
    assert (await client.post(BASE, json={"pk": "abc", "sk": "012024"})).status_code == 400
    assert (await client.post(BASE, json={"pk": "1_1", "sk": "132024"})).status_code == 400
    assert (
        await client.post(BASE, json={"pk": "1_1", "sk": "012024", "c1": "many"})
    ).status_code == 400


async def test_create_record_blank_values(client):
    response = await client.post(BASE, json={"pk": "1_1", "sk": "022024", "c1": "", "c2": "5"})

    assert response.status_code == 201
    assert response.json()["totalUnit"] == 5


async def test_site_history(client, unit_matrix):
    for sk in ("012024", "122023"):
        await client.post(BASE, json={"pk": "1_1", "sk": sk, **unit_matrix})
    await client.post(BASE, json={"pk": "1_2", "sk": "012024", **unit_matrix})

    response = await client.get(f"{BASE}/1/1")

    assert response.status_code == 200
    data = response.json()
    assert [record["sk"] for record in data["data"]] == ["122023", "012024"]
    assert data["message"]


async def test_site_history_empty(client):
    response = await client.get(f"{BASE}/9/9")

    assert response.status_code == 200
    assert response.json()["data"] == []


async def test_list_all_records(client, unit_matrix):
    await client.post(BASE, json={"pk": "1_1", "sk": "012024", **unit_matrix})
    await client.post(BASE, json={"pk": "2_1", "sk": "012024", **unit_matrix})

    response = await client.get(BASE)

    assert response.status_code == 200
    assert {record["pk"] for record in response.json()} == {"1_1", "2_1"}


async def test_existence_probe(client, unit_matrix):
    await client.post(BASE, json={"pk": "1_1", "sk": "012024", **unit_matrix})

    found = await client.get(f"{BASE}/1/1/012024")
    missing = await client.get(f"{BASE}/1/1/022024")

    assert found.status_code == 200
    assert found.json()["data"]["totalUnit"] == 1500
    assert missing.status_code == 404


async def test_update_record(client, unit_matrix):
    await client.post(BASE, json={"pk": "1_1", "sk": "012024", **unit_matrix, "c003": 4})

    response = await client.put(f"{BASE}/1/1/012024", json={"c1": 1, "c001": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["totalUnit"] == 1
    assert data["c001"] == 2
    assert data["c003"] == 4
    assert data["totalCharge"] == 6


async def test_update_with_empty_body_zeroes_unit_matrix(client, unit_matrix):
    await client.post(BASE, json={"pk": "1_1", "sk": "012024", **unit_matrix, "c001": 4})

    response = await client.put(f"{BASE}/1/1/012024", json={})

    assert response.status_code == 200
    data = response.json()
    assert [data[name] for name in ("c1", "c2", "c3", "c4", "c5")] == [0, 0, 0, 0, 0]
    assert data["totalUnit"] == 0
    assert data["c001"] == 4


async def test_update_missing_record(client):
    response = await client.put(f"{BASE}/1/1/012024", json={"c1": 1})

    assert response.status_code == 404
    assert (await client.get(f"{BASE}/1/1/012024")).status_code == 404


async def test_update_invalid_month(client):
    response = await client.put(f"{BASE}/1/1/202401", json={"c1": 1})
    assert response.status_code == 400


async def test_delete_record(client, unit_matrix):
    await client.post(BASE, json={"pk": "1_1", "sk": "012024", **unit_matrix})

    response = await client.delete(f"{BASE}/1/1/012024")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert (await client.get(f"{BASE}/1/1/012024")).status_code == 404
    assert (await client.delete(f"{BASE}/1/1/012024")).status_code == 404
