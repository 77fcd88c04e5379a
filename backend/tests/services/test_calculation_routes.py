"""Calculation Routes — HTTP contract for the calculator and the ledger.

Invariants:
    - POST /calculations/liquidation: 400 on invalid input, 404 on unknown user
    - GET /calculations/history is newest first and [] for unresolvable users
    - X-User-Email resolves the user when userId is absent
    - A malformed userId resolves to nobody, even when X-User-Email is sent
    - An unrecorded history type answers an empty list
    - POST /calculations/clear succeeds even with nothing to delete
    - POST /calculations/update-title rejects blank titles without changing the record
"""

from uuid import uuid4

import pytest

INPUT = {
    "currentUnits": 1000,
    "purchasePrice": 1000,
    "currentPrice": 1050,
    "commissionRate": 15,
    "targetAmount": 907500,
}


@pytest.fixture
async def user_id(verified_user):
    return str(verified_user)


async def _calculate(client, user_id, **overrides):
    return await client.post(
        "/calculations/liquidation",
        json={"userId": user_id, "inputData": {**INPUT, **overrides}},
    )


async def test_liquidation_returns_result_and_id(client, user_id):
    res = await _calculate(client, user_id)
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["calculationId"]
    assert body["title"] == "Liquidation calculation #1"
    assert body["result"]["unitsToSell"] == pytest.approx(870.5036, abs=1e-3)
    assert abs(body["result"]["totalAmount"] - 907500) <= 1


async def test_liquidation_accepts_calculation_data_key(client, user_id):
    res = await client.post(
        "/calculations/liquidation",
        json={"userId": user_id, "calculationData": INPUT},
    )
    assert res.status_code == 200


async def test_liquidation_unknown_user_not_found(client):
    res = await _calculate(client, str(uuid4()))
    assert res.status_code == 404


@pytest.mark.parametrize("field,value", [
    ("currentUnits", 0),
    ("currentUnits", -5),
    ("targetAmount", 0),
    ("purchasePrice", -1),
    ("commissionRate", 101),
])
async def test_liquidation_invalid_input_rejected(client, user_id, field, value):
    res = await _calculate(client, user_id, **{field: value})
    assert res.status_code == 400
    history = await client.get("/calculations/history", params={"userId": user_id})
    assert history.json()["calculations"] == []


async def test_liquidation_missing_input_rejected(client, user_id):
    res = await client.post("/calculations/liquidation", json={"userId": user_id})
    assert res.status_code == 400


async def test_history_newest_first_with_snapshots(client, user_id):
    await _calculate(client, user_id)
    await _calculate(client, user_id, targetAmount=10425)

    res = await client.get("/calculations/history", params={"userId": user_id})
    assert res.status_code == 200
    calculations = res.json()["calculations"]
    assert [c["title"] for c in calculations] == [
        "Liquidation calculation #2",
        "Liquidation calculation #1",
    ]
    assert calculations[0]["inputData"]["targetAmount"] == 10425
    assert calculations[0]["resultData"]["unitsToSell"] == pytest.approx(10)
    assert calculations[0]["status"] == "completed"


async def test_history_without_user_is_empty(client):
    res = await client.get("/calculations/history")
    assert res.status_code == 200
    assert res.json() == {"success": True, "calculations": []}


async def test_history_resolves_user_from_email_header(client, user_id):
    await _calculate(client, user_id)
    res = await client.get(
        "/calculations/history", headers={"X-User-Email": "ana@fl1capital.com"},
    )
    assert len(res.json()["calculations"]) == 1


async def test_history_malformed_user_id_ignores_email_header(client, user_id):
    await _calculate(client, user_id)
    res = await client.get(
        "/calculations/history",
        params={"userId": "not-a-uuid"},
        headers={"X-User-Email": "ana@fl1capital.com"},
    )
    assert res.status_code == 200
    assert res.json()["calculations"] == []


async def test_history_unrecorded_type_is_empty(client, user_id):
    await _calculate(client, user_id)
    res = await client.get(
        "/calculations/history", params={"userId": user_id, "type": "ipo"},
    )
    assert res.status_code == 200
    assert res.json() == {"success": True, "calculations": []}


async def test_history_caps_at_history_limit(client, user_id, test_settings):
    test_settings.history_limit = 2
    for _ in range(3):
        await _calculate(client, user_id)
    res = await client.get("/calculations/history", params={"userId": user_id})
    assert len(res.json()["calculations"]) == 2


async def test_summary_lists_compact_records(client, user_id):
    await _calculate(client, user_id)
    res = await client.get("/calculations/liquidation", params={"userId": user_id})
    assert res.status_code == 200
    (summary,) = res.json()["calculations"]
    assert set(summary) == {"id", "title", "createdAt", "resultData"}


async def test_summary_requires_user_id(client):
    res = await client.get("/calculations/liquidation")
    assert res.status_code == 400


async def test_clear_removes_history(client, user_id):
    await _calculate(client, user_id)
    await _calculate(client, user_id)

    res = await client.post("/calculations/clear", json={"userId": user_id})
    assert res.status_code == 200
    assert res.json()["success"] is True
    assert res.json()["deleted"] == 2

    history = await client.get("/calculations/history", params={"userId": user_id})
    assert history.json()["calculations"] == []


async def test_clear_with_nothing_to_delete_succeeds(client, user_id):
    res = await client.post("/calculations/clear", json={"userId": user_id})
    assert res.status_code == 200
    assert res.json()["deleted"] == 0


async def test_clear_without_any_user_succeeds(client):
    res = await client.post("/calculations/clear", json={})
    assert res.status_code == 200
    assert res.json()["success"] is True


async def test_clear_by_email_header(client, user_id):
    await _calculate(client, user_id)
    res = await client.post(
        "/calculations/clear", json={}, headers={"X-User-Email": "ana@fl1capital.com"},
    )
    assert res.json()["deleted"] == 1


async def test_clear_malformed_user_id_ignores_email_header(client, user_id):
    await _calculate(client, user_id)
    res = await client.post(
        "/calculations/clear",
        json={"userId": "not-a-uuid"},
        headers={"X-User-Email": "ana@fl1capital.com"},
    )
    assert res.status_code == 200
    assert res.json()["deleted"] == 0

    history = await client.get("/calculations/history", params={"userId": user_id})
    assert len(history.json()["calculations"]) == 1


async def test_numbering_restarts_after_clear(client, user_id):
    await _calculate(client, user_id)
    await client.post("/calculations/clear", json={"userId": user_id})
    res = await _calculate(client, user_id)
    assert res.json()["title"] == "Liquidation calculation #1"


async def test_update_title(client, user_id):
    created = await _calculate(client, user_id)
    calc_id = created.json()["calculationId"]

    res = await client.post(
        "/calculations/update-title", json={"id": calc_id, "title": " House deposit "},
    )
    assert res.status_code == 200
    assert res.json()["calculation"] == {"id": calc_id, "title": "House deposit"}


async def test_update_title_blank_rejected(client, user_id):
    created = await _calculate(client, user_id)
    calc_id = created.json()["calculationId"]

    res = await client.post(
        "/calculations/update-title", json={"id": calc_id, "title": "   "},
    )
    assert res.status_code == 400

    history = await client.get("/calculations/history", params={"userId": user_id})
    assert history.json()["calculations"][0]["title"] == "Liquidation calculation #1"


async def test_update_title_blank_reports_field(client, user_id):
    created = await _calculate(client, user_id)
    res = await client.post(
        "/calculations/update-title",
        json={"id": created.json()["calculationId"], "title": ""},
    )
    assert res.json()["error"]["field"] == "title"


async def test_update_title_unknown_id_not_found(client):
    res = await client.post(
        "/calculations/update-title", json={"id": str(uuid4()), "title": "X"},
    )
    assert res.status_code == 404
