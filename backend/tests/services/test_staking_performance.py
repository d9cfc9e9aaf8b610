"""Staking Pool Performance — recording and listing external pool results.

Invariants:
    - Recording needs an existing pool and notifies the acting admin
    - Lists come newest first, filter by pool and date range, and carry a summary
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy import select

from tradedesk.models.staking import StakingExternalPoolPerformance, StakingPool
from tradedesk.models.system import Notification

PERFORMANCE_URL = "/api/admin/staking/performance"
UTC = timezone.utc


@pytest.fixture
async def pools(test_db):
    rows = [
        StakingPool(name="ETH Flex", token="Ethereum", symbol="ETH", status="ACTIVE"),
        StakingPool(name="SOL Lock", token="Solana", symbol="SOL", status="ACTIVE"),
    ]
    test_db.add_all(rows)
    await test_db.commit()
    return rows


@pytest.fixture
async def history(test_db, pools):
    eth, sol = pools
    test_db.add_all([
        StakingExternalPoolPerformance(
            pool_id=eth.id, date=datetime(2026, 8, 1, tzinfo=UTC), apr=8.0, total_staked=1000, profit=6,
        ),
        StakingExternalPoolPerformance(
            pool_id=eth.id, date=datetime(2026, 9, 1, tzinfo=UTC), apr=10.0, total_staked=1500, profit=12,
        ),
        StakingExternalPoolPerformance(
            pool_id=sol.id, date=datetime(2026, 9, 15, tzinfo=UTC), apr=7.0, total_staked=800, profit=4,
        ),
    ])
    await test_db.commit()


async def test_record_performance(client, test_db, pools, admin_user):
    eth = pools[0]

    res = await client.post(PERFORMANCE_URL, json={
        "pool_id": str(eth.id), "date": "2026-10-01T00:00:00Z",
        "apr": 9.5, "total_staked": 2500, "profit": 19.8, "notes": "validator rewards",
    })

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Pool performance recorded successfully"
    assert body["record"]["apr"] == 9.5
    assert body["record"]["pool"]["name"] == "ETH Flex"
    row = (await test_db.execute(select(StakingExternalPoolPerformance))).scalar_one()
    assert (row.pool_id, row.notes) == (eth.id, "validator rewards")
    note = (await test_db.execute(select(Notification))).scalar_one()
    assert note.user_id == admin_user.id
    assert note.title == "Pool Performance Added"
    assert note.message == "New performance record added for ETH Flex with 9.5% APR."


async def test_record_unknown_pool(client, test_db):
    res = await client.post(PERFORMANCE_URL, json={
        "pool_id": str(uuid4()), "date": "2026-10-01T00:00:00Z",
        "apr": 5, "total_staked": 100, "profit": 1,
    })
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Pool not found"
    assert (await test_db.execute(select(StakingExternalPoolPerformance))).first() is None


async def test_record_requires_fields(client, pools):
    res = await client.post(PERFORMANCE_URL, json={"pool_id": str(pools[0].id), "apr": 5})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_list_newest_first_with_summary(client, history):
    res = await client.get(PERFORMANCE_URL)

    assert res.status_code == 200
    body = res.json()
    assert [item["apr"] for item in body["items"]] == [7.0, 10.0, 8.0]
    assert body["items"][0]["pool"]["symbol"] == "SOL"
    assert body["summary"] == {
        "records": 3, "average_apr": 8.3333, "total_profit": 22.0, "latest_total_staked": 800.0,
    }


async def test_list_filters_by_pool_and_dates(client, pools, history):
    eth = pools[0]

    by_pool = (await client.get(PERFORMANCE_URL, params={"pool_id": str(eth.id)})).json()
    assert [item["apr"] for item in by_pool["items"]] == [10.0, 8.0]

    ranged = (await client.get(PERFORMANCE_URL, params={
        "start_date": "2026-08-15T00:00:00", "end_date": "2026-09-10T00:00:00",
    })).json()
    assert [item["apr"] for item in ranged["items"]] == [10.0]
    assert ranged["summary"]["records"] == 1
