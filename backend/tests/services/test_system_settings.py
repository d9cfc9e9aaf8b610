"""System Settings & Health — key/value settings endpoints and the health checks.

Invariants:
    - Booleans are stored as "true"/"false", numbers as their text form
    - PUT upserts: existing keys are overwritten, others left alone
    - Liveness never touches the database; readiness does
"""

from tradedesk.models.system import Setting

SETTINGS_URL = "/api/admin/system/settings"


async def test_update_then_read(client):
    res = await client.put(SETTINGS_URL, json={"settings": {
        "referralApprovalRequired": True, "mlmSystem": "UNILEVEL", "icoMaxOfferings": 5,
    }})

    assert res.status_code == 200
    assert res.json() == {
        "message": "Settings updated successfully",
        "settings": {
            "referralApprovalRequired": "true", "mlmSystem": "UNILEVEL", "icoMaxOfferings": "5",
        },
    }

    res = await client.get(SETTINGS_URL)
    assert res.json()["settings"]["referralApprovalRequired"] == "true"


async def test_update_overwrites_only_given_keys(client, test_db):
    test_db.add_all([Setting(key="mlmSystem", value="DIRECT"), Setting(key="theme", value="dark")])
    await test_db.commit()

    await client.put(SETTINGS_URL, json={"settings": {"mlmSystem": "BINARY"}})

    res = await client.get(SETTINGS_URL)
    assert res.json()["settings"] == {"mlmSystem": "BINARY", "theme": "dark"}


async def test_empty_update_rejected(client):
    res = await client.put(SETTINGS_URL, json={"settings": {}})
    assert res.status_code == 400


async def test_settings_require_auth(anon_client):
    res = await anon_client.get(SETTINGS_URL)
    assert res.status_code == 401


# ─── Health ──────────────────────────────────────────────────────

async def test_liveness(anon_client):
    res = await anon_client.get("/api/health/")
    assert res.status_code == 200
    assert res.json() == {
        "status": "healthy", "service": "tradedesk-admin-api", "version": "1.0.0",
    }


async def test_readiness(anon_client):
    res = await anon_client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json() == {"status": "ready", "checks": {"database": "healthy"}}
