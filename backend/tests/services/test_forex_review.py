"""Forex Review — settling forex deposits/withdrawals and recovering investments over HTTP.

Invariants:
    - Deposit COMPLETED credits the LIVE forex account by amount * price
    - Deposit REJECTED refunds the wallet; withdraw mirrors both directions
    - Only PENDING transactions of the matching type are reviewed
    - The user is mailed the outcome, with the admin's message when given
"""

from uuid import uuid4

import pytest

from tradedesk.models.finance import Transaction, Wallet
from tradedesk.models.forex import ForexAccount, ForexInvestment

FOREX_URL = "/api/admin/ext/forex"


@pytest.fixture
async def trader(make_user):
    return await make_user("fx@tradedesk.io", first_name="Felix")


@pytest.fixture
async def account(test_db, trader):
    row = ForexAccount(user_id=trader.id, account_id="MT5-1001", type="LIVE", balance=100.0)
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
async def wallet(test_db, trader):
    row = Wallet(user_id=trader.id, type="SPOT", currency="USDT", balance=50.0)
    test_db.add(row)
    await test_db.commit()
    return row


async def _transaction(test_db, trader, wallet, **fields) -> Transaction:
    fields.setdefault("type", "FOREX_DEPOSIT")
    fields.setdefault("status", "PENDING")
    fields.setdefault("amount", 10.0)
    fields.setdefault("meta", {"price": 2})
    row = Transaction(user_id=trader.id, wallet_id=wallet.id, **fields)
    test_db.add(row)
    await test_db.commit()
    return row


# ─── Deposits ────────────────────────────────────────────────────

async def test_completed_deposit_credits_account(client, test_db, trader, account, wallet, mail_sender):
    tx = await _transaction(test_db, trader, wallet)

    res = await client.put(f"{FOREX_URL}/deposit/{tx.id}", json={
        "status": "COMPLETED", "message": "Funds arrived",
    })

    assert res.status_code == 200
    assert res.json() == {"message": "Transaction updated successfully"}
    await test_db.refresh(account)
    await test_db.refresh(wallet)
    await test_db.refresh(tx)
    assert account.balance == 120.0
    assert wallet.balance == 50.0
    assert tx.status == "COMPLETED"
    assert tx.meta == {"price": 2, "message": "Funds arrived"}

    (to, subject, html), = mail_sender.sent
    assert to == "fx@tradedesk.io"
    assert subject == "Forex Deposit Completed"
    assert "Funds arrived" in html


async def test_rejected_deposit_refunds_wallet(client, test_db, trader, account, wallet):
    tx = await _transaction(test_db, trader, wallet)

    await client.put(f"{FOREX_URL}/deposit/{tx.id}", json={"status": "REJECTED"})

    await test_db.refresh(account)
    await test_db.refresh(wallet)
    assert (account.balance, wallet.balance) == (100.0, 70.0)


async def test_review_overrides_amount(client, test_db, trader, account, wallet):
    tx = await _transaction(test_db, trader, wallet)

    await client.put(f"{FOREX_URL}/deposit/{tx.id}", json={"status": "COMPLETED", "amount": 25})

    await test_db.refresh(account)
    assert account.balance == 150.0


# ─── Withdrawals ─────────────────────────────────────────────────

async def test_completed_withdraw_credits_wallet(client, test_db, trader, account, wallet):
    tx = await _transaction(test_db, trader, wallet, type="FOREX_WITHDRAW")

    res = await client.put(f"{FOREX_URL}/withdraw/{tx.id}", json={"status": "COMPLETED"})

    assert res.status_code == 200
    await test_db.refresh(wallet)
    assert wallet.balance == 70.0


async def test_withdraw_route_ignores_deposits(client, test_db, trader, account, wallet):
    tx = await _transaction(test_db, trader, wallet)
    res = await client.put(f"{FOREX_URL}/withdraw/{tx.id}", json={"status": "COMPLETED"})
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Transaction not found"


# ─── Guards ──────────────────────────────────────────────────────

async def test_only_pending_reviewed(client, test_db, trader, account, wallet):
    tx = await _transaction(test_db, trader, wallet, status="COMPLETED")
    res = await client.put(f"{FOREX_URL}/deposit/{tx.id}", json={"status": "REJECTED"})
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Only pending transactions can be updated"


async def test_live_account_required(client, test_db, trader, wallet):
    tx = await _transaction(test_db, trader, wallet)
    res = await client.put(f"{FOREX_URL}/deposit/{tx.id}", json={"status": "COMPLETED"})
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Forex account not found"


async def test_missing_price(client, test_db, trader, account, wallet):
    tx = await _transaction(test_db, trader, wallet, meta=None)

    res = await client.put(f"{FOREX_URL}/deposit/{tx.id}", json={"status": "COMPLETED"})

    assert res.status_code == 400
    await test_db.refresh(tx)
    assert tx.status == "PENDING"


# ─── Investment recovery ─────────────────────────────────────────

async def test_recover_cancelled_investment(client, test_db, trader):
    investment = ForexInvestment(
        user_id=trader.id, amount=500.0, status="CANCELLED", meta={"reason": "timeout"},
    )
    test_db.add(investment)
    await test_db.commit()

    res = await client.post(f"{FOREX_URL}/investment/recover", json={"investment_id": str(investment.id)})

    assert res.status_code == 200
    assert res.json()["investment"] == {"id": str(investment.id), "status": "ACTIVE"}
    await test_db.refresh(investment)
    assert investment.status == "ACTIVE"
    assert investment.meta is None


async def test_recover_requires_cancelled(client, test_db, trader):
    investment = ForexInvestment(user_id=trader.id, amount=500.0, status="ACTIVE")
    test_db.add(investment)
    await test_db.commit()

    for investment_id in (investment.id, uuid4()):
        res = await client.post(
            f"{FOREX_URL}/investment/recover", json={"investment_id": str(investment_id)},
        )
        assert res.status_code == 404
        assert res.json()["error"]["message"] == "Investment not found or not in CANCELLED status"
