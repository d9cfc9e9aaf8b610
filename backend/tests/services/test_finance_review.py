"""Finance Review — withdrawal approval/rejection and deposit settlement over HTTP.

Invariants:
    - Approving a withdrawal changes only its status
    - Rejecting refunds amount + fee and records the note in metadata
    - Completing a deposit credits amount - fee
    - Non-pending transactions are refused; the user is mailed every outcome
"""

import pytest

from tradedesk.api.auth import get_current_user
from tradedesk.core.permissions import Principal
from tradedesk.main import app
from tradedesk.models.finance import Transaction, Wallet

FINANCE_URL = "/api/admin/finance"


@pytest.fixture
async def holder(make_user):
    return await make_user("holder@tradedesk.io", first_name="Hana")


@pytest.fixture
async def wallet(test_db, holder):
    row = Wallet(user_id=holder.id, type="SPOT", currency="BTC", balance=1.0)
    test_db.add(row)
    await test_db.commit()
    return row


async def _transaction(test_db, holder, wallet, type_: str, **fields) -> Transaction:
    fields.setdefault("status", "PENDING")
    row = Transaction(
        user_id=holder.id, wallet_id=wallet.id, type=type_, amount=0.5, fee=0.01, **fields,
    )
    test_db.add(row)
    await test_db.commit()
    return row


# ─── Withdrawals ─────────────────────────────────────────────────

async def test_approve_withdrawal(client, test_db, holder, wallet, mail_sender):
    tx = await _transaction(test_db, holder, wallet, "WITHDRAW")

    res = await client.post(f"{FINANCE_URL}/wallet/withdraw/{tx.id}/approve")

    assert res.json() == {"message": "Withdrawal approved successfully"}
    await test_db.refresh(tx)
    await test_db.refresh(wallet)
    assert tx.status == "COMPLETED"
    assert wallet.balance == 1.0
    assert [(m[0], m[1]) for m in mail_sender.sent] == [
        ("holder@tradedesk.io", "Transaction Completed"),
    ]


async def test_reject_withdrawal_refunds(client, test_db, holder, wallet, mail_sender):
    tx = await _transaction(test_db, holder, wallet, "WITHDRAW")

    res = await client.post(
        f"{FINANCE_URL}/wallet/withdraw/{tx.id}/reject", json={"message": "Address flagged"},
    )

    assert res.json() == {"message": "Withdrawal rejected successfully"}
    await test_db.refresh(tx)
    await test_db.refresh(wallet)
    assert tx.status == "REJECTED"
    assert tx.meta == {"note": "Address flagged"}
    assert wallet.balance == pytest.approx(1.51)
    assert "Address flagged" in mail_sender.sent[0][2]


async def test_reject_without_message_uses_default_note(client, test_db, holder, wallet):
    tx = await _transaction(test_db, holder, wallet, "WITHDRAW")

    await client.post(f"{FINANCE_URL}/wallet/withdraw/{tx.id}/reject", json={})

    await test_db.refresh(tx)
    assert tx.meta == {"note": "Withdrawal request rejected"}


async def test_approve_twice_refused(client, test_db, holder, wallet):
    tx = await _transaction(test_db, holder, wallet, "WITHDRAW")
    await client.post(f"{FINANCE_URL}/wallet/withdraw/{tx.id}/approve")

    res = await client.post(f"{FINANCE_URL}/wallet/withdraw/{tx.id}/approve")

    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Transaction is not pending"


async def test_approve_deposit_as_withdrawal_not_found(client, test_db, holder, wallet):
    tx = await _transaction(test_db, holder, wallet, "DEPOSIT")
    res = await client.post(f"{FINANCE_URL}/wallet/withdraw/{tx.id}/approve")
    assert res.status_code == 404


# ─── Deposits ────────────────────────────────────────────────────

async def test_complete_deposit_credits_net_amount(client, test_db, holder, wallet):
    tx = await _transaction(test_db, holder, wallet, "DEPOSIT")

    res = await client.put(f"{FINANCE_URL}/deposit/{tx.id}", json={"status": "COMPLETED"})

    assert res.json() == {"message": "Transaction updated successfully"}
    await test_db.refresh(wallet)
    assert wallet.balance == pytest.approx(1.49)


async def test_rejected_deposit_moves_nothing(client, test_db, holder, wallet):
    tx = await _transaction(test_db, holder, wallet, "DEPOSIT")

    await client.put(f"{FINANCE_URL}/deposit/{tx.id}", json={"status": "REJECTED"})

    await test_db.refresh(tx)
    await test_db.refresh(wallet)
    assert tx.status == "REJECTED"
    assert wallet.balance == 1.0


async def test_deposit_review_needs_permission(anon_client, test_db, holder, wallet):
    tx = await _transaction(test_db, holder, wallet, "DEPOSIT")
    app.dependency_overrides[get_current_user] = lambda: Principal(
        user_id=str(holder.id), role_name="Support", permissions=frozenset({"view.transaction"}),
    )

    res = await anon_client.put(f"{FINANCE_URL}/deposit/{tx.id}", json={"status": "COMPLETED"})

    assert res.status_code == 403
    assert res.json()["error"]["message"] == "Permission denied: edit.transaction"
