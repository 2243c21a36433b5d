"""
Ledger entry store tests.

Running balances, sign conventions per account kind and the manual entry rule.
"""

import pytest

from inventory_backend.app.core.exceptions import AccountNotFoundError, InvalidLedgerEntryError
from inventory_backend.app.models.enums import AccountKind
from inventory_backend.app.services.ledger import LedgerStore, signed_delta


def test_signed_delta_per_kind():
    assert signed_delta(AccountKind.CUSTOMER, debit=300, credit=0) == 300
    assert signed_delta(AccountKind.CUSTOMER, debit=0, credit=120) == -120
    assert signed_delta(AccountKind.PARTNER, debit=0, credit=1000) == 1000
    assert signed_delta(AccountKind.PARTNER, debit=400, credit=0) == -400


@pytest.mark.parametrize(
    "description, debit, credit",
    [
        ("", 100, 0),
        ("   ", 100, 0),
        ("Payment", 0, 0),
        ("Payment", 50, 50),
        ("Payment", -10, 0),
        ("Payment", 0, -10),
        ("Payment", float("inf"), 0),
        ("Payment", 0, float("nan")),
    ],
)
def test_manual_entry_rule_rejects(description, debit, credit):
    with pytest.raises(InvalidLedgerEntryError):
        LedgerStore.validate_manual_entry(description, debit, credit)


def test_manual_entry_rule_accepts_single_sided_entries():
    LedgerStore.validate_manual_entry("Cash payment", 0, 250)
    LedgerStore.validate_manual_entry("Correction", 250, 0)


async def test_balance_recurrence_holds_for_every_entry(db_session, create_customer):
    customer = await create_customer()

    for debit, credit in [(500, 0), (0, 200), (150, 0), (0, 450)]:
        await LedgerStore.post_manual_entry(
            db_session, AccountKind.CUSTOMER, customer["id"], "entry", debit=debit, credit=credit
        )

    entries = await LedgerStore.entries_for(db_session, AccountKind.CUSTOMER, customer["id"])
    assert [e.balance for e in entries] == [500, 300, 450, 0]

    previous = 0.0
    for entry in entries:
        assert entry.balance == previous + signed_delta(AccountKind.CUSTOMER, entry.debit, entry.credit)
        previous = entry.balance


async def test_post_entry_on_missing_account_fails(db_session):
    with pytest.raises(AccountNotFoundError):
        await LedgerStore.post_manual_entry(db_session, AccountKind.PARTNER, 9999, "Payment", debit=10)


async def test_partner_credit_then_payment(client, create_partner):
    partner = await create_partner()

    first = await client.post(
        f"/v1/partners/{partner['id']}/ledger",
        json={"description": "Invoice 17", "credit": 1000},
    )
    assert first.status_code == 201
    assert first.json()["balance"] == 1000

    second = await client.post(
        f"/v1/partners/{partner['id']}/ledger",
        json={"description": "Bank transfer", "debit": 400},
    )
    assert second.status_code == 201
    assert second.json()["balance"] == 600

    balance = await client.get(f"/v1/partners/{partner['id']}/balance")
    assert balance.json() == {"account_kind": "partner", "account_id": partner["id"], "current_balance": 600}


async def test_customer_payment_reduces_balance(client, create_customer, today):
    customer = await create_customer()

    await client.post(f"/v1/customers/{customer['id']}/ledger", json={"description": "Old debt", "debit": 700})
    response = await client.post(
        f"/v1/customers/{customer['id']}/ledger",
        json={"description": "Cash payment", "credit": 300, "transaction_date": today},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["balance"] == 400
    assert body["transaction_date_jalali"] == today


async def test_manual_entry_with_both_sides_is_rejected(client, create_customer):
    customer = await create_customer()

    response = await client.post(
        f"/v1/customers/{customer['id']}/ledger",
        json={"description": "Mixed", "debit": 100, "credit": 100},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION_006"

    balance = await client.get(f"/v1/customers/{customer['id']}/balance")
    assert balance.json()["current_balance"] == 0


async def test_balance_of_unknown_account_is_404(client):
    response = await client.get("/v1/customers/424242/balance")
    assert response.status_code == 404


async def test_post_entry_rejects_non_finite_amounts(db_session, create_customer):
    customer = await create_customer()

    with pytest.raises(InvalidLedgerEntryError):
        await LedgerStore.post_entry(
            db_session, AccountKind.CUSTOMER, customer["id"], "Sale", debit=float("inf")
        )


async def test_infinite_manual_amount_keeps_balance_intact(client, create_customer):
    customer = await create_customer()

    rejected = await client.post(
        f"/v1/customers/{customer['id']}/ledger",
        content=b'{"description": "Payment", "debit": 1e999}',
        headers={"Content-Type": "application/json"},
    )
    assert rejected.status_code == 422
    assert rejected.json()["error_code"] == "ERR_VALIDATION"

    accepted = await client.post(
        f"/v1/customers/{customer['id']}/ledger",
        json={"description": "Opening balance", "debit": 100},
    )
    assert accepted.status_code == 201

    balance = (await client.get(f"/v1/customers/{customer['id']}/balance")).json()
    assert balance["current_balance"] == 100
