"""
Installment sale tests.
"""

from datetime import date, timedelta

import jdatetime

from inventory_backend.app.services.installments import payment_schedule


def test_payment_schedule_is_monthly_and_clamped():
    start = jdatetime.date(1403, 6, 31).togregorian()

    due = [jdatetime.date.fromgregorian(date=d) for d in payment_schedule(start, 3)]

    assert [(d.year, d.month, d.day) for d in due] == [(1403, 6, 31), (1403, 7, 30), (1403, 8, 30)]


async def _create(client, customer_id, phone_id, **overrides):
    payload = {
        "customer_id": customer_id,
        "phone_id": phone_id,
        "actual_sale_price": 1200,
        "down_payment": 300,
        "number_of_installments": 3,
        "installment_amount": 300,
        "installments_start_date": "1403/01/10",
        "checks": [
            {"check_number": "A-1001", "bank_name": "Bank Melli", "due_date": "1403/02/10", "amount": 300},
        ],
    }
    payload.update(overrides)
    return await client.post("/v1/installment-sales", json=payload)


async def test_installment_sale_creates_schedule_and_debit(client, create_customer, create_phone):
    customer = await create_customer()
    phone = await create_phone()

    response = await _create(client, customer["id"], phone["id"])

    assert response.status_code == 201, response.text
    sale = response.json()
    assert [p["due_date"] for p in sale["payments"]] == ["1403/01/10", "1403/02/10", "1403/03/10"]
    assert all(p["status"] == "unpaid" for p in sale["payments"])
    assert sale["checks"][0]["status"] == "with customer"
    assert sale["total_installment_price"] == 1200
    assert sale["remaining_amount"] == 900
    assert sale["overall_status"] == "overdue"
    assert sale["next_due_date"] == "1403/01/10"

    balance = (await client.get(f"/v1/customers/{customer['id']}/balance")).json()
    assert balance["current_balance"] == 1200

    sold = (await client.get(f"/v1/phones/{phone['id']}")).json()
    assert sold["status"] == "sold (installment)"


async def test_installment_sale_of_sold_phone_changes_nothing(client, create_customer, create_phone, today):
    customer = await create_customer()
    phone = await create_phone()
    await client.post("/v1/sales", json={
        "item_type": "phone", "item_id": phone["id"], "quantity": 1, "transaction_date": today,
    })

    response = await _create(client, customer["id"], phone["id"])

    assert response.status_code == 400
    assert (await client.get("/v1/installment-sales")).json() == []
    balance = (await client.get(f"/v1/customers/{customer['id']}/balance")).json()
    assert balance["current_balance"] == 0


async def test_down_payment_cannot_exceed_price(client, create_customer, create_phone):
    customer = await create_customer()
    phone = await create_phone()

    response = await _create(client, customer["id"], phone["id"], down_payment=5000)

    assert response.status_code == 400
    assert (await client.get(f"/v1/phones/{phone['id']}")).json()["status"] == "in stock"


async def test_paying_all_installments_completes_sale(client, create_customer, create_phone):
    customer = await create_customer()
    phone = await create_phone()
    sale = (await _create(client, customer["id"], phone["id"])).json()

    for payment in sale["payments"]:
        updated = await client.put(
            f"/v1/installment-sales/payment/{payment['id']}",
            json={"paid": True, "payment_date": "1403/04/01"},
        )
        assert updated.status_code == 200
        assert updated.json()["payment_date"] == "1403/04/01"

    detail = (await client.get(f"/v1/installment-sales/{sale['id']}")).json()
    assert detail["total_paid"] == 900
    assert detail["remaining_amount"] == 0
    assert detail["overall_status"] == "completed"
    assert detail["next_due_date"] is None


async def test_marking_payment_unpaid_clears_date(client, create_customer, create_phone):
    customer = await create_customer()
    phone = await create_phone()
    sale = (await _create(client, customer["id"], phone["id"])).json()
    payment_id = sale["payments"][0]["id"]

    await client.put(f"/v1/installment-sales/payment/{payment_id}", json={"paid": True})
    reverted = await client.put(f"/v1/installment-sales/payment/{payment_id}", json={"paid": False})

    assert reverted.json()["status"] == "unpaid"
    assert reverted.json()["payment_date"] is None


async def test_check_status_update(client, create_customer, create_phone):
    customer = await create_customer()
    phone = await create_phone()
    sale = (await _create(client, customer["id"], phone["id"])).json()
    check_id = sale["checks"][0]["id"]

    response = await client.put(f"/v1/installment-sales/check/{check_id}", json={"status": "bounced"})
    assert response.json()["status"] == "bounced"

    invalid = await client.put(f"/v1/installment-sales/check/{check_id}", json={"status": "lost"})
    assert invalid.status_code == 422

    missing = await client.put("/v1/installment-sales/check/9999", json={"status": "collected"})
    assert missing.status_code == 404


async def test_future_schedule_is_paying(client, create_customer, create_phone):
    customer = await create_customer()
    phone = await create_phone()
    future = jdatetime.date.fromgregorian(date=date.today() + timedelta(days=40))

    sale = (await _create(
        client, customer["id"], phone["id"], installments_start_date=future.strftime("%Y/%m/%d"), checks=[]
    )).json()

    assert sale["overall_status"] == "paying"
    assert sale["checks"] == []
