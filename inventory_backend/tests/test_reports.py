"""
Reporting and dashboard tests.
"""

import jdatetime

from inventory_backend.app.services.dashboard import sales_chart


async def _sell(client, item_type, item_id, today, quantity=1, customer_id=None, discount=0):
    response = await client.post("/v1/sales", json={
        "item_type": item_type, "item_id": item_id, "quantity": quantity,
        "customer_id": customer_id, "discount": discount, "transaction_date": today,
    })
    assert response.status_code == 201, response.text
    return response.json()


async def test_sales_summary(client, create_product, create_phone, today):
    charger = await create_product(purchase_price=60.0, selling_price=100.0)
    phone = await create_phone(purchase_price=400.0, sale_price=500.0)
    await _sell(client, "inventory", charger["id"], today, quantity=3, discount=30)
    await _sell(client, "phone", phone["id"], today)

    response = await client.get("/v1/reports/sales-summary", params={"fromDate": today, "toDate": today})

    assert response.status_code == 200
    summary = response.json()
    assert summary["total_revenue"] == 770
    assert summary["gross_profit"] == (270 - 180) + (500 - 400)
    assert summary["total_transactions"] == 2
    assert summary["average_sale_value"] == 385
    assert summary["daily_sales"] == [{"date": today, "total_sales": 770}]
    assert [i["item_type"] for i in summary["top_selling_items"]] == ["phone", "inventory"]


async def test_sales_summary_outside_range_is_empty(client, create_product, today):
    product = await create_product()
    await _sell(client, "inventory", product["id"], today)

    response = await client.get(
        "/v1/reports/sales-summary", params={"fromDate": "1390/01/01", "toDate": "1390/12/29"}
    )

    summary = response.json()
    assert summary["total_revenue"] == 0
    assert summary["average_sale_value"] == 0
    assert summary["daily_sales"] == []


async def test_report_rejects_malformed_dates(client):
    response = await client.get("/v1/reports/top-customers", params={"fromDate": "yesterday", "toDate": "1403/01/01"})
    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION_007"


async def test_persian_digits_are_accepted(client):
    response = await client.get("/v1/reports/sales-summary", params={"fromDate": "۱۴۰۳/۰۱/۰۱", "toDate": "۱۴۰۳/۱۲/۳۰"})
    assert response.status_code == 200


async def test_debtors_and_creditors(client, create_customer, create_partner):
    owes = await create_customer(full_name="Owes")
    settled = await create_customer(full_name="Settled")
    await client.post(f"/v1/customers/{owes['id']}/ledger", json={"description": "Debt", "debit": 300})
    await client.post(f"/v1/customers/{settled['id']}/ledger", json={"description": "Debt", "debit": 100})
    await client.post(f"/v1/customers/{settled['id']}/ledger", json={"description": "Paid", "credit": 100})

    supplier = await create_partner()
    await client.post(f"/v1/partners/{supplier['id']}/ledger", json={"description": "Invoice", "credit": 900})

    debtors = (await client.get("/v1/reports/debtors")).json()
    creditors = (await client.get("/v1/reports/creditors")).json()

    assert [(d["full_name"], d["balance"]) for d in debtors] == [("Owes", 300)]
    assert [(c["partner_name"], c["balance"]) for c in creditors] == [(supplier["partner_name"], 900)]


async def test_top_customers(client, create_customer, create_product, today):
    big = await create_customer(full_name="Big Spender")
    small = await create_customer(full_name="Small Spender")
    product = await create_product(selling_price=100.0, stock_quantity=20)
    await _sell(client, "inventory", product["id"], today, quantity=5, customer_id=big["id"])
    await _sell(client, "inventory", product["id"], today, quantity=1, customer_id=small["id"])
    await _sell(client, "inventory", product["id"], today, quantity=1, customer_id=big["id"])

    ranking = (await client.get("/v1/reports/top-customers", params={"fromDate": today, "toDate": today})).json()

    assert ranking[0] == {"customer_id": big["id"], "full_name": "Big Spender", "total_spent": 600, "transaction_count": 2}
    assert ranking[1]["customer_id"] == small["id"]


async def test_top_suppliers_counts_only_purchase_receipts(client, create_partner, create_product, create_phone, today):
    supplier = await create_partner()
    await create_product(purchase_price=50.0, stock_quantity=4, supplier_id=supplier["id"])
    await create_phone(purchase_price=300.0, supplier_id=supplier["id"])
    await client.post(f"/v1/partners/{supplier['id']}/ledger", json={"description": "Opening balance", "credit": 5000})

    ranking = (await client.get("/v1/reports/top-suppliers", params={"fromDate": today, "toDate": today})).json()

    assert ranking == [{
        "partner_id": supplier["id"],
        "partner_name": supplier["partner_name"],
        "total_purchase_value": 500,
        "transaction_count": 2,
    }]


async def test_dashboard_summary(client, create_customer, create_product, create_phone, today):
    customer = await create_customer()
    product = await create_product(selling_price=100.0, stock_quantity=2)
    await create_phone()
    await _sell(client, "inventory", product["id"], today, quantity=2, customer_id=customer["id"])

    response = await client.get("/v1/dashboard/summary", params={"period": "weekly"})

    assert response.status_code == 200
    body = response.json()
    assert body["kpis"] == {
        "total_sales_month": 200,
        "revenue_today": 200,
        "active_products_count": 1,
        "total_customers_count": 1,
    }
    assert len(body["sales_chart_data"]) == 7
    assert body["sales_chart_data"][-1]["sales"] == 200
    assert body["recent_activities"][0]["type_description"] in {"New sale", "New phone", "New product", "New customer"}
    assert any(a["id"].startswith("sale-") for a in body["recent_activities"])


async def test_dashboard_rejects_unknown_period(client):
    response = await client.get("/v1/dashboard/summary", params={"period": "hourly"})
    assert response.status_code == 400


async def test_monthly_and_yearly_chart_shapes(db_session):
    esfand_leap = jdatetime.date(1403, 12, 10)

    monthly = await sales_chart(db_session, "monthly", today=esfand_leap)
    yearly = await sales_chart(db_session, "yearly", today=esfand_leap)

    assert len(monthly) == 30
    assert monthly[0]["name"] == "1"
    assert len(yearly) == 12
    assert all(point["sales"] == 0 for point in monthly + yearly)
