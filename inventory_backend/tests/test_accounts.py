"""
Customer and partner account tests.
"""


async def test_customer_crud(client, create_customer):
    customer = await create_customer(full_name="Reza Karimi", phone_number="09121234567")
    assert customer["current_balance"] == 0

    updated = await client.put(f"/v1/customers/{customer['id']}", json={"address": "Tajrish"})
    assert updated.status_code == 200
    assert updated.json()["address"] == "Tajrish"
    assert updated.json()["full_name"] == "Reza Karimi"

    deleted = await client.delete(f"/v1/customers/{customer['id']}")
    assert deleted.status_code == 204
    assert (await client.get(f"/v1/customers/{customer['id']}")).status_code == 404


async def test_duplicate_customer_phone_is_conflict(client, create_customer):
    await create_customer(phone_number="09121234567")

    response = await client.post("/v1/customers", json={"full_name": "Other", "phone_number": "09121234567"})

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_CONFLICT_003"


async def test_customers_without_phone_do_not_clash(client, create_customer):
    await create_customer(full_name="A", phone_number="")
    await create_customer(full_name="B", phone_number="")
    assert len((await client.get("/v1/customers")).json()) == 2


async def test_customer_list_carries_balances(client, create_customer):
    zahra = await create_customer(full_name="Zahra")
    ali = await create_customer(full_name="Ali")
    await client.post(f"/v1/customers/{zahra['id']}/ledger", json={"description": "Debt", "debit": 250})

    listed = (await client.get("/v1/customers")).json()

    assert [c["full_name"] for c in listed] == ["Ali", "Zahra"]
    assert {c["id"]: c["current_balance"] for c in listed} == {ali["id"]: 0, zahra["id"]: 250}


async def test_customer_detail(client, create_customer, create_product, today):
    customer = await create_customer()
    product = await create_product(selling_price=100.0)
    await client.post("/v1/sales", json={
        "item_type": "inventory", "item_id": product["id"], "quantity": 2,
        "customer_id": customer["id"], "transaction_date": today,
    })
    await client.post(f"/v1/customers/{customer['id']}/ledger", json={"description": "Cash", "credit": 50})

    detail = (await client.get(f"/v1/customers/{customer['id']}")).json()

    assert detail["current_balance"] == 150
    assert detail["profile"]["current_balance"] == 150
    assert [e["balance"] for e in detail["ledger"]] == [200, 150]
    assert detail["purchase_history"][0]["item_type"] == "inventory"


async def test_deleting_customer_keeps_sales(client, create_customer, create_product, today):
    customer = await create_customer()
    product = await create_product()
    sale = (await client.post("/v1/sales", json={
        "item_type": "inventory", "item_id": product["id"], "quantity": 1,
        "customer_id": customer["id"], "transaction_date": today,
    })).json()

    await client.delete(f"/v1/customers/{customer['id']}")

    sales = (await client.get("/v1/sales")).json()
    assert sales[0]["id"] == sale["id"]
    assert sales[0]["customer_id"] is None


async def test_partner_type_filter(client, create_partner):
    await create_partner(partner_name="Accessory Imports", partner_type="Supplier")
    await create_partner(partner_name="Repair Lab", partner_type="Service")

    suppliers = (await client.get("/v1/partners", params={"partnerType": "Supplier"})).json()
    names = [p["partner_name"] for p in suppliers]

    assert "Accessory Imports" in names
    assert "Default Supplier" in names
    assert "Repair Lab" not in names


async def test_partner_update_and_delete(client, create_partner):
    partner = await create_partner(phone_number="0211234")
    other = await create_partner(partner_name="Second", phone_number="0215678")

    clash = await client.put(f"/v1/partners/{other['id']}", json={"phone_number": "0211234"})
    assert clash.status_code == 409

    renamed = await client.put(f"/v1/partners/{partner['id']}", json={"contact_person": "Mr. Hosseini"})
    assert renamed.json()["contact_person"] == "Mr. Hosseini"

    assert (await client.delete(f"/v1/partners/{partner['id']}")).status_code == 204
    assert (await client.get(f"/v1/partners/{partner['id']}/balance")).status_code == 404
