"""
Catalogue tests: categories, product and phone registration and the
supplier ledger postings they produce.
"""

from inventory_backend.app.services.inventory import GOODS_RECEIVED_PREFIX, PHONE_RECEIVED_PREFIX


async def test_seeded_categories(client):
    names = [c["name"] for c in (await client.get("/v1/categories")).json()]
    assert names == ["Accessories", "Mobile Phones", "Parts"]


async def test_category_crud(client):
    created = await client.post("/v1/categories", json={"name": "Tablets"})
    assert created.status_code == 201
    category_id = created.json()["id"]

    duplicate = await client.post("/v1/categories", json={"name": "Tablets"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error_code"] == "ERR_CONFLICT_005"

    renamed = await client.put(f"/v1/categories/{category_id}", json={"name": "Tablets & E-readers"})
    assert renamed.json()["name"] == "Tablets & E-readers"

    deleted = await client.delete(f"/v1/categories/{category_id}")
    assert deleted.status_code == 204
    missing = await client.put(f"/v1/categories/{category_id}", json={"name": "Ghost"})
    assert missing.status_code == 404


async def test_product_purchase_credits_supplier(client, create_partner, create_product):
    supplier = await create_partner()
    categories = (await client.get("/v1/categories")).json()
    accessories = next(c for c in categories if c["name"] == "Accessories")

    product = await create_product(
        purchase_price=60.0, stock_quantity=10, supplier_id=supplier["id"], category_id=accessories["id"]
    )

    assert product["supplier_name"] == supplier["partner_name"]
    assert product["category_name"] == "Accessories"

    detail = (await client.get(f"/v1/partners/{supplier['id']}")).json()
    assert detail["current_balance"] == 600
    assert detail["ledger"][0]["credit"] == 600
    assert detail["ledger"][0]["description"].startswith(GOODS_RECEIVED_PREFIX)
    assert detail["purchased_items"][0]["quantity"] == 10


async def test_product_without_supplier_posts_nothing(client, create_product):
    product = await create_product()
    assert product["supplier_id"] is None
    assert product["sale_count"] == 0


async def test_product_with_unknown_supplier_is_rejected(client):
    response = await client.post(
        "/v1/products",
        json={"name": "Cable", "purchase_price": 5, "selling_price": 10, "stock_quantity": 1, "supplier_id": 999},
    )
    assert response.status_code == 404
    assert (await client.get("/v1/products")).json() == []


async def test_product_requires_positive_selling_price(client):
    response = await client.post(
        "/v1/products",
        json={"name": "Cable", "purchase_price": 5, "selling_price": 0, "stock_quantity": 1},
    )
    assert response.status_code == 422


async def test_phone_purchase_credits_supplier(client, create_partner, create_phone):
    supplier = await create_partner()

    phone = await create_phone(purchase_price=400.0, supplier_id=supplier["id"], purchase_date="1403/01/15")

    assert phone["status"] == "in stock"
    assert phone["supplier_name"] == supplier["partner_name"]

    balance = (await client.get(f"/v1/partners/{supplier['id']}/balance")).json()
    assert balance["current_balance"] == 400

    detail = (await client.get(f"/v1/partners/{supplier['id']}")).json()
    assert detail["ledger"][0]["description"].startswith(PHONE_RECEIVED_PREFIX)
    assert detail["ledger"][0]["transaction_date_jalali"] == "1403/01/15"


async def test_duplicate_imei_is_conflict(client, create_phone):
    await create_phone(imei="356789012345678")

    response = await client.post(
        "/v1/phones",
        json={"model": "iPhone 13", "imei": "356789012345678", "purchase_price": 300},
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_CONFLICT_002"
    assert len((await client.get("/v1/phones")).json()) == 1


async def test_imei_format_is_validated(client):
    response = await client.post(
        "/v1/phones",
        json={"model": "iPhone 13", "imei": "12345", "purchase_price": 300},
    )
    assert response.status_code == 422


async def test_phone_filters(client, create_partner, create_phone, today):
    supplier = await create_partner()
    mine = await create_phone(imei="111111111111111", supplier_id=supplier["id"])
    other = await create_phone(imei="222222222222222")
    await client.post("/v1/sales", json={
        "item_type": "phone", "item_id": other["id"], "quantity": 1, "transaction_date": today,
    })

    by_supplier = (await client.get("/v1/phones", params={"supplierId": supplier["id"]})).json()
    assert [p["id"] for p in by_supplier] == [mine["id"]]

    in_stock = (await client.get("/v1/phones", params={"status": "in stock"})).json()
    assert [p["id"] for p in in_stock] == [mine["id"]]
