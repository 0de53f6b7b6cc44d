"""API tests for products, adjustments and movements."""

from httpx import AsyncClient


class TestProducts:
    """Tests for /api/products."""

    async def test_create_starts_at_zero(self, client: AsyncClient):
        response = await client.post(
            "/api/products", json={"name": "Cement", "unit": "kg", "min_stock_level": 5}
        )
        assert response.status_code == 201
        data = response.json()
        assert data["current_stock"] == 0
        assert data["unit"] == "kg"
        assert data["is_low_stock"] is True
        assert data["last_purchase_price"] is None

    async def test_duplicate_name_conflicts(self, client: AsyncClient, product_factory):
        await product_factory("Cement")
        response = await client.post("/api/products", json={"name": "Cement"})
        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_PRODUCT"

    async def test_names_are_case_sensitive(self, client: AsyncClient, product_factory):
        await product_factory("Cement")
        response = await client.post("/api/products", json={"name": "cement"})
        assert response.status_code == 201

    async def test_empty_name_rejected(self, client: AsyncClient):
        response = await client.post("/api/products", json={"name": ""})
        assert response.status_code == 422

    async def test_update_does_not_touch_stock(self, client: AsyncClient, product_factory):
        product = await product_factory("Cement", stock=8)
        response = await client.patch(
            f"/api/products/{product['id']}",
            json={"unit": "worek", "min_stock_level": 10},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["unit"] == "worek"
        assert data["current_stock"] == 8
        assert data["is_low_stock"] is True

    async def test_low_stock_list(self, client: AsyncClient, product_factory):
        await product_factory("Cement", stock=2, min_stock_level=5)
        await product_factory("Piasek", stock=20, min_stock_level=5)

        response = await client.get("/api/products/low-stock")
        names = [p["name"] for p in response.json()["products"]]
        assert names == ["Cement"]

    async def test_delete_product(self, client: AsyncClient, product_factory):
        product = await product_factory("Cement", stock=3)
        assert (await client.delete(f"/api/products/{product['id']}")).status_code == 204
        assert (await client.get(f"/api/products/{product['id']}")).status_code == 404

    async def test_delete_sold_product_conflicts(self, client: AsyncClient, product_factory):
        product = await product_factory("Cement", stock=10)
        sale = {
            "sale_number": "S1",
            "items": [{"product_id": product["id"], "quantity": 2, "unit_price": 30.0}],
        }
        assert (await client.post("/api/sales", json=sale)).status_code == 201

        response = await client.delete(f"/api/products/{product['id']}")
        assert response.status_code == 409
        body = response.json()
        assert body["error_code"] == "PRODUCT_IN_USE"
        assert "sales" in body["hint"]
        assert (await client.get(f"/api/products/{product['id']}")).json()["current_stock"] == 8

    async def test_missing_product(self, client: AsyncClient):
        response = await client.get("/api/products/404")
        assert response.status_code == 404
        assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"


class TestAdjustments:
    async def test_signed_adjustments(self, client: AsyncClient, product_factory):
        product = await product_factory("Cement")
        url = f"/api/products/{product['id']}/adjustments"

        response = await client.post(url, json={"quantity": 12, "notes": "bilans otwarcia"})
        assert response.status_code == 201
        assert response.json()["movement_type"] == "adjustment"
        await client.post(url, json={"quantity": -4})

        data = (await client.get(f"/api/products/{product['id']}")).json()
        assert data["current_stock"] == 8

    async def test_zero_adjustment_rejected(self, client: AsyncClient, product_factory):
        product = await product_factory("Cement")
        response = await client.post(
            f"/api/products/{product['id']}/adjustments", json={"quantity": 0}
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_adjust_missing_product(self, client: AsyncClient):
        response = await client.post("/api/products/999/adjustments", json={"quantity": 1})
        assert response.status_code == 404

    async def test_movements_newest_first(self, client: AsyncClient, product_factory):
        product = await product_factory("Cement")
        url = f"/api/products/{product['id']}/adjustments"
        await client.post(url, json={"quantity": 1, "notes": "pierwszy"})
        await client.post(url, json={"quantity": 2, "notes": "drugi"})

        movements = (await client.get(f"/api/products/{product['id']}/movements")).json()
        assert [m["notes"] for m in movements] == ["drugi", "pierwszy"]


class TestMovements:
    """Tests for /api/movements/{id}."""

    async def test_update_applies_delta(self, client: AsyncClient, product_factory):
        product = await product_factory("Cement", stock=10)
        movement = (await client.get(f"/api/products/{product['id']}/movements")).json()[0]

        response = await client.patch(f"/api/movements/{movement['id']}", json={"quantity": 6})
        assert response.status_code == 200
        assert response.json()["quantity"] == 6

        data = (await client.get(f"/api/products/{product['id']}")).json()
        assert data["current_stock"] == 6

    async def test_delete_reverses(self, client: AsyncClient, product_factory):
        product = await product_factory("Cement", stock=10)
        movement = (await client.get(f"/api/products/{product['id']}/movements")).json()[0]

        assert (await client.delete(f"/api/movements/{movement['id']}")).status_code == 204
        data = (await client.get(f"/api/products/{product['id']}")).json()
        assert data["current_stock"] == 0

    async def test_missing_movement(self, client: AsyncClient):
        response = await client.delete("/api/movements/999")
        assert response.status_code == 404
        assert response.json()["error_code"] == "MOVEMENT_NOT_FOUND"
