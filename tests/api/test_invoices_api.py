"""API tests for invoice extraction and confirmation."""

import pytest
from httpx import AsyncClient


async def product_by_name(client: AsyncClient, name: str) -> dict:
    response = await client.get("/api/products", params={"search": name})
    return next(p for p in response.json()["products"] if p["name"] == name)


class TestParseInvoice:
    """POST /api/invoices/parse and /upload."""

    async def test_parse_falls_back_to_text(self, client: AsyncClient, sample_invoice_text):
        response = await client.post(
            "/api/invoices/parse", json={"text": sample_invoice_text, "filename": "fv.txt"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "text"
        assert data["invoice_number"] == "FV/2024/01/15"
        assert data["date"] == "2024-01-15"
        assert data["filename"] == "fv.txt"
        assert len(data["items"]) == 3
        assert data["total_net"] == pytest.approx(415.0)

    async def test_parse_empty_text(self, client: AsyncClient):
        response = await client.post("/api/invoices/parse", json={"text": "   "})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_upload_text_file(self, client: AsyncClient, sample_invoice_text):
        response = await client.post(
            "/api/invoices/upload",
            files={"file": ("fv.txt", sample_invoice_text.encode("utf-8"), "text/plain")},
        )
        assert response.status_code == 200
        assert response.json()["filename"] == "fv.txt"
        assert response.json()["invoice_number"] == "FV/2024/01/15"

    async def test_upload_cp1250_file(self, client: AsyncClient, sample_invoice_text):
        response = await client.post(
            "/api/invoices/upload",
            files={"file": ("fv.txt", sample_invoice_text.encode("cp1250"), "text/plain")},
        )
        assert response.status_code == 200
        assert len(response.json()["items"]) == 3

    async def test_upload_pdf_bytes_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/invoices/upload",
            files={"file": ("fv.pdf", b"%PDF-1.4\n...", "application/pdf")},
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "EXTRACTION_ERROR"

    async def test_upload_unsupported_extension(self, client: AsyncClient):
        response = await client.post(
            "/api/invoices/upload",
            files={"file": ("fv.docx", b"Faktura", "application/octet-stream")},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestRecalculate:
    async def test_client_totals_are_ignored(self, client: AsyncClient, invoice_payload):
        invoice_payload["items"][0]["total_net"] = 1
        response = await client.post("/api/invoices/recalculate", json=invoice_payload)
        assert response.status_code == 200
        data = response.json()
        assert data["items"][0]["total_net"] == pytest.approx(255.0)
        assert data["total_net"] == pytest.approx(271.0)
        assert data["total_gross"] == pytest.approx(330.98)


class TestDraftEditing:
    """Line edits on an unsaved draft."""

    async def test_add_blank_line(self, client: AsyncClient, invoice_payload):
        response = await client.post("/api/invoices/draft/items", json=invoice_payload)
        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 3
        blank = data["items"][-1]
        assert (blank["quantity"], blank["unit"], blank["percentage"]) == (1, "szt", 23)
        assert blank["net_price"] == 0
        assert data["total_net"] == pytest.approx(271.0)

    async def test_update_line_recomputes(self, client: AsyncClient, invoice_payload):
        invoice_payload["items"][0]["total_net"] = 1
        response = await client.patch(
            "/api/invoices/draft/items/0",
            json={"draft": invoice_payload, "changes": {"quantity": 20}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["items"][0]["total_net"] == pytest.approx(510.0)
        assert data["items"][0]["name"] == "Cement"
        assert data["total_net"] == pytest.approx(526.0)

    async def test_remove_line_resums(self, client: AsyncClient, invoice_payload):
        response = await client.post("/api/invoices/draft/items/0/remove", json=invoice_payload)
        assert response.status_code == 200
        data = response.json()
        assert [i["name"] for i in data["items"]] == ["Piasek"]
        assert data["total_net"] == pytest.approx(16.0)
        assert data["filename"] == "fv.txt"

    async def test_missing_line(self, client: AsyncClient, invoice_payload):
        response = await client.post("/api/invoices/draft/items/5/remove", json=invoice_payload)
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestConfirmInvoice:
    """POST /api/invoices."""

    async def test_confirm_receives_stock(self, client: AsyncClient, invoice_payload):
        response = await client.post("/api/invoices", json=invoice_payload)
        assert response.status_code == 201
        data = response.json()
        assert data["invoice_number"] == "FV/2024/01/15"
        assert data["invoice_date"] == "2024-01-15"
        assert data["total_net"] == pytest.approx(271.0)
        assert len(data["items"]) == 2

        cement = await product_by_name(client, "Cement")
        assert cement["current_stock"] == 10
        assert cement["last_purchase_price"] == 25.5

        movements = (await client.get(f"/api/products/{cement['id']}/movements")).json()
        assert [m["movement_type"] for m in movements] == ["purchase"]
        assert movements[0]["reference_id"] == data["id"]

    async def test_existing_product_is_reused(
        self, client: AsyncClient, invoice_payload, product_factory
    ):
        existing = await product_factory("Cement", stock=5, unit="kg")
        await client.post("/api/invoices", json=invoice_payload)

        cement = await product_by_name(client, "Cement")
        assert cement["id"] == existing["id"]
        assert cement["current_stock"] == 15

    async def test_duplicate_number_conflicts(self, client: AsyncClient, invoice_payload):
        assert (await client.post("/api/invoices", json=invoice_payload)).status_code == 201
        response = await client.post("/api/invoices", json=invoice_payload)

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_INVOICE"
        cement = await product_by_name(client, "Cement")
        assert cement["current_stock"] == 10

    async def test_no_items_rejected(self, client: AsyncClient, invoice_payload):
        invoice_payload["items"] = []
        response = await client.post("/api/invoices", json=invoice_payload)
        assert response.status_code == 400

    async def test_malformed_body(self, client: AsyncClient, invoice_payload):
        invoice_payload["items"][0]["quantity"] = "dużo"
        response = await client.post("/api/invoices", json=invoice_payload)
        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert "quantity" in body["detail"]


class TestInvoiceQueries:
    async def test_list_and_search(self, client: AsyncClient, invoice_payload):
        await client.post("/api/invoices", json=invoice_payload)
        invoice_payload["invoice_number"] = "FV/2024/02/01"
        invoice_payload["vendor"] = "Stalmet"
        await client.post("/api/invoices", json=invoice_payload)

        response = await client.get("/api/invoices")
        assert response.json()["total"] == 2

        response = await client.get("/api/invoices", params={"search": "Stalmet"})
        data = response.json()
        assert data["total"] == 1
        assert data["invoices"][0]["invoice_number"] == "FV/2024/02/01"

    async def test_get_invoice(self, client: AsyncClient, invoice_payload):
        created = (await client.post("/api/invoices", json=invoice_payload)).json()
        response = await client.get(f"/api/invoices/{created['id']}")
        assert response.status_code == 200
        assert response.json()["vendor"] == "Hurtownia Budowlana ABC"

    async def test_missing_invoice_envelope(self, client: AsyncClient):
        response = await client.get("/api/invoices/999")
        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "INVOICE_NOT_FOUND"
        assert body["path"] == "/api/invoices/999"
        assert body["hint"]
        assert body["timestamp"]

    async def test_delete_reverses_purchases(self, client: AsyncClient, invoice_payload):
        created = (await client.post("/api/invoices", json=invoice_payload)).json()

        response = await client.delete(f"/api/invoices/{created['id']}")
        assert response.status_code == 204

        cement = await product_by_name(client, "Cement")
        assert cement["current_stock"] == 0
        assert (await client.get(f"/api/invoices/{created['id']}")).status_code == 404

    async def test_delete_missing(self, client: AsyncClient):
        assert (await client.delete("/api/invoices/999")).status_code == 404
