"""Tests for the fpdf2 inventory report renderer."""

from datetime import UTC, datetime

import pytest

from stockroom.config.settings import ExportSettings
from stockroom.core.entities.inventory import Inventory, InventoryItem, InventoryStatus
from stockroom.infrastructure.pdf.inventory_report_renderer import (
    Fpdf2InventoryReportRenderer,
    format_difference,
    format_quantity,
    to_latin1,
)


@pytest.fixture
def inventory() -> Inventory:
    return Inventory(
        id=1,
        name="Inwentaryzacja końcoworoczna",
        status=InventoryStatus.COMPLETED,
        created_at=datetime(2024, 12, 30, 8, 0, tzinfo=UTC),
        completed_at=datetime(2024, 12, 31, 16, 30, tzinfo=UTC),
        items=[
            InventoryItem(
                id=1, product_id=1, product_name="Cement", product_unit="kg",
                expected_quantity=10, counted_quantity=7,
            ),
            InventoryItem(
                id=2, product_id=2, product_name="Łączniki ślizgowe", product_unit="szt",
                expected_quantity=4, counted_quantity=6,
            ),
            InventoryItem(id=3, product_id=3, product_name="Żwir", product_unit="t", expected_quantity=2),
        ],
    )


class TestRender:
    def test_renders_pdf(self, inventory):
        content = Fpdf2InventoryReportRenderer().render(inventory)
        assert content.startswith(b"%PDF")
        assert len(content) > 500

    def test_renders_empty_inventory(self):
        content = Fpdf2InventoryReportRenderer().render(Inventory(id=2, name="Pusta"))
        assert content.startswith(b"%PDF")

    def test_many_items_paginate(self, inventory):
        inventory.items = [
            InventoryItem(id=i, product_id=i, product_name=f"Produkt {i}", expected_quantity=i)
            for i in range(1, 120)
        ]
        content = Fpdf2InventoryReportRenderer().render(inventory)
        pages = content.count(b"/Type /Page") - content.count(b"/Type /Pages")
        assert pages >= 2

    def test_missing_font_falls_back(self, inventory, tmp_path):
        settings = ExportSettings(font_path=tmp_path / "missing.ttf")
        content = Fpdf2InventoryReportRenderer(settings).render(inventory)
        assert content.startswith(b"%PDF")


class TestFormatting:
    def test_to_latin1(self):
        assert to_latin1("Zakończona") == "Zakonczona"
        assert to_latin1("Nadwyżka") == "Nadwyzka"
        assert to_latin1("Łódź") == "Lódz"
        assert to_latin1("plain") == "plain"

    def test_quantities(self):
        assert format_quantity(None) == "-"
        assert format_quantity(2.5) == "2.5"
        assert format_quantity(10.0) == "10"

    def test_differences(self):
        assert format_difference(None) == "-"
        assert format_difference(0) == "0"
        assert format_difference(-3) == "-3"
        assert format_difference(2) == "+2"
