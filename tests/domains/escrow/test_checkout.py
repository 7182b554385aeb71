"""Unit tests for escrow payment-session line items and metadata."""

import pytest

from src.domains.escrow import (
    build_checkout_line_items,
    build_checkout_metadata,
    calculate_escrow_fees,
)


class TestBuildCheckoutLineItems:
    def test_three_items_in_minor_units(self):
        fees = calculate_escrow_fees(5000.0, "free")
        items = build_checkout_line_items(fees, "USD", "Logo design", "C-1042")

        assert len(items) == 3
        assert [i["price_data"]["unit_amount"] for i in items] == [500000, 50000, 15980]
        assert all(i["quantity"] == 1 for i in items)
        assert all(i["price_data"]["currency"] == "usd" for i in items)

    def test_item_names_and_descriptions(self):
        fees = calculate_escrow_fees(5000.0, "free")
        items = build_checkout_line_items(fees, "USD", "Logo design", "C-1042")
        products = [i["price_data"]["product_data"] for i in items]

        assert products[0]["name"] == "Contract: Logo design"
        assert products[0]["description"] == "Escrow funding for contract C-1042"
        assert products[1] == {"name": "Platform Fee", "description": "Platform fee (10%)"}
        assert products[2]["name"] == "Processing Fee"

    def test_fractional_percentage_in_description(self):
        fees = calculate_escrow_fees(1000.0, "professional")
        items = build_checkout_line_items(fees, "eur")
        assert items[1]["price_data"]["product_data"]["description"] == "Platform fee (7.5%)"
        assert items[1]["price_data"]["unit_amount"] == 7500

    def test_untitled_contract(self):
        fees = calculate_escrow_fees(100.0, "business")
        items = build_checkout_line_items(fees, "USD")
        assert items[0]["price_data"]["product_data"] == {
            "name": "Contract: Untitled contract",
            "description": "Escrow funding",
        }

    def test_line_items_cover_total_within_rounding(self):
        fees = calculate_escrow_fees(1234.56, "professional")
        items = build_checkout_line_items(fees, "USD")
        charged = sum(i["price_data"]["unit_amount"] for i in items)
        assert abs(charged - fees.minor_units()["total_charge"]) <= 1


class TestBuildCheckoutMetadata:
    def test_full_precision_strings(self):
        fees = calculate_escrow_fees(5000.0, "free")
        metadata = build_checkout_metadata(fees, contract_id="c-1", user_id="u-1")

        assert metadata["contract_amount"] == "5000.0"
        assert metadata["platform_fee"] == "500.0"
        assert float(metadata["stripe_fee"]) == pytest.approx(159.80)
        assert float(metadata["total_charge"]) == pytest.approx(5659.80)
        assert metadata["subscription_tier"] == "free"
        assert metadata["type"] == "escrow_funding"
        assert metadata["contract_id"] == "c-1"
        assert metadata["user_id"] == "u-1"
        assert all(isinstance(v, str) for v in metadata.values())

    def test_optional_ids_omitted(self):
        fees = calculate_escrow_fees(100.0, "business")
        metadata = build_checkout_metadata(fees)
        assert "contract_id" not in metadata
        assert "user_id" not in metadata
        assert metadata["subscription_tier"] == "business"
