from datetime import datetime, timedelta

import pytest

from jewel_erp.billing import (
    aggregate_bill, compute_item_amount, effective_rate, next_bill_number,
    price_items, round2, to_number,
)
from jewel_erp.models import (
    Material, ShopSettings, SALES_BILL, PURCHASE, DELIVERY_VOUCHER, MODE_SALES, MODE_PURCHASE,
)
from jewel_erp.registry import MaterialRegistry

GOLD = Material(id="gold-22k", name="22K Gold", price=6000, unit="gram", icon="gold")
REGISTRY = MaterialRegistry([GOLD])
ZERO = {"amount": 0.0, "item_cgst_amount": 0.0, "item_sgst_amount": 0.0}


@pytest.mark.parametrize("qty", [0, -1, None, "", "abc", float("nan")])
def test_incomplete_quantity_prices_as_zero(qty):
    item = {"valuable_id": "gold-22k", "weight_or_quantity": qty, "rate": 6000}
    assert compute_item_amount(item, MODE_SALES, REGISTRY, (1.5, 1.5)) == ZERO


def test_missing_material_reference_prices_as_zero():
    item = {"valuable_id": None, "weight_or_quantity": 3, "rate": 6000}
    assert compute_item_amount(item, MODE_SALES, REGISTRY, (1.5, 1.5)) == ZERO
    assert compute_item_amount({}, MODE_PURCHASE, REGISTRY) == ZERO


def test_unknown_mode_prices_as_zero():
    item = {"valuable_id": "gold-22k", "weight_or_quantity": 3, "rate": 6000}
    assert compute_item_amount(item, "rental", REGISTRY) == ZERO


def test_sales_percentage_making_charge():
    item = {
        "valuable_id": "gold-22k", "weight_or_quantity": 10, "rate": 5000,
        "making_charge_type": "percentage", "making_charge": 10,
    }
    assert compute_item_amount(item, MODE_SALES, REGISTRY)["amount"] == 55000.00


def test_sales_fixed_making_charge_is_flat():
    item = {
        "valuable_id": "gold-22k", "weight_or_quantity": 2, "rate": 100,
        "making_charge_type": "fixed", "making_charge": 50,
    }
    assert compute_item_amount(item, MODE_SALES, REGISTRY)["amount"] == 250.00


def test_sales_uses_quoted_rate_not_market_price():
    item = {"valuable_id": "gold-22k", "weight_or_quantity": 1, "rate": 5500}
    assert compute_item_amount(item, MODE_SALES, REGISTRY)["amount"] == 5500.00


def test_purchase_net_percentage_uses_market_price():
    item = {
        "valuable_id": "gold-22k", "weight_or_quantity": 5, "rate": 1,
        "purchase_net_type": "net_percentage", "purchase_net_percent_value": 10,
    }
    assert effective_rate(item, MODE_PURCHASE, REGISTRY) == pytest.approx(5400)
    assert compute_item_amount(item, MODE_PURCHASE, REGISTRY)["amount"] == 27000.00


def test_purchase_net_percentage_falls_back_to_item_rate_for_deleted_material():
    item = {
        "valuable_id": "old-alloy", "weight_or_quantity": 1, "rate": 1000,
        "purchase_net_type": "net_percentage", "purchase_net_percent_value": 10,
    }
    assert compute_item_amount(item, MODE_PURCHASE, REGISTRY)["amount"] == 900.00


def test_purchase_fixed_net_ignores_market_price():
    item = {
        "valuable_id": "gold-22k", "weight_or_quantity": 2,
        "purchase_net_type": "fixed_net_price", "purchase_net_fixed_value": 4500,
    }
    assert compute_item_amount(item, MODE_PURCHASE, REGISTRY)["amount"] == 9000.00
    cheap = MaterialRegistry([Material(id="gold-22k", name="22K Gold", price=1)])
    assert compute_item_amount(item, MODE_PURCHASE, cheap)["amount"] == 9000.00


def test_purchase_without_net_type_uses_item_rate():
    item = {"valuable_id": "gold-22k", "weight_or_quantity": 2, "rate": 150}
    assert compute_item_amount(item, MODE_PURCHASE, REGISTRY)["amount"] == 300.00


def test_negative_effective_rate_is_clamped():
    item = {
        "valuable_id": "gold-22k", "weight_or_quantity": 2,
        "purchase_net_type": "net_percentage", "purchase_net_percent_value": 150,
    }
    assert effective_rate(item, MODE_PURCHASE, REGISTRY) == 0.0
    assert compute_item_amount(item, MODE_PURCHASE, REGISTRY) == ZERO

    sale = {"valuable_id": "gold-22k", "weight_or_quantity": 2, "rate": -10}
    assert compute_item_amount(sale, MODE_SALES, REGISTRY)["amount"] == 0.0


def test_purchase_items_are_never_taxed():
    item = {"valuable_id": "gold-22k", "weight_or_quantity": 1, "rate": 1000}
    out = compute_item_amount(item, MODE_PURCHASE, REGISTRY, (9, 9))
    assert out == {"amount": 1000.0, "item_cgst_amount": 0.0, "item_sgst_amount": 0.0}


def test_tax_rates_from_settings_object():
    item = {"valuable_id": "gold-22k", "weight_or_quantity": 1, "rate": 1000}
    out = compute_item_amount(item, MODE_SALES, REGISTRY, ShopSettings(cgst_rate=2.5, sgst_rate=2.5))
    assert out["item_cgst_amount"] == 25.0
    assert out["item_sgst_amount"] == 25.0


def test_tax_rollup():
    items = [
        {"valuable_id": "gold-22k", "weight_or_quantity": 1, "rate": 1000},
        {"valuable_id": "gold-22k", "weight_or_quantity": 1, "rate": 2000},
    ]
    totals = price_items(items, SALES_BILL, REGISTRY, (9, 9))
    assert [(i["item_cgst_amount"], i["item_sgst_amount"]) for i in items] == [(90.0, 90.0), (180.0, 180.0)]
    assert totals == {"sub_total": 3000.0, "cgst_amount": 270.0, "sgst_amount": 270.0, "total_amount": 3540.0}


def test_aggregate_is_idempotent():
    items = [
        {"amount": 1000.004, "item_cgst_amount": 15.0, "item_sgst_amount": 15.0},
        {"amount": 333.333, "item_cgst_amount": 5.0, "item_sgst_amount": 5.0},
    ]
    first = aggregate_bill(items, SALES_BILL)
    assert aggregate_bill(items, SALES_BILL) == first
    assert first["sub_total"] == 1333.33


def test_purchase_totals_carry_no_tax():
    items = [{"amount": 500, "item_cgst_amount": 10, "item_sgst_amount": 10}]
    assert aggregate_bill(items, PURCHASE) == {
        "sub_total": 500.0, "cgst_amount": 0.0, "sgst_amount": 0.0, "total_amount": 500.0,
    }


def test_delivery_voucher_totals_are_zero():
    items = [
        {"valuable_id": "gold-22k", "weight_or_quantity": 5, "rate": 6000, "amount": 30000,
         "item_cgst_amount": 450, "item_sgst_amount": 450},
    ]
    assert aggregate_bill(items, DELIVERY_VOUCHER) == {
        "sub_total": 0.0, "cgst_amount": 0.0, "sgst_amount": 0.0, "total_amount": 0.0,
    }
    assert price_items(items, DELIVERY_VOUCHER, REGISTRY, (1.5, 1.5))["total_amount"] == 0.0


def test_estimate_drops_tax():
    items = [{"valuable_id": "gold-22k", "weight_or_quantity": 1, "rate": 1000}]
    totals = price_items(items, SALES_BILL, REGISTRY, (9, 9), estimate=True)
    assert items[0]["item_cgst_amount"] == 0.0
    assert totals == {"sub_total": 1000.0, "cgst_amount": 0.0, "sgst_amount": 0.0, "total_amount": 1000.0}


def test_round2_is_half_up():
    assert round2(2.675) == 2.68
    assert round2(0.125) == 0.13
    assert round2("garbage") == 0.0


def test_to_number_coerces_malformed_input():
    assert to_number("12.5") == 12.5
    assert to_number("abc") == 0.0
    assert to_number(None) == 0.0
    assert to_number(True) == 0.0
    assert to_number(float("inf")) == 0.0


# ---------------- numbering ----------------
NOW = datetime(2024, 3, 5, 10, 30)


def _bill(number, when=NOW, bill_type=SALES_BILL):
    return {"type": bill_type, "bill_number": number, "date": when}


def test_first_number_of_the_day():
    assert next_bill_number(SALES_BILL, [], NOW) == "050324-001"


def test_number_follows_highest_same_day_suffix():
    bills = [_bill("050324-001"), _bill("050324-002")]
    assert next_bill_number(SALES_BILL, bills, NOW) == "050324-003"
    assert next_bill_number(SALES_BILL, [_bill("050324-005"), _bill("050324-002")], NOW) == "050324-006"


def test_number_ignores_prefix_lookalikes_from_another_day():
    bills = [_bill("050324-007", NOW - timedelta(days=1)), _bill("050324-001")]
    assert next_bill_number(SALES_BILL, bills, NOW) == "050324-002"


def test_number_is_per_type():
    bills = [_bill("050324-004", bill_type=PURCHASE)]
    assert next_bill_number(SALES_BILL, bills, NOW) == "050324-001"
    assert next_bill_number(PURCHASE, bills, NOW) == "050324-005"


def test_number_skips_malformed_suffixes():
    bills = [_bill("050324-abc"), _bill("050324"), _bill(None), _bill("050324-002")]
    assert next_bill_number(SALES_BILL, bills, NOW) == "050324-003"


def test_delivery_vouchers_are_not_numbered():
    assert next_bill_number(DELIVERY_VOUCHER, [], NOW) is None
