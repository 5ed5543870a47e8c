from datetime import datetime

import pytest

from jewel_erp import services
from jewel_erp.models import SALES_BILL, PURCHASE, DELIVERY_VOUCHER
from jewel_erp.reports import report_items
from jewel_erp.schemas import BillIn, BillItemIn

NOW = datetime(2024, 3, 5, 10, 0)


def _sale(qty=10, valuable_id="gold-22k", **kw):
    return BillIn(type=SALES_BILL, customer_name="Asha", items=[
        BillItemIn(valuable_id=valuable_id, weight_or_quantity=qty, **kw),
    ])


# ---------------- seed & settings ----------------
def test_seed_defaults(session):
    materials = services.list_materials(session)
    assert len(materials) == 11
    assert materials[0].id == "gold-18k"
    assert all(m.is_default for m in materials)
    st = services.get_settings(session)
    assert (st.cgst_rate, st.sgst_rate) == (1.5, 1.5)
    services.seed_defaults(session)
    assert len(services.list_materials(session)) == 11


def test_update_settings_ignores_unknown_keys(session):
    st = services.update_settings(session, company_name="Ratna Jewellers", cgst_rate=3, bogus=1)
    assert st.company_name == "Ratna Jewellers"
    assert services.tax_rates(st) == (3, 1.5)


# ---------------- materials ----------------
def test_custom_material_names_are_unique_ignoring_case(session):
    m = services.add_custom_material(session, "Old Alloy", 100, "gram")
    assert not m.is_default
    assert m.sort_order == 11
    with pytest.raises(services.MaterialError):
        services.add_custom_material(session, "old alloy", 50, "gram")
    with pytest.raises(services.MaterialError):
        services.add_custom_material(session, "silver", 50, "gram")
    with pytest.raises(services.MaterialError):
        services.add_custom_material(session, "  ", 50, "gram")
    with pytest.raises(services.MaterialError):
        services.add_custom_material(session, "Coral", -1, "gram")


def test_custom_gem_keeps_colour(session):
    gem = services.add_custom_material(session, "Coral", 900, "carat", icon="custom-gem", icon_color="#ff7f50")
    plain = services.add_custom_material(session, "Brass", 1, "gram", icon="other", icon_color="#ff7f50")
    assert gem.icon_color == "#ff7f50"
    assert plain.icon_color is None


def test_built_in_materials_are_locked(session):
    with pytest.raises(services.MaterialError):
        services.edit_material(session, "gold-22k", name="Gold")
    with pytest.raises(services.MaterialError):
        services.edit_material(session, "silver", unit="kg")
    with pytest.raises(services.MaterialError):
        services.delete_material(session, "diamond")
    ruby = services.edit_material(session, "ruby", unit="piece", price=21000)
    assert (ruby.unit, ruby.price) == ("piece", 21000)


def test_edit_and_delete_custom_material(session):
    m = services.add_custom_material(session, "Old Alloy", 100, "gram")
    m = services.edit_material(session, m.id, name="New Alloy", unit="piece")
    assert (m.name, m.unit) == ("New Alloy", "piece")
    material_id = m.id
    services.delete_material(session, material_id)
    assert services.material_registry(session).lookup(material_id) is None
    with pytest.raises(services.MaterialError):
        services.delete_material(session, "no-such-id")


def test_price_update_stamps_time(session):
    m = services.update_material_price(session, "silver", 75)
    assert m.price == 75
    assert m.last_updated is not None
    with pytest.raises(services.MaterialError):
        services.update_material_price(session, "silver", -5)


def test_toggle_and_move(session):
    assert services.toggle_material_in_header(session, "gold-24k").selected_in_header
    rows = services.move_material(session, "silver", -1)
    assert [m.id for m in rows][3:5] == ["silver", "gold-24k"]
    rows = services.move_material(session, "gold-18k", -5)
    assert rows[0].id == "gold-18k"


def test_product_suggestions(session):
    assert services.add_product_suggestion(session, "Anklet", "7113").name == "Anklet"
    assert services.add_product_suggestion(session, "anklet") is None
    assert services.add_product_suggestion(session, "   ") is None
    services.set_product_hsn(session, "Anklet", "7117")
    services.remove_product_suggestion(session, "Rings")
    products = services.list_product_suggestions(session)
    names = [p.name for p in products]
    assert names == sorted(names)
    assert "Rings" not in names
    assert next(p for p in products if p.name == "Anklet").hsn_code == "7117"


# ---------------- bills ----------------
def test_add_sales_bill_applies_defaults_and_numbers(session):
    bill = services.add_bill(session, _sale(), now=NOW)
    assert bill.bill_number == "050324-001"
    assert (bill.sub_total, bill.cgst_amount, bill.sgst_amount, bill.total_amount) == (66000.0, 990.0, 990.0, 67980.0)
    line = services.bill_lines(session, bill.id)[0]
    assert (line.name, line.unit, line.rate) == ("22K Gold", "gram", 6000)
    assert (line.making_charge_type, line.making_charge) == ("percentage", 10)
    assert services.add_bill(session, _sale(), now=NOW).bill_number == "050324-002"


def test_add_bill_drops_incomplete_rows(session):
    bill_in = _sale()
    bill_in.items.append(BillItemIn(valuable_id="silver", weight_or_quantity=0))
    bill_in.items.append(BillItemIn(weight_or_quantity=3))
    bill = services.add_bill(session, bill_in, now=NOW)
    assert len(services.bill_lines(session, bill.id)) == 1


def test_add_bill_without_valid_items_fails(session):
    with pytest.raises(services.BillingError):
        services.add_bill(session, BillIn(type=SALES_BILL, items=[BillItemIn(valuable_id="silver")]))
    with pytest.raises(services.BillingError):
        services.add_bill(session, BillIn(type="quotation", items=[]))


def test_purchase_bill_uses_default_net_percentage(session):
    bill_in = BillIn(type=PURCHASE, customer_name="Supplier", items=[
        BillItemIn(valuable_id="gold-22k", weight_or_quantity=5, purchase_net_type="net_percentage"),
    ])
    bill = services.add_bill(session, bill_in, now=NOW)
    assert bill.bill_number == "050324-001"
    assert (bill.total_amount, bill.cgst_amount) == (27000.0, 0.0)
    assert bill.company_gstin is None


def test_purchase_disabled(session):
    services.update_settings(session, enable_purchase=False)
    with pytest.raises(services.BillingError):
        services.add_bill(session, BillIn(type=PURCHASE, items=[
            BillItemIn(valuable_id="silver", weight_or_quantity=1, rate=70),
        ]))


def test_delivery_voucher_has_no_number_or_totals(session):
    bill = services.add_bill(session, BillIn(type=DELIVERY_VOUCHER, notes="To workshop", items=[
        BillItemIn(valuable_id="gold-22k", weight_or_quantity=12),
    ]))
    assert bill.bill_number is None
    assert bill.total_amount == 0.0
    assert services.bill_lines(session, bill.id)[0].name == "22K Gold"


def test_saved_bill_is_frozen_against_price_changes(session):
    bill = services.add_bill(session, _sale(), now=NOW)
    services.update_material_price(session, "gold-22k", 7000)
    record = services.bill_record(session, session.get(type(bill), bill.id))
    assert record["total_amount"] == 67980.0
    assert record["items"][0]["rate"] == 6000
    assert record["items"][0]["amount"] == 66000.0


def _net_purchase():
    return BillIn(type=PURCHASE, customer_name="Ravi", items=[
        BillItemIn(valuable_id="gold-22k", weight_or_quantity=5, purchase_net_type="net_percentage",
                   purchase_net_percent_value=10),
    ])


def test_net_percentage_purchase_keeps_billed_rate(session, tmp_path, monkeypatch):
    bill = services.add_bill(session, _net_purchase(), now=NOW)
    assert bill.total_amount == 27000.0
    services.update_material_price(session, "gold-22k", 8000)

    record = services.bill_record(session, session.get(type(bill), bill.id))
    line = record["items"][0]
    assert (line["billed_rate"], line["amount"]) == (5400.0, 27000.0)
    assert record["total_amount"] == 27000.0

    rows = report_items([record], PURCHASE, lambda d: True, services.material_registry(session))
    assert (rows[0]["rate"], rows[0]["amount"]) == (5400.0, 27000.0)

    drawn = []
    original = services.canvas.Canvas.drawRightString

    def spy(self, x, y, text, *args, **kwargs):
        drawn.append(text)
        return original(self, x, y, text, *args, **kwargs)

    monkeypatch.setattr(services.canvas.Canvas, "drawRightString", spy)
    services.build_bill_pdf(str(tmp_path / "purchase.pdf"), record, services.get_settings(session),
                            services.material_registry(session))
    assert "Rs. 5400.00" in drawn
    assert "Rs. 7200.00" not in drawn


def test_deleted_material_keeps_history(session):
    alloy = services.add_custom_material(session, "Old Alloy", 100, "gram")
    bill = services.add_bill(session, _sale(qty=2, valuable_id=alloy.id, making_charge=0), now=NOW)
    services.delete_material(session, alloy.id)
    records = services.bill_records(session, SALES_BILL)
    assert records[0]["items"][0]["name"] == "Old Alloy"
    assert records[0]["total_amount"] == bill.total_amount
    rows = report_items(records, SALES_BILL, lambda d: True, services.material_registry(session))
    assert rows[0]["valuable_name"] == "Old Alloy"


def test_update_bill_keeps_identity(session):
    bill = services.add_bill(session, _sale(), now=NOW)
    bill_id, number = bill.id, bill.bill_number
    updated = services.update_bill(session, bill_id, _sale(qty=5, rate=6000))
    assert (updated.id, updated.bill_number, updated.date) == (bill_id, number, NOW)
    assert updated.total_amount == 33990.0
    assert len(services.bill_lines(session, bill_id)) == 1


def test_delete_bill(session):
    bill_id = services.add_bill(session, _sale(), now=NOW).id
    services.delete_bill(session, bill_id)
    assert services.bill_records(session) == []
    with pytest.raises(services.BillingError):
        services.delete_bill(session, bill_id)


def test_preview_and_estimate(session):
    preview = services.preview_bill(session, _sale(qty=1, valuable_id="silver"))
    assert (preview["sub_total"], preview["total_amount"]) == (77.0, 79.32)
    estimate = services.preview_bill(session, _sale(qty=1, valuable_id="silver"), estimate=True)
    assert estimate["total_amount"] == estimate["sub_total"] == 77.0
    assert estimate["bill_number"] is None
    assert services.bill_records(session) == []


# ---------------- settings backup ----------------
def test_export_then_import_settings(session):
    data = services.export_settings(session)
    assert data["companyName"] == "Your Company Name"
    assert len(data["valuables"]) == 11
    data["companyName"] = "Ratna Jewellers"
    data["valuables"] = data["valuables"][:2]
    data["productSuggestions"] = [{"name": "Toe Ring", "hsnCode": "7113"}, {"name": "toe ring"}]
    data["defaultMakingCharge"] = {"type": "fixed", "value": 250}
    services.import_settings(session, data)
    st = services.get_settings(session)
    assert st.company_name == "Ratna Jewellers"
    assert (st.default_making_charge_type, st.default_making_charge_value) == ("fixed", 250)
    assert [m.id for m in services.list_materials(session)] == ["gold-18k", "gold-bis"]
    assert [p.name for p in services.list_product_suggestions(session)] == ["Toe Ring"]


def test_import_skips_repeated_material_ids(session):
    services.import_settings(session, {"companyName": "Dup Co", "valuables": [
        {"id": "x", "name": "First", "price": 10},
        {"id": "x", "name": "Second", "price": 20},
    ]})
    materials = services.list_materials(session)
    assert [(m.id, m.name) for m in materials] == [("x", "First")]
    assert services.get_settings(session).company_name == "Dup Co"


def test_import_commits_once(session, monkeypatch):
    commits = []
    monkeypatch.setattr(session, "commit", lambda: commits.append(1))
    services.import_settings(session, {"companyName": "Dup Co", "valuables": [{"id": "x", "name": "X"}]})
    assert len(commits) == 1


@pytest.mark.parametrize("data", [
    {"valuables": []},
    {"companyName": "X", "valuables": "gold"},
    ["not", "a", "dict"],
])
def test_import_rejects_bad_shape(session, data):
    with pytest.raises(services.SettingsImportError):
        services.import_settings(session, data)
    assert services.get_settings(session).company_name == "Your Company Name"


# ---------------- printing & export ----------------
def test_amount_in_words():
    words = services.amount_in_words(1234.5)
    assert words.startswith("One thousand")
    assert words.endswith("and fifty paise only")
    assert "lakh" in services.amount_in_words(150000)
    assert services.amount_in_words(0) == "Zero only"


def test_qty_display():
    assert services.qty_display(1.5, "carat") == "1.500 carat"
    assert services.qty_display(10, "gram") == "10.00 gram"


@pytest.mark.parametrize("bill_type,estimate", [
    (SALES_BILL, False), (SALES_BILL, True), (PURCHASE, False), (DELIVERY_VOUCHER, False),
])
def test_build_bill_pdf(session, tmp_path, bill_type, estimate):
    bill = services.add_bill(session, BillIn(type=bill_type, customer_name="Asha", notes="Handle with care", items=[
        BillItemIn(valuable_id="gold-22k", weight_or_quantity=2, hsn_code="7113"),
        BillItemIn(valuable_id="diamond", weight_or_quantity=0.25),
    ]))
    path = tmp_path / "bill.pdf"
    services.build_bill_pdf(str(path), services.bill_record(session, bill), services.get_settings(session),
                            services.material_registry(session), estimate=estimate)
    assert path.read_bytes().startswith(b"%PDF")


def test_report_csv(session):
    st = services.get_settings(session)
    rows = [{
        "bill_date": NOW, "bill_number": "050324-001", "name": "Gold Ring", "valuable_name": "22K Gold",
        "hsn_code": "7113", "weight_or_quantity": 2, "unit": "gram", "rate": 6000, "amount": 12000,
        "item_cgst_amount": 180, "item_sgst_amount": 180, "total_tax": 360,
    }]
    sales = services.report_csv("sales", rows, st).splitlines()
    assert sales[0] == "Date,Product,HSN,Bill No.,Taxable Amount,CGST (1.5%),SGST (1.5%),Total Tax"
    assert sales[1] == "05/03/2024,Gold Ring,7113,050324-001,12000.00,180.00,180.00,360.00"
    purchase = services.report_csv("purchase", rows, st).splitlines()
    assert purchase[1] == "05/03/2024,Gold Ring,22K Gold,050324-001,2.00 gram,6000.00,12000.00"
