from __future__ import annotations
import json
import logging
import os
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, Form, File, UploadFile, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse, FileResponse, StreamingResponse
from jinja2 import Environment, DictLoader
from sqlmodel import Session, select

from jewel_erp import services
from jewel_erp.billing import aggregate_bill, as_datetime, billed_rate, to_number
from jewel_erp.config import APP_TITLE, LOG_LEVEL, PDF_DIR
from jewel_erp.db import engine, init_db
from jewel_erp.models import (
    Bill, SALES_BILL, PURCHASE, DELIVERY_VOUCHER, BILL_TYPES,
    NET_PERCENTAGE, NET_FIXED_PRICE, AVAILABLE_ICONS, AVAILABLE_CURRENCIES,
)
from jewel_erp.reports import (
    MONTHS, available_years, gst_report, period_title, period_window, purchase_report_totals,
    report_items, sales_report_totals, summarize_period, window_predicate,
)
from jewel_erp.schemas import BillIn, BillItemIn
from jewel_erp.templates import TEMPLATES

logger = logging.getLogger(__name__)

app = FastAPI(title=APP_TITLE)

templates = Environment(loader=DictLoader(TEMPLATES), autoescape=True)
templates.filters["money"] = lambda v: f"{to_number(v or 0):.2f}"
templates.filters["dmy"] = lambda v: as_datetime(v).strftime("%d/%m/%Y") if as_datetime(v) else ""

ESTIMATE = "estimate"
FORM_TYPES = (SALES_BILL, PURCHASE, DELIVERY_VOUCHER, ESTIMATE)


def render(name: str, **ctx) -> HTMLResponse:
    with Session(engine) as s:
        ctx.setdefault("settings", services.get_settings(s))
    tpl = templates.get_template(name)
    return HTMLResponse(tpl.render(app_title=APP_TITLE, **ctx))


@app.on_event("startup")
def _startup():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    init_db()
    with Session(engine) as s:
        services.seed_defaults(s)
    logger.info("%s ready", APP_TITLE)


# ---------------- Helpers ----------------
def _int_or_none(v: str) -> Optional[int]:
    v = (v or "").strip()
    return int(v) if v.isdigit() else None


def _period_args(period: str, year: str, month: str, start: str, end: str) -> dict:
    return dict(period=period, year=_int_or_none(year), month=_int_or_none(month),
                start=start or None, end=end or None)


def _window(args: dict):
    return period_window(args["period"], datetime.now(), start=args["start"], end=args["end"],
                         year=args["year"], month=args["month"])


def _num_or_none(v: Optional[str]) -> Optional[float]:
    if v is None or str(v).strip() == "":
        return None
    return to_number(v)


def _at(values: List[str], i: int) -> str:
    return values[i] if i < len(values) else ""


def _items_from_form(valuable_id, name, hsn_code, weight_or_quantity, rate,
                     making_charge_type, making_charge, purchase_net_type, purchase_net_value) -> List[BillItemIn]:
    items = []
    for i in range(len(valuable_id)):
        net_type = _at(purchase_net_type, i) or None
        net_value = _num_or_none(_at(purchase_net_value, i))
        items.append(BillItemIn(
            valuable_id=_at(valuable_id, i) or None,
            name=_at(name, i).strip() or None,
            hsn_code=_at(hsn_code, i).strip() or None,
            weight_or_quantity=_num_or_none(_at(weight_or_quantity, i)),
            rate=_num_or_none(_at(rate, i)),
            making_charge_type=_at(making_charge_type, i) or None,
            making_charge=_num_or_none(_at(making_charge, i)),
            purchase_net_type=net_type,
            purchase_net_percent_value=net_value if net_type == NET_PERCENTAGE else None,
            purchase_net_fixed_value=net_value if net_type == NET_FIXED_PRICE else None,
        ))
    return items


def _form_rows(items: list, count: int) -> list:
    rows = [dict(it) for it in items]
    while len(rows) < count:
        rows.append({})
    return rows


def _bill_in_or_404(s: Session, bill_id: str) -> Bill:
    bill = s.get(Bill, bill_id)
    if not bill:
        raise HTTPException(404, "Bill not found")
    return bill


def _generate_bill_pdf(session: Session, record: dict, estimate: bool = False) -> str:
    os.makedirs(PDF_DIR, exist_ok=True)
    stem = record.get("bill_number") or record.get("id") or f"draft-{uuid.uuid4().hex[:8]}"
    if estimate:
        stem = f"{stem}-estimate"
    pdf_path = os.path.join(PDF_DIR, f"{stem}.pdf")
    services.build_bill_pdf(pdf_path, record, services.get_settings(session),
                            services.material_registry(session), estimate=estimate)
    return pdf_path


# ---------------- Dashboard ----------------
@app.get("/", response_class=HTMLResponse)
def dashboard(period: str = "monthly"):
    if period not in ("daily", "monthly", "yearly"):
        period = "monthly"
    with Session(engine) as s:
        bills = services.bill_records(s)
        header = [m for m in services.list_materials(s) if m.selected_in_header]
    pred = window_predicate(period_window(period, datetime.now()))
    return render(
        "dashboard.html",
        title="Dashboard",
        period=period,
        summary=summarize_period(bills, pred),
        header_materials=header,
        recent=bills[:10],
    )


# ---------------- Materials ----------------
@app.get("/materials", response_class=HTMLResponse)
def materials_page(msg: str = ""):
    with Session(engine) as s:
        rows = services.list_materials(s)
    return render("materials.html", title="Materials", rows=rows, icons=AVAILABLE_ICONS, msg=msg)


@app.post("/materials/create")
def materials_create(
    name: str = Form(...),
    price: float = Form(0.0),
    unit: str = Form("gram"),
    icon: str = Form("other"),
    icon_color: str = Form(""),
):
    with Session(engine) as s:
        try:
            services.add_custom_material(s, name, price, unit, icon, icon_color or None)
        except services.MaterialError as e:
            raise HTTPException(400, str(e))
    return RedirectResponse("/materials", status_code=303)


@app.post("/materials/{material_id}/price")
def materials_price(material_id: str, price: float = Form(...), next: str = Form("/materials")):
    with Session(engine) as s:
        try:
            services.update_material_price(s, material_id, price)
        except services.MaterialError as e:
            raise HTTPException(400, str(e))
    return RedirectResponse(next if next.startswith("/") else "/materials", status_code=303)


@app.post("/materials/{material_id}/update")
def materials_update(
    material_id: str,
    name: str = Form(""),
    price: str = Form(""),
    unit: str = Form(""),
    icon: str = Form(""),
    icon_color: str = Form(""),
):
    with Session(engine) as s:
        try:
            services.edit_material(
                s, material_id,
                name=name or None,
                price=_num_or_none(price),
                unit=unit or None,
                icon=icon or None,
                icon_color=icon_color or None,
            )
        except services.MaterialError as e:
            raise HTTPException(400, str(e))
    return RedirectResponse("/materials", status_code=303)


@app.post("/materials/{material_id}/toggle-header")
def materials_toggle_header(material_id: str):
    with Session(engine) as s:
        try:
            services.toggle_material_in_header(s, material_id)
        except services.MaterialError as e:
            raise HTTPException(404, str(e))
    return RedirectResponse("/materials", status_code=303)


@app.post("/materials/{material_id}/move")
def materials_move(material_id: str, offset: int = Form(...)):
    with Session(engine) as s:
        try:
            services.move_material(s, material_id, offset)
        except services.MaterialError as e:
            raise HTTPException(404, str(e))
    return RedirectResponse("/materials", status_code=303)


@app.post("/materials/{material_id}/delete")
def materials_delete(material_id: str):
    with Session(engine) as s:
        try:
            services.delete_material(s, material_id)
        except services.MaterialError as e:
            raise HTTPException(400, str(e))
    return RedirectResponse("/materials", status_code=303)


# ---------------- Settings ----------------
@app.get("/settings", response_class=HTMLResponse)
def settings_page(msg: str = ""):
    with Session(engine) as s:
        products = services.list_product_suggestions(s)
    return render("settings.html", title="Settings", products=products,
                  currencies=AVAILABLE_CURRENCIES, msg=msg)


@app.post("/settings/save")
def settings_save(
    company_name: str = Form(...),
    slogan: str = Form(""),
    place: str = Form(""),
    phone_number: str = Form(""),
    gstin: str = Form(""),
    show_company_logo: bool = Form(False),
    cgst_rate: float = Form(0.0),
    sgst_rate: float = Form(0.0),
    default_making_charge_type: Optional[str] = Form(None),
    default_making_charge_value: Optional[float] = Form(None),
    default_purchase_net_percentage: Optional[float] = Form(None),
    default_purchase_net_fixed_value: Optional[float] = Form(None),
    currency_symbol: str = Form("₹"),
    theme: str = Form("light"),
    pdf_logo_position: str = Form("inline-left"),
    enable_color_billing: bool = Form(False),
    enable_gst_report: bool = Form(False),
    enable_hsn_code: bool = Form(False),
    enable_purchase: bool = Form(False),
):
    if cgst_rate < 0 or sgst_rate < 0:
        raise HTTPException(400, "Tax rates cannot be negative")
    # policy defaults keep their stored value when the form leaves them out
    policy = {
        k: v for k, v in (
            ("default_making_charge_type", default_making_charge_type),
            ("default_making_charge_value", default_making_charge_value),
            ("default_purchase_net_percentage", default_purchase_net_percentage),
            ("default_purchase_net_fixed_value", default_purchase_net_fixed_value),
        ) if v is not None
    }
    with Session(engine) as s:
        services.update_settings(
            s,
            company_name=company_name,
            slogan=slogan,
            place=place,
            phone_number=phone_number,
            gstin=gstin or None,
            show_company_logo=show_company_logo,
            cgst_rate=cgst_rate,
            sgst_rate=sgst_rate,
            currency_symbol=currency_symbol,
            theme=theme,
            pdf_logo_position=pdf_logo_position,
            enable_color_billing=enable_color_billing,
            enable_gst_report=enable_gst_report,
            enable_hsn_code=enable_hsn_code,
            enable_purchase=enable_purchase,
            **policy,
        )
    return RedirectResponse("/settings?msg=Settings+saved", status_code=303)


@app.post("/settings/products/add")
def products_add(name: str = Form(...), hsn_code: str = Form("")):
    with Session(engine) as s:
        services.add_product_suggestion(s, name, hsn_code)
    return RedirectResponse("/settings", status_code=303)


@app.post("/settings/products/hsn")
def products_hsn(name: str = Form(...), hsn_code: str = Form("")):
    with Session(engine) as s:
        services.set_product_hsn(s, name, hsn_code)
    return RedirectResponse("/settings", status_code=303)


@app.post("/settings/products/remove")
def products_remove(name: str = Form(...)):
    with Session(engine) as s:
        services.remove_product_suggestion(s, name)
    return RedirectResponse("/settings", status_code=303)


@app.get("/settings/export")
def settings_export():
    with Session(engine) as s:
        data = services.export_settings(s)
    filename = f"jewel-erp-settings-backup-{datetime.now().date().isoformat()}.json"
    body = json.dumps(data, indent=2, ensure_ascii=False)
    return StreamingResponse(
        iter([body]),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/settings/import")
def settings_import(file: UploadFile = File(...)):
    try:
        data = json.loads(file.file.read().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.warning("Settings import %s is not valid JSON", file.filename)
        raise HTTPException(400, "Failed to read or parse the settings file.")
    with Session(engine) as s:
        try:
            services.import_settings(s, data)
        except services.SettingsImportError as e:
            raise HTTPException(400, str(e))
    return RedirectResponse("/settings?msg=Settings+imported", status_code=303)


# ---------------- Billing forms ----------------
def _bill_form(bill_type: str, bill_in: BillIn, rows: int, preview: Optional[dict] = None,
               action_url: str = "", bill: Optional[Bill] = None, msg: str = "") -> HTMLResponse:
    with Session(engine) as s:
        materials = services.list_materials(s)
        products = services.list_product_suggestions(s)
    items = preview["items"] if preview else [it.model_dump() for it in bill_in.items]
    return render(
        "bill_form.html",
        title=("Edit " if bill else "Create ") + (
            "Estimate" if bill_type == ESTIMATE else services.BILL_TITLES[bill_type]),
        bill_type=bill_type,
        bill=bill,
        bill_in=bill_in,
        rows=_form_rows(items, rows),
        preview=preview,
        materials=materials,
        products=products,
        action_url=action_url or f"/billing/{bill_type}",
        msg=msg,
    )


@app.get("/billing/{bill_type}", response_class=HTMLResponse)
def billing_page(bill_type: str, rows: int = 3):
    if bill_type not in FORM_TYPES:
        raise HTTPException(404, "Unknown bill type")
    return _bill_form(bill_type, BillIn(type=SALES_BILL if bill_type == ESTIMATE else bill_type), max(rows, 1))


def _submit(bill_type: str, action: str, bill_in: BillIn, rows: int, action_url: str,
            bill: Optional[Bill] = None):
    rows = max(rows, len(bill_in.items), 1)
    with Session(engine) as s:
        if action == "add_row":
            return _bill_form(bill_type, bill_in, rows + 1, action_url=action_url, bill=bill)
        if bill_type == ESTIMATE or action == "estimate_pdf":
            preview = services.preview_bill(s, bill_in, estimate=True)
            if action == "estimate_pdf":
                preview["date"] = datetime.now()
                pdf_path = _generate_bill_pdf(s, preview, estimate=True)
                return FileResponse(pdf_path, media_type="application/pdf", filename="estimate.pdf")
            return _bill_form(bill_type, bill_in, rows, preview, action_url=action_url, bill=bill)
        if action == "save":
            try:
                if bill:
                    saved = services.update_bill(s, bill.id, bill_in)
                else:
                    saved = services.add_bill(s, bill_in)
            except services.BillingError as e:
                preview = services.preview_bill(s, bill_in)
                return _bill_form(bill_type, bill_in, rows, preview, action_url=action_url, bill=bill, msg=str(e))
            return RedirectResponse(f"/bills/{saved.id}", status_code=303)
        preview = services.preview_bill(s, bill_in)
    return _bill_form(bill_type, bill_in, rows, preview, action_url=action_url, bill=bill)


@app.post("/billing/{bill_type}")
def billing_submit(
    bill_type: str,
    action: str = Form("preview"),
    rows: int = Form(3),
    customer_name: str = Form(""),
    customer_place: str = Form(""),
    customer_phone: str = Form(""),
    customer_gstin: str = Form(""),
    notes: str = Form(""),
    valuable_id: List[str] = Form([]),
    name: List[str] = Form([]),
    hsn_code: List[str] = Form([]),
    weight_or_quantity: List[str] = Form([]),
    rate: List[str] = Form([]),
    making_charge_type: List[str] = Form([]),
    making_charge: List[str] = Form([]),
    purchase_net_type: List[str] = Form([]),
    purchase_net_value: List[str] = Form([]),
):
    if bill_type not in FORM_TYPES:
        raise HTTPException(404, "Unknown bill type")
    bill_in = BillIn(
        type=SALES_BILL if bill_type == ESTIMATE else bill_type,
        customer_name=customer_name,
        customer_place=customer_place,
        customer_phone=customer_phone,
        customer_gstin=customer_gstin,
        notes=notes,
        items=_items_from_form(valuable_id, name, hsn_code, weight_or_quantity, rate,
                               making_charge_type, making_charge, purchase_net_type, purchase_net_value),
    )
    if bill_type == ESTIMATE and action == "save":
        action = "preview"
    return _submit(bill_type, action, bill_in, rows, f"/billing/{bill_type}")


# ---------------- Bills ----------------
@app.get("/bills", response_class=HTMLResponse)
def bills_page(type: str = ""):
    with Session(engine) as s:
        rows = services.bill_records(s, type if type in BILL_TYPES else None)
    return render("bills.html", title="Bill History", rows=rows, bill_type=type, bill_types=BILL_TYPES)


@app.get("/bills/{bill_id}", response_class=HTMLResponse)
def bill_view(bill_id: str):
    with Session(engine) as s:
        bill = _bill_in_or_404(s, bill_id)
        record = services.bill_record(s, bill)
        registry = services.material_registry(s)
    for it in record["items"]:
        it["billed_rate"] = billed_rate(it)
        it["material_name"] = registry.name_for(it["valuable_id"], it["name"])
    return render("bill_view.html", title=f"{services.BILL_TITLES[record['type']]} {record['bill_number'] or ''}",
                  bill=record, estimate_totals=aggregate_bill(record["items"], record["type"], estimate=True))


@app.get("/bills/{bill_id}/edit", response_class=HTMLResponse)
def bill_edit(bill_id: str):
    with Session(engine) as s:
        bill = _bill_in_or_404(s, bill_id)
        record = services.bill_record(s, bill)
    bill_in = BillIn(**{k: record[k] for k in ("type", "customer_name", "customer_place",
                                               "customer_phone", "customer_gstin", "notes")},
                     items=[BillItemIn(**{k: v for k, v in it.items() if k in BillItemIn.model_fields})
                            for it in record["items"]])
    return _bill_form(bill.type, bill_in, len(bill_in.items) or 1, action_url=f"/bills/{bill_id}/edit", bill=bill)


@app.post("/bills/{bill_id}/edit")
def bill_edit_submit(
    bill_id: str,
    action: str = Form("preview"),
    rows: int = Form(3),
    customer_name: str = Form(""),
    customer_place: str = Form(""),
    customer_phone: str = Form(""),
    customer_gstin: str = Form(""),
    notes: str = Form(""),
    valuable_id: List[str] = Form([]),
    name: List[str] = Form([]),
    hsn_code: List[str] = Form([]),
    weight_or_quantity: List[str] = Form([]),
    rate: List[str] = Form([]),
    making_charge_type: List[str] = Form([]),
    making_charge: List[str] = Form([]),
    purchase_net_type: List[str] = Form([]),
    purchase_net_value: List[str] = Form([]),
):
    with Session(engine) as s:
        bill = _bill_in_or_404(s, bill_id)
    bill_in = BillIn(
        type=bill.type,
        customer_name=customer_name,
        customer_place=customer_place,
        customer_phone=customer_phone,
        customer_gstin=customer_gstin,
        notes=notes,
        items=_items_from_form(valuable_id, name, hsn_code, weight_or_quantity, rate,
                               making_charge_type, making_charge, purchase_net_type, purchase_net_value),
    )
    return _submit(bill.type, action, bill_in, rows, f"/bills/{bill_id}/edit", bill=bill)


@app.post("/bills/{bill_id}/delete")
def bill_delete(bill_id: str):
    with Session(engine) as s:
        _bill_in_or_404(s, bill_id)
        services.delete_bill(s, bill_id)
    return RedirectResponse("/bills", status_code=303)


@app.get("/bills/{bill_id}/pdf")
def bill_pdf(bill_id: str, estimate: bool = False):
    with Session(engine) as s:
        bill = _bill_in_or_404(s, bill_id)
        if estimate and bill.type != SALES_BILL:
            raise HTTPException(400, "Only sales bills can be printed as an estimate")
        record = services.bill_record(s, bill)
        pdf_path = _generate_bill_pdf(s, record, estimate=estimate)
    return FileResponse(pdf_path, media_type="application/pdf", filename=os.path.basename(pdf_path))


# ---------------- Reports ----------------
@app.get("/gst-report", response_class=HTMLResponse)
def gst_report_page(period: str = "month", year: str = "", month: str = "",
                    start: str = "", end: str = ""):
    args = _period_args(period, year, month, start, end)
    with Session(engine) as s:
        if not services.get_settings(s).enable_gst_report:
            raise HTTPException(404, "GST report is disabled in settings")
        bills = services.bill_records(s, SALES_BILL)
    report = gst_report(bills, window_predicate(_window(args)))
    return render("gst_report.html", title="GST Tax Report", report=report,
                  report_title=period_title(now=datetime.now(), **args), args=args,
                  years=available_years(bills), months=MONTHS, action="/gst-report")


def _report(report: str, args: dict):
    bill_type = PURCHASE if report == "purchase" else SALES_BILL
    with Session(engine) as s:
        bills = services.bill_records(s, bill_type)
        all_bills = services.bill_records(s)
        registry = services.material_registry(s)
    rows = report_items(bills, bill_type, window_predicate(_window(args)), registry)
    totals = purchase_report_totals(rows) if bill_type == PURCHASE else sales_report_totals(rows)
    return rows, totals, available_years(all_bills)


@app.get("/reports", response_class=HTMLResponse)
def reports_page(report: str = "sales", period: str = "month", year: str = "",
                 month: str = "", start: str = "", end: str = ""):
    report = "purchase" if report == "purchase" else "sales"
    args = _period_args(period, year, month, start, end)
    rows, totals, years = _report(report, args)
    return render("reports.html", title="Financial Reports", report=report, rows=rows, totals=totals,
                  report_title=period_title(now=datetime.now(), **args), args=args,
                  years=years, months=MONTHS, action="/reports", kind=report)


@app.get("/reports/export.csv")
def reports_export(report: str = "sales", period: str = "month", year: str = "",
                   month: str = "", start: str = "", end: str = ""):
    report = "purchase" if report == "purchase" else "sales"
    rows, _, _ = _report(report, _period_args(period, year, month, start, end))
    with Session(engine) as s:
        body = services.report_csv(report, rows, services.get_settings(s))
    filename = f"{report}_report_{datetime.now().date().isoformat()}.csv"
    return StreamingResponse(
        iter([body]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ---------------- JSON API ----------------
@app.get("/api/materials")
def api_materials():
    with Session(engine) as s:
        return [m.model_dump() for m in services.list_materials(s)]


@app.post("/api/bills/preview")
def api_bill_preview(bill_in: BillIn):
    with Session(engine) as s:
        return services.preview_bill(s, bill_in)


@app.post("/api/bills/estimate")
def api_bill_estimate(bill_in: BillIn):
    with Session(engine) as s:
        return services.preview_bill(s, bill_in, estimate=True)


@app.post("/api/bills", status_code=201)
def api_bill_create(bill_in: BillIn):
    with Session(engine) as s:
        try:
            bill = services.add_bill(s, bill_in)
        except services.BillingError as e:
            raise HTTPException(400, str(e))
        return services.bill_record(s, bill)


@app.get("/api/bills")
def api_bills(type: str = ""):
    with Session(engine) as s:
        return services.bill_records(s, type or None)


@app.get("/api/bills/{bill_id}")
def api_bill(bill_id: str):
    with Session(engine) as s:
        return services.bill_record(s, _bill_in_or_404(s, bill_id))


@app.put("/api/bills/{bill_id}")
def api_bill_update(bill_id: str, bill_in: BillIn):
    with Session(engine) as s:
        _bill_in_or_404(s, bill_id)
        try:
            bill = services.update_bill(s, bill_id, bill_in)
        except services.BillingError as e:
            raise HTTPException(400, str(e))
        return services.bill_record(s, bill)


@app.delete("/api/bills/{bill_id}")
def api_bill_delete(bill_id: str):
    with Session(engine) as s:
        _bill_in_or_404(s, bill_id)
        services.delete_bill(s, bill_id)
    return {"ok": True}


@app.get("/api/summary")
def api_summary(period: str = "monthly", year: str = "", month: str = "",
                start: str = "", end: str = ""):
    args = _period_args(period, year, month, start, end)
    with Session(engine) as s:
        bills = services.bill_records(s)
    return {
        "period": period,
        "title": period_title(now=datetime.now(), **args),
        **summarize_period(bills, window_predicate(_window(args))),
    }


@app.get("/api/reports/{report}")
def api_report(report: str, period: str = "month", year: str = "",
               month: str = "", start: str = "", end: str = ""):
    args = _period_args(period, year, month, start, end)
    if report == "gst":
        with Session(engine) as s:
            bills = services.bill_records(s, SALES_BILL)
        return gst_report(bills, window_predicate(_window(args)))
    if report not in ("sales", "purchase"):
        raise HTTPException(404, "Unknown report")
    rows, totals, _ = _report(report, args)
    return {"rows": rows, "totals": totals}


@app.get("/api/years")
def api_years():
    with Session(engine) as s:
        bills = s.exec(select(Bill)).all()
    return available_years(bills)
