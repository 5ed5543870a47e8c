from __future__ import annotations
import csv
import io
import logging
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from num2words import num2words
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from sqlmodel import Session, select

from jewel_erp.billing import (
    aggregate_bill, as_datetime, billed_rate, effective_rate, next_bill_number,
    price_items, pricing_mode, round2, to_number,
)
from jewel_erp.models import (
    Material, ProductSuggestion, ShopSettings, Bill, BillItem,
    SALES_BILL, PURCHASE, DELIVERY_VOUCHER, BILL_TYPES,
    MODE_SALES, MODE_PURCHASE, MC_PERCENTAGE, NET_PERCENTAGE, NET_FIXED_PRICE,
    DEFAULT_MATERIALS, DEFAULT_PRODUCT_SUGGESTIONS, UNIT_LOCKED_ICONS,
)
from jewel_erp.registry import MaterialRegistry
from jewel_erp.schemas import BillIn

logger = logging.getLogger(__name__)

BILL_TITLES = {
    SALES_BILL: "Sales Bill",
    PURCHASE: "Purchase Invoice",
    DELIVERY_VOUCHER: "Delivery Voucher",
}


class BillingError(ValueError):
    pass


class MaterialError(ValueError):
    pass


class SettingsImportError(ValueError):
    pass


# ---------------- Settings ----------------
def get_settings(session: Session) -> ShopSettings:
    st = session.exec(select(ShopSettings)).first()
    if not st:
        st = ShopSettings()
        session.add(st)
        session.commit()
        session.refresh(st)
    return st


def tax_rates(settings: ShopSettings):
    return settings.cgst_rate, settings.sgst_rate


def _apply_settings(session: Session, changes: Dict) -> ShopSettings:
    st = get_settings(session)
    for k, v in changes.items():
        if k == "id" or not hasattr(st, k):
            continue
        setattr(st, k, v)
    session.add(st)
    return st


def update_settings(session: Session, **changes) -> ShopSettings:
    st = _apply_settings(session, changes)
    session.commit()
    session.refresh(st)
    return st


def seed_defaults(session: Session):
    get_settings(session)
    if not session.exec(select(Material)).first():
        for i, m in enumerate(DEFAULT_MATERIALS):
            session.add(Material(is_default=True, sort_order=i, **m))
    if not session.exec(select(ProductSuggestion)).first():
        for name, hsn in DEFAULT_PRODUCT_SUGGESTIONS:
            session.add(ProductSuggestion(name=name, hsn_code=hsn))
    session.commit()


# ---------------- Materials ----------------
def list_materials(session: Session) -> List[Material]:
    return session.exec(select(Material).order_by(Material.sort_order, Material.name)).all()


def material_registry(session: Session) -> MaterialRegistry:
    return MaterialRegistry(list_materials(session))


def _get_material(session: Session, material_id: str) -> Material:
    m = session.get(Material, material_id)
    if not m:
        raise MaterialError("Material not found")
    return m


def _name_taken(session: Session, name: str, exclude_id: Optional[str] = None) -> bool:
    wanted = name.strip().lower()
    return any(m.id != exclude_id and m.name.lower() == wanted for m in list_materials(session))


def update_material_price(session: Session, material_id: str, price: float) -> Material:
    price = to_number(price)
    if price < 0:
        raise MaterialError("Price cannot be negative")
    m = _get_material(session, material_id)
    m.price = price
    m.last_updated = datetime.now()
    session.add(m)
    session.commit()
    session.refresh(m)
    return m


def toggle_material_in_header(session: Session, material_id: str) -> Material:
    m = _get_material(session, material_id)
    m.selected_in_header = not m.selected_in_header
    session.add(m)
    session.commit()
    session.refresh(m)
    return m


def add_custom_material(session: Session, name: str, price: float, unit: str,
                        icon: str = "other", icon_color: Optional[str] = None) -> Material:
    name = (name or "").strip()
    unit = (unit or "").strip()
    price = to_number(price)
    if not name or not unit:
        raise MaterialError("Name and unit are required")
    if price < 0:
        raise MaterialError("Price cannot be negative")
    if _name_taken(session, name):
        raise MaterialError(f"A material named '{name}' already exists")

    last = session.exec(select(Material).order_by(Material.sort_order.desc())).first()
    m = Material(
        id=str(uuid.uuid4()),
        name=name,
        price=price,
        unit=unit,
        icon=icon or "other",
        icon_color=(icon_color or "#808080") if icon == "custom-gem" else None,
        selected_in_header=False,
        is_default=False,
        sort_order=(last.sort_order + 1) if last else 0,
        last_updated=datetime.now(),
    )
    session.add(m)
    session.commit()
    session.refresh(m)
    logger.info("Added material %s (%s)", m.name, m.id)
    return m


def edit_material(session: Session, material_id: str, name: Optional[str] = None, price=None,
                  unit: Optional[str] = None, icon: Optional[str] = None,
                  icon_color: Optional[str] = None) -> Material:
    m = _get_material(session, material_id)
    if name is not None and name.strip() and name.strip() != m.name:
        if m.is_default:
            raise MaterialError("Built-in materials cannot be renamed")
        if _name_taken(session, name, exclude_id=m.id):
            raise MaterialError(f"A material named '{name.strip()}' already exists")
        m.name = name.strip()
    if unit is not None and unit.strip() and unit.strip() != m.unit:
        if m.is_default and m.icon in UNIT_LOCKED_ICONS:
            raise MaterialError(f"The unit of {m.name} is fixed")
        m.unit = unit.strip()
    if icon is not None and icon != m.icon:
        if m.is_default:
            raise MaterialError("Built-in materials keep their icon")
        m.icon = icon
    if icon_color is not None and m.icon == "custom-gem":
        m.icon_color = icon_color
    if price is not None:
        price = to_number(price)
        if price < 0:
            raise MaterialError("Price cannot be negative")
        if price != m.price:
            m.price = price
            m.last_updated = datetime.now()
    session.add(m)
    session.commit()
    session.refresh(m)
    return m


def delete_material(session: Session, material_id: str):
    """Remove a custom material. Bill items keep their snapshot copy."""
    m = _get_material(session, material_id)
    if m.is_default:
        raise MaterialError("Built-in materials cannot be deleted")
    name = m.name
    session.delete(m)
    session.commit()
    logger.info("Deleted material %s (%s)", name, material_id)


def move_material(session: Session, material_id: str, offset: int) -> List[Material]:
    rows = list(list_materials(session))
    idx = next((i for i, m in enumerate(rows) if m.id == material_id), None)
    if idx is None:
        raise MaterialError("Material not found")
    new_idx = max(0, min(len(rows) - 1, idx + offset))
    rows.insert(new_idx, rows.pop(idx))
    for i, m in enumerate(rows):
        m.sort_order = i
        session.add(m)
    session.commit()
    return rows


# ---------------- Product suggestions ----------------
def list_product_suggestions(session: Session) -> List[ProductSuggestion]:
    return session.exec(select(ProductSuggestion).order_by(ProductSuggestion.name)).all()


def add_product_suggestion(session: Session, name: str, hsn_code: str = "") -> Optional[ProductSuggestion]:
    name = (name or "").strip()
    if not name:
        return None
    if any(p.name.lower() == name.lower() for p in list_product_suggestions(session)):
        return None
    p = ProductSuggestion(name=name, hsn_code=(hsn_code or "").strip())
    session.add(p)
    session.commit()
    session.refresh(p)
    return p


def set_product_hsn(session: Session, name: str, hsn_code: str):
    p = session.exec(select(ProductSuggestion).where(ProductSuggestion.name == name)).first()
    if p:
        p.hsn_code = (hsn_code or "").strip()
        session.add(p)
        session.commit()


def remove_product_suggestion(session: Session, name: str):
    p = session.exec(select(ProductSuggestion).where(ProductSuggestion.name == name)).first()
    if p:
        session.delete(p)
        session.commit()


# ---------------- Bills ----------------
def bill_lines(session: Session, bill_id: str) -> List[BillItem]:
    return session.exec(
        select(BillItem).where(BillItem.bill_id == bill_id).order_by(BillItem.position)
    ).all()


def bill_record(session: Session, bill: Bill) -> Dict:
    rec = bill.model_dump()
    rec["items"] = [ln.model_dump() for ln in bill_lines(session, bill.id)]
    return rec


def bill_records(session: Session, bill_type: Optional[str] = None) -> List[Dict]:
    q = select(Bill).order_by(Bill.date.desc())
    if bill_type:
        q = q.where(Bill.type == bill_type)
    return [bill_record(session, b) for b in session.exec(q).all()]


def _draft_items(bill_type: str, items: Iterable, registry: MaterialRegistry,
                 settings: ShopSettings) -> List[Dict]:
    mode = pricing_mode(bill_type)
    drafts = []
    for raw in items:
        it = raw.model_dump() if hasattr(raw, "model_dump") else dict(raw)
        it["id"] = it.get("id") or str(uuid.uuid4())
        material = registry.lookup(it.get("valuable_id"))
        if material is not None:
            # snapshot for when the material is later renamed or deleted
            if not it.get("name"):
                it["name"] = material.name
            if not it.get("unit"):
                it["unit"] = material.unit
            if it.get("rate") is None:
                it["rate"] = material.price
        if mode == MODE_SALES and it.get("making_charge_type") is None and it.get("making_charge") is None:
            it["making_charge_type"] = settings.default_making_charge_type
            it["making_charge"] = settings.default_making_charge_value
        if mode == MODE_PURCHASE:
            if it.get("purchase_net_type") == NET_PERCENTAGE and it.get("purchase_net_percent_value") is None:
                it["purchase_net_percent_value"] = settings.default_purchase_net_percentage
            if it.get("purchase_net_type") == NET_FIXED_PRICE and it.get("purchase_net_fixed_value") is None:
                it["purchase_net_fixed_value"] = settings.default_purchase_net_fixed_value
        it["billed_rate"] = round2(effective_rate(it, mode, registry))
        drafts.append(it)
    return drafts


def _is_complete(item: Dict) -> bool:
    return bool(item.get("valuable_id")) and to_number(item.get("weight_or_quantity")) > 0


def preview_bill(session: Session, bill_in: BillIn, estimate: bool = False) -> Dict:
    """Price a draft bill for live display. Nothing is saved or numbered."""
    settings = get_settings(session)
    registry = material_registry(session)
    bill_type = SALES_BILL if estimate else bill_in.type
    items = _draft_items(bill_type, bill_in.items, registry, settings)
    totals = price_items(items, bill_type, registry, tax_rates(settings), estimate=estimate)
    return {
        "type": bill_type,
        "estimate": estimate,
        "bill_number": None,
        "customer_name": bill_in.customer_name,
        "customer_place": bill_in.customer_place,
        "customer_phone": bill_in.customer_phone,
        "customer_gstin": bill_in.customer_gstin,
        "notes": bill_in.notes,
        "items": items,
        **totals,
    }


def _priced_lines(session: Session, bill_in: BillIn, bill_type: str):
    settings = get_settings(session)
    registry = material_registry(session)
    items = [it for it in _draft_items(bill_type, bill_in.items, registry, settings) if _is_complete(it)]
    if not items:
        raise BillingError("Please add at least one valid item.")
    totals = price_items(items, bill_type, registry, tax_rates(settings))
    return settings, items, totals


def _write_lines(session: Session, bill_id: str, items: List[Dict]):
    for pos, it in enumerate(items):
        session.add(BillItem(
            id=str(uuid.uuid4()),
            bill_id=bill_id,
            position=pos,
            valuable_id=it.get("valuable_id"),
            name=it.get("name") or "",
            hsn_code=it.get("hsn_code") or None,
            weight_or_quantity=to_number(it.get("weight_or_quantity")),
            unit=it.get("unit") or "",
            rate=to_number(it.get("rate")),
            billed_rate=it.get("billed_rate"),
            making_charge_type=it.get("making_charge_type"),
            making_charge=it.get("making_charge"),
            purchase_net_type=it.get("purchase_net_type"),
            purchase_net_percent_value=it.get("purchase_net_percent_value"),
            purchase_net_fixed_value=it.get("purchase_net_fixed_value"),
            amount=it["amount"],
            item_cgst_amount=it["item_cgst_amount"],
            item_sgst_amount=it["item_sgst_amount"],
        ))


def add_bill(session: Session, bill_in: BillIn, now: Optional[datetime] = None) -> Bill:
    if bill_in.type not in BILL_TYPES:
        raise BillingError(f"Unknown bill type: {bill_in.type}")
    settings, items, totals = _priced_lines(session, bill_in, bill_in.type)
    if bill_in.type == PURCHASE and not settings.enable_purchase:
        raise BillingError("Purchase billing is disabled in settings")

    now = now or datetime.now()
    same_type = session.exec(select(Bill).where(Bill.type == bill_in.type)).all()
    bill = Bill(
        id=str(uuid.uuid4()),
        bill_number=next_bill_number(bill_in.type, same_type, now),
        type=bill_in.type,
        date=now,
        customer_name=bill_in.customer_name or None,
        customer_place=bill_in.customer_place or None,
        customer_phone=bill_in.customer_phone or None,
        customer_gstin=bill_in.customer_gstin or None,
        notes=bill_in.notes or None,
        company_gstin=(settings.gstin or None) if bill_in.type == SALES_BILL else None,
        **totals,
    )
    session.add(bill)
    _write_lines(session, bill.id, items)
    session.commit()
    session.refresh(bill)
    logger.info("Saved %s %s with %d item(s), total %.2f",
                bill.type, bill.bill_number or bill.id, len(items), bill.total_amount)
    return bill


def update_bill(session: Session, bill_id: str, bill_in: BillIn) -> Bill:
    """Replace the items of a saved bill; id, number, type and date stay."""
    bill = session.get(Bill, bill_id)
    if not bill:
        raise BillingError("Bill not found")
    _, items, totals = _priced_lines(session, bill_in, bill.type)

    for ln in bill_lines(session, bill_id):
        session.delete(ln)
    session.flush()
    for k in ("customer_name", "customer_place", "customer_phone", "customer_gstin", "notes"):
        setattr(bill, k, getattr(bill_in, k) or None)
    for k, v in totals.items():
        setattr(bill, k, v)
    session.add(bill)
    _write_lines(session, bill.id, items)
    session.commit()
    session.refresh(bill)
    logger.info("Updated %s %s, total %.2f", bill.type, bill.bill_number or bill.id, bill.total_amount)
    return bill


def delete_bill(session: Session, bill_id: str):
    bill = session.get(Bill, bill_id)
    if not bill:
        raise BillingError("Bill not found")
    label = f"{bill.type} {bill.bill_number or bill_id}"
    for ln in bill_lines(session, bill_id):
        session.delete(ln)
    session.delete(bill)
    session.commit()
    logger.info("Deleted %s", label)


# ---------------- Settings backup ----------------
def export_settings(session: Session) -> Dict:
    st = get_settings(session)
    return {
        "companyName": st.company_name,
        "slogan": st.slogan,
        "place": st.place,
        "phoneNumber": st.phone_number,
        "gstin": st.gstin or "",
        "companyLogo": st.company_logo,
        "showCompanyLogo": st.show_company_logo,
        "valuables": [
            {
                "id": m.id,
                "name": m.name,
                "price": m.price,
                "lastUpdated": m.last_updated.isoformat() if m.last_updated else None,
                "icon": m.icon,
                "iconColor": m.icon_color,
                "selectedInHeader": m.selected_in_header,
                "unit": m.unit,
                "isDefault": m.is_default,
            }
            for m in list_materials(session)
        ],
        "defaultMakingCharge": {"type": st.default_making_charge_type, "value": st.default_making_charge_value},
        "defaultPurchaseItemNetPercentage": st.default_purchase_net_percentage,
        "defaultPurchaseItemNetFixedValue": st.default_purchase_net_fixed_value,
        "cgstRate": st.cgst_rate,
        "sgstRate": st.sgst_rate,
        "productSuggestions": [{"name": p.name, "hsnCode": p.hsn_code} for p in list_product_suggestions(session)],
        "currencySymbol": st.currency_symbol,
        "theme": st.theme,
        "enableColorBilling": st.enable_color_billing,
        "pdfLogoPosition": st.pdf_logo_position,
        "enableGstReport": st.enable_gst_report,
        "enableHsnCode": st.enable_hsn_code,
        "enablePurchase": st.enable_purchase,
    }


_IMPORT_FIELDS = {
    "companyName": "company_name",
    "slogan": "slogan",
    "place": "place",
    "phoneNumber": "phone_number",
    "gstin": "gstin",
    "companyLogo": "company_logo",
    "showCompanyLogo": "show_company_logo",
    "defaultPurchaseItemNetPercentage": "default_purchase_net_percentage",
    "defaultPurchaseItemNetFixedValue": "default_purchase_net_fixed_value",
    "cgstRate": "cgst_rate",
    "sgstRate": "sgst_rate",
    "currencySymbol": "currency_symbol",
    "theme": "theme",
    "enableColorBilling": "enable_color_billing",
    "pdfLogoPosition": "pdf_logo_position",
    "enableGstReport": "enable_gst_report",
    "enableHsnCode": "enable_hsn_code",
    "enablePurchase": "enable_purchase",
}


def import_settings(session: Session, data) -> ShopSettings:
    """Overwrite settings, materials and product suggestions from a backup."""
    if not isinstance(data, dict) or not data.get("companyName") or not isinstance(data.get("valuables"), list):
        logger.warning("Rejected settings import: missing companyName or valuables list")
        raise SettingsImportError("Invalid or corrupted settings file.")

    changes = {attr: data[key] for key, attr in _IMPORT_FIELDS.items() if key in data}
    mc = data.get("defaultMakingCharge")
    if isinstance(mc, dict):
        if mc.get("type") in (MC_PERCENTAGE, "fixed"):
            changes["default_making_charge_type"] = mc["type"]
        if "value" in mc:
            changes["default_making_charge_value"] = to_number(mc["value"])
    st = _apply_settings(session, changes)

    for m in list_materials(session):
        session.delete(m)
    session.flush()
    seen_ids = set()
    for i, v in enumerate(data["valuables"]):
        if not isinstance(v, dict) or not v.get("id") or not v.get("name"):
            continue
        if str(v["id"]) in seen_ids:
            continue
        seen_ids.add(str(v["id"]))
        session.add(Material(
            id=str(v["id"]),
            name=str(v["name"]),
            price=max(to_number(v.get("price")), 0.0),
            unit=v.get("unit") or "gram",
            icon=v.get("icon") or "other",
            icon_color=v.get("iconColor"),
            selected_in_header=bool(v.get("selectedInHeader")),
            is_default=bool(v.get("isDefault")),
            sort_order=i,
            last_updated=as_datetime(v.get("lastUpdated")),
        ))

    suggestions = data.get("productSuggestions")
    if isinstance(suggestions, list):
        for p in list_product_suggestions(session):
            session.delete(p)
        session.flush()
        seen = set()
        for p in suggestions:
            name = str(p.get("name", "")).strip() if isinstance(p, dict) else ""
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())
            session.add(ProductSuggestion(name=name, hsn_code=str(p.get("hsnCode") or "")))
    session.commit()
    logger.info("Imported settings for %s with %d material(s)", st.company_name, len(seen_ids))
    return st


# ---------------- Printing ----------------
def amount_in_words(amount) -> str:
    """Indian numbering: 123456.5 -> 'One lakh, twenty-three ... and fifty paise only'."""
    amount = round2(amount)
    rupees = int(amount)
    paise = int(round((amount - rupees) * 100))
    words = num2words(rupees, lang="en_IN").replace(",", "") if rupees else "zero"
    words = words[0].upper() + words[1:]
    if paise > 0:
        words += " and " + num2words(paise, lang="en_IN").replace(",", "") + " paise"
    return words + " only"


def pdf_currency(settings: ShopSettings) -> str:
    # base-14 PDF fonts have no rupee glyph
    return "Rs. " if settings.currency_symbol == "₹" else settings.currency_symbol


def qty_display(qty, unit: str) -> str:
    places = 3 if unit in ("carat", "ct") else 2
    return f"{to_number(qty):.{places}f} {unit}"


def build_bill_pdf(pdf_path: str, bill: Dict, settings: ShopSettings, registry: MaterialRegistry,
                   estimate: bool = False):
    c = canvas.Canvas(pdf_path, pagesize=A4)
    w, h = A4
    y = h - 40
    cur = pdf_currency(settings)
    bill_type = bill["type"]
    is_dv = bill_type == DELIVERY_VOUCHER
    items = bill.get("items") or []

    show_gst = bill_type == SALES_BILL and not estimate
    show_hsn = ((bill_type == SALES_BILL or is_dv) and not estimate and settings.enable_hsn_code
                and any(it.get("hsn_code") for it in items))
    show_mc = bill_type == SALES_BILL and any(to_number(it.get("making_charge")) > 0 for it in items)
    totals = aggregate_bill(items, bill_type, estimate=True) if estimate else bill

    c.setFont("Helvetica-Bold", 18)
    c.drawCentredString(w / 2, y, settings.company_name)
    y -= 16
    c.setFont("Helvetica", 9)
    for line in (settings.slogan, settings.place, settings.phone_number):
        if line:
            c.drawCentredString(w / 2, y, line)
            y -= 12
    if settings.gstin and not estimate:
        c.setFont("Helvetica-Bold", 9)
        c.drawCentredString(w / 2, y, f"GSTIN: {settings.gstin}")
        y -= 12

    y -= 10
    title = "Estimate" if estimate else BILL_TITLES.get(bill_type, "Bill")
    c.setFont("Helvetica-Bold", 14)
    c.drawRightString(550, y, title.upper())
    c.setFont("Helvetica", 9)
    c.drawString(40, y, "DELIVER TO" if is_dv else "BILL TO")
    y -= 14
    c.setFont("Helvetica-Bold", 11)
    c.drawString(40, y, bill.get("customer_name") or "N/A")
    c.setFont("Helvetica", 9)
    c.drawRightString(550, y, f"Bill # {bill.get('bill_number') or 'N/A'}")
    y -= 12
    bill_date = as_datetime(bill.get("date"))
    c.drawRightString(550, y, f"Date: {bill_date.strftime('%d %b, %Y') if bill_date else ''}")
    for k, label in (("customer_place", ""), ("customer_phone", ""), ("customer_gstin", "GSTIN: ")):
        if bill.get(k):
            c.drawString(40, y, f"{label}{bill[k]}")
            y -= 12
    y -= 16

    cols = [("#", 40), ("Item", 60)]
    if show_hsn:
        cols.append(("HSN", 220))
    cols.append(("Qty/Wt", 300))
    if not is_dv:
        cols.append(("Rate", 370))
    if show_mc:
        cols.append(("MC", 410))
    if not is_dv:
        cols.append(("Cost", 465))
    if show_gst:
        cols += [("CGST", 510), ("SGST", 555)]

    c.setFont("Helvetica-Bold", 9)
    for label, x in cols:
        if x < 250:
            c.drawString(x, y, label)
        else:
            c.drawRightString(x, y, label)
    y -= 8
    c.line(40, y, 555, y)
    y -= 14

    c.setFont("Helvetica", 8)
    for idx, it in enumerate(items, start=1):
        if y < 120:
            c.showPage()
            y = h - 40
            c.setFont("Helvetica", 8)
        material = registry.lookup(it.get("valuable_id"))
        label = it.get("name") or ""
        if material is not None and material.name != label:
            label = f"{label} ({material.name})"
        c.drawString(40, y, str(idx))
        c.drawString(60, y, label[:32])
        if show_hsn:
            c.drawString(220, y, it.get("hsn_code") or "-")
        c.drawRightString(300, y, qty_display(it.get("weight_or_quantity"), it.get("unit") or ""))
        if not is_dv:
            c.drawRightString(370, y, f"{cur}{billed_rate(it):.2f}")
        if show_mc:
            mc = to_number(it.get("making_charge"))
            if mc <= 0:
                mc_txt = "-"
            elif it.get("making_charge_type") == MC_PERCENTAGE:
                mc_txt = f"{mc:g}%"
            else:
                mc_txt = f"{cur}{mc:.2f}"
            c.drawRightString(410, y, mc_txt)
        if not is_dv:
            c.drawRightString(465, y, f"{cur}{to_number(it.get('amount')):.2f}")
        if show_gst:
            c.drawRightString(510, y, f"{to_number(it.get('item_cgst_amount')):.2f}")
            c.drawRightString(555, y, f"{to_number(it.get('item_sgst_amount')):.2f}")
        y -= 14

    y -= 10
    if is_dv:
        if bill.get("notes"):
            c.setFont("Helvetica-Bold", 9)
            c.drawString(40, y, "Notes")
            y -= 12
            c.setFont("Helvetica", 8)
            c.drawString(40, y, bill["notes"][:110])
            y -= 16
        c.setFont("Helvetica", 10)
        c.drawCentredString(w / 2, y, "This is a delivery voucher and not a tax invoice.")
    else:
        c.setFont("Helvetica", 10)
        c.drawRightString(555, y, f"Subtotal: {cur}{to_number(totals['sub_total']):.2f}")
        y -= 14
        if show_gst and to_number(totals["cgst_amount"]) > 0:
            c.drawRightString(555, y, f"CGST ({settings.cgst_rate:g}%): {cur}{totals['cgst_amount']:.2f}")
            y -= 14
        if show_gst and to_number(totals["sgst_amount"]) > 0:
            c.drawRightString(555, y, f"SGST ({settings.sgst_rate:g}%): {cur}{totals['sgst_amount']:.2f}")
            y -= 14
        c.setFont("Helvetica-Bold", 12)
        c.drawRightString(555, y, f"GRAND TOTAL: {cur}{to_number(totals['total_amount']):.2f}")
        y -= 20
        c.setFont("Helvetica-Bold", 9)
        c.drawString(40, y, "Amount in Words:")
        y -= 12
        c.setFont("Helvetica", 8)
        c.drawString(40, y, amount_in_words(totals["total_amount"])[:120])
        y -= 16
        if bill.get("notes"):
            c.setFont("Helvetica-Bold", 9)
            c.drawString(40, y, "Notes")
            y -= 12
            c.setFont("Helvetica", 8)
            c.drawString(40, y, bill["notes"][:110])

    c.setFont("Helvetica", 8)
    c.drawString(40, 60, f"Thank you for your business! - {settings.company_name}")
    c.line(400, 70, 555, 70)
    c.drawCentredString(477, 58, "Authorised Signatory")
    c.save()


# ---------------- Report export ----------------
def report_csv(report_type: str, rows: List[Dict], settings: ShopSettings) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    if report_type == "sales":
        writer.writerow([
            "Date", "Product", "HSN", "Bill No.", "Taxable Amount",
            f"CGST ({settings.cgst_rate:g}%)", f"SGST ({settings.sgst_rate:g}%)", "Total Tax",
        ])
        for r in rows:
            d = as_datetime(r["bill_date"])
            writer.writerow([
                d.strftime("%d/%m/%Y") if d else "", r["name"], r["hsn_code"], r["bill_number"],
                f"{r['amount']:.2f}", f"{r['item_cgst_amount']:.2f}", f"{r['item_sgst_amount']:.2f}",
                f"{r['total_tax']:.2f}",
            ])
    else:
        writer.writerow(["Date", "Product", "Material", "Bill No.", "Quantity/Weight", "Rate", "Amount"])
        for r in rows:
            d = as_datetime(r["bill_date"])
            writer.writerow([
                d.strftime("%d/%m/%Y") if d else "", r["name"], r["valuable_name"], r["bill_number"],
                qty_display(r["weight_or_quantity"], r["unit"]), f"{r['rate']:.2f}", f"{r['amount']:.2f}",
            ])
    return buf.getvalue()
