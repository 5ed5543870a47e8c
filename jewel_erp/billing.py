"""Billing engine: item pricing, bill totals and bill numbering.

Everything here is a pure function of its arguments. Settings, material
prices and bill history are passed in by the caller; nothing is read
from the database and nothing is persisted. The functions are total:
malformed input (None, text, NaN) computes as zero instead of raising,
because the billing form recalculates on every keystroke.
"""
from __future__ import annotations
import math
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Dict, Iterable, Optional, Tuple

from jewel_erp.models import (
    SALES_BILL, PURCHASE, DELIVERY_VOUCHER,
    MODE_SALES, MODE_PURCHASE,
    MC_PERCENTAGE, NET_PERCENTAGE, NET_FIXED_PRICE,
)

BILL_NUMBER_DATE_FORMAT = "%d%m%y"


def to_number(x) -> float:
    """Coerce to a finite float; anything unusable becomes 0.0."""
    if isinstance(x, bool):
        return 0.0
    try:
        n = float(x)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(n) or math.isinf(n):
        return 0.0
    return n


def round2(x) -> float:
    """Round half-up to 2 decimals, as shown on the bill."""
    try:
        d = Decimal(str(to_number(x)))
        return float(d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return 0.0


def field(obj, name: str):
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def set_field(obj, name: str, value):
    if isinstance(obj, dict):
        obj[name] = value
    else:
        setattr(obj, name, value)


def as_datetime(value) -> Optional[datetime]:
    """Accept a datetime or an ISO string; aware values become local naive."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def pricing_mode(bill_type: str) -> Optional[str]:
    if bill_type in (SALES_BILL, MODE_SALES):
        return MODE_SALES
    if bill_type in (PURCHASE, MODE_PURCHASE):
        return MODE_PURCHASE
    return None


def _lookup(material_lookup, material_id):
    if material_lookup is None or not material_id:
        return None
    finder = getattr(material_lookup, "lookup", material_lookup)
    try:
        return finder(material_id)
    except (KeyError, LookupError):
        return None


def _rates(tax_rates) -> Tuple[float, float]:
    if tax_rates is None:
        return 0.0, 0.0
    if isinstance(tax_rates, (tuple, list)):
        if len(tax_rates) != 2:
            return 0.0, 0.0
        return to_number(tax_rates[0]), to_number(tax_rates[1])
    return to_number(field(tax_rates, "cgst_rate")), to_number(field(tax_rates, "sgst_rate"))


def effective_rate(item, mode: str, material_lookup=None) -> float:
    """Per-unit rate the item is billed at, never negative.

    Sales bill at the rate quoted on the line. Purchases are derived from
    the material's current market price through the line's net policy;
    when the material is gone the line's own rate stands in for the
    market price.
    """
    declared = to_number(field(item, "rate"))
    if mode != MODE_PURCHASE:
        return max(declared, 0.0)

    net_type = field(item, "purchase_net_type")
    if net_type == NET_PERCENTAGE:
        material = _lookup(material_lookup, field(item, "valuable_id"))
        market = to_number(field(material, "price")) if material is not None else declared
        pct = to_number(field(item, "purchase_net_percent_value"))
        rate = market * (1 - pct / 100.0)
    elif net_type == NET_FIXED_PRICE:
        rate = to_number(field(item, "purchase_net_fixed_value"))
    else:
        rate = declared
    return max(rate, 0.0)


def billed_rate(item) -> float:
    """Rate stored on a saved line; older lines fall back to the quoted rate."""
    stored = field(item, "billed_rate")
    return to_number(stored if stored is not None else field(item, "rate"))


def compute_item_amount(item, mode: str, material_lookup=None, tax_rates=None) -> Dict[str, float]:
    zero = {"amount": 0.0, "item_cgst_amount": 0.0, "item_sgst_amount": 0.0}
    if mode not in (MODE_SALES, MODE_PURCHASE):
        return zero
    qty = to_number(field(item, "weight_or_quantity"))
    if qty <= 0 or not field(item, "valuable_id"):
        return zero

    amount = qty * effective_rate(item, mode, material_lookup)

    if mode == MODE_SALES:
        mc = to_number(field(item, "making_charge"))
        if mc > 0:
            if field(item, "making_charge_type") == MC_PERCENTAGE:
                # on the quoted rate, not the effective one
                declared = max(to_number(field(item, "rate")), 0.0)
                amount += qty * declared * (mc / 100.0)
            else:
                amount += mc

    amount = round2(max(amount, 0.0))
    if mode != MODE_SALES:
        return {"amount": amount, "item_cgst_amount": 0.0, "item_sgst_amount": 0.0}

    cgst_rate, sgst_rate = _rates(tax_rates)
    return {
        "amount": amount,
        "item_cgst_amount": round2(amount * cgst_rate / 100.0),
        "item_sgst_amount": round2(amount * sgst_rate / 100.0),
    }


def aggregate_bill(items: Iterable, bill_type: str, estimate: bool = False) -> Dict[str, float]:
    if bill_type == DELIVERY_VOUCHER:
        return {"sub_total": 0.0, "cgst_amount": 0.0, "sgst_amount": 0.0, "total_amount": 0.0}

    items = list(items or [])
    sub_total = round2(sum(round2(field(it, "amount")) for it in items))
    cgst = sgst = 0.0
    if bill_type == SALES_BILL and not estimate:
        cgst = round2(sum(round2(field(it, "item_cgst_amount")) for it in items))
        sgst = round2(sum(round2(field(it, "item_sgst_amount")) for it in items))

    return {
        "sub_total": sub_total,
        "cgst_amount": cgst,
        "sgst_amount": sgst,
        "total_amount": round2(sub_total + cgst + sgst),
    }


def price_items(items: Iterable, bill_type: str, material_lookup=None, tax_rates=None,
                estimate: bool = False) -> Dict[str, float]:
    """Recompute every draft line in place and return the bill totals."""
    items = list(items or [])
    mode = pricing_mode(bill_type)
    rates = None if estimate else tax_rates
    for it in items:
        for k, v in compute_item_amount(it, mode, material_lookup, rates).items():
            set_field(it, k, v)
    return aggregate_bill(items, bill_type, estimate=estimate)


def next_bill_number(bill_type: str, existing_bills: Iterable, now=None) -> Optional[str]:
    """DDMMYY-NNN, sequential per bill type and calendar day.

    Not safe against two writers saving before either sees the other's
    bill; the store is single-user.
    """
    if bill_type == DELIVERY_VOUCHER:
        return None
    now = as_datetime(now) or datetime.now()
    prefix = now.strftime(BILL_NUMBER_DATE_FORMAT)

    nums = []
    for b in existing_bills or []:
        b_type = field(b, "type")
        if b_type is not None and b_type != bill_type:
            continue
        number = field(b, "bill_number")
        if not isinstance(number, str) or not number.startswith(prefix):
            continue
        b_date = as_datetime(field(b, "date"))
        if b_date is None or b_date.date() != now.date():
            continue
        _, sep, suffix = number.partition("-")
        if not sep:
            continue
        try:
            nums.append(int(suffix))
        except ValueError:
            pass
    n = (max(nums) + 1) if nums else 1
    return f"{prefix}-{str(n).zfill(3)}"
