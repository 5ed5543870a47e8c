"""Period filters and summaries for the dashboard, GST report and
sales/purchase reports.

Bills are plain records (dicts or objects) carrying the saved totals and,
for item-level reports, an ``items`` list. Sums are taken over the
amounts frozen on those records; nothing is re-priced here.
"""
from __future__ import annotations
import calendar
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from jewel_erp.billing import as_datetime, billed_rate, field, round2, to_number
from jewel_erp.models import SALES_BILL, PURCHASE

Window = Tuple[datetime, datetime]

PERIODS = ("daily", "monthly", "yearly", "month", "year", "custom")
MONTHS = [(i, calendar.month_name[i]) for i in range(1, 13)]
EPOCH = datetime(1970, 1, 1)


def start_of_day(d: datetime) -> datetime:
    return d.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(d: datetime) -> datetime:
    return d.replace(hour=23, minute=59, second=59, microsecond=999999)


def month_window(year: int, month: int) -> Window:
    start = datetime(year, month, 1)
    last = calendar.monthrange(year, month)[1]
    return start, end_of_day(start.replace(day=last))


def year_window(year: int) -> Window:
    return datetime(year, 1, 1), end_of_day(datetime(year, 12, 31))


def _bound(value, end: bool = False) -> Optional[datetime]:
    # a bare date covers the whole day
    if isinstance(value, date) and not isinstance(value, datetime):
        d = datetime(value.year, value.month, value.day)
        return end_of_day(d) if end else d
    if isinstance(value, str) and len(value) == 10:
        try:
            return _bound(date.fromisoformat(value), end)
        except ValueError:
            return None
    return as_datetime(value)


def period_window(period: str, now=None, start=None, end=None,
                  year: Optional[int] = None, month: Optional[int] = None) -> Optional[Window]:
    """Inclusive (start, end) for a period, or None when it selects nothing."""
    now = as_datetime(now) or datetime.now()
    try:
        if period == "daily":
            return start_of_day(now), end_of_day(now)
        if period == "monthly":
            return month_window(now.year, now.month)
        if period == "yearly":
            return year_window(now.year)
        if period == "month":
            return month_window(int(now.year if year is None else year),
                                int(now.month if month is None else month))
        if period == "year":
            return year_window(int(now.year if year is None else year))
    except (TypeError, ValueError):
        return None
    if period == "custom":
        lo = _bound(start) if start else EPOCH
        hi = _bound(end, end=True) if end else now
        if lo is None or hi is None or hi < lo:
            return None
        return lo, hi
    return None


def window_predicate(window: Optional[Window]) -> Callable[[datetime], bool]:
    def pred(value) -> bool:
        if window is None:
            return False
        d = as_datetime(value)
        return d is not None and window[0] <= d <= window[1]
    return pred


def filter_bills(bills: Iterable, predicate: Callable, bill_type: Optional[str] = None) -> list:
    return [
        b for b in bills or []
        if (bill_type is None or field(b, "type") == bill_type) and predicate(field(b, "date"))
    ]


def summarize_period(bills: Iterable, predicate: Callable) -> Dict[str, float]:
    sales = purchases = cgst = sgst = 0.0
    for b in filter_bills(bills, predicate):
        b_type = field(b, "type")
        if b_type == SALES_BILL:
            sales += round2(field(b, "total_amount"))
            cgst += round2(field(b, "cgst_amount"))
            sgst += round2(field(b, "sgst_amount"))
        elif b_type == PURCHASE:
            purchases += round2(field(b, "total_amount"))

    total_sales = round2(sales)
    total_purchases = round2(purchases)
    total_cgst = round2(cgst)
    total_sgst = round2(sgst)
    return {
        "total_sales": total_sales,
        "total_purchases": total_purchases,
        "profit": round2(total_sales - total_purchases),
        "total_cgst": total_cgst,
        "total_sgst": total_sgst,
        "total_tax": round2(total_cgst + total_sgst),
    }


def available_years(bills: Iterable, now=None) -> List[int]:
    now = as_datetime(now) or datetime.now()
    years = {now.year}
    for b in bills or []:
        d = as_datetime(field(b, "date"))
        if d is not None:
            years.add(d.year)
    return sorted(years, reverse=True)


def _sort_key(row) -> datetime:
    return as_datetime(row["bill_date"]) or EPOCH


def report_items(bills: Iterable, bill_type: str, predicate: Callable, material_lookup=None) -> List[dict]:
    """Flatten the items of matching bills into report rows, newest bill first."""
    finder = getattr(material_lookup, "lookup", material_lookup)
    rows = []
    for b in filter_bills(bills, predicate, bill_type):
        for it in field(b, "items") or []:
            material = finder(field(it, "valuable_id")) if finder else None
            cgst = round2(field(it, "item_cgst_amount"))
            sgst = round2(field(it, "item_sgst_amount"))
            rows.append({
                "bill_date": field(b, "date"),
                "bill_number": field(b, "bill_number") or "",
                "customer_name": field(b, "customer_name") or "",
                "valuable_name": material.name if material is not None else (field(it, "name") or ""),
                "name": field(it, "name") or "",
                "hsn_code": field(it, "hsn_code") or "",
                "weight_or_quantity": to_number(field(it, "weight_or_quantity")),
                "unit": field(it, "unit") or "",
                "rate": round2(billed_rate(it)),
                "amount": round2(field(it, "amount")),
                "item_cgst_amount": cgst,
                "item_sgst_amount": sgst,
                "total_tax": round2(cgst + sgst),
            })
    rows.sort(key=_sort_key, reverse=True)
    return rows


def sales_report_totals(rows: Iterable[dict]) -> Dict[str, float]:
    taxable = cgst = sgst = 0.0
    for r in rows:
        taxable += r["amount"]
        cgst += r["item_cgst_amount"]
        sgst += r["item_sgst_amount"]
    return {
        "taxable": round2(taxable),
        "cgst": round2(cgst),
        "sgst": round2(sgst),
        "total_tax": round2(round2(cgst) + round2(sgst)),
    }


def purchase_report_totals(rows: Iterable[dict]) -> Dict[str, float]:
    return {"total_amount": round2(sum(r["amount"] for r in rows))}


def gst_report(bills: Iterable, predicate: Callable) -> Dict[str, object]:
    rows = []
    for b in filter_bills(bills, predicate, SALES_BILL):
        cgst = round2(field(b, "cgst_amount"))
        sgst = round2(field(b, "sgst_amount"))
        rows.append({
            "date": field(b, "date"),
            "bill_number": field(b, "bill_number") or "",
            "customer_name": field(b, "customer_name") or "N/A",
            "taxable": round2(field(b, "sub_total")),
            "cgst": cgst,
            "sgst": sgst,
            "total_tax": round2(cgst + sgst),
        })
    rows.sort(key=lambda r: as_datetime(r["date"]) or EPOCH, reverse=True)
    totals = {
        "taxable": round2(sum(r["taxable"] for r in rows)),
        "cgst": round2(sum(r["cgst"] for r in rows)),
        "sgst": round2(sum(r["sgst"] for r in rows)),
    }
    totals["total_tax"] = round2(totals["cgst"] + totals["sgst"])
    return {"rows": rows, "totals": totals}


def period_title(period: str, now=None, start=None, end=None,
                 year: Optional[int] = None, month: Optional[int] = None) -> str:
    now = as_datetime(now) or datetime.now()
    if period == "daily":
        return f"Today, {now.strftime('%d %b %Y')}"
    if period == "monthly":
        return f"{calendar.month_name[now.month]} {now.year}"
    if period == "yearly":
        return f"Year {now.year}"
    if period == "month":
        try:
            return f"{calendar.month_name[int(month or now.month)]} {int(year or now.year)}"
        except (IndexError, ValueError):
            return "Invalid month"
    if period == "year":
        return f"Year {year or now.year}"
    if period == "custom":
        lo, hi = _bound(start), _bound(end, end=True)
        if lo and hi:
            return f"{lo.strftime('%d %b %Y')} to {hi.strftime('%d %b %Y')}"
        return "Custom Range"
    return ""
