from __future__ import annotations
from typing import List, Optional
from sqlmodel import SQLModel, Field

from jewel_erp.models import SALES_BILL


class BillItemIn(SQLModel):
    """One draft line as sent by the billing form; every field may be blank."""
    id: Optional[str] = None
    valuable_id: Optional[str] = None
    name: Optional[str] = None
    hsn_code: Optional[str] = None
    weight_or_quantity: Optional[float] = None
    unit: Optional[str] = None
    rate: Optional[float] = None
    making_charge_type: Optional[str] = None
    making_charge: Optional[float] = None
    purchase_net_type: Optional[str] = None
    purchase_net_percent_value: Optional[float] = None
    purchase_net_fixed_value: Optional[float] = None


class BillIn(SQLModel):
    type: str = SALES_BILL
    customer_name: Optional[str] = None
    customer_place: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_gstin: Optional[str] = None
    notes: Optional[str] = None
    items: List[BillItemIn] = Field(default_factory=list)
