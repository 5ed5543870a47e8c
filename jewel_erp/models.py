from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

SALES_BILL = "sales-bill"
PURCHASE = "purchase"
DELIVERY_VOUCHER = "delivery-voucher"
BILL_TYPES = (SALES_BILL, PURCHASE, DELIVERY_VOUCHER)

MODE_SALES = "sales"
MODE_PURCHASE = "purchase"

MC_PERCENTAGE = "percentage"
MC_FIXED = "fixed"

NET_PERCENTAGE = "net_percentage"
NET_FIXED_PRICE = "fixed_net_price"


class Material(SQLModel, table=True):
    id: str = Field(primary_key=True)  # stable across renames, e.g. gold-22k
    name: str = Field(index=True)
    price: float = 0.0  # current market price per unit
    unit: str = "gram"
    icon: str = "other"
    icon_color: Optional[str] = None
    selected_in_header: bool = False
    is_default: bool = False
    sort_order: int = 0
    last_updated: Optional[datetime] = None


class ProductSuggestion(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    hsn_code: str = ""


class ShopSettings(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    company_name: str = "Your Company Name"
    slogan: str = "Quality you can trust"
    place: str = "123 Main St, City, Country"
    phone_number: str = "+1234567890"
    gstin: Optional[str] = None
    company_logo: Optional[str] = None  # data URI
    show_company_logo: bool = True
    default_making_charge_type: str = MC_PERCENTAGE  # percentage, fixed
    default_making_charge_value: float = 10.0
    default_purchase_net_percentage: float = 10.0
    default_purchase_net_fixed_value: float = 4500.0
    cgst_rate: float = 1.5
    sgst_rate: float = 1.5
    currency_symbol: str = "₹"
    theme: str = "light"
    enable_color_billing: bool = True
    pdf_logo_position: str = "inline-left"  # top-center, top-left, inline-left
    enable_gst_report: bool = True
    enable_hsn_code: bool = True
    enable_purchase: bool = True


class Bill(SQLModel, table=True):
    id: str = Field(primary_key=True)
    bill_number: Optional[str] = Field(default=None, index=True)  # None for delivery vouchers
    type: str = Field(default=SALES_BILL, index=True)  # sales-bill, purchase, delivery-voucher
    date: datetime = Field(default_factory=datetime.now, index=True)
    customer_name: Optional[str] = None
    customer_place: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_gstin: Optional[str] = None
    sub_total: float = 0.0
    cgst_amount: float = 0.0
    sgst_amount: float = 0.0
    total_amount: float = 0.0
    notes: Optional[str] = None
    company_gstin: Optional[str] = None


class BillItem(SQLModel, table=True):
    id: str = Field(primary_key=True)
    bill_id: str = Field(foreign_key="bill.id", index=True)
    position: int = 0
    valuable_id: Optional[str] = None  # weak reference to Material.id, no cascade
    name: str = ""
    hsn_code: Optional[str] = None
    weight_or_quantity: float = 0.0
    unit: str = ""
    rate: float = 0.0
    billed_rate: Optional[float] = None  # effective per-unit rate, frozen on save
    making_charge_type: Optional[str] = None  # percentage, fixed
    making_charge: Optional[float] = None
    purchase_net_type: Optional[str] = None  # net_percentage, fixed_net_price
    purchase_net_percent_value: Optional[float] = None
    purchase_net_fixed_value: Optional[float] = None
    amount: float = 0.0
    item_cgst_amount: float = 0.0
    item_sgst_amount: float = 0.0


DEFAULT_MATERIALS = [
    dict(id="gold-18k", name="18K Gold", price=5000, icon="gold", selected_in_header=True, unit="gram"),
    dict(id="gold-bis", name="BIS 916", price=5500, icon="gold", selected_in_header=True, unit="gram"),
    dict(id="gold-22k", name="22K Gold", price=6000, icon="gold", selected_in_header=True, unit="gram"),
    dict(id="gold-24k", name="24K Gold", price=6500, icon="gold", selected_in_header=False, unit="gram"),
    dict(id="silver", name="Silver", price=70, icon="silver", selected_in_header=True, unit="gram"),
    dict(id="diamond", name="Diamond", price=50000, icon="diamond", icon_color="deepskyblue", selected_in_header=True, unit="carat"),
    dict(id="platinum", name="Platinum", price=2500, icon="platinum", icon_color="slategray", selected_in_header=False, unit="gram"),
    dict(id="ruby", name="Ruby", price=20000, icon="ruby", icon_color="crimson", selected_in_header=False, unit="carat"),
    dict(id="emerald", name="Emerald", price=15000, icon="emerald", icon_color="mediumseagreen", selected_in_header=False, unit="carat"),
    dict(id="sapphire", name="Sapphire", price=18000, icon="sapphire", icon_color="royalblue", selected_in_header=False, unit="carat"),
    dict(id="pearl", name="Pearl", price=500, icon="pearl", icon_color="#F0F0F0", selected_in_header=False, unit="piece"),
]

# built-ins of these icons are tied to a fixed unit
UNIT_LOCKED_ICONS = ("gold", "silver", "diamond", "platinum")

DEFAULT_PRODUCT_SUGGESTIONS = [
    ("Gold Ring", "7113"),
    ("Silver Chain", "7113"),
    ("Diamond Pendant", "7113"),
    ("Gold Bangle", "7113"),
    ("Bangles", "7113"),
    ("Rings", "7113"),
    ("Necklace", "7113"),
    ("Platinum Band", "7114"),
    ("Ruby Earrings", "7113"),
]

AVAILABLE_ICONS = [
    ("gold", "Gold Coin"),
    ("silver", "Silver Coin"),
    ("diamond", "Diamond (Clear)"),
    ("ruby", "Ruby (Red Gem)"),
    ("emerald", "Emerald (Green Gem)"),
    ("sapphire", "Sapphire (Blue Gem)"),
    ("pearl", "Pearl"),
    ("platinum", "Platinum Badge"),
    ("custom-gem", "Custom Gem (Specify Color)"),
    ("other", "Other/Generic"),
]

AVAILABLE_CURRENCIES = [
    ("₹", "INR", "Indian Rupee"),
    ("$", "USD", "US Dollar"),
    ("€", "EUR", "Euro"),
    ("£", "GBP", "British Pound"),
    ("د.إ", "AED", "UAE Dirham"),
    ("S$", "SGD", "Singapore Dollar"),
]
