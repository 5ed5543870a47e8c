TEMPLATES = {}

TEMPLATES["base.html"] = """
<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{title}} - {{settings.company_name}}</title>
  <style>
    body{font-family:system-ui,Segoe UI,Arial;margin:20px;max-width:1100px}
    a{color:#0a58ca;text-decoration:none}
    .top{display:flex;gap:12px;flex-wrap:wrap;margin-bottom:16px}
    .card{border:1px solid #ddd;border-radius:12px;padding:14px;margin:12px 0}
    table{border-collapse:collapse;width:100%}
    th,td{border-bottom:1px solid #eee;padding:8px;text-align:left;font-size:14px}
    td.num,th.num{text-align:right}
    input,select,textarea{padding:8px;border:1px solid #ccc;border-radius:10px;width:100%}
    .grid{display:grid;grid-template-columns:repeat(2,minmax(0,1fr));gap:10px}
    .btn{display:inline-block;padding:10px 14px;border-radius:10px;border:1px solid #0a58ca;background:#0a58ca;color:white}
    .btn2{display:inline-block;padding:10px 14px;border-radius:10px;border:1px solid #666;background:white;color:#111}
    .row{display:flex;gap:10px;flex-wrap:wrap}
    .pill{padding:4px 10px;border-radius:999px;border:1px solid #ddd;font-size:12px}
    .msg{padding:8px 12px;border-radius:10px;background:#fff3cd;border:1px solid #ffe69c}
  </style>
</head>
<body>
  <div class="top">
    <a class="btn2" href="/">Dashboard</a>
    <a class="btn2" href="/billing/sales-bill">Sales Bill</a>
    {% if settings.enable_purchase %}<a class="btn2" href="/billing/purchase">Purchase</a>{% endif %}
    <a class="btn2" href="/billing/delivery-voucher">Delivery Voucher</a>
    <a class="btn2" href="/billing/estimate">Estimate</a>
    <a class="btn2" href="/bills">Bills</a>
    <a class="btn2" href="/materials">Materials</a>
    {% if settings.enable_gst_report %}<a class="btn2" href="/gst-report">GST Report</a>{% endif %}
    <a class="btn2" href="/reports">Reports</a>
    <a class="btn2" href="/settings">Settings</a>
    <a class="btn2" href="/docs">API Docs</a>
  </div>
  <h2>{{title}}</h2>
  {% if msg %}<p class="msg">{{msg}}</p>{% endif %}
  {% block body %}{% endblock %}
</body>
</html>
"""

TEMPLATES["dashboard.html"] = """
{% extends "base.html" %}
{% block body %}
<div class="card">
  <div class="row">
    {% for p in ("daily", "monthly", "yearly") %}
      <a class="{{ 'btn' if p == period else 'btn2' }}" href="/?period={{p}}">{{p|capitalize}}</a>
    {% endfor %}
  </div>
</div>
<div class="card">
  <h3>Accounting Summary</h3>
  <div class="row">
    <div class="pill">Total Sales: <b>{{settings.currency_symbol}}{{summary.total_sales|money}}</b></div>
    <div class="pill">Total Purchases: <b>{{settings.currency_symbol}}{{summary.total_purchases|money}}</b></div>
    <div class="pill">Profit: <b>{{settings.currency_symbol}}{{summary.profit|money}}</b></div>
  </div>
  <h3>Tax Summary</h3>
  <div class="row">
    <div class="pill">CGST: <b>{{settings.currency_symbol}}{{summary.total_cgst|money}}</b></div>
    <div class="pill">SGST: <b>{{settings.currency_symbol}}{{summary.total_sgst|money}}</b></div>
    <div class="pill">Total Tax: <b>{{settings.currency_symbol}}{{summary.total_tax|money}}</b></div>
  </div>
</div>
<div class="card">
  <h3>Market Prices</h3>
  <table>
    <tr><th>Material</th><th>Unit</th><th class="num">Price</th><th>Updated</th><th></th></tr>
    {% for m in header_materials %}
    <tr>
      <td>{{m.name}}</td><td>{{m.unit}}</td>
      <td class="num">{{settings.currency_symbol}}{{m.price|money}}</td>
      <td>{{m.last_updated|dmy}}</td>
      <td>
        <form method="post" action="/materials/{{m.id}}/price" class="row">
          <input type="hidden" name="next" value="/">
          <input name="price" type="number" step="0.01" min="0" value="{{m.price}}" style="width:120px">
          <button class="btn2" type="submit">Update</button>
        </form>
      </td>
    </tr>
    {% endfor %}
  </table>
</div>
<div class="card">
  <h3>Recent Bills</h3>
  <table>
    <tr><th>Date</th><th>No.</th><th>Type</th><th>Customer</th><th class="num">Total</th></tr>
    {% for b in recent %}
    <tr>
      <td>{{b.date|dmy}}</td>
      <td><a href="/bills/{{b.id}}">{{b.bill_number or "-"}}</a></td>
      <td>{{b.type}}</td><td>{{b.customer_name or ""}}</td>
      <td class="num">{{settings.currency_symbol}}{{b.total_amount|money}}</td>
    </tr>
    {% else %}
    <tr><td colspan="5">No bills yet.</td></tr>
    {% endfor %}
  </table>
</div>
{% endblock %}
"""

TEMPLATES["materials.html"] = """
{% extends "base.html" %}
{% block body %}
<div class="card">
  <h3>Add Custom Material</h3>
  <form method="post" action="/materials/create">
    <div class="grid">
      <label>Name<input name="name" required></label>
      <label>Price<input name="price" type="number" step="0.01" min="0" value="0"></label>
      <label>Unit<input name="unit" value="gram" required></label>
      <label>Icon
        <select name="icon">
          {% for value, label in icons %}<option value="{{value}}" {% if value == 'other' %}selected{% endif %}>{{label}}</option>{% endfor %}
        </select>
      </label>
      <label>Gem colour (custom gem only)<input name="icon_color" type="color" value="#808080"></label>
    </div>
    <p><button class="btn" type="submit">Add Material</button></p>
  </form>
</div>
<div class="card">
  <table>
    <tr><th>Name</th><th>Unit</th><th class="num">Price</th><th>Header</th><th>Edit</th><th></th></tr>
    {% for m in rows %}
    <tr>
      <td>{{m.name}}{% if m.is_default %} <span class="pill">built-in</span>{% endif %}</td>
      <td>{{m.unit}}</td>
      <td class="num">{{settings.currency_symbol}}{{m.price|money}}</td>
      <td>
        <form method="post" action="/materials/{{m.id}}/toggle-header">
          <button class="btn2" type="submit">{{ "Shown" if m.selected_in_header else "Hidden" }}</button>
        </form>
      </td>
      <td>
        <form method="post" action="/materials/{{m.id}}/update" class="row">
          <input name="name" value="{{m.name}}" {% if m.is_default %}readonly{% endif %} style="width:140px">
          <input name="price" type="number" step="0.01" min="0" value="{{m.price}}" style="width:110px">
          <input name="unit" value="{{m.unit}}" style="width:80px">
          <button class="btn2" type="submit">Save</button>
        </form>
      </td>
      <td class="row">
        <form method="post" action="/materials/{{m.id}}/move"><input type="hidden" name="offset" value="-1"><button class="btn2" type="submit">&uarr;</button></form>
        <form method="post" action="/materials/{{m.id}}/move"><input type="hidden" name="offset" value="1"><button class="btn2" type="submit">&darr;</button></form>
        {% if not m.is_default %}
        <form method="post" action="/materials/{{m.id}}/delete"><button class="btn2" type="submit">Delete</button></form>
        {% endif %}
      </td>
    </tr>
    {% endfor %}
  </table>
</div>
{% endblock %}
"""

TEMPLATES["settings.html"] = """
{% extends "base.html" %}
{% block body %}
<form method="post" action="/settings/save">
<div class="card">
  <h3>Company</h3>
  <div class="grid">
    <label>Company name<input name="company_name" value="{{settings.company_name}}" required></label>
    <label>Slogan<input name="slogan" value="{{settings.slogan}}"></label>
    <label>Address<input name="place" value="{{settings.place}}"></label>
    <label>Phone<input name="phone_number" value="{{settings.phone_number}}"></label>
    <label>GSTIN<input name="gstin" value="{{settings.gstin or ''}}"></label>
    <label><input type="checkbox" name="show_company_logo" {% if settings.show_company_logo %}checked{% endif %} style="width:auto"> Show logo on bills</label>
    <label>Logo position
      <select name="pdf_logo_position">
        {% for p in ("inline-left", "top-left", "top-center") %}<option {% if p == settings.pdf_logo_position %}selected{% endif %}>{{p}}</option>{% endfor %}
      </select>
    </label>
  </div>
</div>
<div class="card">
  <h3>Billing Defaults</h3>
  <div class="grid">
    <label>CGST %<input name="cgst_rate" type="number" step="0.01" min="0" value="{{settings.cgst_rate}}"></label>
    <label>SGST %<input name="sgst_rate" type="number" step="0.01" min="0" value="{{settings.sgst_rate}}"></label>
    <label>Default making charge type
      <select name="default_making_charge_type">
        {% for t in ("percentage", "fixed") %}<option {% if t == settings.default_making_charge_type %}selected{% endif %}>{{t}}</option>{% endfor %}
      </select>
    </label>
    <label>Default making charge<input name="default_making_charge_value" type="number" step="0.01" min="0" value="{{settings.default_making_charge_value}}"></label>
    <label>Purchase net %<input name="default_purchase_net_percentage" type="number" step="0.01" value="{{settings.default_purchase_net_percentage}}"></label>
    <label>Purchase fixed net price<input name="default_purchase_net_fixed_value" type="number" step="0.01" min="0" value="{{settings.default_purchase_net_fixed_value}}"></label>
    <label>Currency
      <select name="currency_symbol">
        {% for sym, code, label in currencies %}<option value="{{sym}}" {% if sym == settings.currency_symbol %}selected{% endif %}>{{sym}} {{code}} - {{label}}</option>{% endfor %}
      </select>
    </label>
    <label>Theme
      <select name="theme">
        {% for t in ("light", "dark") %}<option {% if t == settings.theme %}selected{% endif %}>{{t}}</option>{% endfor %}
      </select>
    </label>
  </div>
</div>
<div class="card">
  <h3>Features</h3>
  <div class="row">
    {% for key, label in (("enable_purchase", "Purchase billing"), ("enable_gst_report", "GST report"),
                          ("enable_hsn_code", "HSN codes"), ("enable_color_billing", "Coloured billing")) %}
    <label class="pill"><input type="checkbox" name="{{key}}" {% if settings[key] %}checked{% endif %} style="width:auto"> {{label}}</label>
    {% endfor %}
  </div>
  <p><button class="btn" type="submit">Save Settings</button></p>
</div>
</form>

<div class="card">
  <h3>Product Suggestions</h3>
  <form method="post" action="/settings/products/add" class="row">
    <input name="name" placeholder="Product name" style="width:220px" required>
    <input name="hsn_code" placeholder="HSN" style="width:120px">
    <button class="btn2" type="submit">Add</button>
  </form>
  <table>
    <tr><th>Name</th><th>HSN</th><th></th></tr>
    {% for p in products %}
    <tr>
      <td>{{p.name}}</td>
      <td>
        <form method="post" action="/settings/products/hsn" class="row">
          <input type="hidden" name="name" value="{{p.name}}">
          <input name="hsn_code" value="{{p.hsn_code}}" style="width:120px">
          <button class="btn2" type="submit">Save</button>
        </form>
      </td>
      <td>
        <form method="post" action="/settings/products/remove">
          <input type="hidden" name="name" value="{{p.name}}">
          <button class="btn2" type="submit">Remove</button>
        </form>
      </td>
    </tr>
    {% endfor %}
  </table>
</div>

<div class="card">
  <h3>Backup</h3>
  <div class="row">
    <a class="btn2" href="/settings/export">Export Settings</a>
    <form method="post" action="/settings/import" enctype="multipart/form-data" class="row">
      <input type="file" name="file" accept="application/json" style="width:260px" required>
      <button class="btn2" type="submit">Import Settings</button>
    </form>
  </div>
</div>
{% endblock %}
"""

TEMPLATES["bill_form.html"] = """
{% extends "base.html" %}
{% block body %}
{% set is_purchase = bill_type == "purchase" %}
{% set is_dv = bill_type == "delivery-voucher" %}
{% set is_estimate = bill_type == "estimate" %}
<form method="post" action="{{action_url}}">
<input type="hidden" name="rows" value="{{rows|length}}">
<div class="card">
  <div class="grid">
    <label>{{ "Supplier" if is_purchase else ("Deliver to" if is_dv else "Customer") }} name
      <input name="customer_name" value="{{bill_in.customer_name or ''}}"></label>
    <label>Place<input name="customer_place" value="{{bill_in.customer_place or ''}}"></label>
    <label>Phone<input name="customer_phone" value="{{bill_in.customer_phone or ''}}"></label>
    {% if not is_dv %}<label>GSTIN<input name="customer_gstin" value="{{bill_in.customer_gstin or ''}}"></label>{% endif %}
  </div>
</div>
<datalist id="products">
  {% for p in products %}<option value="{{p.name}}">{% endfor %}
</datalist>
<div class="card">
  <table>
    <tr>
      <th>Material</th><th>Product</th>
      {% if settings.enable_hsn_code and not is_purchase %}<th>HSN</th>{% endif %}
      <th>Qty/Wt</th>
      {% if not is_dv %}<th>Rate</th>{% endif %}
      {% if is_purchase %}<th>Net type</th><th>Net value</th>
      {% elif not is_dv %}<th>MC type</th><th>MC</th>{% endif %}
      {% if preview and not is_dv %}<th class="num">Amount</th>{% endif %}
    </tr>
    {% for r in rows %}
    <tr>
      <td>
        <select name="valuable_id">
          <option value="">--</option>
          {% for m in materials %}<option value="{{m.id}}" {% if m.id == r.valuable_id %}selected{% endif %}>{{m.name}} ({{m.unit}})</option>{% endfor %}
        </select>
      </td>
      <td><input name="name" list="products" value="{{r.name or ''}}"></td>
      {% if settings.enable_hsn_code and not is_purchase %}<td><input name="hsn_code" value="{{r.hsn_code or ''}}" style="width:80px"></td>
      {% else %}<input type="hidden" name="hsn_code" value="{{r.hsn_code or ''}}">{% endif %}
      <td><input name="weight_or_quantity" type="number" step="0.001" min="0" value="{{r.weight_or_quantity if r.weight_or_quantity is not none else ''}}" style="width:90px"></td>
      {% if not is_dv %}
      <td><input name="rate" type="number" step="0.01" min="0" value="{{r.rate if r.rate is not none else ''}}" style="width:100px"></td>
      {% else %}<input type="hidden" name="rate" value="">{% endif %}
      {% if is_purchase %}
      <td>
        <select name="purchase_net_type">
          <option value="">Quoted rate</option>
          <option value="net_percentage" {% if r.purchase_net_type == 'net_percentage' %}selected{% endif %}>Net %</option>
          <option value="fixed_net_price" {% if r.purchase_net_type == 'fixed_net_price' %}selected{% endif %}>Fixed net price</option>
        </select>
      </td>
      <td><input name="purchase_net_value" type="number" step="0.01" value="{{ (r.purchase_net_percent_value if r.purchase_net_type == 'net_percentage' else r.purchase_net_fixed_value) if r.purchase_net_type else '' }}" style="width:90px"></td>
      <input type="hidden" name="making_charge_type" value=""><input type="hidden" name="making_charge" value="">
      {% elif not is_dv %}
      <td>
        <select name="making_charge_type">
          <option value="">Default</option>
          <option value="percentage" {% if r.making_charge_type == 'percentage' %}selected{% endif %}>%</option>
          <option value="fixed" {% if r.making_charge_type == 'fixed' %}selected{% endif %}>Fixed</option>
        </select>
      </td>
      <td><input name="making_charge" type="number" step="0.01" min="0" value="{{r.making_charge if r.making_charge is not none else ''}}" style="width:80px"></td>
      <input type="hidden" name="purchase_net_type" value=""><input type="hidden" name="purchase_net_value" value="">
      {% else %}
      <input type="hidden" name="making_charge_type" value=""><input type="hidden" name="making_charge" value="">
      <input type="hidden" name="purchase_net_type" value=""><input type="hidden" name="purchase_net_value" value="">
      {% endif %}
      {% if preview and not is_dv %}<td class="num">{{settings.currency_symbol}}{{r.amount|money}}</td>{% endif %}
    </tr>
    {% endfor %}
  </table>
  <p><button class="btn2" type="submit" name="action" value="add_row">Add Row</button></p>
</div>
{% if preview and not is_dv %}
<div class="card">
  <div class="row">
    <div class="pill">Subtotal: <b>{{settings.currency_symbol}}{{preview.sub_total|money}}</b></div>
    {% if preview.cgst_amount %}<div class="pill">CGST ({{settings.cgst_rate}}%): <b>{{settings.currency_symbol}}{{preview.cgst_amount|money}}</b></div>{% endif %}
    {% if preview.sgst_amount %}<div class="pill">SGST ({{settings.sgst_rate}}%): <b>{{settings.currency_symbol}}{{preview.sgst_amount|money}}</b></div>{% endif %}
    <div class="pill">Total: <b>{{settings.currency_symbol}}{{preview.total_amount|money}}</b></div>
  </div>
</div>
{% endif %}
{% if is_dv %}
<div class="card"><label>Notes<textarea name="notes">{{bill_in.notes or ''}}</textarea></label></div>
{% else %}<input type="hidden" name="notes" value="{{bill_in.notes or ''}}">{% endif %}
<div class="row">
  <button class="btn2" type="submit" name="action" value="preview">Calculate</button>
  {% if is_estimate %}
  <button class="btn" type="submit" name="action" value="estimate_pdf">Estimate PDF</button>
  {% else %}
  <button class="btn" type="submit" name="action" value="save">{{ "Update" if bill else "Save" }}</button>
  {% endif %}
</div>
</form>
{% endblock %}
"""

TEMPLATES["bills.html"] = """
{% extends "base.html" %}
{% block body %}
<div class="card">
  <div class="row">
    <a class="{{ 'btn' if not bill_type else 'btn2' }}" href="/bills">All</a>
    {% for t in bill_types %}<a class="{{ 'btn' if t == bill_type else 'btn2' }}" href="/bills?type={{t}}">{{t}}</a>{% endfor %}
  </div>
</div>
<div class="card">
  <table>
    <tr><th>Date</th><th>No.</th><th>Type</th><th>Customer</th><th class="num">Items</th><th class="num">Total</th><th></th></tr>
    {% for b in rows %}
    <tr>
      <td>{{b.date|dmy}}</td>
      <td><a href="/bills/{{b.id}}">{{b.bill_number or "-"}}</a></td>
      <td>{{b.type}}</td>
      <td>{{b.customer_name or ""}}</td>
      <td class="num">{{b['items']|length}}</td>
      <td class="num">{{settings.currency_symbol}}{{b.total_amount|money}}</td>
      <td><a href="/bills/{{b.id}}/pdf">PDF</a></td>
    </tr>
    {% else %}
    <tr><td colspan="7">No bills.</td></tr>
    {% endfor %}
  </table>
</div>
{% endblock %}
"""

TEMPLATES["bill_view.html"] = """
{% extends "base.html" %}
{% block body %}
{% set is_dv = bill.type == "delivery-voucher" %}
<div class="card">
  <div class="row">
    <div class="pill">Date: <b>{{bill.date|dmy}}</b></div>
    <div class="pill">{{ "Deliver to" if is_dv else "Bill to" }}: <b>{{bill.customer_name or "N/A"}}</b></div>
    {% if bill.customer_place %}<div class="pill">{{bill.customer_place}}</div>{% endif %}
    {% if bill.customer_phone %}<div class="pill">{{bill.customer_phone}}</div>{% endif %}
    {% if bill.customer_gstin %}<div class="pill">GSTIN: {{bill.customer_gstin}}</div>{% endif %}
  </div>
</div>
<div class="card">
  <table>
    <tr>
      <th>#</th><th>Item</th><th>HSN</th><th class="num">Qty/Wt</th>
      {% if not is_dv %}<th class="num">Rate</th><th class="num">Amount</th>{% endif %}
      {% if bill.type == "sales-bill" %}<th class="num">CGST</th><th class="num">SGST</th>{% endif %}
    </tr>
    {% for it in bill['items'] %}
    <tr>
      <td>{{loop.index}}</td>
      <td>{{it.name}}{% if it.material_name != it.name %} ({{it.material_name}}){% endif %}</td>
      <td>{{it.hsn_code or "-"}}</td>
      <td class="num">{{it.weight_or_quantity}} {{it.unit}}</td>
      {% if not is_dv %}
      <td class="num">{{settings.currency_symbol}}{{it.billed_rate|money}}</td>
      <td class="num">{{settings.currency_symbol}}{{it.amount|money}}</td>
      {% endif %}
      {% if bill.type == "sales-bill" %}
      <td class="num">{{it.item_cgst_amount|money}}</td><td class="num">{{it.item_sgst_amount|money}}</td>
      {% endif %}
    </tr>
    {% endfor %}
  </table>
</div>
{% if not is_dv %}
<div class="card">
  <div class="row">
    <div class="pill">Subtotal: <b>{{settings.currency_symbol}}{{bill.sub_total|money}}</b></div>
    <div class="pill">CGST: <b>{{settings.currency_symbol}}{{bill.cgst_amount|money}}</b></div>
    <div class="pill">SGST: <b>{{settings.currency_symbol}}{{bill.sgst_amount|money}}</b></div>
    <div class="pill">Total: <b>{{settings.currency_symbol}}{{bill.total_amount|money}}</b></div>
    {% if bill.type == "sales-bill" %}<div class="pill">As estimate: <b>{{settings.currency_symbol}}{{estimate_totals.total_amount|money}}</b></div>{% endif %}
  </div>
</div>
{% endif %}
{% if bill.notes %}<div class="card"><b>Notes</b><p>{{bill.notes}}</p></div>{% endif %}
<div class="row">
  <a class="btn" href="/bills/{{bill.id}}/pdf">Download PDF</a>
  {% if bill.type == "sales-bill" %}<a class="btn2" href="/bills/{{bill.id}}/pdf?estimate=1">Estimate PDF</a>{% endif %}
  <a class="btn2" href="/bills/{{bill.id}}/edit">Edit</a>
  <form method="post" action="/bills/{{bill.id}}/delete"><button class="btn2" type="submit">Delete</button></form>
</div>
{% endblock %}
"""

TEMPLATES["period_form.html"] = """
<form method="get" action="{{action}}" class="row">
  {% if kind %}<input type="hidden" name="report" value="{{kind}}">{% endif %}
  <select name="period" style="width:120px">
    {% for p in ("month", "year", "custom") %}<option {% if p == args.period %}selected{% endif %}>{{p}}</option>{% endfor %}
  </select>
  <select name="month" style="width:140px">
    {% for num, label in months %}<option value="{{num}}" {% if num == args.month %}selected{% endif %}>{{label}}</option>{% endfor %}
  </select>
  <select name="year" style="width:100px">
    {% for y in years %}<option {% if y == args.year %}selected{% endif %}>{{y}}</option>{% endfor %}
  </select>
  <input type="date" name="start" value="{{args.start or ''}}" style="width:160px">
  <input type="date" name="end" value="{{args.end or ''}}" style="width:160px">
  <button class="btn2" type="submit">Apply</button>
</form>
"""

TEMPLATES["gst_report.html"] = """
{% extends "base.html" %}
{% block body %}
<div class="card">{% include "period_form.html" %}</div>
<div class="card">
  <h3>{{report_title}}</h3>
  <table>
    <tr><th>Date</th><th>Bill No.</th><th>Customer</th><th class="num">Taxable</th><th class="num">CGST</th><th class="num">SGST</th><th class="num">Total Tax</th></tr>
    {% for r in report.rows %}
    <tr>
      <td>{{r.date|dmy}}</td><td>{{r.bill_number}}</td><td>{{r.customer_name}}</td>
      <td class="num">{{r.taxable|money}}</td><td class="num">{{r.cgst|money}}</td>
      <td class="num">{{r.sgst|money}}</td><td class="num">{{r.total_tax|money}}</td>
    </tr>
    {% else %}
    <tr><td colspan="7">No sales bills in this period.</td></tr>
    {% endfor %}
    <tr>
      <th colspan="3">Total</th>
      <th class="num">{{report.totals.taxable|money}}</th><th class="num">{{report.totals.cgst|money}}</th>
      <th class="num">{{report.totals.sgst|money}}</th><th class="num">{{report.totals.total_tax|money}}</th>
    </tr>
  </table>
</div>
{% endblock %}
"""

TEMPLATES["reports.html"] = """
{% extends "base.html" %}
{% block body %}
<div class="card">
  <div class="row">
    <a class="{{ 'btn' if report == 'sales' else 'btn2' }}" href="/reports?report=sales">Sales</a>
    {% if settings.enable_purchase %}<a class="{{ 'btn' if report == 'purchase' else 'btn2' }}" href="/reports?report=purchase">Purchase</a>{% endif %}
  </div>
</div>
<div class="card">{% include "period_form.html" %}</div>
<div class="card">
  <h3>{{report_title}}</h3>
  <p><a class="btn2" href="/reports/export.csv?report={{report}}&period={{args.period}}&year={{args.year or ''}}&month={{args.month or ''}}&start={{args.start or ''}}&end={{args.end or ''}}">Export CSV</a></p>
  <table>
  {% if report == "sales" %}
    <tr><th>Date</th><th>Product</th><th>HSN</th><th>Bill No.</th><th class="num">Taxable</th><th class="num">CGST</th><th class="num">SGST</th><th class="num">Total Tax</th></tr>
    {% for r in rows %}
    <tr>
      <td>{{r.bill_date|dmy}}</td><td>{{r.name}}</td><td>{{r.hsn_code}}</td><td>{{r.bill_number}}</td>
      <td class="num">{{r.amount|money}}</td><td class="num">{{r.item_cgst_amount|money}}</td>
      <td class="num">{{r.item_sgst_amount|money}}</td><td class="num">{{r.total_tax|money}}</td>
    </tr>
    {% endfor %}
    <tr>
      <th colspan="4">Total</th><th class="num">{{totals.taxable|money}}</th><th class="num">{{totals.cgst|money}}</th>
      <th class="num">{{totals.sgst|money}}</th><th class="num">{{totals.total_tax|money}}</th>
    </tr>
  {% else %}
    <tr><th>Date</th><th>Product</th><th>Material</th><th>Bill No.</th><th class="num">Qty/Wt</th><th class="num">Rate</th><th class="num">Amount</th></tr>
    {% for r in rows %}
    <tr>
      <td>{{r.bill_date|dmy}}</td><td>{{r.name}}</td><td>{{r.valuable_name}}</td><td>{{r.bill_number}}</td>
      <td class="num">{{r.weight_or_quantity}} {{r.unit}}</td><td class="num">{{r.rate|money}}</td>
      <td class="num">{{r.amount|money}}</td>
    </tr>
    {% endfor %}
    <tr><th colspan="6">Total</th><th class="num">{{totals.total_amount|money}}</th></tr>
  {% endif %}
  </table>
</div>
{% endblock %}
"""
