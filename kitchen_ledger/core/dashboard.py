"""Headline metrics, rankings and sales series for the dashboard.

All functions are read-only over a UserData snapshot.  Date filters compare
the YYYY-MM-DD prefix of each record's ISO timestamp, inclusive at both ends.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Optional

from kitchen_ledger.core.fixed_costs import monthly_total
from kitchen_ledger.core.materials import inventory_value
from kitchen_ledger.core.pantry import pantry_value
from kitchen_ledger.core.waste import waste_value
from kitchen_ledger.db.models import UserData, find_by_id

GRANULARITIES = ["day", "week", "month", "year"]
WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _in_range(iso: str, start: Optional[str], end: Optional[str]) -> bool:
    day = iso[:10]
    return (not start or day >= start) and (not end or day <= end)


def _sale_day(sale) -> Optional[date]:
    try:
        return date.fromisoformat(sale.date[:10])
    except ValueError:
        return None


def filter_sales(
    sales: list,
    start: Optional[str] = None,
    end: Optional[str] = None,
    customer_id: Optional[str] = None,
    product_id: Optional[str] = None,
) -> list:
    return [
        s for s in sales
        if _in_range(s.date, start, end)
        and (not customer_id or s.customer_id == customer_id)
        and (not product_id or s.product_id == product_id)
    ]


def _rank(totals: dict) -> list[tuple[str, float]]:
    return sorted(((k, v) for k, v in totals.items() if v > 0), key=lambda kv: kv[1], reverse=True)


def summarize(
    data: UserData,
    start: Optional[str] = None,
    end: Optional[str] = None,
    customer_id: Optional[str] = None,
    product_id: Optional[str] = None,
) -> dict:
    """Return the headline metrics for the filtered period."""
    sales = filter_sales(data.sales, start, end, customer_id, product_id)
    pantry = [p for p in data.sellable_products if not product_id or p.id == product_id]
    waste = [
        r for r in data.waste_records
        if _in_range(r.date, start, end) and (not product_id or r.item_id == product_id)
    ]

    units_by_product: dict[str, float] = defaultdict(float)
    revenue_by_customer: dict[str, float] = defaultdict(float)
    for s in sales:
        units_by_product[s.product_id] += s.quantity
        revenue_by_customer[s.customer_id] += s.total_sale
    products = _rank(units_by_product)
    customers = _rank(revenue_by_customer)

    def product_entry(pair):
        product = find_by_id(data.sellable_products, pair[0])
        return {"id": pair[0], "name": product.name if product else "Unknown", "quantity": pair[1]}

    def customer_entry(pair):
        customer = find_by_id(data.customers, pair[0])
        return {"id": pair[0], "name": customer.name if customer else "Unknown", "total": pair[1]}

    stock_by_unit = {"kg": 0.0, "l": 0.0, "und": 0.0}
    for m in data.raw_materials:
        stock_by_unit[m.consumption_unit if m.consumption_unit in stock_by_unit else "und"] += m.stock

    return {
        "inventory_value": inventory_value(data.raw_materials),
        "pantry_value": pantry_value(pantry),
        "monthly_fixed_costs": monthly_total(data.fixed_costs),
        "sales_total": sum(s.total_sale for s in sales),
        "profit_total": sum(s.profit for s in sales),
        "sales_count": len(sales),
        "waste_value": waste_value(data, waste),
        "best_product": product_entry(products[0]) if products else None,
        "worst_product": product_entry(products[-1]) if products else None,
        "top_products": [product_entry(p) for p in products[:5]],
        "best_customer": customer_entry(customers[0]) if customers else None,
        "worst_customer": customer_entry(customers[-1]) if customers else None,
        "raw_material_stock": stock_by_unit,
    }


def sales_series(
    sales: list,
    granularity: str = "day",
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> list[dict]:
    """Bucket sale totals for charting.

    day: every date between start and end (default: the current month).
    week: totals per weekday, Monday first.  month: per calendar month.
    year: every year with sales, plus the current one.
    """
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown granularity '{granularity}'")
    # Records without a readable date cannot be bucketed
    sales = [s for s in filter_sales(sales, start, end) if _sale_day(s) is not None]
    totals: dict[str, float] = {}

    if granularity == "day":
        today = date.today()
        first = date.fromisoformat(start) if start else today.replace(day=1)
        if end:
            last = date.fromisoformat(end)
        else:
            next_month = (today.replace(day=28) + timedelta(days=4)).replace(day=1)
            last = next_month - timedelta(days=1)
        day = first
        while day <= last:
            totals[day.isoformat()] = 0.0
            day += timedelta(days=1)
        for s in sales:
            key = s.date[:10]
            if key in totals:
                totals[key] += s.total_sale
    elif granularity == "week":
        totals = {d: 0.0 for d in WEEKDAYS}
        for s in sales:
            totals[WEEKDAYS[_sale_day(s).weekday()]] += s.total_sale
    elif granularity == "month":
        totals = {m: 0.0 for m in MONTHS}
        for s in sales:
            totals[MONTHS[_sale_day(s).month - 1]] += s.total_sale
    else:
        years = {str(date.today().year)} | {s.date[:4] for s in sales}
        totals = {y: 0.0 for y in sorted(years)}
        for s in sales:
            totals[s.date[:4]] += s.total_sale

    return [{"name": k, "total": v} for k, v in totals.items()]
