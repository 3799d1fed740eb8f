import pytest

from kitchen_ledger.core import dashboard
from kitchen_ledger.db.models import Customer, Sale, UserData


def _sale(sale_id, product_id, customer_id, quantity, total, day):
    return Sale(id=sale_id, product_id=product_id, customer_id=customer_id, quantity=quantity,
                sale_price_per_unit=total / quantity, total_sale=total, total_cost=total / 2,
                profit=total / 2, delivery_method="in_person", shipping_cost=0, total_charged=total,
                date=f"{day}T10:00:00+00:00")


@pytest.fixture
def shop(kitchen):
    kitchen.customers.extend([Customer(id="ana", name="Ana"), Customer(id="bo", name="Bo")])
    kitchen.sales.extend([
        _sale("s1", "loaf", "ana", 5, 20, "2026-03-02"),
        _sale("s2", "loaf", "bo", 1, 4, "2026-03-09"),
        _sale("s3", "loaf", "ana", 2, 8, "2025-12-31"),
    ])
    return kitchen


def test_summary_totals(shop):
    s = dashboard.summarize(shop)
    assert s["sales_total"] == pytest.approx(32)
    assert s["profit_total"] == pytest.approx(16)
    assert s["sales_count"] == 3
    assert s["inventory_value"] == pytest.approx(52)
    assert s["pantry_value"] == pytest.approx(20)
    assert s["monthly_fixed_costs"] == 100
    assert s["best_customer"]["name"] == "Ana"
    assert s["worst_customer"]["name"] == "Bo"
    assert s["best_product"]["quantity"] == 8
    assert s["raw_material_stock"]["kg"] == pytest.approx(11)


def test_summary_date_range_is_inclusive(shop):
    s = dashboard.summarize(shop, start="2026-03-02", end="2026-03-09")
    assert s["sales_count"] == 2
    assert s["sales_total"] == pytest.approx(24)


def test_summary_filters_by_customer(shop):
    s = dashboard.summarize(shop, customer_id="bo")
    assert s["sales_total"] == pytest.approx(4)
    assert s["best_customer"]["id"] == "bo"


def test_summary_with_no_sales(kitchen):
    s = dashboard.summarize(kitchen)
    assert s["best_product"] is None
    assert s["top_products"] == []


def test_daily_series_covers_range(shop):
    series = dashboard.sales_series(shop.sales, "day", "2026-03-01", "2026-03-10")
    assert len(series) == 10
    assert series[1] == {"name": "2026-03-02", "total": 20}


def test_weekday_series(shop):
    series = dashboard.sales_series(shop.sales, "week")
    assert [p["name"] for p in series] == dashboard.WEEKDAYS
    # 2026-03-02 and 2026-03-09 are Mondays
    assert series[0]["total"] == pytest.approx(24)


def test_month_and_year_series(shop):
    months = dashboard.sales_series(shop.sales, "month")
    assert months[2] == {"name": "Mar", "total": 24}
    years = {p["name"]: p["total"] for p in dashboard.sales_series(shop.sales, "year")}
    assert years["2025"] == 8


def test_unknown_granularity(shop):
    with pytest.raises(ValueError):
        dashboard.sales_series(shop.sales, "hour")


def test_series_skip_sales_without_a_date(shop):
    undated = UserData.from_dict({"sales": [{"id": "s", "product_id": "p", "quantity": "2", "total_sale": "10"}]})
    sales = shop.sales + undated.sales
    assert dashboard.sales_series(sales, "week")[0]["total"] == pytest.approx(24)
    assert dashboard.sales_series(sales, "month")[2]["total"] == pytest.approx(24)
    years = [p["name"] for p in dashboard.sales_series(sales, "year")]
    assert "" not in years
