from datetime import datetime, timedelta

import pytest
from app.services.order_status import growth_percent, month_starts
from app.version import API_PREFIX
from factories import auth_header, make_order, make_product, make_user, make_vendor
from models import db
from models.enums import Role


@pytest.fixture
def sales(app):
    vendor, shop = make_vendor(first_name='Seller')
    other, other_shop = make_vendor(first_name='Other')
    mat = make_product(vendor, shop, price='10.00', name='Reed mat')
    pot = make_product(vendor, shop, price='25.00', name='Clay pot')
    make_product(vendor, shop, stock=0, name='Old stock')
    lamp = make_product(other, other_shop, price='99.00', name='Lamp')
    customer = make_user(Role.CUSTOMER)
    current = make_order(customer, [(mat, 2), (pot, 1), (lamp, 1)])
    earlier = make_order(customer, [(mat, 1)])
    return {'vendor': vendor, 'current': current, 'earlier': earlier}


def _analytics(client, vendor):
    resp = client.get(f"{API_PREFIX}/vendor/analytics", headers=auth_header(vendor))
    assert resp.status_code == 200
    return resp.get_json()['data']


def test_totals_only_count_own_lines(client, sales):
    data = _analytics(client, sales['vendor'])
    assert data['totalRevenue'] == 55.0
    assert data['totalOrders'] == 2
    assert data['averageOrderValue'] == 27.5
    assert data['totalProducts'] == 2


def test_top_products_ranked_by_units_sold(client, sales):
    top = _analytics(client, sales['vendor'])['topProducts']
    assert [(p['name'], p['sales']) for p in top] == [('Reed mat', 3), ('Clay pot', 1)]
    assert top[0]['price'] == 10.0


def test_monthly_series_and_growth_use_real_orders(client, sales):
    last_month = datetime.utcnow().replace(day=1) - timedelta(days=1)
    sales['earlier'].created_at = last_month.replace(day=15, hour=12)
    db.session.commit()

    data = _analytics(client, sales['vendor'])
    months = data['monthlyData']
    assert len(months) == 6
    assert (months[-1]['revenue'], months[-1]['orders']) == (45.0, 1)
    assert (months[-2]['revenue'], months[-2]['orders']) == (10.0, 1)
    assert months[-2]['month'] == last_month.strftime('%b')
    assert all(m['orders'] == 0 for m in months[:-2])
    growth = data['growthMetrics']
    assert growth['revenueGrowth'] == 350.0
    assert growth['ordersGrowth'] == 0.0
    assert growth['aovGrowth'] == 350.0


def test_vendor_without_orders(client, app):
    vendor, _ = make_vendor(first_name='Quiet')
    data = _analytics(client, vendor)
    assert data['totalRevenue'] == 0.0
    assert data['averageOrderValue'] == 0.0
    assert data['topProducts'] == []
    assert data['growthMetrics']['revenueGrowth'] == 0.0


def test_customer_cannot_read_analytics(client, sales):
    customer = make_user(Role.CUSTOMER)
    assert client.get(f"{API_PREFIX}/vendor/analytics", headers=auth_header(customer)).status_code == 403


def test_month_starts_cross_year_boundary():
    starts = month_starts(datetime(2026, 2, 10), 4)
    assert [(d.year, d.month) for d in starts] == [(2025, 11), (2025, 12), (2026, 1), (2026, 2)]


@pytest.mark.parametrize('current, previous, expected', [
    (0, 0, 0.0),
    (5, 0, 100.0),
    (15, 10, 50.0),
    (5, 10, -50.0),
])
def test_growth_percentages(current, previous, expected):
    assert growth_percent(current, previous) == expected
