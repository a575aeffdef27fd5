from datetime import datetime, timedelta

import pytest
from app.version import API_PREFIX
from factories import auth_header, make_category, make_order, make_product, make_user, make_vendor
from models import db
from models.enums import OrderStatus, Role


@pytest.fixture
def platform(app):
    food = make_category('Food')
    lilongwe, lilongwe_shop = make_vendor(district='Lilongwe', first_name='Open')
    zomba, zomba_shop = make_vendor(district='Zomba', first_name='Lake')
    make_vendor(district='Zomba', approved=False, first_name='Wait')
    make_vendor(district='Zomba', rejected=True, first_name='Gone')

    rice = make_product(lilongwe, lilongwe_shop, price='10.00', category=food, name='Rice')
    beans = make_product(lilongwe, lilongwe_shop, price='5.00', category=food, name='Beans')
    make_product(lilongwe, lilongwe_shop, stock=0, category=food, name='Sold out')
    fish = make_product(zomba, zomba_shop, price='10.00', name='Chambo')

    local = make_user(Role.CUSTOMER, district='Zomba')
    neighbour = make_user(Role.CUSTOMER, district='Zomba')
    visitor = make_user(Role.CUSTOMER, district='Blantyre')
    delivered = make_order(local, [(fish, 3)], status=OrderStatus.DELIVERED)
    make_order(neighbour, [(rice, 1)], status=OrderStatus.PENDING)
    make_order(visitor, [(beans, 1)], status=OrderStatus.CANCELLED)
    return {'zomba_shop': zomba_shop, 'delivered': delivered}


def test_admin_dashboard_totals(client, platform):
    admin = make_user(Role.ADMIN)
    resp = client.get(f"{API_PREFIX}/admin/dashboard", headers=auth_header(admin))
    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert data['totalVendors'] == 4
    assert data['pendingVendors'] == 1
    assert data['totalProducts'] == 3
    assert data['totalOrders'] == 3
    assert data['totalRevenue'] == 45.0
    assert data['platformFee'] == 4.5
    assert data['vendorDistribution'] == {'approved': 2, 'pending': 1, 'rejected': 1}
    assert data['orderStatus'] == {'delivered': 1, 'inProgress': 1, 'cancelled': 1}
    assert data['topCategories'][0] == {'category': 'Food', 'count': 2}


def test_admin_dashboard_activity_feed(client, platform):
    admin = make_user(Role.ADMIN)
    feed = client.get(f"{API_PREFIX}/admin/dashboard", headers=auth_header(admin)).get_json()['data']['recentActivity']
    assert len(feed) == 5
    assert {e['type'] for e in feed} <= {'vendor_registration', 'order_placed', 'product_listed'}
    assert all(set(e) == {'type', 'title', 'description', 'status', 'createdAt'} for e in feed)
    stamps = [e['createdAt'] for e in feed]
    assert stamps == sorted(stamps, reverse=True)


def test_platform_fee_rate_is_configurable(client, app, platform):
    app.config['PLATFORM_FEE_RATE'] = 0.2
    try:
        admin = make_user(Role.ADMIN)
        data = client.get(f"{API_PREFIX}/admin/dashboard", headers=auth_header(admin)).get_json()['data']
    finally:
        app.config['PLATFORM_FEE_RATE'] = 0.1
    assert data['platformFee'] == 9.0


@pytest.mark.parametrize('role', [Role.CUSTOMER, Role.VENDOR])
def test_admin_dashboard_requires_admin(client, platform, role):
    user = make_user(role)
    assert client.get(f"{API_PREFIX}/admin/dashboard", headers=auth_header(user)).status_code == 403


def test_regional_dashboard_is_district_scoped(client, platform):
    regional = make_user(Role.REGIONAL_ADMIN, district='Zomba')
    resp = client.get(f"{API_PREFIX}/regional-admin/dashboard", headers=auth_header(regional))
    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert data['district'] == 'Zomba'
    assert data['stats'] == {
        'totalUsers': 5,
        'totalCustomers': 2,
        'totalVendors': 3,
        'pendingVendors': 1,
        'approvedVendors': 1,
    }
    assert data['districtStats'] == {
        'totalOrders': 2,
        'totalRevenue': 30.0,
        'activeVendors': 1,
        'recentActivity': 5,
    }
    assert len(data['recentVendors']) == 3
    assert {v['status'] for v in data['recentVendors']} == {'approved', 'pending', 'rejected'}
    assert all(v['email'].endswith('@example.com') for v in data['recentVendors'])


def test_regional_dashboard_requires_district(client, platform):
    unassigned = make_user(Role.REGIONAL_ADMIN)
    resp = client.get(f"{API_PREFIX}/regional-admin/dashboard", headers=auth_header(unassigned))
    assert resp.status_code == 400


def test_admin_cannot_use_regional_dashboard(client, platform):
    admin = make_user(Role.ADMIN)
    assert client.get(f"{API_PREFIX}/regional-admin/dashboard", headers=auth_header(admin)).status_code == 403


def test_admin_analytics_current_month(client, platform):
    admin = make_user(Role.ADMIN)
    resp = client.get(f"{API_PREFIX}/admin/analytics", headers=auth_header(admin))
    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert data['totalRevenue'] == 30.0
    assert data['platformFee'] == 3.0
    assert data['totalOrders'] == 3
    assert data['activeVendors'] == 2
    assert data['pendingVendors'] == 1
    assert data['totalProducts'] == 4
    assert data['growthMetrics'] == {'revenueGrowth': 100.0, 'ordersGrowth': 100.0}
    assert len(data['monthlyData']) == 6
    assert {k: data['monthlyData'][-1][k] for k in ('revenue', 'orders', 'vendors')} == {
        'revenue': 30.0, 'orders': 3, 'vendors': 2,
    }
    assert [(v['name'], v['totalSales']) for v in data['topVendors']] == [("Lake's Shop", 30.0), ("Open's Shop", 15.0)]


def test_admin_analytics_growth_against_previous_month(client, platform):
    last_month = datetime.utcnow().replace(day=1) - timedelta(days=1)
    platform['delivered'].created_at = last_month.replace(day=10, hour=9)
    db.session.commit()

    admin = make_user(Role.ADMIN)
    data = client.get(f"{API_PREFIX}/admin/analytics", headers=auth_header(admin)).get_json()['data']
    assert data['totalRevenue'] == 0.0
    assert data['totalOrders'] == 2
    assert data['growthMetrics'] == {'revenueGrowth': -100.0, 'ordersGrowth': 100.0}
    assert data['monthlyData'][-2]['revenue'] == 30.0
    assert data['monthlyData'][-2]['vendors'] == 1


def test_admin_analytics_requires_admin(client, platform):
    regional = make_user(Role.REGIONAL_ADMIN, district='Zomba')
    assert client.get(f"{API_PREFIX}/admin/analytics", headers=auth_header(regional)).status_code == 403
