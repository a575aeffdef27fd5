import pytest
from app.version import API_PREFIX
from factories import auth_header, make_order, make_product, make_user, make_vendor
from models import db
from models.enums import OrderStatus, Role
from models.order import Order


@pytest.fixture
def marketplace(app):
    """Two vendors sharing one order, plus an order only the second vendor sees."""
    alpha, alpha_shop = make_vendor(first_name='Alpha')
    beta, beta_shop = make_vendor(first_name='Beta')
    customer = make_user(Role.CUSTOMER, first_name='Grace', last_name='Tembo', email='grace@example.com')
    pa = make_product(alpha, alpha_shop, price='10.00')
    pb = make_product(beta, beta_shop, price='25.50')
    shared = make_order(customer, [(pa, 2), (pb, 1)])
    beta_only = make_order(customer, [(pb, 4)])
    return {
        'alpha': alpha, 'beta': beta, 'customer': customer,
        'shared': shared, 'beta_only': beta_only,
    }


def _patch_status(client, vendor, order_id, status):
    return client.patch(
        f"{API_PREFIX}/vendor/orders/{order_id}/status",
        json={'status': status},
        headers=auth_header(vendor),
    )


def test_vendor_sees_only_own_lines_and_total(client, marketplace):
    data = client.get(f"{API_PREFIX}/vendor/orders", headers=auth_header(marketplace['alpha'])).get_json()['data']
    assert [o['id'] for o in data] == [marketplace['shared'].id]
    order = data[0]
    assert order['totalAmount'] == 20.0
    assert [i['vendorId'] for i in order['items']] == [marketplace['alpha'].id]
    assert order['status'] == 'pending'
    assert order['customer']['email'] == 'grace@example.com'
    assert order['shippingAddress'] == {'district': 'Lilongwe'}


def test_vendor_order_list_status_and_search(client, marketplace):
    hdr = auth_header(marketplace['beta'])
    _patch_status(client, marketplace['beta'], marketplace['beta_only'].id, 'shipped')

    data = client.get(f"{API_PREFIX}/vendor/orders", query_string={'status': 'SHIPPED'}, headers=hdr).get_json()['data']
    assert [o['id'] for o in data] == [marketplace['beta_only'].id]

    data = client.get(f"{API_PREFIX}/vendor/orders", query_string={'status': 'all'}, headers=hdr).get_json()['data']
    assert len(data) == 2

    data = client.get(f"{API_PREFIX}/vendor/orders", query_string={'search': 'TEMBO'}, headers=hdr).get_json()['data']
    assert len(data) == 2
    data = client.get(f"{API_PREFIX}/vendor/orders", query_string={'search': 'nobody'}, headers=hdr).get_json()['data']
    assert data == []


def test_update_status_any_casing(client, app, marketplace):
    resp = _patch_status(client, marketplace['alpha'], marketplace['shared'].id, 'Delivered')
    assert resp.status_code == 200
    body = resp.get_json()['data']
    assert body['status'] == 'delivered'
    assert body['totalAmount'] == 20.0
    assert body['shippingAddress'] == {'district': 'Lilongwe'}
    with app.app_context():
        assert db.session.get(Order, marketplace['shared'].id).status == OrderStatus.DELIVERED


def test_update_status_can_move_backwards(client, marketplace):
    order_id = marketplace['shared'].id
    assert _patch_status(client, marketplace['alpha'], order_id, 'delivered').status_code == 200
    assert _patch_status(client, marketplace['alpha'], order_id, 'pending').status_code == 200


def test_update_status_invalid(client, app, marketplace):
    resp = _patch_status(client, marketplace['alpha'], marketplace['shared'].id, 'teleported')
    assert resp.status_code == 400
    with app.app_context():
        assert db.session.get(Order, marketplace['shared'].id).status == OrderStatus.PENDING


def test_update_status_foreign_order_is_not_found(client, app, marketplace):
    resp = _patch_status(client, marketplace['alpha'], marketplace['beta_only'].id, 'shipped')
    assert resp.status_code == 404
    with app.app_context():
        assert db.session.get(Order, marketplace['beta_only'].id).status == OrderStatus.PENDING


def test_customer_cannot_update_status(client, marketplace):
    resp = _patch_status(client, marketplace['customer'], marketplace['shared'].id, 'shipped')
    assert resp.status_code == 403


def test_recent_orders_and_stats(client, marketplace):
    hdr = auth_header(marketplace['beta'])
    recent = client.get(f"{API_PREFIX}/vendor/orders/recent", query_string={'limit': 1}, headers=hdr).get_json()['data']
    assert len(recent) == 1

    stats = client.get(f"{API_PREFIX}/vendor/stats", headers=hdr).get_json()['data']
    assert stats['totalOrders'] == 2
    assert stats['pendingOrders'] == 2
    assert stats['totalRevenue'] == 127.5
    assert stats['totalProducts'] == 1
