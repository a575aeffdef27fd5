import pytest
from app.version import API_PREFIX
from factories import auth_header, make_user, make_vendor
from models.enums import Role


@pytest.fixture
def headers(app):
    customer = make_user(Role.CUSTOMER)
    vendor, _ = make_vendor()
    admin = make_user(Role.ADMIN)
    regional = make_user(Role.REGIONAL_ADMIN, district="Zomba")
    return {
        'customer': auth_header(customer),
        'vendor': auth_header(vendor),
        'admin': auth_header(admin),
        'regional': auth_header(regional),
    }


def test_blueprint_access(client, headers):
    # customer routes
    assert client.get(f"{API_PREFIX}/cart", headers=headers['customer']).status_code == 200
    assert client.get(f"{API_PREFIX}/cart", headers=headers['vendor']).status_code == 403

    # vendor routes
    assert client.get(f"{API_PREFIX}/vendor/orders", headers=headers['vendor']).status_code == 200
    assert client.get(f"{API_PREFIX}/vendor/orders", headers=headers['customer']).status_code == 403

    # admin routes
    assert client.get(f"{API_PREFIX}/admin/users", headers=headers['admin']).status_code == 200
    assert client.get(f"{API_PREFIX}/admin/users", headers=headers['regional']).status_code == 403

    # regional admin routes
    assert client.get(f"{API_PREFIX}/regional-admin/users", headers=headers['regional']).status_code == 200
    assert client.get(f"{API_PREFIX}/regional-admin/users", headers=headers['admin']).status_code == 403


def test_missing_token_is_401(client):
    for path in ("/cart", "/vendor/orders", "/admin/users", "/regional-admin/users", "/user/profile"):
        resp = client.get(f"{API_PREFIX}{path}")
        assert resp.status_code == 401
        assert resp.get_json()["success"] is False


def test_regional_admin_without_district_gets_400(client, app):
    regional = make_user(Role.REGIONAL_ADMIN, district=None)
    resp = client.get(f"{API_PREFIX}/regional-admin/vendors", headers=auth_header(regional))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "No district assigned to regional admin"


def test_public_catalog_needs_no_token(client):
    assert client.get(f"{API_PREFIX}/shop/products").status_code == 200
    assert client.get(f"{API_PREFIX}/shop/categories").status_code == 200
    assert client.get(f"{API_PREFIX}/categories").status_code == 401
