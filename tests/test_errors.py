import importlib
import sys
import pytest


def load_app(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'testing')
    for module in ['main', 'app.config']:
        if module in sys.modules:
            del sys.modules[module]
    main = importlib.import_module('main')
    return main.app


@pytest.fixture()
def test_client(monkeypatch):
    app = load_app(monkeypatch)
    app.config.update(TESTING=True)
    return app.test_client()


def test_404_json_envelope(test_client):
    resp = test_client.get('/no/such/route')
    assert resp.status_code == 404
    data = resp.get_json()
    assert data['success'] is False
    assert isinstance(data.get('error'), str)


def test_unexpected_500_json_envelope(test_client):
    resp = test_client.get('/__boom')
    assert resp.status_code == 500
    data = resp.get_json()
    assert data['success'] is False
    assert 'boom' not in data['error']
    assert 'RuntimeError' not in data['error']


def test_domain_error_carries_status_and_details(test_client):
    resp = test_client.get('/__conflict')
    assert resp.status_code == 400
    assert resp.get_json() == {
        'success': False,
        'error': 'already there',
        'details': {'field': 'name'},
    }


def test_ok_helper_endpoint(test_client):
    resp = test_client.get('/__ok')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data == {
        'success': True,
        'data': {'ping': 'pong'}
    }


def test_invalid_json_body_is_rejected(test_client):
    resp = test_client.post(
        '/api/v1/auth/login',
        data='{not json',
        headers={'Content-Type': 'application/json'},
    )
    assert resp.status_code == 400
    assert resp.get_json()['success'] is False


def test_internal_domain_error_hides_message(test_client):
    resp = test_client.get('/__internal')
    assert resp.status_code == 500
    assert resp.get_json() == {
        'success': False,
        'error': 'An unexpected error occurred. Please try again later.',
    }
