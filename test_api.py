import pytest
from decimal import Decimal

from stockroom import create_app, db
from stockroom.context import get_services

JSON = {'Accept': 'application/json'}


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        get_services().auth.register('admin', 'admin123')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    client = app.test_client()
    resp = client.post('/login', data={'username': 'admin', 'password': 'admin123'})
    assert resp.status_code == 302
    return client


@pytest.fixture
def anon(app):
    return app.test_client()


def product_count(app):
    with app.app_context():
        return len(get_services().products.list())


def add(client, **fields):
    resp = client.post('/products', json=fields)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()['product']


# ── Authentication gate ───────────────────────────────────────────

def test_unauthenticated_api_post_is_rejected_without_writing(anon, app):
    resp = anon.post('/products', json={'name': 'Pen', 'price': '1.50', 'quantity': 10})
    assert resp.status_code == 401
    assert resp.get_json() == {'success': False, 'error': 'Not authenticated'}
    assert product_count(app) == 0


def test_unauthenticated_form_post_redirects_without_writing(anon, app):
    resp = anon.post('/products', data={'name': 'Pen', 'price': '1.50'})
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/login')
    assert product_count(app) == 0


def test_unauthenticated_navigation_redirects_to_login(anon):
    resp = anon.get('/products')
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/login')


def test_unauthenticated_xhr_gets_401(anon):
    resp = anon.get('/products', headers={'X-Requested-With': 'XMLHttpRequest'})
    assert resp.status_code == 401


@pytest.mark.parametrize('method, url', [
    ('get', '/products/1'),
    ('put', '/products/1'),
    ('post', '/products/1'),
    ('delete', '/products/1'),
    ('post', '/products/1/delete'),
])
def test_every_product_route_is_gated(anon, method, url):
    resp = getattr(anon, method)(url, headers=JSON)
    assert resp.status_code == 401


def test_forged_token_is_rejected(anon):
    with anon.session_transaction() as sess:
        sess['token'] = 'made-up'
    assert anon.get('/products', headers=JSON).status_code == 401


def test_home_redirects_to_products(anon):
    resp = anon.get('/')
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/products')


# ── JSON API ──────────────────────────────────────────────────────

def test_create_returns_product(client):
    product = add(client, name='Pen', price='1.50', quantity=10)
    assert product['name'] == 'Pen'
    assert product['price'] == '1.50'
    assert product['quantity'] == 10
    assert product['updated_at'] is None
    assert isinstance(product['id'], int)


def test_create_accepts_qty_alias_and_numbers(client):
    product = add(client, name='Eraser', price=0.5, qty=3)
    assert product['price'] == '0.50'
    assert product['quantity'] == 3


def test_create_validation_errors(client, app):
    resp = client.post('/products', json={'name': '  ', 'price': '1'})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body['success'] is False
    assert body['field'] == 'name'
    assert body['error']

    resp = client.post('/products', json={'name': 'Pen', 'price': '-2'})
    assert resp.status_code == 400
    assert resp.get_json()['field'] == 'price'

    assert product_count(app) == 0


def test_list_and_search(client):
    add(client, name='Widget', price='3.00')
    add(client, name='gadget', price='4.00')

    everything = client.get('/products', headers=JSON).get_json()
    assert [p['name'] for p in everything] == ['gadget', 'Widget']

    assert client.get('/products?q=', headers=JSON).get_json() == everything

    found = client.get('/products?q=ID', headers=JSON).get_json()
    assert [p['name'] for p in found] == ['Widget']


def test_get_single_product(client):
    product = add(client, name='Pen', price='1.50')
    resp = client.get(f"/products/{product['id']}", headers=JSON)
    assert resp.status_code == 200
    assert resp.get_json()['name'] == 'Pen'

    resp = client.get('/products/999', headers=JSON)
    assert resp.status_code == 404
    assert resp.get_json()['success'] is False


def test_update_via_put_and_post(client):
    product = add(client, name='Pen', price='1.50', quantity=10)
    url = f"/products/{product['id']}"

    resp = client.put(url, json={'name': 'Pen', 'price': '2.00', 'quantity': 8})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['success'] is True
    assert body['product']['id'] == product['id']
    assert body['product']['price'] == '2.00'
    assert body['product']['updated_at'] is not None

    resp = client.post(url, json={'name': 'Pencil', 'price': '0.75', 'quantity': 8})
    assert resp.get_json()['product']['name'] == 'Pencil'


def test_update_missing_product_is_404(client):
    resp = client.put('/products/999', json={'name': 'Pen', 'price': '1'})
    assert resp.status_code == 404
    assert resp.get_json() == {'success': False, 'error': 'Product not found.'}


def test_update_validation_error(client):
    product = add(client, name='Pen', price='1.50')
    resp = client.put(f"/products/{product['id']}", json={'name': 'Pen', 'price': 'lots'})
    assert resp.status_code == 400
    assert resp.get_json()['field'] == 'price'


def test_delete_is_idempotent(client):
    product = add(client, name='Pen', price='1.50')
    url = f"/products/{product['id']}"

    assert client.delete(url).get_json() == {'success': True}
    assert client.delete(url).get_json() == {'success': True}
    assert client.post(url + '/delete', json={}).get_json() == {'success': True}
    assert client.get('/products', headers=JSON).get_json() == []


def test_pen_scenario(client):
    pen = add(client, name='Pen', price=1.50, quantity=10)

    rows = client.get('/products', headers=JSON).get_json()
    assert len(rows) == 1
    assert Decimal(rows[0]['price']) == Decimal('1.50')

    client.put(f"/products/{pen['id']}", json={'name': 'Pen', 'price': 2.00, 'quantity': 8})
    rows = client.get('/products', headers=JSON).get_json()
    assert Decimal(rows[0]['price']) == Decimal('2.00')
    assert rows[0]['quantity'] == 8

    client.delete(f"/products/{pen['id']}")
    assert client.get('/products', headers=JSON).get_json() == []


# ── Pages ─────────────────────────────────────────────────────────

def test_product_page_lists_with_two_decimals(client):
    add(client, name='Pen', price='1.5', quantity=10)
    resp = client.get('/products')
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert 'Pen' in html
    assert '1.50' in html
    assert 'admin' in html   # signed-in user in the header


def test_page_search_keeps_query(client):
    add(client, name='Widget', price='1')
    add(client, name='gadget', price='1')
    html = client.get('/products?q=wid').get_data(as_text=True)
    assert 'Widget' in html
    assert 'gadget' not in html
    assert 'value="wid"' in html


def test_form_create_redirects(client, app):
    resp = client.post('/products', data={'name': 'Pen', 'price': '1.50', 'quantity': '10'})
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/products')
    assert product_count(app) == 1


def test_form_create_shows_inline_error(client, app):
    resp = client.post('/products', data={'name': '', 'price': '1.50'})
    assert resp.status_code == 200
    assert b'Product name is required.' in resp.data
    assert product_count(app) == 0


def test_new_and_edit_forms(client):
    assert client.get('/products/new').status_code == 200

    product = add(client, name='Pen', price='1.5', quantity=4)
    resp = client.get(f"/products/{product['id']}/edit")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert 'value="Pen"' in html
    assert 'value="1.50"' in html

    assert client.get('/products/999/edit').status_code == 404


def test_form_update_and_delete(client, app):
    product = add(client, name='Pen', price='1.50')

    resp = client.post(f"/products/{product['id']}", data={'name': 'Pen', 'price': '3', 'quantity': '1'})
    assert resp.status_code == 302
    with app.app_context():
        assert get_services().products.get(product['id']).price == Decimal('3.00')

    resp = client.post(f"/products/{product['id']}/delete")
    assert resp.status_code == 302
    assert product_count(app) == 0


# ── Store failures ────────────────────────────────────────────────

def test_store_error_is_generic_and_does_not_break_later_requests(client, app):
    with app.app_context():
        db.drop_all()

    resp = client.get('/products', headers=JSON)
    assert resp.status_code == 500
    body = resp.get_json()
    assert body == {'success': False, 'error': 'A database error occurred.'}
    assert 'no such table' not in resp.get_data(as_text=True)

    with app.app_context():
        db.create_all()
    # Session token lives outside the database, so the client is still signed in
    assert client.get('/products', headers=JSON).status_code == 200


def test_store_error_page_renders_for_signed_in_browser(client, app):
    with app.app_context():
        db.drop_all()

    resp = client.get('/products')
    assert resp.status_code == 500
    html = resp.get_data(as_text=True)
    assert 'Server error' in html
    assert 'A database error occurred.' in html
    assert 'no such table' not in html


# ── Column limits ─────────────────────────────────────────────────

def test_oversized_quantity_is_a_validation_error(client, app):
    resp = client.post('/products', json={'name': 'Pen', 'price': '1.50', 'quantity': 2**64})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body['field'] == 'quantity'
    assert body['error'] == 'Quantity is too large.'
    assert product_count(app) == 0
