"""
Integration tests for the order wizard endpoints.
Requests go through the real httpx client into the in-memory backend.
"""

from retail_panel.services.order_submission_service import SubmissionState


def open_wizard(client):
    response = client.post('/orders/wizard/open')
    assert response.status_code == 200
    return response.get_json()['wizard']


def fill_draft(client):
    client.post('/orders/wizard/selection', json={'store_id': 7, 'user_id': '3'})
    client.post('/orders/wizard/cart', json={'product_id': 1, 'delta': 1})
    response = client.post('/orders/wizard/cart', json={'product_id': 1})
    return response.get_json()['wizard']


def test_open_returns_adapted_catalog(client):
    wizard = open_wizard(client)

    assert wizard['is_open'] is True
    assert wizard['state'] == 'IDLE'
    assert wizard['catalog']['stores'] == [{'id': 7, 'label': 'Downtown'}]
    assert wizard['catalog']['users'] == [{'id': 3, 'label': 'mara'}]
    assert wizard['cart'] == {}
    assert wizard['total'] == '0.00'
    assert wizard['can_submit'] is False


def test_running_total_follows_cart(client):
    open_wizard(client)
    client.post('/orders/wizard/cart', json={'product_id': 1, 'delta': 2})
    response = client.post('/orders/wizard/cart', data={'product_id': '2', 'delta': '1'})

    wizard = response.get_json()['wizard']
    assert wizard['cart'] == {'1': 2, '2': 1}
    assert wizard['total'] == '25.00'

    response = client.post('/orders/wizard/cart', json={'product_id': 1, 'delta': -2})
    assert response.get_json()['wizard']['cart'] == {'2': 1}


def test_submit_creates_order_and_resets(client, backend):
    """Test the full flow: open, fill, submit, list refreshed, draft reset."""
    open_wizard(client)
    wizard = fill_draft(client)
    assert wizard['total'] == '20.00'

    response = client.post('/orders/wizard/submit')
    assert response.status_code == 201
    body = response.get_json()

    assert backend.data['orders'][-1]['items'] == [{'product': 1, 'quantity': 2}]
    assert backend.data['orders'][-1]['store_id'] == 7
    assert backend.data['orders'][-1]['user_id'] == 3
    assert body['order']['items'] == [{'product': 1, 'quantity': 2}]
    assert [row['id'] for row in body['orders']] == [body['order']['id']]
    assert body['wizard']['cart'] == {}
    assert body['wizard']['store_id'] is None
    assert body['wizard']['user_id'] is None
    assert body['wizard']['is_open'] is False


def test_submit_without_selection_is_rejected(client, backend):
    open_wizard(client)
    client.post('/orders/wizard/cart', json={'product_id': 1})

    response = client.post('/orders/wizard/submit')
    assert response.status_code == 400
    assert response.get_json()['status'] == 'error'
    assert backend.posted('orders') == []


def test_submit_failure_preserves_draft(client, backend):
    open_wizard(client)
    before = fill_draft(client)
    backend.failing.add(('POST', 'orders'))

    response = client.post('/orders/wizard/submit')
    assert response.status_code == 502
    assert 'Failed to create order' in response.get_json()['message']

    after = client.get('/orders/wizard').get_json()['wizard']
    assert after['cart'] == before['cart']
    assert after['store_id'] == 7 and after['user_id'] == 3
    assert after['is_open'] is True
    assert after['state'] == 'IDLE'


def test_catalog_failure_opens_empty_wizard(client, backend):
    backend.failing.add(('GET', 'stores'))

    wizard = open_wizard(client)
    assert wizard['catalog'] == {'products': [], 'stores': [], 'users': []}


def test_invalid_cart_payload(client):
    open_wizard(client)
    response = client.post('/orders/wizard/cart', json={'product_id': 'abc'})
    assert response.status_code == 400


def test_close_discards_draft(client):
    open_wizard(client)
    fill_draft(client)

    wizard = client.post('/orders/wizard/close').get_json()['wizard']
    assert wizard['is_open'] is False
    assert wizard['cart'] == {}


def test_sessions_are_isolated(app):
    first, second = app.test_client(), app.test_client()
    open_wizard(first)
    open_wizard(second)
    first.post('/orders/wizard/cart', json={'product_id': 1})

    assert second.get('/orders/wizard').get_json()['wizard']['cart'] == {}


def panel_for(app, client):
    with client.session_transaction() as sess:
        token = sess['panel_token']
    return app.extensions['panel_sessions'].get(token)


def test_submit_while_in_flight_is_ignored(app, client, backend):
    """Test that a second confirmation during a pending submission sends nothing."""
    open_wizard(client)
    fill_draft(client)
    panel_for(app, client).wizard.submitter.state = SubmissionState.SUBMITTING
    posted_before = list(backend.posted('orders'))

    response = client.post('/orders/wizard/submit')

    assert response.status_code == 409
    assert response.get_json()['status'] == 'ignored'
    assert backend.posted('orders') == posted_before
    assert b'panel_orders_submitted_total{outcome="ignored"}' in client.get('/metrics').data

    after = client.get('/orders/wizard').get_json()['wizard']
    assert after['cart'] == {'1': 2}
    assert after['is_open'] is True


def test_non_object_json_payload_is_rejected(client):
    open_wizard(client)

    response = client.post('/orders/wizard/cart', json=[1])
    assert response.status_code == 400
    assert response.get_json()['status'] == 'error'

    response = client.post('/orders/wizard/selection', json='7')
    assert response.status_code == 400


def test_store_zero_submits(client, backend):
    backend.data['stores'].append({'store_id': 0, 'store_location': 'Warehouse'})
    open_wizard(client)
    client.post('/orders/wizard/selection', data={'store_id': '0', 'user_id': '3'})
    client.post('/orders/wizard/cart', json={'product_id': 2})

    response = client.post('/orders/wizard/submit')

    assert response.status_code == 201
    assert backend.data['orders'][-1]['store_id'] == 0


class TestPanelSessions:
    """Tests for per-operator session lifetime."""

    def test_metrics_scrapes_create_no_sessions(self, app):
        registry = app.extensions['panel_sessions']
        for _ in range(5):
            assert app.test_client().get('/metrics').status_code == 200
        assert len(registry) == 0

    def test_unknown_routes_create_no_sessions(self, app):
        app.test_client().get('/nope')
        assert len(app.extensions['panel_sessions']) == 0

    def test_panel_view_creates_one_session_per_operator(self, app, client):
        open_wizard(client)
        client.get('/orders/wizard')
        client.post('/orders/wizard/close')
        assert len(app.extensions['panel_sessions']) == 1

        app.test_client().get('/orders/wizard')
        assert len(app.extensions['panel_sessions']) == 2
