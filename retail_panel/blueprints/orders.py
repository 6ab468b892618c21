"""Orders blueprint: order list and the order-composition wizard (JSON)."""
from flask import Blueprint, request, jsonify, current_app, g
from typing import Any, Dict, Optional

from retail_panel.blueprints.metrics import (
    catalog_loads_total, order_deletions_total, orders_submitted_total, record_outcome
)
from retail_panel.exceptions import SubmissionError, ValidationError
from retail_panel.middleware import require_panel
from retail_panel.services.order_list_service import PresetConfirmation

orders_bp = Blueprint('orders', __name__, url_prefix='/orders')

TRUTHY = {'1', 'true', 'yes', 'on'}


def _api():
    """New backend client for this request (bound to the request's event loop)."""
    return current_app.extensions['panel_api_factory']()


def _payload() -> Dict[str, Any]:
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError('Invalid payload: expected a JSON object')
        return data
    return request.form.to_dict()


def _int_field(payload: Dict[str, Any], name: str, default=None) -> int:
    value = payload.get(name, default)
    if value is None:
        raise ValidationError(f'Missing {name}')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {name}: {value!r}')


def _order_to_dict(order) -> Optional[Dict[str, Any]]:
    if order is None:
        return None
    return {
        'id': order.id,
        'items': [{'product': line.product_id, 'quantity': line.quantity} for line in order.items],
        'store_id': order.store_id,
        'user_id': order.user_id,
        'status': getattr(order.status, 'value', order.status),
        'created_at': order.created_at.isoformat() if order.created_at else None,
    }


@orders_bp.route('/', methods=['GET'])
@require_panel
async def list_orders():
    """Reload and return the order list."""
    order_list = g.panel.order_list
    async with _api() as api:
        await order_list.refresh(api)
    return jsonify({'status': 'ok', 'loading': order_list.loading, 'orders': order_list.rows()})


@orders_bp.route('/<int:order_id>/delete', methods=['POST'])
@require_panel
async def delete_order(order_id: int):
    """Delete an order. The request must carry confirm=true."""
    payload = _payload()
    confirmation = PresetConfirmation(str(payload.get('confirm', '')).strip().lower() in TRUTHY)
    order_list = g.panel.order_list

    async with _api() as api:
        deleted = await order_list.delete_order(api, order_id, confirmation)

    if deleted:
        record_outcome(order_deletions_total, 'deleted')
    elif confirmation.answer:
        record_outcome(order_deletions_total, 'failed')
    else:
        record_outcome(order_deletions_total, 'declined')

    return jsonify({'status': 'ok', 'deleted': deleted, 'orders': order_list.rows()})


@orders_bp.route('/wizard/open', methods=['POST'])
@require_panel
async def wizard_open():
    """Open the wizard: reset the draft and load the catalog."""
    wizard = g.panel.wizard
    async with _api() as api:
        await wizard.open(api)

    record_outcome(catalog_loads_total, 'failed' if wizard.load_failed else 'loaded')
    current_app.logger.info(
        f"[WIZARD] Opened: products={len(wizard.catalog.products)}, load_failed={wizard.load_failed}"
    )
    return jsonify({'status': 'ok', 'wizard': wizard.snapshot()})


@orders_bp.route('/wizard', methods=['GET'])
@require_panel
def wizard_state():
    return jsonify({'status': 'ok', 'wizard': g.panel.wizard.snapshot()})


@orders_bp.route('/wizard/cart', methods=['POST'])
@require_panel
def wizard_cart():
    """Move one product's quantity by ``delta`` (default +1)."""
    payload = _payload()
    product_id = _int_field(payload, 'product_id')
    delta = _int_field(payload, 'delta', default=1)

    wizard = g.panel.wizard
    wizard.adjust_quantity(product_id, delta)
    return jsonify({'status': 'ok', 'wizard': wizard.snapshot()})


@orders_bp.route('/wizard/selection', methods=['POST'])
@require_panel
def wizard_selection():
    """Set the store and/or user; blank values clear the selection."""
    payload = _payload()
    wizard = g.panel.wizard

    if 'store_id' in payload:
        wizard.select_store(payload['store_id'])
    if 'user_id' in payload:
        wizard.select_user(payload['user_id'])

    return jsonify({'status': 'ok', 'wizard': wizard.snapshot()})


@orders_bp.route('/wizard/submit', methods=['POST'])
@require_panel
async def wizard_submit():
    """Submit the draft as one order; refresh the order list on success."""
    panel = g.panel

    async with _api() as api:
        async def refresh_orders():
            await panel.order_list.refresh(api)

        try:
            result = await panel.wizard.submit(api, on_order_created=refresh_orders)
        except ValidationError:
            record_outcome(orders_submitted_total, 'invalid')
            raise
        except SubmissionError:
            record_outcome(orders_submitted_total, 'failed')
            raise

    if not result.accepted:
        record_outcome(orders_submitted_total, 'ignored')
        return jsonify({'status': 'ignored', 'message': 'A submission is already in progress'}), 409

    record_outcome(orders_submitted_total, 'created')
    return jsonify({
        'status': 'ok',
        'order': _order_to_dict(result.order),
        'orders': panel.order_list.rows(),
        'wizard': panel.wizard.snapshot(),
    }), 201


@orders_bp.route('/wizard/close', methods=['POST'])
@require_panel
def wizard_close():
    wizard = g.panel.wizard
    wizard.close()
    return jsonify({'status': 'ok', 'wizard': wizard.snapshot()})
