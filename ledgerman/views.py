"""
Ledgerman JSON API.

POST /movements/
    { "product_id": "P1", "quantity": -3, "type": "adjustment",
      "reason": "파손", "note": "", "skip_cashbook": true }
    → 201 { movement_id, product_id, balance_before, balance_after, created_at }

GET /products/<product_id>/movements/?limit=50&offset=0
    → 200 { product_id, count, limit, offset, results: [...] }

Errors → { kind, code, message, retryable, data }
"""

import json

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from ledgerman.conf import ledgerman_settings
from ledgerman.exceptions import StockError, ValidationError
from ledgerman.services.engine import ReconciliationEngine
from ledgerman.services.ledger import MovementLedger


STATUS_BY_KIND = {
    'validation': 400,
    'insufficient_stock': 400,
    'not_found': 404,
    'conflict': 409,
    'concurrency_exhausted': 409,
    'persistence': 500,
}


def movement_as_dict(movement) -> dict:
    return {
        'movement_id': movement.pk,
        'product_id': movement.product_id,
        'type': movement.movement_type,
        'quantity': movement.quantity,
        'balance_before': movement.previous_quantity,
        'balance_after': movement.new_quantity,
        'unit_cost': str(movement.cost_per_unit) if movement.cost_per_unit is not None else None,
        'reason': movement.reason,
        'note': movement.notes,
        'ref_no': movement.reference_no,
        'skip_cashbook': movement.skip_cashbook,
        'created_by': movement.created_by,
        'created_at': movement.created_at.isoformat(),
    }


def _error_response(error: StockError) -> JsonResponse:
    return JsonResponse(error.as_dict(), status=STATUS_BY_KIND.get(error.kind, 400))


def _parse_body(request) -> dict:
    try:
        payload = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError):
        raise ValidationError('INVALID_PAYLOAD') from None
    if not isinstance(payload, dict):
        raise ValidationError('INVALID_PAYLOAD')
    return payload


def _text(payload: dict, name: str) -> str:
    value = payload.get(name)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError('INVALID_PAYLOAD', field=name)
    return value


def _int_param(params, name: str, default: int) -> int:
    raw = params.get(name)
    if raw in (None, ''):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError('INVALID_PAGE', **{name: raw}) from None


def _actor(request) -> str:
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return str(user.pk)
    return ''


@csrf_exempt
@require_POST
def create_movement(request):
    """Apply one stock movement through the reconciliation engine."""
    try:
        payload = _parse_body(request)

        product_id = payload.get('product_id')
        if not isinstance(product_id, str) or not product_id:
            raise ValidationError('INVALID_PAYLOAD', field='product_id')

        skip_cashbook = payload.get('skip_cashbook', False)
        if not isinstance(skip_cashbook, bool):
            raise ValidationError('INVALID_PAYLOAD', field='skip_cashbook')

        result = ReconciliationEngine().apply(
            product_id,
            payload.get('type'),
            payload.get('quantity'),
            unit_cost=payload.get('unit_cost'),
            reason=_text(payload, 'reason'),
            note=_text(payload, 'note'),
            reference_no=_text(payload, 'ref_no'),
            skip_cashbook=skip_cashbook,
            actor=_actor(request),
        )
    except StockError as e:
        return _error_response(e)

    return JsonResponse(result.as_dict(), status=201)


@require_GET
def product_movements(request, product_id):
    """Paginated movement history, newest first."""
    ledger = MovementLedger()
    try:
        limit = _int_param(request.GET, 'limit', ledgerman_settings.DEFAULT_PAGE_SIZE)
        offset = _int_param(request.GET, 'offset', 0)
        movements = ledger.list_by_product(product_id, limit=limit, offset=offset)
        count = ledger.count_by_product(product_id)
    except StockError as e:
        return _error_response(e)

    return JsonResponse({
        'product_id': product_id,
        'count': count,
        'limit': limit,
        'offset': offset,
        'results': [movement_as_dict(m) for m in movements],
    })
