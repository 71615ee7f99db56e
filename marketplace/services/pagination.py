"""Page/limit pagination shared by the list endpoints."""
from __future__ import annotations

import math
from typing import Any, Callable, Iterable

from rest_framework.exceptions import ValidationError

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def page_params(query, *, default_limit: int = DEFAULT_LIMIT) -> tuple[int, int]:
    """Read ``page`` and ``limit`` from query params, rejecting junk values."""
    try:
        page = int(query.get('page') or 1)
        limit = int(query.get('limit') or default_limit)
    except (TypeError, ValueError):
        raise ValidationError({'detail': 'page and limit must be integers'})
    if page < 1 or limit < 1:
        raise ValidationError({'detail': 'page and limit must be positive'})
    return page, min(limit, MAX_LIMIT)


def paginate(qs, query, serialize: Callable[[Any], dict], *, default_limit: int = DEFAULT_LIMIT) -> dict:
    page, limit = page_params(query, default_limit=default_limit)
    total = qs.count()
    offset = (page - 1) * limit
    rows: Iterable = qs[offset:offset + limit]
    return {
        'ok': True,
        'data': [serialize(r) for r in rows],
        'pagination': {
            'total': total,
            'page': page,
            'limit': limit,
            'pages': math.ceil(total / limit) if total else 0,
        },
    }
