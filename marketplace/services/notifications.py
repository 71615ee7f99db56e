"""
Notification delivery.

A notification is always persisted first; the WebSocket push to the
recipient's ``notifications.<user_id>`` group is best effort and never
rolls back the stored row.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.utils import timezone

from marketplace.models import Notification, User

logger = logging.getLogger(__name__)


def group_name(user_id: int) -> str:
    return f"notifications.{user_id}"


def serialize_notification(n: Notification) -> dict:
    return {
        'id': n.id,
        'user_id': n.user_id,
        'title': n.title,
        'message': n.message,
        'type': n.type,
        'category': n.category,
        'is_read': n.is_read,
        'read_at': n.read_at.isoformat() if n.read_at else None,
        'action_url': n.action_url,
        'metadata': n.metadata,
        'created_at': n.created_at.isoformat() if n.created_at else None,
    }


def _push(n: Notification) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    payload = {'type': 'notification.created', 'notification': serialize_notification(n)}
    try:
        async_to_sync(channel_layer.group_send)(group_name(n.user_id), payload)
    except Exception:
        logger.warning("WebSocket push failed for notification %s", n.id, exc_info=True)


def notify(user: User, *, title: str, message: str, type: str = 'info', category: str = 'system',
           action_url: str = '', metadata: Optional[dict[str, Any]] = None) -> Notification:
    n = Notification.objects.create(
        user=user, title=title, message=message, type=type, category=category,
        action_url=action_url or '', metadata=metadata or {},
    )
    # push only once the row is visible to readers
    transaction.on_commit(lambda: _push(n))
    return n


def notify_many(users: Iterable[User], **kwargs) -> list[Notification]:
    return [notify(u, **kwargs) for u in users]


def mark_read(n: Notification) -> Notification:
    if not n.is_read:
        n.is_read = True
        n.read_at = timezone.now()
        n.save(update_fields=['is_read', 'read_at'])
    return n


def mark_all_read(user: User) -> int:
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True, read_at=timezone.now())
