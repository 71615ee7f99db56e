"""
Approval workflow for doctors, hospitals and implant manufacturers.

``pending`` is the only state that can move; ``approved`` and
``rejected`` are final.  Approving flips the entity status and activates
every linked login inside the same database transaction.
"""
from __future__ import annotations

import logging
from typing import Type

from django.db import transaction
from django.http import Http404
from django.utils import timezone

from marketplace.exceptions import InvalidTransition
from marketplace.models import ApprovableModel, Doctor, Hospital, Implant, User
from marketplace.services.audit import log_action
from marketplace.services.notifications import notify_many

logger = logging.getLogger(__name__)

TRANSITIONS = {
    ApprovableModel.STATUS_PENDING: [ApprovableModel.STATUS_APPROVED, ApprovableModel.STATUS_REJECTED],
    ApprovableModel.STATUS_APPROVED: [],
    ApprovableModel.STATUS_REJECTED: [],
}


def _can_transition(current: str, new: str) -> bool:
    return new in TRANSITIONS.get(current, [])


def linked_users(entity: ApprovableModel) -> list[User]:
    """Accounts whose access depends on ``entity`` being approved."""
    if isinstance(entity, Doctor):
        return [entity.user]
    if isinstance(entity, (Hospital, Implant)):
        return [s.user for s in entity.staff.select_related('user')]
    return []


def _label(entity: ApprovableModel) -> str:
    return entity._meta.model_name


def _lock(model: Type[ApprovableModel], pk: int) -> ApprovableModel:
    try:
        return model.objects.select_for_update().get(pk=pk)
    except model.DoesNotExist:
        raise Http404(f'{model._meta.model_name} {pk} not found')


def approve(model: Type[ApprovableModel], pk: int, *, by: User) -> ApprovableModel:
    with transaction.atomic():
        entity = _lock(model, pk)
        if not _can_transition(entity.status, ApprovableModel.STATUS_APPROVED):
            raise InvalidTransition(f'{_label(entity).title()} is already {entity.status}')
        entity.status = ApprovableModel.STATUS_APPROVED
        entity.approved_at = timezone.now()
        entity.approved_by = by
        entity.save(update_fields=['status', 'approved_at', 'approved_by'])

        users = linked_users(entity)
        User.objects.filter(pk__in=[u.pk for u in users]).update(is_active=True, email_verified=True)

        notify_many(
            users,
            title='Account approved',
            message=f'Your {_label(entity)} registration has been approved. You can now sign in.',
            type='success',
            category='account',
        )
        log_action(user=by, action=f'{_label(entity)}_approve', object_type=_label(entity), object_id=entity.pk,
                   detail={'activated_users': [u.pk for u in users]})
    logger.info("%s %s approved by user %s", _label(entity), entity.pk, by.pk)
    return entity


def reject(model: Type[ApprovableModel], pk: int, *, by: User, reason: str = '') -> ApprovableModel:
    with transaction.atomic():
        entity = _lock(model, pk)
        if not _can_transition(entity.status, ApprovableModel.STATUS_REJECTED):
            raise InvalidTransition(f'{_label(entity).title()} is already {entity.status}')
        entity.status = ApprovableModel.STATUS_REJECTED
        entity.rejected_at = timezone.now()
        entity.rejection_reason = reason or ''
        entity.save(update_fields=['status', 'rejected_at', 'rejection_reason'])

        notify_many(
            linked_users(entity),
            title='Registration rejected',
            message=f'Your {_label(entity)} registration was rejected.' + (f' Reason: {reason}' if reason else ''),
            type='error',
            category='account',
        )
        log_action(user=by, action=f'{_label(entity)}_reject', object_type=_label(entity), object_id=entity.pk,
                   detail={'reason': reason})
    logger.info("%s %s rejected by user %s", _label(entity), entity.pk, by.pk)
    return entity


def mark_approved(entity: ApprovableModel, *, by: User) -> None:
    """Stamp a freshly created entity as approved (administrator-created records)."""
    entity.status = ApprovableModel.STATUS_APPROVED
    entity.approved_at = timezone.now()
    entity.approved_by = by
