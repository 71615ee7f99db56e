"""
Commission agreement lifecycle.

Agreements are created as drafts and only become active through
:func:`approve_agreement`.  At most one active agreement may cover a
given entity on any date; both creation and approval enforce this with
an interval-overlap query against the entity's active agreements.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.http import Http404
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from marketplace.exceptions import CommissionError, Conflict, InvalidTransition
from marketplace.models import CommissionAgreement, Doctor, Hospital, Implant, User
from marketplace.services.commission import COMMISSION_TYPES, to_decimal

logger = logging.getLogger(__name__)

ENTITY_MODELS = {
    'doctor': Doctor,
    'hospital': Hospital,
    'implant_company': Implant,
}

# ``active`` is reachable only through approve_agreement
STATUS_TRANSITIONS = {
    'draft': ['terminated'],
    'active': ['suspended', 'terminated', 'expired'],
    'suspended': ['terminated', 'expired'],
    'terminated': [],
    'expired': [],
}

APPROVABLE_FROM = ('draft', 'suspended')
FROZEN_STATUSES = ('terminated', 'expired')

PARAMETER_FIELDS = ('commission_type', 'commission_rate', 'fixed_amount', 'tiered_structure')


def _can_transition(current: str, new: str) -> bool:
    return new in STATUS_TRANSITIONS.get(current, [])


def ensure_entity_exists(entity_type: str, entity_id: int) -> None:
    model = ENTITY_MODELS.get(entity_type)
    if model is None:
        raise ValidationError({'entity_type': f'Unknown entity type: {entity_type}'})
    if not model.objects.filter(pk=entity_id).exists():
        raise Http404(f'{entity_type} {entity_id} not found')


def validate_tiers(tiers: Any) -> list[dict]:
    if not isinstance(tiers, list) or not tiers:
        raise ValidationError({'tiered_structure': 'A non-empty list of tiers is required'})
    cleaned = []
    for i, tier in enumerate(tiers):
        if not isinstance(tier, dict) or 'rate' not in tier:
            raise ValidationError({'tiered_structure': f'Tier {i} must be an object with min_amount, max_amount and rate'})
        try:
            low = to_decimal(tier.get('min_amount', 0), 'min_amount')
            rate = to_decimal(tier['rate'], 'rate')
            high = tier.get('max_amount')
            high_d = None if high in (None, '') else to_decimal(high, 'max_amount')
        except CommissionError as exc:
            raise ValidationError({'tiered_structure': f'Tier {i}: {exc.detail}'})
        if low < 0 or rate < 0 or rate > 100:
            raise ValidationError({'tiered_structure': f'Tier {i} has an out-of-range value'})
        if high_d is not None and high_d != 0 and high_d < low:
            raise ValidationError({'tiered_structure': f'Tier {i} max_amount is below min_amount'})
        cleaned.append({
            'min_amount': float(low),
            'max_amount': None if high_d is None or high_d == 0 else float(high_d),
            'rate': float(rate),
        })
    return cleaned


def validate_parameters(data: dict) -> dict:
    """Check that the fields required by ``commission_type`` are present."""
    ctype = data.get('commission_type')
    if ctype not in COMMISSION_TYPES:
        raise ValidationError({'commission_type': f'Unknown commission type: {ctype}'})
    if ctype in ('percentage', 'hybrid') and data.get('commission_rate') is None:
        raise ValidationError({'commission_rate': f'commission_rate is required for {ctype} agreements'})
    if ctype in ('fixed_amount', 'hybrid') and data.get('fixed_amount') is None:
        raise ValidationError({'fixed_amount': f'fixed_amount is required for {ctype} agreements'})
    # tiers are stored as JSON whatever the type, so they are normalised to floats here too
    tiers = data.get('tiered_structure')
    if ctype == 'tiered' or tiers:
        data['tiered_structure'] = validate_tiers(tiers)
    elif 'tiered_structure' in data:
        data['tiered_structure'] = []
    eff, exp = data.get('effective_date'), data.get('expiry_date')
    if eff and exp and exp < eff:
        raise ValidationError({'expiry_date': 'expiry_date must not be before effective_date'})
    return data


def overlapping_active(entity_type: str, entity_id: int, effective: date, expiry: Optional[date],
                       *, exclude_id: Optional[int] = None):
    """Active agreements for the entity whose date range intersects ``[effective, expiry]``.

    A missing expiry date means the agreement runs indefinitely.
    """
    qs = CommissionAgreement.objects.filter(entity_type=entity_type, entity_id=entity_id, status='active')
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    qs = qs.filter(Q(expiry_date__isnull=True) | Q(expiry_date__gte=effective))
    if expiry is not None:
        qs = qs.filter(effective_date__lte=expiry)
    return qs


def _lock_entity(entity_type: str, entity_id: int) -> None:
    """Lock the covered entity's row so concurrent approvals for it run one at a time."""
    model = ENTITY_MODELS[entity_type]
    try:
        model.objects.select_for_update().only('pk').get(pk=entity_id)
    except model.DoesNotExist:
        raise Http404(f'{entity_type} {entity_id} not found')


def _ensure_no_overlap(entity_type, entity_id, effective, expiry, *, exclude_id=None) -> None:
    clash = overlapping_active(entity_type, entity_id, effective, expiry, exclude_id=exclude_id).first()
    if clash is not None:
        raise Conflict(f'Active agreement {clash.id} already covers {entity_type} {entity_id} in this period')


def create_agreement(data: dict, *, created_by: User) -> CommissionAgreement:
    data = validate_parameters(dict(data))
    ensure_entity_exists(data['entity_type'], data['entity_id'])
    _ensure_no_overlap(data['entity_type'], data['entity_id'], data['effective_date'], data.get('expiry_date'))
    data.setdefault('currency', settings.COMMISSION_DEFAULT_CURRENCY)
    data.setdefault('payment_terms', settings.COMMISSION_DEFAULT_PAYMENT_TERMS)
    data.pop('status', None)
    agreement = CommissionAgreement.objects.create(status='draft', created_by=created_by, **data)
    logger.info("Created %s commission agreement %s for %s %s",
                agreement.commission_type, agreement.id, agreement.entity_type, agreement.entity_id)
    return agreement


def approve_agreement(agreement_id: int, *, by: User) -> CommissionAgreement:
    with transaction.atomic():
        try:
            agreement = CommissionAgreement.objects.select_for_update().get(pk=agreement_id)
        except CommissionAgreement.DoesNotExist:
            raise Http404('Commission agreement not found')
        if agreement.status not in APPROVABLE_FROM:
            raise InvalidTransition(f'Cannot approve an agreement that is {agreement.status}')
        _lock_entity(agreement.entity_type, agreement.entity_id)
        _ensure_no_overlap(agreement.entity_type, agreement.entity_id, agreement.effective_date,
                           agreement.expiry_date, exclude_id=agreement.id)
        agreement.status = 'active'
        agreement.approved_by = by
        agreement.approved_at = timezone.now()
        agreement.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])
    logger.info("Commission agreement %s approved by user %s", agreement.id, by.id)
    return agreement


def change_status(agreement: CommissionAgreement, new_status: str) -> CommissionAgreement:
    if new_status == 'active':
        raise ValidationError({'status': 'Use the approve action to activate an agreement'})
    if not _can_transition(agreement.status, new_status):
        raise ValidationError({'status': f'Cannot move agreement from {agreement.status} to {new_status}'})
    agreement.status = new_status
    agreement.save(update_fields=['status', 'updated_at'])
    return agreement


def update_agreement(agreement: CommissionAgreement, changes: dict) -> CommissionAgreement:
    if agreement.status in FROZEN_STATUSES:
        raise ValidationError({'status': f'A {agreement.status} agreement cannot be modified'})
    changes = dict(changes)
    for key in ('status', 'entity_type', 'entity_id', 'total_transactions', 'total_commission_earned'):
        changes.pop(key, None)
    merged = {f: getattr(agreement, f) for f in PARAMETER_FIELDS + ('effective_date', 'expiry_date')}
    merged.update(changes)
    merged = validate_parameters(merged)
    if 'tiered_structure' in changes or merged.get('commission_type') == 'tiered':
        changes['tiered_structure'] = merged['tiered_structure']
    with transaction.atomic():
        if agreement.status == 'active' and ('effective_date' in changes or 'expiry_date' in changes):
            _lock_entity(agreement.entity_type, agreement.entity_id)
            _ensure_no_overlap(agreement.entity_type, agreement.entity_id, merged['effective_date'],
                               merged.get('expiry_date'), exclude_id=agreement.id)
        for field, value in changes.items():
            setattr(agreement, field, value)
        agreement.save()
    return agreement


def delete_agreement(agreement: CommissionAgreement) -> None:
    if agreement.transactions.exists():
        raise ValidationError({'detail': 'Agreements with commission transactions cannot be deleted'})
    agreement.delete()


def expire_due(today: Optional[date] = None) -> int:
    today = today or timezone.localdate()
    return CommissionAgreement.objects.filter(status='active', expiry_date__lt=today).update(
        status='expired', updated_at=timezone.now())


def serialize_agreement(a: CommissionAgreement) -> dict:
    return {
        'id': a.id,
        'entity_type': a.entity_type,
        'entity_id': a.entity_id,
        'commission_type': a.commission_type,
        'commission_rate': str(a.commission_rate) if a.commission_rate is not None else None,
        'fixed_amount': str(a.fixed_amount) if a.fixed_amount is not None else None,
        'tiered_structure': a.tiered_structure,
        'minimum_monthly_volume': str(a.minimum_monthly_volume) if a.minimum_monthly_volume is not None else None,
        'payment_terms': a.payment_terms,
        'currency': a.currency,
        'applicable_services': a.applicable_services,
        'excluded_services': a.excluded_services,
        'status': a.status,
        'effective_date': a.effective_date.isoformat() if a.effective_date else None,
        'expiry_date': a.expiry_date.isoformat() if a.expiry_date else None,
        'auto_renewal': a.auto_renewal,
        'agreement_document_url': a.agreement_document_url,
        'tax_treatment': a.tax_treatment,
        'compliance_notes': a.compliance_notes,
        'total_transactions': a.total_transactions,
        'total_commission_earned': str(a.total_commission_earned),
        'last_commission_date': a.last_commission_date.isoformat() if a.last_commission_date else None,
        'approved_by': a.approved_by_id,
        'approved_at': a.approved_at.isoformat() if a.approved_at else None,
        'created_at': a.created_at.isoformat() if a.created_at else None,
        'updated_at': a.updated_at.isoformat() if a.updated_at else None,
    }
