"""
Commission calculation and bookkeeping.

:func:`calculate_commission` is a pure function of a transaction amount
and an agreement's parameters.  :func:`record_transaction` applies it to
a booking under a row lock on the agreement so that running totals stay
consistent with the transaction rows.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Iterable, Optional

from django.db import IntegrityError, transaction
from django.db.models import F
from django.shortcuts import get_object_or_404
from django.utils import timezone

from marketplace.exceptions import AgreementNotActive, CommissionError, Conflict, InvalidTransition
from marketplace.models import Booking, CommissionAgreement, CommissionTransaction

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
HUNDRED = Decimal('100')
ZERO = Decimal('0')

COMMISSION_TYPES = ('percentage', 'fixed_amount', 'tiered', 'hybrid')

PAYMENT_TRANSITIONS = {
    'pending': ['paid', 'disputed'],
    'disputed': ['pending', 'paid', 'refunded'],
    'paid': [],
    'refunded': [],
}


@dataclass(frozen=True)
class CommissionQuote:
    rate_applied: Decimal
    amount: Decimal


def to_decimal(value: Any, field: str = 'value') -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise CommissionError(f'{field} is required')
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise CommissionError(f'{field} must be a number')


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _is_unbounded(max_amount: Any) -> bool:
    if max_amount in (None, ''):
        return True
    return to_decimal(max_amount, 'max_amount') == ZERO


def select_tier(tiers: Iterable[dict], amount: Decimal) -> Optional[dict]:
    """Return the first tier whose ``[min_amount, max_amount]`` range holds ``amount``."""
    for tier in tiers:
        low = to_decimal(tier.get('min_amount', 0), 'min_amount')
        high = tier.get('max_amount')
        if amount >= low and (_is_unbounded(high) or amount <= to_decimal(high, 'max_amount')):
            return tier
    return None


def calculate_commission(transaction_amount: Any, *, commission_type: str, commission_rate: Any = None,
                         fixed_amount: Any = None, tiered_structure: Optional[list] = None) -> CommissionQuote:
    """Return the rate applied and commission amount for one transaction.

    ``percentage``
        amount = transaction_amount * rate / 100.
    ``fixed_amount``
        amount = fixed_amount; the rate is informational.
    ``tiered``
        the first tier (in list order) containing the amount supplies the
        rate.  When no tier matches, the commission is zero.
    ``hybrid``
        the smaller of the percentage amount and the fixed amount; the rate
        is back-computed from whichever wins.
    """
    amount = to_decimal(transaction_amount, 'transaction_amount')
    if amount <= ZERO:
        raise CommissionError('transaction_amount must be greater than zero')

    if commission_type == 'percentage':
        rate = to_decimal(commission_rate, 'commission_rate')
        return CommissionQuote(quantize_money(rate), quantize_money(amount * rate / HUNDRED))

    if commission_type == 'fixed_amount':
        fixed = to_decimal(fixed_amount, 'fixed_amount')
        return CommissionQuote(quantize_money(fixed / amount * HUNDRED), quantize_money(fixed))

    if commission_type == 'tiered':
        tier = select_tier(tiered_structure or [], amount)
        if tier is None:
            logger.warning("No commission tier matches amount %s; commission set to 0", amount)
            return CommissionQuote(quantize_money(ZERO), quantize_money(ZERO))
        rate = to_decimal(tier.get('rate'), 'rate')
        return CommissionQuote(quantize_money(rate), quantize_money(amount * rate / HUNDRED))

    if commission_type == 'hybrid':
        rate = to_decimal(commission_rate, 'commission_rate')
        fixed = to_decimal(fixed_amount, 'fixed_amount')
        pct_amount = amount * rate / HUNDRED
        commission = min(pct_amount, fixed)
        return CommissionQuote(quantize_money(commission / amount * HUNDRED), quantize_money(commission))

    raise CommissionError(f'Unknown commission type: {commission_type}', code='unknown_commission_type')


def quote_for_agreement(agreement: CommissionAgreement, transaction_amount: Any) -> CommissionQuote:
    return calculate_commission(
        transaction_amount,
        commission_type=agreement.commission_type,
        commission_rate=agreement.commission_rate,
        fixed_amount=agreement.fixed_amount,
        tiered_structure=agreement.tiered_structure,
    )


def record_transaction(*, agreement_id: int, booking_id: int, transaction_amount: Any,
                       service_type: str = '', transaction_date=None) -> CommissionTransaction:
    """Compute and store the commission owed on one booking."""
    with transaction.atomic():
        agreement = get_object_or_404(CommissionAgreement.objects.select_for_update(), pk=agreement_id)
        if agreement.status != 'active':
            raise AgreementNotActive(f'Commission agreement {agreement.id} is {agreement.status}, not active')
        booking = get_object_or_404(Booking, pk=booking_id)
        if CommissionTransaction.objects.filter(agreement=agreement, booking=booking).exists():
            raise Conflict('A commission transaction already exists for this booking and agreement')

        amount = quantize_money(to_decimal(transaction_amount, 'transaction_amount'))
        quote = quote_for_agreement(agreement, amount)
        try:
            with transaction.atomic():
                tx = CommissionTransaction.objects.create(
                    agreement=agreement,
                    booking=booking,
                    transaction_amount=amount,
                    commission_rate_applied=quote.rate_applied,
                    commission_amount=quote.amount,
                    service_type=service_type or '',
                    transaction_date=transaction_date or timezone.now(),
                )
        except IntegrityError:
            raise Conflict('A commission transaction already exists for this booking and agreement')

        CommissionAgreement.objects.filter(pk=agreement.pk).update(
            total_transactions=F('total_transactions') + 1,
            total_commission_earned=F('total_commission_earned') + quote.amount,
            last_commission_date=timezone.now(),
        )
    logger.info("Recorded commission %s on booking %s under agreement %s", quote.amount, booking.id, agreement.id)
    return tx


def can_change_payment_status(current: str, new: str) -> bool:
    return new in PAYMENT_TRANSITIONS.get(current, [])


def update_payment_status(tx: CommissionTransaction, *, payment_status: str, payment_date=None,
                          payment_reference: Optional[str] = None) -> CommissionTransaction:
    if not PAYMENT_TRANSITIONS.get(tx.payment_status):
        raise InvalidTransition(f'Commission transaction is {tx.payment_status} and can no longer change')
    if tx.payment_status != payment_status and not can_change_payment_status(tx.payment_status, payment_status):
        raise InvalidTransition(f'Cannot move commission payment from {tx.payment_status} to {payment_status}')
    tx.payment_status = payment_status
    if payment_status == 'paid':
        tx.payment_date = payment_date or tx.payment_date or timezone.localdate()
    elif payment_date is not None:
        tx.payment_date = payment_date
    if payment_reference is not None:
        tx.payment_reference = payment_reference
    tx.save(update_fields=['payment_status', 'payment_date', 'payment_reference', 'updated_at'])
    return tx


def delete_transaction(tx: CommissionTransaction) -> None:
    if tx.payment_status != 'pending':
        raise InvalidTransition('Only pending commission transactions can be deleted')
    with transaction.atomic():
        CommissionAgreement.objects.select_for_update().filter(pk=tx.agreement_id).update(
            total_transactions=F('total_transactions') - 1,
            total_commission_earned=F('total_commission_earned') - tx.commission_amount,
        )
        tx.delete()


def serialize_transaction(tx: CommissionTransaction) -> dict:
    return {
        'id': tx.id,
        'agreement_id': tx.agreement_id,
        'booking_id': tx.booking_id,
        'transaction_amount': str(tx.transaction_amount),
        'commission_rate_applied': str(tx.commission_rate_applied),
        'commission_amount': str(tx.commission_amount),
        'payment_status': tx.payment_status,
        'payment_date': tx.payment_date.isoformat() if tx.payment_date else None,
        'payment_reference': tx.payment_reference,
        'service_type': tx.service_type,
        'transaction_date': tx.transaction_date.isoformat() if tx.transaction_date else None,
        'created_at': tx.created_at.isoformat() if tx.created_at else None,
    }
