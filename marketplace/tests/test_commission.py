from decimal import Decimal

import pytest

from marketplace.exceptions import AgreementNotActive, CommissionError, Conflict, InvalidTransition
from marketplace.models import CommissionTransaction
from marketplace.services import commission
from marketplace.services.commission import calculate_commission

TIERS = [
    {'min_amount': 0, 'max_amount': 100000, 'rate': 5},
    {'min_amount': 100000.01, 'max_amount': 500000, 'rate': 7.5},
    {'min_amount': 500000.01, 'max_amount': None, 'rate': 10},
]


def test_percentage():
    q = calculate_commission('250000', commission_type='percentage', commission_rate='12.5')
    assert q.rate_applied == Decimal('12.50')
    assert q.amount == Decimal('31250.00')


def test_fixed_amount_back_computes_rate():
    q = calculate_commission(Decimal('40000'), commission_type='fixed_amount', fixed_amount='2000')
    assert q.amount == Decimal('2000.00')
    assert q.rate_applied == Decimal('5.00')


@pytest.mark.parametrize('amount,rate,expected', [
    ('50000', '5.00', '2500.00'),
    ('100000', '5.00', '5000.00'),
    ('300000', '7.50', '22500.00'),
    ('900000', '10.00', '90000.00'),
])
def test_tiered_picks_matching_tier(amount, rate, expected):
    q = calculate_commission(amount, commission_type='tiered', tiered_structure=TIERS)
    assert q.rate_applied == Decimal(rate)
    assert q.amount == Decimal(expected)


def test_tier_with_zero_max_is_unbounded():
    tiers = [{'min_amount': 1000, 'max_amount': 0, 'rate': 3}]
    q = calculate_commission('5000000', commission_type='tiered', tiered_structure=tiers)
    assert q.amount == Decimal('150000.00')


def test_tiered_without_match_yields_zero():
    tiers = [{'min_amount': 1000, 'max_amount': 2000, 'rate': 3}]
    q = calculate_commission('500', commission_type='tiered', tiered_structure=tiers)
    assert q.amount == Decimal('0.00')
    assert q.rate_applied == Decimal('0.00')


def test_hybrid_takes_the_smaller_amount():
    q = calculate_commission('10000', commission_type='hybrid', commission_rate='10', fixed_amount='500')
    assert q.amount == Decimal('500.00')
    assert q.rate_applied == Decimal('5.00')

    q = calculate_commission('1000', commission_type='hybrid', commission_rate='10', fixed_amount='500')
    assert q.amount == Decimal('100.00')
    assert q.rate_applied == Decimal('10.00')


def test_rounding_is_half_up():
    q = calculate_commission('0.05', commission_type='percentage', commission_rate='10')
    assert q.amount == Decimal('0.01')


def test_unknown_type_and_bad_amount_are_rejected():
    with pytest.raises(CommissionError):
        calculate_commission('100', commission_type='bogus', commission_rate='5')
    with pytest.raises(CommissionError):
        calculate_commission('0', commission_type='percentage', commission_rate='5')
    with pytest.raises(CommissionError):
        calculate_commission('abc', commission_type='percentage', commission_rate='5')


@pytest.mark.django_db
def test_record_transaction_updates_agreement_totals(active_agreement, booking):
    tx = commission.record_transaction(agreement_id=active_agreement.id, booking_id=booking.id,
                                       transaction_amount='310000')
    assert tx.commission_amount == Decimal('31000.00')
    active_agreement.refresh_from_db()
    assert active_agreement.total_transactions == 1
    assert active_agreement.total_commission_earned == Decimal('31000.00')
    assert active_agreement.last_commission_date is not None


@pytest.mark.django_db
def test_record_transaction_rejects_duplicates(active_agreement, booking):
    commission.record_transaction(agreement_id=active_agreement.id, booking_id=booking.id, transaction_amount='1000')
    with pytest.raises(Conflict):
        commission.record_transaction(agreement_id=active_agreement.id, booking_id=booking.id,
                                      transaction_amount='1000')
    assert CommissionTransaction.objects.count() == 1


@pytest.mark.django_db
def test_record_transaction_requires_active_agreement(active_agreement, booking):
    active_agreement.status = 'suspended'
    active_agreement.save()
    with pytest.raises(AgreementNotActive):
        commission.record_transaction(agreement_id=active_agreement.id, booking_id=booking.id,
                                      transaction_amount='1000')


@pytest.mark.django_db
def test_paid_transaction_is_immutable(active_agreement, booking):
    tx = commission.record_transaction(agreement_id=active_agreement.id, booking_id=booking.id,
                                       transaction_amount='1000')
    tx = commission.update_payment_status(tx, payment_status='paid', payment_reference='UTR123')
    assert tx.payment_date is not None
    with pytest.raises(InvalidTransition):
        commission.update_payment_status(tx, payment_status='disputed')
    with pytest.raises(InvalidTransition):
        commission.delete_transaction(tx)


@pytest.mark.django_db
def test_delete_pending_transaction_reverts_totals(active_agreement, booking):
    tx = commission.record_transaction(agreement_id=active_agreement.id, booking_id=booking.id,
                                       transaction_amount='1000')
    commission.delete_transaction(tx)
    active_agreement.refresh_from_db()
    assert active_agreement.total_transactions == 0
    assert active_agreement.total_commission_earned == Decimal('0.00')


def test_overlapping_tiers_use_the_first_match_in_list_order():
    tiers = [
        {'min_amount': 0, 'max_amount': 200000, 'rate': 4},
        {'min_amount': 100000, 'max_amount': None, 'rate': 9},
    ]
    q = calculate_commission('150000', commission_type='tiered', tiered_structure=tiers)
    assert q.rate_applied == Decimal('4.00')
    assert q.amount == Decimal('6000.00')

    q = calculate_commission('150000', commission_type='tiered', tiered_structure=list(reversed(tiers)))
    assert q.rate_applied == Decimal('9.00')


@pytest.mark.django_db
def test_large_back_computed_rate_fits_the_column(active_agreement, booking):
    active_agreement.commission_type = 'fixed_amount'
    active_agreement.fixed_amount = Decimal('5000')
    active_agreement.save()
    tx = commission.record_transaction(agreement_id=active_agreement.id, booking_id=booking.id,
                                       transaction_amount='1.00')
    tx.refresh_from_db()
    assert tx.commission_rate_applied == Decimal('500000.00')
    tx.full_clean()
