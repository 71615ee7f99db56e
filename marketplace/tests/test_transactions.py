from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from marketplace.models import Booking, CommissionTransaction

pytestmark = pytest.mark.django_db


def _record(client, agreement, booking, amount='200000'):
    return client.post(reverse('transaction_list'), {
        'agreement_id': agreement.id, 'booking_id': booking.id, 'transaction_amount': amount,
        'service_type': 'surgery',
    }, format='json')


def test_record_and_summarise(admin_client, active_agreement, booking):
    r = _record(admin_client, active_agreement, booking)
    assert r.status_code == status.HTTP_201_CREATED
    assert r.data['data']['commission_amount'] == '20000.00'
    assert r.data['data']['commission_rate_applied'] == '10.00'
    assert r.data['data']['payment_status'] == 'pending'

    r = admin_client.get(reverse('agreement_transactions', args=[active_agreement.id]))
    assert r.status_code == status.HTTP_200_OK
    assert r.data['summary'] == {
        'total_commission': '20000.00',
        'paid_commission': '0.00',
        'pending_commission': '20000.00',
    }


def test_duplicate_is_409(admin_client, active_agreement, booking):
    _record(admin_client, active_agreement, booking)
    r = _record(admin_client, active_agreement, booking)
    assert r.status_code == status.HTTP_409_CONFLICT


def test_non_positive_amount_is_400(admin_client, active_agreement, booking):
    r = _record(admin_client, active_agreement, booking, amount='0')
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert 'transaction_amount' in r.data['errors']


def test_draft_agreement_is_rejected(admin_client, active_agreement, booking):
    active_agreement.status = 'draft'
    active_agreement.save()
    r = _record(admin_client, active_agreement, booking)
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.data['error'] == 'agreement_not_active'


def test_missing_booking_is_404(admin_client, active_agreement, booking):
    r = admin_client.post(reverse('transaction_list'), {
        'agreement_id': active_agreement.id, 'booking_id': 9999, 'transaction_amount': '100',
    }, format='json')
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_payment_status_flow(admin_client, active_agreement, booking):
    tx_id = _record(admin_client, active_agreement, booking).data['data']['id']
    url = reverse('transaction_payment', args=[tx_id])

    r = admin_client.patch(url, {'payment_status': 'disputed'}, format='json')
    assert r.status_code == 200
    r = admin_client.patch(url, {'payment_status': 'paid', 'payment_reference': 'NEFT-881'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['payment_date'] is not None

    r = admin_client.patch(url, {'payment_status': 'refunded'}, format='json')
    assert r.status_code == status.HTTP_409_CONFLICT

    r = admin_client.delete(reverse('transaction_detail', args=[tx_id]))
    assert r.status_code == status.HTTP_409_CONFLICT
    assert CommissionTransaction.objects.filter(pk=tx_id).exists()


def test_list_filters(admin_client, active_agreement, booking):
    _record(admin_client, active_agreement, booking)
    r = admin_client.get(reverse('transaction_list'), {'payment_status': 'paid'})
    assert r.data['pagination']['total'] == 0
    r = admin_client.get(reverse('transaction_list'), {'agreement_id': active_agreement.id})
    assert r.data['pagination']['total'] == 1


def test_delete_pending(admin_client, active_agreement, booking):
    tx_id = _record(admin_client, active_agreement, booking).data['data']['id']
    r = admin_client.delete(reverse('transaction_detail', args=[tx_id]))
    assert r.status_code == 200
    active_agreement.refresh_from_db()
    assert active_agreement.total_transactions == 0


def test_summary_totals_are_rounded_to_cents(admin_client, active_agreement, booking):
    second = Booking.objects.create(
        patient=booking.patient, surgery=booking.surgery, doctor=booking.doctor, hospital=booking.hospital,
        total_cost=Decimal('1000.00'), advance_payment=Decimal('50.00'),
    )
    for b, amount in ((booking, '0.10'), (second, '0.20')):
        CommissionTransaction.objects.create(
            agreement=active_agreement, booking=b, transaction_amount=Decimal('1.00'),
            commission_rate_applied=Decimal('10.00'), commission_amount=Decimal(amount),
        )

    r = admin_client.get(reverse('agreement_transactions', args=[active_agreement.id]))
    assert r.data['summary']['total_commission'] == '0.30'
    assert r.data['summary']['pending_commission'] == '0.30'
