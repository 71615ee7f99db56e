from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from marketplace.models import Booking, Notification, Patient, Surgery
from marketplace.services.bookings import price_booking

from .conftest import client_for, make_user

pytestmark = pytest.mark.django_db


def _create(client, surgery, doctor, hospital, implant=None, **extra):
    data = {'surgery_id': surgery.id, 'doctor_id': doctor.id, 'hospital_id': hospital.id, **extra}
    if implant is not None:
        data['implant_id'] = implant.id
    return client.post(reverse('booking_create'), data, format='json')


def test_patient_books_and_cost_is_summed(patient_client, patient, surgery, doctor, hospital, implant):
    r = _create(patient_client, surgery, doctor, hospital, implant, notes='Left knee')
    assert r.status_code == status.HTTP_201_CREATED
    data = r.data['data']
    # 100000 surgery + 80000 hospital + 20000 consumables + 60000 implant + 50000 surgeon
    assert data['total_cost'] == '310000.00'
    assert data['advance_payment'] == '15500.00'
    assert data['status'] == 'pending'
    assert data['payment_status'] == 'pending'
    assert data['patient_id'] == patient.id
    assert Notification.objects.filter(user=doctor.user, category='booking').exists()


def test_default_total_when_no_prices(admin_user, doctor, hospital):
    surgery = Surgery.objects.create(name='Consultation Only')
    doctor.surgery_fee = None
    hospital.base_price = hospital.consumables_cost = Decimal('0')
    total, advance = price_booking(surgery, doctor, hospital, None)
    assert total == Decimal('500000.00')
    assert advance == Decimal('25000.00')


def test_admin_books_on_behalf_of_patient(admin_client, patient, surgery, doctor, hospital):
    r = _create(admin_client, surgery, doctor, hospital)
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    r = _create(admin_client, surgery, doctor, hospital, patient_id=patient.id)
    assert r.status_code == status.HTTP_201_CREATED
    assert r.data['data']['patient_id'] == patient.id


def test_unapproved_doctor_cannot_be_booked(patient_client, surgery, pending_doctor, hospital):
    r = _create(patient_client, surgery, pending_doctor, hospital)
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_doctor_cannot_create_bookings(doctor, surgery, hospital):
    r = _create(client_for(doctor.user), surgery, doctor, hospital)
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_visibility(booking, patient_client, doctor, hospital, implant, admin_client):
    url = reverse('booking_detail', args=[booking.id])
    assert patient_client.get(url).status_code == 200
    assert client_for(doctor.user).get(url).status_code == 200
    assert client_for(hospital.staff.first().user).get(url).status_code == 200
    assert admin_client.get(url).status_code == 200

    other = Patient.objects.create(user=make_user('other@example.com', 'patient'), full_name='Other')
    assert client_for(other.user).get(url).status_code == status.HTTP_403_FORBIDDEN


def test_doctor_confirms_and_completes(booking, doctor, patient):
    client = client_for(doctor.user)
    url = reverse('booking_detail', args=[booking.id])
    r = client.patch(url, {'status': 'confirmed'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['confirmed_at'] is not None
    assert Notification.objects.filter(user=patient.user, metadata__status='confirmed').exists()

    r = client.patch(url, {'status': 'completed'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['completed_at'] is not None

    r = client.delete(url)
    assert r.status_code == status.HTTP_409_CONFLICT


def test_invalid_status_value_is_400(booking, admin_client):
    r = admin_client.patch(reverse('booking_detail', args=[booking.id]), {'status': 'teleported'}, format='json')
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_patient_may_only_cancel(booking, patient_client):
    url = reverse('booking_detail', args=[booking.id])
    assert patient_client.patch(url, {'status': 'confirmed'}, format='json').status_code == 403
    r = patient_client.delete(url)
    assert r.status_code == 200
    booking.refresh_from_db()
    assert booking.status == 'cancelled'
    assert booking.cancelled_at is not None
    # soft cancel keeps the row and is idempotent
    assert patient_client.delete(url).status_code == 200
    assert Booking.objects.filter(pk=booking.id).exists()


def test_listing_with_ownership(booking, doctor, hospital, implant, patient, patient_client, admin_client):
    r = patient_client.get(reverse('patient_bookings', args=[patient.id]))
    assert [b['id'] for b in r.data['data']] == [booking.id]
    assert client_for(doctor.user).get(reverse('doctor_bookings', args=[doctor.id])).status_code == 200
    assert client_for(hospital.staff.first().user).get(reverse('hospital_bookings', args=[hospital.id])).status_code == 200
    assert client_for(implant.staff.first().user).get(reverse('implant_bookings', args=[implant.id])).status_code == 200
    assert patient_client.get(reverse('doctor_bookings', args=[doctor.id])).status_code == 403

    r = admin_client.get(reverse('admin_bookings'), {'status': 'cancelled'})
    assert r.data['pagination']['total'] == 0
