from datetime import date, timedelta

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import DoctorAvailability, Hospital, HospitalAvailability, HospitalUser

from .conftest import client_for, make_user

pytestmark = pytest.mark.django_db

NEXT_WEEK = (date.today() + timedelta(days=7)).isoformat()


def _slot(**overrides):
    data = {
        'available_date': NEXT_WEEK,
        'available_time_slots': [{'start_time': '09:00', 'end_time': '13:30'}],
        'willing_to_travel': True,
        'max_travel_distance_km': 300,
        'preferred_cities': ['Mumbai', 'Nashik'],
        'surgery_fee': '65000',
    }
    data.update(overrides)
    return data


def test_doctor_publishes_own_availability(doctor):
    r = client_for(doctor.user).post(reverse('doctor_availability_list'), _slot(), format='json')
    assert r.status_code == status.HTTP_201_CREATED
    data = r.data['data']
    assert data['doctor']['id'] == doctor.id
    assert data['available_time_slots'] == [{'start_time': '09:00', 'end_time': '13:30'}]
    assert data['required_support_staff'] == 2
    assert data['booking_lead_time_hours'] == 48


def test_slot_times_must_be_ordered(doctor):
    r = client_for(doctor.user).post(reverse('doctor_availability_list'),
                                     _slot(available_time_slots=[{'start_time': '14:00', 'end_time': '10:00'}]),
                                     format='json')
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_doctor_cannot_publish_for_someone_else(doctor, pending_doctor, patient_client, admin_client):
    r = client_for(doctor.user).post(reverse('doctor_availability_list'), _slot(doctor_id=pending_doctor.id),
                                     format='json')
    assert r.status_code == status.HTTP_403_FORBIDDEN
    r = patient_client.post(reverse('doctor_availability_list'), _slot(), format='json')
    assert r.status_code == status.HTTP_403_FORBIDDEN
    r = admin_client.post(reverse('doctor_availability_list'), _slot(), format='json')
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    r = admin_client.post(reverse('doctor_availability_list'), _slot(doctor_id=doctor.id), format='json')
    assert r.status_code == status.HTTP_201_CREATED


def test_public_listing_filters(doctor, pending_doctor):
    DoctorAvailability.objects.create(doctor=doctor, available_date=date.today() + timedelta(days=3),
                                      preferred_cities=['Mumbai'], willing_to_travel=True)
    DoctorAvailability.objects.create(doctor=doctor, available_date=date.today() + timedelta(days=4))
    DoctorAvailability.objects.create(doctor=pending_doctor, available_date=date.today() + timedelta(days=3),
                                      preferred_cities=['Mumbai'])
    anon = APIClient()
    url = reverse('doctor_availability_list')

    assert anon.get(url).data['pagination']['total'] == 2
    assert anon.get(url, {'city': 'mumbai'}).data['pagination']['total'] == 1
    # the doctor's home city matches too
    assert anon.get(url, {'city': 'Pune'}).data['pagination']['total'] == 2
    assert anon.get(url, {'willing_to_travel': 'false'}).data['pagination']['total'] == 1
    assert anon.get(url, {'specialization': 'ortho'}).data['pagination']['total'] == 2


def test_traveling_search(doctor):
    DoctorAvailability.objects.create(doctor=doctor, available_date=date.today() + timedelta(days=2),
                                      willing_to_travel=True, max_travel_distance_km=150,
                                      preferred_cities=['Goa'])
    far = DoctorAvailability.objects.create(doctor=doctor, available_date=date.today() + timedelta(days=2),
                                            willing_to_travel=True, max_travel_distance_km=800,
                                            preferred_cities=['Goa', 'Delhi'])
    DoctorAvailability.objects.create(doctor=doctor, available_date=date.today() + timedelta(days=2))
    url = reverse('doctor_availability_traveling')
    anon = APIClient()

    r = anon.get(url, {'target_city': 'goa'})
    assert [a['id'] for a in r.data['data']][0] == far.id
    assert r.data['pagination']['total'] == 2
    r = anon.get(url, {'max_distance': 500})
    assert [a['id'] for a in r.data['data']] == [far.id]


def test_my_calendar_defaults_to_upcoming(doctor):
    DoctorAvailability.objects.create(doctor=doctor, available_date=date.today() - timedelta(days=5))
    DoctorAvailability.objects.create(doctor=doctor, available_date=date.today() + timedelta(days=5))
    c = client_for(doctor.user)
    assert c.get(reverse('doctor_availability_my')).data['pagination']['total'] == 1
    assert c.get(reverse('doctor_availability_my'), {'upcoming_only': 'false'}).data['pagination']['total'] == 2


def test_only_owner_changes_a_slot(doctor, admin_user):
    slot = DoctorAvailability.objects.create(doctor=doctor, available_date=date.today() + timedelta(days=1))
    other = make_user('otherdoc@example.com', 'doctor')
    url = reverse('doctor_availability_detail', args=[slot.id])

    assert client_for(other).patch(url, {'is_available': False}, format='json').status_code == 403
    r = client_for(doctor.user).patch(url, {'is_available': False, 'booking_lead_time_hours': 72}, format='json')
    assert r.status_code == status.HTTP_200_OK
    assert r.data['data']['booking_lead_time_hours'] == 72
    assert client_for(doctor.user).delete(url).status_code == status.HTTP_200_OK
    assert not DoctorAvailability.objects.filter(pk=slot.id).exists()


def _facility(**overrides):
    data = {
        'facility_type': 'operation_theater',
        'facility_name': 'OT-2',
        'specialization_supported': ['Orthopedics', 'Cardiac'],
        'available_date': NEXT_WEEK,
        'facility_cost_per_hour': '12000',
    }
    data.update(overrides)
    return data


def test_hospital_staff_publish_facilities(hospital, admin_client):
    staff = hospital.staff.get().user
    r = client_for(staff).post(reverse('hospital_availability_list'), _facility(), format='json')
    assert r.status_code == status.HTTP_201_CREATED
    assert r.data['data']['hospital']['id'] == hospital.id
    assert r.data['data']['booking_lead_time_hours'] == 24

    r = admin_client.post(reverse('hospital_availability_list'), _facility(), format='json')
    assert r.status_code == status.HTTP_400_BAD_REQUEST

    anon = APIClient()
    url = reverse('hospital_availability_list')
    assert anon.get(url, {'specialization': 'cardiac'}).data['pagination']['total'] == 1
    assert anon.get(url, {'facility_type': 'diagnostic_center'}).data['pagination']['total'] == 0
    assert anon.get(url, {'city': 'pune'}).data['pagination']['total'] == 1


def test_other_hospital_cannot_edit_facility(hospital):
    slot = HospitalAvailability.objects.create(hospital=hospital, facility_type='consultation_room',
                                               facility_name='Room 4', available_date=date.today())
    rival = Hospital.objects.create(name='Rival Care', status=Hospital.STATUS_APPROVED)
    rival_user = make_user('desk@rival.example', 'hospital')
    HospitalUser.objects.create(user=rival_user, hospital=rival, full_name='Rival Desk')

    url = reverse('hospital_availability_detail', args=[slot.id])
    assert client_for(rival_user).delete(url).status_code == status.HTTP_403_FORBIDDEN
    r = client_for(rival_user).post(reverse('hospital_availability_list'), _facility(hospital_id=hospital.id),
                                    format='json')
    assert r.status_code == status.HTTP_403_FORBIDDEN
