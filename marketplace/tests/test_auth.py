import pytest
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from marketplace.models import Doctor, DoctorSurgery, Hospital, HospitalUser, User

from .conftest import PASSWORD, make_user

pytestmark = pytest.mark.django_db


def login(client, email, password=PASSWORD):
    return client.post(reverse('login'), {'email': email, 'password': password}, format='json')


def test_login_returns_jwt_pair_with_role_claim():
    make_user('p1@example.com', 'patient')
    r = login(APIClient(), 'P1@example.com')
    assert r.status_code == 200
    assert r.data['token_type'] == 'bearer'
    assert r.data['user_role'] == 'patient'
    assert r.data['refresh_token']
    assert AccessToken(r.data['access_token'])['role'] == 'patient'


def test_bearer_token_authenticates_requests():
    make_user('p2@example.com', 'patient')
    client = APIClient()
    token = login(client, 'p2@example.com').data['access_token']
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    r = client.get(reverse('me'))
    assert r.status_code == 200
    assert r.data['user']['email'] == 'p2@example.com'


def test_inactive_account_cannot_login():
    make_user('pending@example.com', 'doctor', is_active=False)
    r = login(APIClient(), 'pending@example.com')
    assert r.status_code == 401
    assert r.data['ok'] is False


def test_repeated_failures_lock_the_account(settings):
    settings.LOGIN_MAX_FAILED_ATTEMPTS = 3
    user = make_user('locked@example.com', 'patient')
    client = APIClient()
    for _ in range(3):
        assert login(client, user.email, 'wrong-password').status_code == 401
    user.refresh_from_db()
    assert user.failed_login_attempts == 3
    assert user.is_account_locked()
    r = login(client, user.email)
    assert r.status_code == 403
    assert r.data['error'] == 'account_locked'


def test_successful_login_resets_counter():
    user = make_user('reset@example.com', 'patient')
    client = APIClient()
    login(client, user.email, 'nope')
    assert login(client, user.email).status_code == 200
    user.refresh_from_db()
    assert user.failed_login_attempts == 0
    assert user.last_login is not None


def test_role_in_body_is_ignored():
    make_user('plain@example.com', 'patient')
    r = APIClient().post(reverse('login'), {'email': 'plain@example.com', 'password': PASSWORD, 'role': 'admin'},
                         format='json')
    assert r.status_code == 200
    assert r.data['user_role'] == 'patient'


def test_patient_registration_signs_in_immediately():
    r = APIClient().post(reverse('register_patient'), {
        'email': 'new.patient@example.com', 'password': PASSWORD, 'full_name': 'Meera Pillai',
        'phone': '9811111111', 'city': 'Chennai',
    }, format='json')
    assert r.status_code == 201
    assert r.data['access_token']
    assert r.data['profile']['profile_completeness'] > 0


def test_doctor_registration_waits_for_approval(surgery):
    r = APIClient().post(reverse('register_doctor'), {
        'email': 'dr.new@example.com', 'password': PASSWORD, 'full_name': 'Arjun Das',
        'medical_council_number': 'MCI-7777', 'surgery_types': [surgery.id],
    }, format='json')
    assert r.status_code == 201
    assert 'access_token' not in r.data
    doctor = Doctor.objects.get(medical_council_number='MCI-7777')
    assert doctor.status == 'pending'
    assert doctor.user.is_active is False
    assert DoctorSurgery.objects.filter(doctor=doctor, surgery=surgery, is_primary=True).exists()


def test_duplicate_email_and_council_number_rejected(doctor):
    client = APIClient()
    r = client.post(reverse('register_patient'), {
        'email': doctor.user.email, 'password': PASSWORD, 'full_name': 'Dup',
    }, format='json')
    assert r.status_code == 400
    r = client.post(reverse('register_doctor'), {
        'email': 'another@example.com', 'password': PASSWORD, 'full_name': 'Dup',
        'medical_council_number': doctor.medical_council_number,
    }, format='json')
    assert r.status_code == 400
    assert not User.objects.filter(email='another@example.com').exists()


def test_hospital_registration_creates_primary_staff():
    r = APIClient().post(reverse('register_hospital'), {
        'email': 'ops@sunrise.example', 'password': PASSWORD, 'full_name': 'Kiran Rao',
        'hospital_name': 'Sunrise Multispeciality', 'contact_phone': '9822222222', 'city': 'Hyderabad',
    }, format='json')
    assert r.status_code == 201
    hospital = Hospital.objects.get(name='Sunrise Multispeciality')
    assert hospital.status == 'pending'
    staff = HospitalUser.objects.get(hospital=hospital)
    assert staff.is_primary_admin is True
    assert staff.user.is_active is False


def test_admin_registration_requires_admin(admin_client, patient_client):
    payload = {'email': 'second.admin@example.com', 'password': PASSWORD, 'full_name': 'Second Admin'}
    assert patient_client.post(reverse('register_admin'), payload, format='json').status_code == 403
    r = admin_client.post(reverse('register_admin'), payload, format='json')
    assert r.status_code == 201
    assert User.objects.get(email='second.admin@example.com').is_staff is True


def test_refresh_and_logout():
    make_user('cycle@example.com', 'patient')
    client = APIClient()
    tokens = login(client, 'cycle@example.com').data

    r = client.post(reverse('token_refresh'), {'refresh': tokens['refresh_token']}, format='json')
    assert r.status_code == 200
    assert r.data['access_token']

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access_token']}")
    r = client.post(reverse('logout'), {'refresh': tokens['refresh_token']}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 1

    r = APIClient().post(reverse('token_refresh'), {'refresh': tokens['refresh_token']}, format='json')
    assert r.status_code == 401


def test_registration_options_is_public(surgery, doctor):
    r = APIClient().get(reverse('registration_options'))
    assert r.status_code == 200
    assert 'patient' in r.data['roles']
    assert 'admin' not in r.data['roles']
    assert r.data['specializations'] == ['Orthopedics']


def test_health_and_docs_are_served():
    client = APIClient()
    assert client.get('/healthz').json()['ok'] is True
    assert client.get('/swagger/?format=openapi').status_code == 200
