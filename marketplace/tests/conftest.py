from datetime import date
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from marketplace.models import (
    Booking,
    CommissionAgreement,
    Doctor,
    Hospital,
    HospitalUser,
    Implant,
    ImplantUser,
    Patient,
    Surgery,
    User,
)

PASSWORD = 'Str0ng!Passw0rd'


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


def make_user(email, role, *, is_active=True, password=PASSWORD):
    return User.objects.create_user(username=email, email=email, password=password, role=role, is_active=is_active)


def client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_user(db):
    return make_user('admin@example.com', 'admin')


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def patient(db):
    user = make_user('patient@example.com', 'patient')
    return Patient.objects.create(user=user, full_name='Asha Rao', phone='9800000001', city='Pune')


@pytest.fixture
def patient_client(patient):
    return client_for(patient.user)


@pytest.fixture
def surgery(db):
    return Surgery.objects.create(name='Total Knee Replacement', category='Orthopedics', base_price=Decimal('100000'))


@pytest.fixture
def doctor(db, admin_user):
    user = make_user('doctor@example.com', 'doctor')
    return Doctor.objects.create(
        user=user, full_name='Vikram Shah', medical_council_number='MCI-1001', primary_specialization='Orthopedics',
        city='Pune', surgery_fee=Decimal('50000'), status=Doctor.STATUS_APPROVED, approved_by=admin_user,
    )


@pytest.fixture
def pending_doctor(db):
    user = make_user('newdoc@example.com', 'doctor', is_active=False)
    return Doctor.objects.create(user=user, full_name='Neha Iyer', medical_council_number='MCI-2002')


@pytest.fixture
def hospital(db, admin_user):
    h = Hospital.objects.create(
        name='City Care Hospital', city='Pune', base_price=Decimal('80000'), consumables_cost=Decimal('20000'),
        status=Hospital.STATUS_APPROVED, approved_by=admin_user,
    )
    HospitalUser.objects.create(user=make_user('hospital@example.com', 'hospital'), hospital=h,
                                full_name='Ravi Menon', is_primary_admin=True)
    return h


@pytest.fixture
def implant(db, admin_user):
    i = Implant.objects.create(name='FlexKnee', brand='OrthoCo', price=Decimal('60000'),
                               status=Implant.STATUS_APPROVED, approved_by=admin_user)
    ImplantUser.objects.create(user=make_user('implant@example.com', 'implant'), implant=i,
                               full_name='Sara Khan', is_primary_admin=True)
    return i


@pytest.fixture
def booking(patient, surgery, doctor, hospital, implant):
    return Booking.objects.create(
        patient=patient, surgery=surgery, doctor=doctor, hospital=hospital, implant=implant,
        total_cost=Decimal('310000.00'), advance_payment=Decimal('15500.00'),
    )


@pytest.fixture
def active_agreement(doctor, admin_user):
    return CommissionAgreement.objects.create(
        entity_type='doctor', entity_id=doctor.id, commission_type='percentage', commission_rate=Decimal('10'),
        effective_date=date(2024, 1, 1), status='active', created_by=admin_user, approved_by=admin_user,
    )
