import pytest
from django.urls import reverse
from rest_framework import status

from marketplace.models import AuditEvent, Doctor, Hospital, HospitalUser, Implant, ImplantUser, Notification
from marketplace.services import approvals

from .conftest import client_for, make_user

pytestmark = pytest.mark.django_db


def test_approving_doctor_activates_account(admin_client, admin_user, pending_doctor):
    r = admin_client.post(reverse('doctor_approve', args=[pending_doctor.id]))
    assert r.status_code == status.HTTP_200_OK
    assert r.data['ok'] is True

    pending_doctor.refresh_from_db()
    pending_doctor.user.refresh_from_db()
    assert pending_doctor.status == 'approved'
    assert pending_doctor.approved_by_id == admin_user.id
    assert pending_doctor.approved_at is not None
    assert pending_doctor.user.is_active is True
    assert pending_doctor.user.email_verified is True
    assert Notification.objects.filter(user=pending_doctor.user, category='account').exists()
    assert AuditEvent.objects.filter(action='doctor_approve', object_id=pending_doctor.id).exists()


def test_rejected_doctor_stays_inactive(admin_client, pending_doctor):
    r = admin_client.post(reverse('doctor_reject', args=[pending_doctor.id]), {'reason': 'Licence not verifiable'},
                          format='json')
    assert r.status_code == status.HTTP_200_OK
    pending_doctor.refresh_from_db()
    pending_doctor.user.refresh_from_db()
    assert pending_doctor.status == 'rejected'
    assert pending_doctor.rejection_reason == 'Licence not verifiable'
    assert pending_doctor.user.is_active is False


def test_terminal_states_cannot_transition(admin_client, pending_doctor):
    admin_client.post(reverse('doctor_reject', args=[pending_doctor.id]))
    r = admin_client.post(reverse('doctor_approve', args=[pending_doctor.id]))
    assert r.status_code == status.HTTP_409_CONFLICT
    assert r.data['ok'] is False
    assert r.data['error'] == 'invalid_transition'

    pending_doctor.refresh_from_db()
    assert pending_doctor.status == 'rejected'


def test_hospital_approval_activates_every_staff_login(admin_client):
    hospital = Hospital.objects.create(name='Lakeside Clinic', city='Mumbai')
    users = [make_user(f'staff{i}@lakeside.example', 'hospital', is_active=False) for i in range(2)]
    for i, u in enumerate(users):
        HospitalUser.objects.create(user=u, hospital=hospital, full_name=f'Staff {i}', is_primary_admin=(i == 0))

    r = admin_client.post(reverse('hospital_approve', args=[hospital.id]))
    assert r.status_code == status.HTTP_200_OK
    for u in users:
        u.refresh_from_db()
        assert u.is_active is True


def test_non_admin_cannot_approve(pending_doctor, patient):
    r = client_for(patient.user).post(reverse('doctor_approve', args=[pending_doctor.id]))
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_approving_missing_entity_is_404(admin_client):
    r = admin_client.post(reverse('implant_approve', args=[999]))
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert r.data['error'] == 'not_found'


def test_pending_queue_lists_only_pending(admin_client, pending_doctor, doctor):
    r = admin_client.get(reverse('doctor_pending'))
    assert r.status_code == status.HTTP_200_OK
    ids = [d['id'] for d in r.data['data']]
    assert ids == [pending_doctor.id]
    assert r.data['pagination']['total'] == 1


def test_approval_is_all_or_nothing(admin_user, pending_doctor, monkeypatch):
    def broken_notify(*args, **kwargs):
        raise RuntimeError('notification store unavailable')

    monkeypatch.setattr(approvals, 'notify_many', broken_notify)
    with pytest.raises(RuntimeError):
        approvals.approve(Doctor, pending_doctor.id, by=admin_user)

    pending_doctor.refresh_from_db()
    pending_doctor.user.refresh_from_db()
    assert pending_doctor.status == 'pending'
    assert pending_doctor.approved_by_id is None
    assert pending_doctor.user.is_active is False


def test_implant_approval_activates_company_login(admin_client, admin_user):
    implant = Implant.objects.create(name='SpineFix', brand='VertebraCo')
    user = make_user('rep@vertebra.example', 'implant', is_active=False)
    ImplantUser.objects.create(user=user, implant=implant, full_name='Field Rep', is_primary_admin=True)

    r = admin_client.post(reverse('implant_approve', args=[implant.id]))
    assert r.status_code == status.HTTP_200_OK
    implant.refresh_from_db()
    user.refresh_from_db()
    assert implant.status == 'approved'
    assert implant.approved_by_id == admin_user.id
    assert user.is_active is True
    assert user.email_verified is True
    assert Notification.objects.filter(user=user, category='account').exists()
