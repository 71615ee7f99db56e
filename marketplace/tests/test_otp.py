from datetime import timedelta

import pytest
from django.core.management import call_command
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import OtpLog

pytestmark = pytest.mark.django_db


def _generate(client, **data):
    payload = {'otp_type': 'login', 'delivery_method': 'sms', 'phone': '+919800000001'}
    payload.update(data)
    return client.post(reverse('otp_generate'), payload, format='json')


def _verify(client, code, **data):
    payload = {'otp_type': 'login', 'phone': '+919800000001', 'otp_code': code}
    payload.update(data)
    return client.post(reverse('otp_verify'), payload, format='json')


def test_generate_and_verify(settings):
    settings.OTP_EXPOSE_CODE = False
    client = APIClient()
    r = _generate(client)
    assert r.status_code == status.HTTP_201_CREATED
    assert 'otp_code' not in r.data

    otp = OtpLog.objects.get(pk=r.data['otp_id'])
    assert len(otp.otp_code) == 6 and otp.otp_code.isdigit()
    assert otp.expires_at > timezone.now() + timedelta(minutes=9)

    r = _verify(client, otp.otp_code)
    assert r.status_code == 200
    otp.refresh_from_db()
    assert otp.status == 'verified'
    assert otp.verified_at is not None


def test_code_is_exposed_only_when_enabled(settings):
    settings.OTP_EXPOSE_CODE = True
    r = _generate(APIClient())
    assert r.data['otp_code'] == OtpLog.objects.get(pk=r.data['otp_id']).otp_code


def test_delivery_method_needs_matching_contact():
    client = APIClient()
    assert _generate(client, phone='').status_code == 400
    assert _generate(client, delivery_method='email', phone='').status_code == 400
    assert _generate(client, delivery_method='email', phone='', email='someone@example.com').status_code == 201


def test_rate_limit_per_contact(settings):
    settings.OTP_RATE_LIMIT_COUNT = 3
    client = APIClient()
    for _ in range(3):
        assert _generate(client).status_code == 201
    r = _generate(client)
    assert r.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert r.data['error'] == 'rate_limited'
    # a different number is unaffected
    assert _generate(client, phone='+919800000002').status_code == 201


def test_wrong_codes_exhaust_attempts():
    client = APIClient()
    otp = OtpLog.objects.get(pk=_generate(client).data['otp_id'])
    wrong = '000000' if otp.otp_code != '000000' else '111111'

    for expected_left in (2, 1):
        r = _verify(client, wrong)
        assert r.status_code == 400
        assert f'{expected_left} attempt(s) remaining' in r.data['detail']
    r = _verify(client, wrong)
    assert r.status_code == 400
    otp.refresh_from_db()
    assert otp.attempts == 3
    assert otp.status == 'failed'

    # the correct code no longer works once the OTP has failed
    assert _verify(client, otp.otp_code).status_code == 400


def test_expired_code_is_rejected():
    client = APIClient()
    otp = OtpLog.objects.get(pk=_generate(client).data['otp_id'])
    OtpLog.objects.filter(pk=otp.pk).update(expires_at=timezone.now() - timedelta(seconds=1))
    assert _verify(client, otp.otp_code).status_code == 400


def test_email_verification_marks_user(patient):
    client = APIClient()
    r = _generate(client, otp_type='email_verification', delivery_method='email', phone='',
                  email=patient.user.email, user_id=patient.user.id)
    otp = OtpLog.objects.get(pk=r.data['otp_id'])
    r = _verify(client, otp.otp_code, otp_type='email_verification', phone='', email=patient.user.email)
    assert r.status_code == 200
    patient.user.refresh_from_db()
    assert patient.user.email_verified is True


def test_admin_log_hides_codes(admin_client, patient_client):
    _generate(APIClient())
    assert patient_client.get(reverse('otp_list')).status_code == 403
    r = admin_client.get(reverse('otp_list'), {'delivery_method': 'sms'})
    assert r.status_code == 200
    assert r.data['pagination']['total'] == 1
    assert 'otp_code' not in r.data['data'][0]


def test_cleanup_expires_and_purges(admin_client, settings):
    settings.OTP_RETENTION_DAYS = 30
    client = APIClient()
    stale = OtpLog.objects.get(pk=_generate(client).data['otp_id'])
    old = OtpLog.objects.get(pk=_generate(client, phone='+919800000003').data['otp_id'])
    OtpLog.objects.filter(pk=stale.pk).update(expires_at=timezone.now() - timedelta(minutes=1))
    OtpLog.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=31))

    r = admin_client.post(reverse('otp_cleanup'))
    assert r.status_code == 200
    assert r.data['deleted'] == 1
    stale.refresh_from_db()
    assert stale.status == 'expired'
    assert not OtpLog.objects.filter(pk=old.pk).exists()

    call_command('cleanup_otps')


def test_admin_deletes_log_entry(admin_client):
    otp_id = _generate(APIClient()).data['otp_id']
    assert admin_client.delete(reverse('otp_delete', args=[otp_id])).status_code == 200
    assert not OtpLog.objects.filter(pk=otp_id).exists()
