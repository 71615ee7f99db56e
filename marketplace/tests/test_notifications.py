import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.urls import reverse
from rest_framework import status

from marketplace.models import Notification
from marketplace.services.notifications import _push, group_name, notify

pytestmark = pytest.mark.django_db


def _send(client, user, **extra):
    return client.post(reverse('notification_send'), {
        'user_id': user.id, 'title': 'Surgery reminder', 'message': '<b>Fast</b> from midnight', **extra,
    }, format='json')


def test_admin_sends_sanitised_notification(admin_client, patient):
    r = _send(admin_client, patient.user, type='warning', category='booking')
    assert r.status_code == status.HTTP_201_CREATED
    assert r.data['data']['message'] == 'Fast from midnight'
    assert r.data['data']['type'] == 'warning'


def test_only_admins_send(patient_client, patient):
    assert _send(patient_client, patient.user).status_code == status.HTTP_403_FORBIDDEN


def test_list_mark_read_and_delete(patient_client, patient, admin_user):
    first = notify(patient.user, title='One', message='first')
    notify(patient.user, title='Two', message='second')
    notify(admin_user, title='Private', message='not yours')

    url = reverse('notification_list', args=[patient.user.id])
    r = patient_client.get(url)
    assert r.status_code == 200
    assert len(r.data['data']) == 2
    assert r.data['unread_count'] == 2

    r = patient_client.patch(reverse('notification_read', args=[first.id]))
    assert r.data['data']['is_read'] is True
    assert r.data['data']['read_at'] is not None
    r = patient_client.get(url, {'unread_only': 'true'})
    assert [n['title'] for n in r.data['data']] == ['Two']

    r = patient_client.patch(reverse('notification_read_all', args=[patient.user.id]))
    assert r.data['updated'] == 1
    assert not Notification.objects.filter(user=patient.user, is_read=False).exists()

    assert patient_client.delete(reverse('notification_delete', args=[first.id])).status_code == 200
    assert not Notification.objects.filter(pk=first.id).exists()


def test_other_users_notifications_are_private(patient_client, admin_user):
    n = notify(admin_user, title='Private', message='not yours')
    assert patient_client.get(reverse('notification_list', args=[admin_user.id])).status_code == 403
    assert patient_client.patch(reverse('notification_read', args=[n.id])).status_code == 403
    assert patient_client.delete(reverse('notification_delete', args=[n.id])).status_code == 403


def test_limit_caps_results(patient_client, patient):
    for i in range(5):
        notify(patient.user, title=f'N{i}', message='x')
    r = patient_client.get(reverse('notification_list', args=[patient.user.id]), {'limit': 3})
    assert len(r.data['data']) == 3


def test_push_reaches_the_users_group(patient):
    layer = get_channel_layer()
    channel = async_to_sync(layer.new_channel)()
    async_to_sync(layer.group_add)(group_name(patient.user.id), channel)

    n = Notification.objects.create(user=patient.user, title='Live', message='pushed')
    _push(n)

    event = async_to_sync(layer.receive)(channel)
    assert event['type'] == 'notification.created'
    assert event['notification']['id'] == n.id
