from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import Notification, Patient, Review

from .conftest import client_for, make_user

pytestmark = pytest.mark.django_db


@pytest.fixture
def other_patient(db):
    user = make_user('second@example.com', 'patient')
    return Patient.objects.create(user=user, full_name='Kiran Das')


def _review(client, doctor, **overrides):
    data = {'reviewable_type': 'doctor', 'reviewable_id': doctor.id, 'rating': 5,
            'review_title': 'Great surgeon', 'review_text': '<b>Smooth</b> recovery'}
    data.update(overrides)
    return client.post(reverse('review_list'), data, format='json')


def test_new_review_waits_for_moderation(patient_client, doctor):
    r = _review(patient_client, doctor)
    assert r.status_code == status.HTTP_201_CREATED
    assert r.data['data']['status'] == 'pending'
    assert r.data['data']['review_text'] == 'Smooth recovery'

    public = client_for(make_user('reader@example.com', 'patient')).get(reverse('review_list'))
    assert public.data['pagination']['total'] == 0
    # the author still sees their own pending review
    mine = patient_client.get(reverse('review_my'))
    assert mine.data['pagination']['total'] == 1


def test_moderation_rolls_rating_up(admin_client, patient_client, other_patient, doctor):
    first = _review(patient_client, doctor, rating=4).data['data']['id']
    second = _review(client_for(other_patient.user), doctor, rating=5).data['data']['id']

    for review_id in (first, second):
        r = admin_client.post(reverse('review_moderate', args=[review_id]), {'status': 'approved'}, format='json')
        assert r.status_code == status.HTTP_200_OK
    doctor.refresh_from_db()
    assert doctor.rating == Decimal('4.50')
    assert Notification.objects.filter(user=other_patient.user, category='review').exists()

    r = admin_client.post(reverse('review_moderate', args=[second]),
                          {'status': 'flagged', 'moderation_notes': 'Suspected duplicate'}, format='json')
    assert r.data['data']['status'] == 'flagged'
    doctor.refresh_from_db()
    assert doctor.rating == Decimal('4.00')


def test_editing_an_approved_review_sends_it_back(admin_client, patient_client, doctor):
    review_id = _review(patient_client, doctor, rating=3).data['data']['id']
    admin_client.post(reverse('review_moderate', args=[review_id]), {'status': 'approved'}, format='json')

    r = patient_client.patch(reverse('review_detail', args=[review_id]), {'rating': 1}, format='json')
    assert r.status_code == status.HTTP_200_OK
    assert r.data['data']['status'] == 'pending'
    doctor.refresh_from_db()
    assert doctor.rating == Decimal('0.00')


def test_only_author_or_admin_edits(patient_client, other_patient, doctor, admin_client):
    review_id = _review(patient_client, doctor).data['data']['id']
    r = client_for(other_patient.user).delete(reverse('review_detail', args=[review_id]))
    assert r.status_code == status.HTTP_403_FORBIDDEN
    r = admin_client.delete(reverse('review_detail', args=[review_id]))
    assert r.status_code == status.HTTP_200_OK
    assert not Review.objects.filter(pk=review_id).exists()


def test_booking_reviews_are_verified_for_participants(patient_client, other_patient, booking):
    r = patient_client.post(reverse('review_list'), {
        'reviewable_type': 'booking_experience', 'reviewable_id': booking.id, 'rating': 4,
    }, format='json')
    assert r.status_code == status.HTTP_201_CREATED
    assert r.data['data']['is_verified'] is True
    assert r.data['data']['booking_id'] == booking.id

    r = client_for(other_patient.user).post(reverse('review_list'), {
        'reviewable_type': 'hospital', 'reviewable_id': booking.hospital_id, 'booking_id': booking.id, 'rating': 2,
    }, format='json')
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_reviewer_rules(doctor, admin_client, patient_client):
    r = _review(client_for(doctor.user), doctor)
    assert r.status_code == status.HTTP_403_FORBIDDEN
    r = _review(admin_client, doctor)
    assert r.status_code == status.HTTP_403_FORBIDDEN
    r = _review(patient_client, doctor, reviewable_id=9999)
    assert r.status_code == status.HTTP_404_NOT_FOUND
    r = _review(patient_client, doctor, rating=6)
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_entity_listing_reports_statistics(admin_client, patient_client, other_patient, doctor):
    for c, rating in ((patient_client, 5), (client_for(other_patient.user), 3)):
        review_id = _review(c, doctor, rating=rating).data['data']['id']
        admin_client.post(reverse('review_moderate', args=[review_id]), {'status': 'approved'}, format='json')

    anon = APIClient()
    r = anon.get(reverse('review_entity', args=['doctor', doctor.id]))
    assert r.status_code == status.HTTP_200_OK
    stats = r.data['statistics']
    assert stats['total_reviews'] == 2
    assert stats['average_rating'] == '4.00'
    assert stats['rating_breakdown']['5'] == 1
    assert stats['rating_breakdown']['3'] == 1

    r = anon.get(reverse('review_entity', args=['clinic', doctor.id]))
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_helpful_votes(admin_client, patient_client, other_patient, doctor):
    review_id = _review(patient_client, doctor).data['data']['id']
    admin_client.post(reverse('review_moderate', args=[review_id]), {'status': 'approved'}, format='json')
    voter = client_for(other_patient.user)
    url = reverse('review_helpful', args=[review_id])

    assert voter.post(url, {'is_helpful': True}, format='json').data['data']['helpful_count'] == 1
    r = voter.post(url, {'is_helpful': False}, format='json')
    assert r.data['data'] == {'helpful_count': 1, 'not_helpful_count': 1}
    assert voter.post(url, {'is_helpful': 'perhaps'}, format='json').status_code == status.HTTP_400_BAD_REQUEST
