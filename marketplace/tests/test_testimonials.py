import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import Patient, PatientTestimonial

from .conftest import client_for, make_user

pytestmark = pytest.mark.django_db


def _payload(doctor, **overrides):
    data = {'doctor_id': doctor.id, 'rating': 5, 'testimonial_text': 'Walking again within a week.',
            'treatment_type': 'Knee Replacement', 'consent_for_display': True}
    data.update(overrides)
    return data


def test_only_consented_testimonials_are_public(patient_client, doctor):
    r = patient_client.post(reverse('testimonial_list'), _payload(doctor), format='json')
    assert r.status_code == status.HTTP_201_CREATED
    assert r.data['data']['patient_name'] == 'Asha Rao'
    assert r.data['data']['region'] == 'global'
    hidden = patient_client.post(reverse('testimonial_list'), _payload(doctor, consent_for_display=False),
                                 format='json').data['data']['id']

    anon = APIClient()
    r = anon.get(reverse('testimonial_list'), {'doctor_id': doctor.id})
    assert r.data['pagination']['total'] == 1
    assert anon.get(reverse('testimonial_detail', args=[hidden])).status_code == status.HTTP_404_NOT_FOUND
    assert patient_client.get(reverse('testimonial_detail', args=[hidden])).status_code == status.HTTP_200_OK
    assert patient_client.get(reverse('testimonial_my')).data['pagination']['total'] == 2


def test_anonymous_testimonial_uses_display_name(patient_client, doctor):
    r = patient_client.post(reverse('testimonial_list'),
                            _payload(doctor, is_anonymous=True, patient_name_display='A. R.'), format='json')
    assert r.data['data']['patient_name'] == 'A. R.'
    r = patient_client.post(reverse('testimonial_list'), _payload(doctor, patient_name_display='Ignored'),
                            format='json')
    t = PatientTestimonial.objects.get(pk=r.data['data']['id'])
    assert t.patient_name_display == ''


def test_booking_must_belong_to_patient(booking, doctor):
    stranger = Patient.objects.create(user=make_user('stranger@example.com', 'patient'), full_name='Stranger')
    r = client_for(stranger.user).post(reverse('testimonial_list'), _payload(doctor, booking_id=booking.id),
                                       format='json')
    assert r.status_code == status.HTTP_403_FORBIDDEN
    r = client_for(stranger.user).post(reverse('testimonial_list'), _payload(doctor, doctor_id=9999), format='json')
    assert r.status_code == status.HTTP_404_NOT_FOUND
    r = client_for(doctor.user).post(reverse('testimonial_list'), _payload(doctor), format='json')
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_verification_and_featured_region_fallback(admin_client, patient_client, doctor):
    pune = patient_client.post(reverse('testimonial_list'), _payload(doctor, region='pune'),
                               format='json').data['data']['id']
    world = patient_client.post(reverse('testimonial_list'), _payload(doctor), format='json').data['data']['id']
    delhi = patient_client.post(reverse('testimonial_list'), _payload(doctor, region='delhi'),
                                format='json').data['data']['id']
    for order, tid in enumerate((pune, world, delhi)):
        r = admin_client.post(reverse('testimonial_verify', args=[tid]),
                              {'is_featured': True, 'display_order': order}, format='json')
        assert r.status_code == status.HTTP_200_OK
        assert r.data['data']['is_verified'] is True

    r = APIClient().get(reverse('testimonial_featured'), {'region': 'pune'})
    assert [t['id'] for t in r.data['data']] == [pune, world]
    r = APIClient().get(reverse('testimonial_featured'), {'limit': 2})
    assert len(r.data['data']) == 2


def test_doctor_listing_is_verified_only_by_default(admin_client, patient_client, doctor):
    first = patient_client.post(reverse('testimonial_list'), _payload(doctor), format='json').data['data']['id']
    patient_client.post(reverse('testimonial_list'), _payload(doctor), format='json')
    admin_client.post(reverse('testimonial_verify', args=[first]), {}, format='json')

    url = reverse('testimonial_doctor', args=[doctor.id])
    anon = APIClient()
    assert anon.get(url).data['pagination']['total'] == 1
    assert anon.get(url, {'verified_only': 'false'}).data['pagination']['total'] == 2
    assert anon.get(reverse('testimonial_doctor', args=[9999])).status_code == status.HTTP_404_NOT_FOUND


def test_only_author_or_admin_edits(patient_client, doctor, admin_client):
    tid = patient_client.post(reverse('testimonial_list'), _payload(doctor), format='json').data['data']['id']
    url = reverse('testimonial_detail', args=[tid])
    other = Patient.objects.create(user=make_user('other@example.com', 'patient'), full_name='Other')

    assert client_for(other.user).patch(url, {'rating': 1}, format='json').status_code == status.HTTP_403_FORBIDDEN
    r = patient_client.patch(url, {'rating': 4, 'consent_for_display': False}, format='json')
    assert r.status_code == status.HTTP_200_OK
    assert r.data['data']['rating'] == 4
    assert admin_client.delete(url).status_code == status.HTTP_200_OK
    assert not PatientTestimonial.objects.filter(pk=tid).exists()
