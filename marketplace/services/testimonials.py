"""
Patient testimonials shown on doctor profiles and the landing page.

Only testimonials the patient consented to display are public.  An
administrator verifies a testimonial and may feature it; featured
testimonials are served per region with ``global`` ones as fallback.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from marketplace.models import Booking, Doctor, Hospital, Patient, PatientTestimonial, User

logger = logging.getLogger(__name__)

DEFAULT_REGION = 'global'


def public_testimonials():
    return PatientTestimonial.objects.select_related('doctor', 'patient').filter(consent_for_display=True)


def can_edit(user: User, t: PatientTestimonial) -> bool:
    return user.role == 'admin' or (t.patient is not None and t.patient.user_id == user.id)


def _display_name(is_anonymous: bool, name: str) -> str:
    return (name or '') if is_anonymous else ''


def create_testimonial(user: User, data: dict) -> PatientTestimonial:
    data = dict(data)
    doctor = get_object_or_404(Doctor, pk=data.pop('doctor_id'))
    patient_id = data.pop('patient_id', None)
    if user.role == 'admin':
        patient = get_object_or_404(Patient, pk=patient_id) if patient_id else None
    else:
        patient = get_object_or_404(Patient, user=user)
    hospital_id = data.pop('hospital_id', None)
    hospital = get_object_or_404(Hospital, pk=hospital_id) if hospital_id else None
    booking_id = data.pop('booking_id', None)
    booking = None
    if booking_id:
        booking = get_object_or_404(Booking, pk=booking_id)
        if user.role != 'admin' and booking.patient_id != patient.id:
            raise PermissionDenied('You can only write testimonials for your own bookings')
        patient = patient or booking.patient
    is_anonymous = data.get('is_anonymous', False)
    data['patient_name_display'] = _display_name(is_anonymous, data.get('patient_name_display', ''))
    data['region'] = data.get('region') or DEFAULT_REGION
    t = PatientTestimonial.objects.create(doctor=doctor, patient=patient, hospital=hospital, booking=booking,
                                          **data)
    logger.info("Testimonial %s created for doctor %s", t.id, doctor.id)
    return t


def update_testimonial(t: PatientTestimonial, changes: dict) -> PatientTestimonial:
    for field, value in changes.items():
        setattr(t, field, value)
    if 'region' in changes and not t.region:
        t.region = DEFAULT_REGION
    t.patient_name_display = _display_name(t.is_anonymous, t.patient_name_display)
    t.save()
    return t


def verify(t: PatientTestimonial, *, by: User, is_featured: bool = False, display_order: int = 0) -> PatientTestimonial:
    t.is_verified = True
    t.verified_at = timezone.now()
    t.verified_by = by
    t.is_featured = is_featured
    t.display_order = display_order
    t.save(update_fields=['is_verified', 'verified_at', 'verified_by', 'is_featured', 'display_order', 'updated_at'])
    logger.info("Testimonial %s verified by user %s (featured=%s)", t.id, by.id, is_featured)
    return t


def featured(region: Optional[str] = None, limit: int = 6):
    qs = public_testimonials().filter(is_featured=True, is_verified=True)
    if region:
        qs = qs.filter(Q(region=region) | Q(region=DEFAULT_REGION))
    return list(qs.order_by('display_order', '-created_at')[:limit])


def serialize_testimonial(t: PatientTestimonial) -> dict:
    if t.is_anonymous:
        author = t.patient_name_display or 'Anonymous'
    else:
        author = t.patient.full_name if t.patient else ''
    return {
        'id': t.id,
        'doctor': {'id': t.doctor_id, 'full_name': t.doctor.full_name,
                   'primary_specialization': t.doctor.primary_specialization},
        'hospital_id': t.hospital_id,
        'booking_id': t.booking_id,
        'patient_name': author,
        'rating': t.rating,
        'testimonial_text': t.testimonial_text,
        'treatment_type': t.treatment_type,
        'region': t.region,
        'is_featured': t.is_featured,
        'display_order': t.display_order,
        'consent_for_display': t.consent_for_display,
        'is_anonymous': t.is_anonymous,
        'is_verified': t.is_verified,
        'verified_at': t.verified_at.isoformat() if t.verified_at else None,
        'created_at': t.created_at.isoformat() if t.created_at else None,
    }
