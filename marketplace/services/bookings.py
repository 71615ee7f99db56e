"""
Booking pricing, access rules and status changes.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone

from marketplace.exceptions import InvalidTransition
from marketplace.models import Booking, Doctor, Hospital, Implant, Patient, Surgery, User
from marketplace.services.commission import quantize_money
from marketplace.services.notifications import notify

logger = logging.getLogger(__name__)


def _can_transition(current: str, new: str) -> bool:
    transitions = {
        'pending': ['confirmed', 'cancelled'],
        'confirmed': ['completed', 'cancelled'],
        'completed': [],
        'cancelled': [],
    }
    return new in transitions.get(current, [])


def price_booking(surgery: Surgery, doctor: Doctor, hospital: Hospital,
                  implant: Optional[Implant]) -> tuple[Decimal, Decimal]:
    """Return ``(total_cost, advance_payment)`` for the chosen combination."""
    parts = [
        surgery.base_price,
        hospital.base_price,
        hospital.consumables_cost,
        implant.price if implant else None,
        doctor.surgery_fee,
    ]
    total = sum((Decimal(p) for p in parts if p is not None), Decimal('0'))
    if total <= 0:
        total = Decimal(settings.BOOKING_DEFAULT_TOTAL_COST)
    advance = total * Decimal(settings.BOOKING_ADVANCE_RATE)
    return quantize_money(total), quantize_money(advance)


def create_booking(*, patient: Patient, surgery_id: int, doctor_id: int, hospital_id: int,
                   implant_id: Optional[int] = None, appointment_date=None, notes: str = '') -> Booking:
    surgery = get_object_or_404(Surgery, pk=surgery_id)
    doctor = get_object_or_404(Doctor, pk=doctor_id, status=Doctor.STATUS_APPROVED)
    hospital = get_object_or_404(Hospital, pk=hospital_id, status=Hospital.STATUS_APPROVED)
    implant = get_object_or_404(Implant, pk=implant_id, status=Implant.STATUS_APPROVED) if implant_id else None
    total, advance = price_booking(surgery, doctor, hospital, implant)
    with transaction.atomic():
        booking = Booking.objects.create(
            patient=patient, surgery=surgery, doctor=doctor, hospital=hospital, implant=implant,
            total_cost=total, advance_payment=advance, appointment_date=appointment_date, notes=notes or '',
        )
        notify(
            doctor.user,
            title='New booking request',
            message=f'{patient.full_name} requested {surgery.name} at {hospital.name}.',
            category='booking',
            action_url=f'/bookings/{booking.id}',
            metadata={'booking_id': booking.id},
        )
    logger.info("Booking %s created for patient %s (total=%s)", booking.id, patient.id, total)
    return booking


def can_view(user: User, booking: Booking) -> bool:
    role = getattr(user, 'role', None)
    if role == 'admin':
        return True
    if role == 'patient':
        return booking.patient.user_id == user.id
    if role == 'doctor':
        return booking.doctor.user_id == user.id
    if role == 'hospital':
        return booking.hospital.staff.filter(user_id=user.id).exists()
    if role == 'implant':
        return booking.implant_id is not None and booking.implant.staff.filter(user_id=user.id).exists()
    return False


def can_modify(user: User, booking: Booking) -> bool:
    role = getattr(user, 'role', None)
    if role == 'admin':
        return True
    if role == 'patient':
        return booking.patient.user_id == user.id
    if role == 'doctor':
        return booking.doctor.user_id == user.id
    return False


def update_booking(booking: Booking, changes: dict) -> Booking:
    previous = booking.status
    new_status = changes.get('status')
    if new_status and new_status != previous:
        if not _can_transition(previous, new_status):
            raise InvalidTransition(f'Cannot move booking from {previous} to {new_status}')
        booking.status = new_status
        now = timezone.now()
        if new_status == 'confirmed':
            booking.confirmed_at = now
        elif new_status == 'completed':
            booking.completed_at = now
        elif new_status == 'cancelled':
            booking.cancelled_at = now
    for field in ('payment_status', 'appointment_date', 'notes'):
        if field in changes:
            setattr(booking, field, changes[field])
    with transaction.atomic():
        booking.save()
        if booking.status != previous:
            notify(
                booking.patient.user,
                title='Booking updated',
                message=f'Your booking #{booking.id} is now {booking.status}.',
                type='success' if booking.status in ('confirmed', 'completed') else 'info',
                category='booking',
                action_url=f'/bookings/{booking.id}',
                metadata={'booking_id': booking.id, 'status': booking.status},
            )
    return booking


def cancel_booking(booking: Booking) -> Booking:
    if booking.status == 'cancelled':
        return booking
    if booking.status == 'completed':
        raise InvalidTransition('A completed booking cannot be cancelled')
    return update_booking(booking, {'status': 'cancelled'})


def serialize_booking(b: Booking) -> dict:
    return {
        'id': b.id,
        'patient_id': b.patient_id,
        'patient_name': b.patient.full_name,
        'surgery_id': b.surgery_id,
        'surgery_name': b.surgery.name,
        'doctor_id': b.doctor_id,
        'doctor_name': b.doctor.full_name,
        'hospital_id': b.hospital_id,
        'hospital_name': b.hospital.name,
        'implant_id': b.implant_id,
        'implant_name': b.implant.name if b.implant_id else None,
        'status': b.status,
        'payment_status': b.payment_status,
        'total_cost': str(b.total_cost),
        'advance_payment': str(b.advance_payment),
        'appointment_date': b.appointment_date.isoformat() if b.appointment_date else None,
        'notes': b.notes,
        'confirmed_at': b.confirmed_at.isoformat() if b.confirmed_at else None,
        'completed_at': b.completed_at.isoformat() if b.completed_at else None,
        'cancelled_at': b.cancelled_at.isoformat() if b.cancelled_at else None,
        'created_at': b.created_at.isoformat() if b.created_at else None,
    }


BOOKING_RELATED = ('patient', 'surgery', 'doctor', 'hospital', 'implant')
