"""Doctor and hospital availability calendars."""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from marketplace.models import Doctor, DoctorAvailability, Hospital, HospitalAvailability, HospitalUser, User

logger = logging.getLogger(__name__)


def _money(v):
    return str(v) if v is not None else None


def owns_doctor(user: User, doctor: Doctor) -> bool:
    return user.role == 'admin' or doctor.user_id == user.id


def owns_hospital(user: User, hospital: Hospital) -> bool:
    return user.role == 'admin' or hospital.staff.filter(user=user).exists()


def _resolve_doctor(user: User, doctor_id: Optional[int]) -> Doctor:
    if user.role == 'admin':
        if not doctor_id:
            raise ValidationError({'doctor_id': 'doctor_id is required'})
        return get_object_or_404(Doctor, pk=doctor_id)
    doctor = get_object_or_404(Doctor, user=user)
    if doctor_id and doctor_id != doctor.id:
        raise PermissionDenied('You can only manage your own availability')
    return doctor


def _resolve_hospital(user: User, hospital_id: Optional[int]) -> Hospital:
    if user.role == 'admin':
        if not hospital_id:
            raise ValidationError({'hospital_id': 'hospital_id is required'})
        return get_object_or_404(Hospital, pk=hospital_id)
    staff = get_object_or_404(HospitalUser.objects.select_related('hospital'), user=user)
    if hospital_id and hospital_id != staff.hospital_id:
        raise PermissionDenied('You can only manage your own hospital availability')
    return staff.hospital


def create_doctor_slot(user: User, data: dict) -> DoctorAvailability:
    data = dict(data)
    doctor = _resolve_doctor(user, data.pop('doctor_id', None))
    slot = DoctorAvailability.objects.create(doctor=doctor, **data)
    logger.info("Doctor %s published availability %s for %s", doctor.id, slot.id, slot.available_date)
    return slot


def create_hospital_slot(user: User, data: dict) -> HospitalAvailability:
    data = dict(data)
    hospital = _resolve_hospital(user, data.pop('hospital_id', None))
    slot = HospitalAvailability.objects.create(hospital=hospital, **data)
    logger.info("Hospital %s published %s availability %s for %s",
                hospital.id, slot.facility_type, slot.id, slot.available_date)
    return slot


def update_slot(slot, changes: dict):
    for key in ('doctor_id', 'hospital_id'):
        changes.pop(key, None)
    for field, value in changes.items():
        setattr(slot, field, value)
    slot.save()
    return slot


def doctor_listing(params: dict):
    qs = (DoctorAvailability.objects.select_related('doctor')
          .filter(doctor__status=Doctor.STATUS_APPROVED, is_available=True)
          .order_by('available_date', '-created_at'))
    if params.get('doctor_id'):
        qs = qs.filter(doctor_id=params['doctor_id'])
    if params.get('available_date'):
        qs = qs.filter(available_date=params['available_date'])
    if params.get('willing_to_travel') is not None:
        qs = qs.filter(willing_to_travel=params['willing_to_travel'])
    if params.get('city'):
        city = params['city']
        qs = qs.filter(Q(preferred_cities__icontains=city) | Q(doctor__city__iexact=city))
    if params.get('specialization'):
        spec = params['specialization']
        qs = qs.filter(Q(doctor__primary_specialization__icontains=spec)
                       | Q(doctor__secondary_specializations__icontains=spec))
    return qs


def traveling_doctors(params: dict):
    """Surgeons willing to travel, optionally narrowed by city, speciality, date and reach."""
    qs = (DoctorAvailability.objects.select_related('doctor')
          .filter(doctor__status=Doctor.STATUS_APPROVED, is_available=True, willing_to_travel=True)
          .order_by('available_date', '-max_travel_distance_km'))
    if params.get('target_city'):
        qs = qs.filter(preferred_cities__icontains=params['target_city'])
    if params.get('specialization'):
        qs = qs.filter(doctor__primary_specialization__icontains=params['specialization'])
    if params.get('available_date'):
        qs = qs.filter(available_date=params['available_date'])
    if params.get('max_distance') is not None:
        qs = qs.filter(max_travel_distance_km__gte=params['max_distance'])
    return qs


def doctor_calendar(doctor: Doctor, *, upcoming_only: bool = True, today: Optional[date] = None):
    qs = doctor.availability.order_by('available_date', '-created_at')
    if upcoming_only:
        qs = qs.filter(available_date__gte=today or timezone.localdate())
    return qs


def hospital_listing(params: dict):
    qs = (HospitalAvailability.objects.select_related('hospital')
          .filter(hospital__status=Hospital.STATUS_APPROVED, is_available=True)
          .order_by('available_date', 'facility_type'))
    if params.get('hospital_id'):
        qs = qs.filter(hospital_id=params['hospital_id'])
    if params.get('facility_type'):
        qs = qs.filter(facility_type=params['facility_type'])
    if params.get('available_date'):
        qs = qs.filter(available_date=params['available_date'])
    if params.get('specialization'):
        qs = qs.filter(specialization_supported__icontains=params['specialization'])
    if params.get('city'):
        qs = qs.filter(hospital__city__iexact=params['city'])
    return qs


def serialize_doctor_slot(a: DoctorAvailability) -> dict:
    return {
        'id': a.id,
        'doctor': {
            'id': a.doctor_id,
            'full_name': a.doctor.full_name,
            'primary_specialization': a.doctor.primary_specialization,
            'city': a.doctor.city,
        },
        'available_date': a.available_date.isoformat(),
        'available_time_slots': a.available_time_slots,
        'willing_to_travel': a.willing_to_travel,
        'max_travel_distance_km': a.max_travel_distance_km,
        'preferred_cities': a.preferred_cities,
        'consultation_fee': _money(a.consultation_fee),
        'surgery_fee': _money(a.surgery_fee),
        'travel_allowance': _money(a.travel_allowance),
        'required_equipment': a.required_equipment,
        'required_support_staff': a.required_support_staff,
        'is_available': a.is_available,
        'booking_lead_time_hours': a.booking_lead_time_hours,
    }


def serialize_hospital_slot(a: HospitalAvailability) -> dict:
    return {
        'id': a.id,
        'hospital': {'id': a.hospital_id, 'name': a.hospital.name, 'city': a.hospital.city},
        'facility_type': a.facility_type,
        'facility_name': a.facility_name,
        'specialization_supported': a.specialization_supported,
        'equipment_available': a.equipment_available,
        'available_date': a.available_date.isoformat(),
        'available_time_slots': a.available_time_slots,
        'facility_cost_per_hour': _money(a.facility_cost_per_hour),
        'equipment_cost': _money(a.equipment_cost),
        'support_staff_cost': _money(a.support_staff_cost),
        'total_package_cost': _money(a.total_package_cost),
        'is_available': a.is_available,
        'booking_lead_time_hours': a.booking_lead_time_hours,
    }
