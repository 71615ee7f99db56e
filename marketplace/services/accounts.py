"""
Account creation and credential checks.

Every registration path creates the login and its profile rows inside a
single database transaction.  Patients can sign in immediately; doctors,
hospital staff and implant manufacturer staff are created inactive until
an administrator approves the related entity.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework.exceptions import AuthenticationFailed, PermissionDenied, ValidationError

from marketplace.models import (
    AdminProfile, Doctor, DoctorSurgery, Hospital, HospitalUser, Implant, ImplantUser, Patient, Surgery, User,
)
from marketplace.services.approvals import mark_approved
from marketplace.services.profiles import doctor_completeness, patient_completeness

logger = logging.getLogger(__name__)

PATIENT_FIELDS = (
    'phone', 'date_of_birth', 'gender', 'blood_group', 'address', 'city', 'state', 'pincode',
    'emergency_contact_name', 'emergency_contact_phone', 'emergency_contact_relation',
    'current_medications', 'allergies', 'chronic_conditions', 'insurance_provider', 'insurance_number',
)

DOCTOR_FIELDS = (
    'phone', 'gender', 'primary_specialization', 'secondary_specializations', 'medical_council_state',
    'experience_years', 'consultation_fee', 'surgery_fee', 'followup_fee', 'bio', 'training_type',
    'fellowships', 'procedures_completed', 'languages_spoken', 'clinic_address', 'city', 'state', 'pincode',
    'online_consultation', 'in_person_consultation', 'emergency_services', 'website_url', 'linkedin_url',
    'image_url',
)

HOSPITAL_FIELDS = (
    'zone', 'address', 'city', 'state', 'pincode', 'facilities', 'accreditations', 'total_beds', 'icu_beds',
    'operation_theaters', 'emergency_services', 'insurance_accepted', 'base_price', 'consumables_cost',
    'room_charges_per_day', 'phone', 'email', 'website',
)

IMPLANT_FIELDS = (
    'brand', 'manufacturer', 'material', 'surgery_type', 'expected_life', 'warranty', 'success_rate',
    'price', 'description', 'features',
)


def _pick(data: dict, fields) -> dict:
    return {f: data[f] for f in fields if f in data and data[f] is not None}


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


def create_user(*, email: str, password: str, role: str, is_active: bool = True) -> User:
    email = normalize_email(email)
    if User.objects.filter(email=email).exists():
        raise ValidationError({'email': 'An account with this email already exists'})
    try:
        validate_password(password)
    except DjangoValidationError as e:
        raise ValidationError({'password': e.messages})
    return User.objects.create_user(username=email, email=email, password=password, role=role, is_active=is_active)


def _ensure_council_number_free(number: str) -> None:
    if Doctor.objects.filter(medical_council_number=number).exists():
        raise ValidationError({'medical_council_number': 'A doctor with this medical council number already exists'})


def _attach_surgeries(doctor: Doctor, surgery_ids) -> None:
    ids = list(dict.fromkeys(int(i) for i in surgery_ids or []))
    if not ids:
        return
    found = set(Surgery.objects.filter(pk__in=ids).values_list('pk', flat=True))
    missing = [i for i in ids if i not in found]
    if missing:
        raise ValidationError({'surgery_types': f'Unknown surgery ids: {missing}'})
    DoctorSurgery.objects.bulk_create(
        [DoctorSurgery(doctor=doctor, surgery_id=sid, is_primary=(n == 0)) for n, sid in enumerate(ids)]
    )


def register_patient(data: dict) -> Patient:
    with transaction.atomic():
        user = create_user(email=data['email'], password=data['password'], role='patient')
        patient = Patient(user=user, full_name=data['full_name'], **_pick(data, PATIENT_FIELDS))
        patient.profile_completeness = patient_completeness(patient)
        patient.save()
    logger.info("Registered patient %s", patient.id)
    return patient


def register_doctor(data: dict, *, approved_by: Optional[User] = None) -> Doctor:
    with transaction.atomic():
        _ensure_council_number_free(data['medical_council_number'])
        user = create_user(email=data['email'], password=data['password'], role='doctor',
                           is_active=approved_by is not None)
        doctor = Doctor(user=user, full_name=data['full_name'],
                        medical_council_number=data['medical_council_number'], **_pick(data, DOCTOR_FIELDS))
        if approved_by is not None:
            mark_approved(doctor, by=approved_by)
            user.email_verified = True
            user.save(update_fields=['email_verified'])
        doctor.profile_completeness = doctor_completeness(doctor)
        doctor.save()
        _attach_surgeries(doctor, data.get('surgery_types'))
    logger.info("Registered doctor %s (status=%s)", doctor.id, doctor.status)
    return doctor


def register_hospital(data: dict, *, approved_by: Optional[User] = None) -> HospitalUser:
    with transaction.atomic():
        user = create_user(email=data['email'], password=data['password'], role='hospital',
                           is_active=approved_by is not None)
        hospital = Hospital(name=data['hospital_name'], **_pick(data, HOSPITAL_FIELDS))
        if approved_by is not None:
            mark_approved(hospital, by=approved_by)
            user.email_verified = True
            user.save(update_fields=['email_verified'])
        hospital.save()
        staff = HospitalUser.objects.create(
            user=user, hospital=hospital, full_name=data['full_name'],
            phone=data.get('contact_phone') or '', designation=data.get('designation') or '',
            department=data.get('department') or '', is_primary_admin=True,
        )
    logger.info("Registered hospital %s (status=%s)", hospital.id, hospital.status)
    return staff


def register_implant(data: dict, *, approved_by: Optional[User] = None) -> ImplantUser:
    with transaction.atomic():
        user = create_user(email=data['email'], password=data['password'], role='implant',
                           is_active=approved_by is not None)
        implant = Implant(name=data['implant_name'], **_pick(data, IMPLANT_FIELDS))
        if approved_by is not None:
            mark_approved(implant, by=approved_by)
            user.email_verified = True
            user.save(update_fields=['email_verified'])
        implant.save()
        staff = ImplantUser.objects.create(
            user=user, implant=implant, full_name=data['full_name'],
            phone=data.get('contact_phone') or '', designation=data.get('designation') or '',
            is_primary_admin=True,
        )
    logger.info("Registered implant manufacturer %s (status=%s)", implant.id, implant.status)
    return staff


def register_admin(data: dict) -> AdminProfile:
    with transaction.atomic():
        user = create_user(email=data['email'], password=data['password'], role='admin')
        user.is_staff = True
        user.email_verified = True
        user.save(update_fields=['is_staff', 'email_verified'])
        profile = AdminProfile.objects.create(user=user, full_name=data['full_name'])
    return profile


def add_hospital_staff(hospital: Hospital, data: dict) -> HospitalUser:
    with transaction.atomic():
        user = create_user(email=data['email'], password=data['password'], role='hospital',
                           is_active=hospital.status == Hospital.STATUS_APPROVED)
        return HospitalUser.objects.create(
            user=user, hospital=hospital, full_name=data['full_name'],
            phone=data.get('phone') or '', designation=data.get('designation') or '',
            department=data.get('department') or '', is_primary_admin=False,
        )


def check_credentials(email: str, password: str) -> User:
    """Return the user for valid credentials, counting failures toward lockout."""
    user = User.objects.filter(email=normalize_email(email), is_active=True).first()
    if user is None:
        raise AuthenticationFailed('Invalid email or password', code='invalid_credentials')
    if user.is_account_locked():
        raise PermissionDenied('Account is temporarily locked due to repeated failed logins', code='account_locked')
    if not user.check_password(password):
        user.register_failed_login()
        logger.warning("Failed login for user %s (%s attempts)", user.id, user.failed_login_attempts)
        raise AuthenticationFailed('Invalid email or password', code='invalid_credentials')
    user.reset_failed_logins()
    return user
