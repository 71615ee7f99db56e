"""Profile completeness and read models for marketplace entities."""
from __future__ import annotations

from marketplace.models import Doctor, Hospital, HospitalUser, Implant, ImplantUser, Patient, Surgery, User

PATIENT_TRACKED_FIELDS = (
    'full_name', 'phone', 'date_of_birth', 'gender', 'blood_group', 'address', 'city', 'state',
    'pincode', 'emergency_contact_name', 'emergency_contact_phone', 'emergency_contact_relation',
    'current_medications', 'allergies', 'chronic_conditions', 'insurance_provider', 'insurance_number',
)

DOCTOR_TRACKED_FIELDS = (
    'full_name', 'phone', 'primary_specialization', 'medical_council_number', 'experience_years',
    'consultation_fee', 'bio', 'training_type', 'fellowships', 'procedures_completed',
    'secondary_specializations', 'languages_spoken', 'clinic_address', 'city', 'state', 'pincode',
    'website_url', 'linkedin_url', 'image_url', 'surgery_fee', 'followup_fee',
)

# Consultation flags always count as answered.
DOCTOR_FLAG_FIELDS = ('online_consultation', 'in_person_consultation', 'emergency_services')


def _percent(done: int, total: int) -> int:
    return (done * 100) // total


def patient_completeness(p: Patient) -> int:
    done = sum(1 for f in PATIENT_TRACKED_FIELDS if getattr(p, f))
    done += 1 if p.user.email else 0
    return _percent(done, len(PATIENT_TRACKED_FIELDS) + 1)


def doctor_completeness(d: Doctor) -> int:
    done = sum(1 for f in DOCTOR_TRACKED_FIELDS if getattr(d, f))
    done += len(DOCTOR_FLAG_FIELDS)
    done += 1 if d.user.email else 0
    return _percent(done, len(DOCTOR_TRACKED_FIELDS) + len(DOCTOR_FLAG_FIELDS) + 1)


def _money(v):
    return str(v) if v is not None else None


def _dt(v):
    return v.isoformat() if v else None


def serialize_user(u: User) -> dict:
    return {
        'id': u.id,
        'email': u.email,
        'role': u.role,
        'is_active': u.is_active,
        'email_verified': u.email_verified,
        'last_login': _dt(u.last_login),
    }


def serialize_patient(p: Patient) -> dict:
    return {
        'id': p.id,
        'user_id': p.user_id,
        'email': p.user.email,
        'full_name': p.full_name,
        'phone': p.phone,
        'date_of_birth': _dt(p.date_of_birth),
        'gender': p.gender,
        'blood_group': p.blood_group,
        'address': p.address,
        'city': p.city,
        'state': p.state,
        'pincode': p.pincode,
        'emergency_contact_name': p.emergency_contact_name,
        'emergency_contact_phone': p.emergency_contact_phone,
        'emergency_contact_relation': p.emergency_contact_relation,
        'current_medications': p.current_medications,
        'allergies': p.allergies,
        'chronic_conditions': p.chronic_conditions,
        'insurance_provider': p.insurance_provider,
        'insurance_number': p.insurance_number,
        'profile_completeness': p.profile_completeness,
        'created_at': _dt(p.created_at),
    }


def serialize_surgery(s: Surgery) -> dict:
    return {
        'id': s.id,
        'name': s.name,
        'category': s.category,
        'description': s.description,
        'base_price': _money(s.base_price),
    }


def _approval(e) -> dict:
    return {
        'status': e.status,
        'approved_at': _dt(e.approved_at),
        'approved_by': e.approved_by_id,
        'rejected_at': _dt(e.rejected_at),
        'rejection_reason': e.rejection_reason,
    }


def serialize_doctor(d: Doctor, *, include_surgeries: bool = True) -> dict:
    data = {
        'id': d.id,
        'user_id': d.user_id,
        'email': d.user.email,
        'full_name': d.full_name,
        'phone': d.phone,
        'gender': d.gender,
        'primary_specialization': d.primary_specialization,
        'secondary_specializations': d.secondary_specializations,
        'medical_council_number': d.medical_council_number,
        'medical_council_state': d.medical_council_state,
        'experience_years': d.experience_years,
        'consultation_fee': _money(d.consultation_fee),
        'surgery_fee': _money(d.surgery_fee),
        'followup_fee': _money(d.followup_fee),
        'bio': d.bio,
        'training_type': d.training_type,
        'fellowships': d.fellowships,
        'procedures_completed': d.procedures_completed,
        'languages_spoken': d.languages_spoken,
        'clinic_address': d.clinic_address,
        'city': d.city,
        'state': d.state,
        'pincode': d.pincode,
        'online_consultation': d.online_consultation,
        'in_person_consultation': d.in_person_consultation,
        'emergency_services': d.emergency_services,
        'website_url': d.website_url,
        'linkedin_url': d.linkedin_url,
        'image_url': d.image_url,
        'rating': _money(d.rating),
        'profile_completeness': d.profile_completeness,
        'created_at': _dt(d.created_at),
        **_approval(d),
    }
    if include_surgeries:
        data['surgeries'] = [
            {
                'surgery_id': ds.surgery_id,
                'name': ds.surgery.name,
                'is_primary': ds.is_primary,
                'experience_years': ds.experience_years,
                'procedures_completed': ds.procedures_completed,
            }
            for ds in d.doctor_surgeries.select_related('surgery')
        ]
    return data


def serialize_hospital(h: Hospital) -> dict:
    return {
        'id': h.id,
        'name': h.name,
        'zone': h.zone,
        'address': h.address,
        'city': h.city,
        'state': h.state,
        'pincode': h.pincode,
        'facilities': h.facilities,
        'accreditations': h.accreditations,
        'total_beds': h.total_beds,
        'icu_beds': h.icu_beds,
        'operation_theaters': h.operation_theaters,
        'emergency_services': h.emergency_services,
        'insurance_accepted': h.insurance_accepted,
        'base_price': _money(h.base_price),
        'consumables_cost': _money(h.consumables_cost),
        'room_charges_per_day': _money(h.room_charges_per_day),
        'phone': h.phone,
        'email': h.email,
        'website': h.website,
        'rating': _money(h.rating),
        'created_at': _dt(h.created_at),
        **_approval(h),
    }


def serialize_staff(s: HospitalUser | ImplantUser) -> dict:
    data = {
        'id': s.id,
        'user_id': s.user_id,
        'email': s.user.email,
        'full_name': s.full_name,
        'phone': s.phone,
        'designation': s.designation,
        'is_primary_admin': s.is_primary_admin,
        'is_active': s.user.is_active,
    }
    if isinstance(s, HospitalUser):
        data['department'] = s.department
    return data


def serialize_implant(i: Implant) -> dict:
    return {
        'id': i.id,
        'name': i.name,
        'brand': i.brand,
        'manufacturer': i.manufacturer,
        'material': i.material,
        'surgery_type': i.surgery_type,
        'expected_life': i.expected_life,
        'warranty': i.warranty,
        'success_rate': _money(i.success_rate),
        'price': _money(i.price),
        'description': i.description,
        'features': i.features,
        'created_at': _dt(i.created_at),
        **_approval(i),
    }
