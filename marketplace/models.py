"""
Database models for the SurgiBook marketplace.

The data model covers the five account roles (patient, doctor, hospital
staff, implant manufacturer staff and administrators), the surgery
catalogue, bookings, commission bookkeeping, reviews, testimonials,
provider availability, notifications and one-time passwords.  Doctors,
hospitals and implants share the approval fields defined on
:class:`ApprovableModel`.
"""
from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Custom user model keyed by e-mail with a marketplace role.

    ``username`` mirrors the lower-cased e-mail so Django's auth
    machinery keeps working.  Failed logins are counted here and lock
    the account for a while once the configured limit is reached.
    """
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('doctor', 'Doctor'),
        ('patient', 'Patient'),
        ('hospital', 'Hospital'),
        ('implant', 'Implant Manufacturer'),
    ]
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='patient', db_index=True)
    email_verified = models.BooleanField(default=False)
    failed_login_attempts = models.PositiveIntegerField(default=0)
    account_locked_until = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"

    def is_account_locked(self) -> bool:
        return bool(self.account_locked_until and self.account_locked_until > timezone.now())

    def register_failed_login(self) -> None:
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= settings.LOGIN_MAX_FAILED_ATTEMPTS:
            self.account_locked_until = timezone.now() + timedelta(minutes=settings.LOGIN_LOCKOUT_MINUTES)
        self.save(update_fields=['failed_login_attempts', 'account_locked_until'])

    def reset_failed_logins(self) -> None:
        self.failed_login_attempts = 0
        self.account_locked_until = None
        self.last_login = timezone.now()
        self.save(update_fields=['failed_login_attempts', 'account_locked_until', 'last_login'])


class ApprovableModel(models.Model):
    """Shared approval state for entities an administrator must vet."""
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)

    class Meta:
        abstract = True


class AdminProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='admin_profile')
    full_name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.full_name


class Patient(models.Model):
    GENDER_CHOICES = [('male', 'Male'), ('female', 'Female'), ('other', 'Other')]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='patient')
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    blood_group = models.CharField(max_length=5, blank=True)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    pincode = models.CharField(max_length=10, blank=True)
    emergency_contact_name = models.CharField(max_length=255, blank=True)
    emergency_contact_phone = models.CharField(max_length=20, blank=True)
    emergency_contact_relation = models.CharField(max_length=50, blank=True)
    current_medications = models.TextField(blank=True)
    allergies = models.TextField(blank=True)
    chronic_conditions = models.TextField(blank=True)
    insurance_provider = models.CharField(max_length=255, blank=True)
    insurance_number = models.CharField(max_length=100, blank=True)
    profile_completeness = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.full_name


class Surgery(models.Model):
    name = models.CharField(max_length=255, unique=True)
    category = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    base_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'surgeries'

    def __str__(self) -> str:
        return self.name


class Doctor(ApprovableModel):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='doctor')
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, blank=True)
    gender = models.CharField(max_length=10, blank=True)
    primary_specialization = models.CharField(max_length=255, blank=True, db_index=True)
    secondary_specializations = models.JSONField(default=list, blank=True)
    medical_council_number = models.CharField(max_length=100, unique=True)
    medical_council_state = models.CharField(max_length=100, blank=True)
    experience_years = models.PositiveIntegerField(default=0)
    consultation_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    surgery_fee = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    followup_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    bio = models.TextField(blank=True)
    training_type = models.CharField(max_length=100, blank=True)
    fellowships = models.JSONField(default=list, blank=True)
    procedures_completed = models.PositiveIntegerField(default=0)
    languages_spoken = models.JSONField(default=list, blank=True)
    clinic_address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True, db_index=True)
    state = models.CharField(max_length=100, blank=True)
    pincode = models.CharField(max_length=10, blank=True)
    online_consultation = models.BooleanField(default=False)
    in_person_consultation = models.BooleanField(default=True)
    emergency_services = models.BooleanField(default=False)
    website_url = models.URLField(blank=True)
    linkedin_url = models.URLField(blank=True)
    image_url = models.URLField(blank=True)
    rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    profile_completeness = models.PositiveSmallIntegerField(default=0)
    surgeries = models.ManyToManyField(Surgery, through='DoctorSurgery', related_name='doctors')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Dr. {self.full_name}"


class DoctorSurgery(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='doctor_surgeries')
    surgery = models.ForeignKey(Surgery, on_delete=models.CASCADE, related_name='doctor_surgeries')
    is_primary = models.BooleanField(default=False)
    experience_years = models.PositiveIntegerField(default=0)
    procedures_completed = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['doctor', 'surgery'], name='uniq_doctor_surgery'),
        ]


class Hospital(ApprovableModel):
    name = models.CharField(max_length=255)
    zone = models.CharField(max_length=100, blank=True)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True, db_index=True)
    state = models.CharField(max_length=100, blank=True)
    pincode = models.CharField(max_length=10, blank=True)
    facilities = models.JSONField(default=list, blank=True)
    accreditations = models.JSONField(default=list, blank=True)
    total_beds = models.PositiveIntegerField(default=0)
    icu_beds = models.PositiveIntegerField(default=0)
    operation_theaters = models.PositiveIntegerField(default=0)
    emergency_services = models.BooleanField(default=False)
    insurance_accepted = models.JSONField(default=list, blank=True)
    base_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    consumables_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    room_charges_per_day = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    website = models.URLField(blank=True)
    rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name


class HospitalUser(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='hospital_user')
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='staff')
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, blank=True)
    designation = models.CharField(max_length=100, blank=True)
    department = models.CharField(max_length=100, blank=True)
    is_primary_admin = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.full_name} @ {self.hospital_id}"


class Implant(ApprovableModel):
    name = models.CharField(max_length=255)
    brand = models.CharField(max_length=255, blank=True)
    manufacturer = models.CharField(max_length=255, blank=True)
    material = models.CharField(max_length=255, blank=True)
    surgery_type = models.CharField(max_length=255, blank=True, db_index=True)
    expected_life = models.CharField(max_length=100, blank=True)
    warranty = models.CharField(max_length=100, blank=True)
    success_rate = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    description = models.TextField(blank=True)
    features = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.brand} {self.name}".strip()


class ImplantUser(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='implant_user')
    implant = models.ForeignKey(Implant, on_delete=models.CASCADE, related_name='staff')
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, blank=True)
    designation = models.CharField(max_length=100, blank=True)
    is_primary_admin = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.full_name} @ {self.implant_id}"


class Booking(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('confirmed', 'Confirmed'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]
    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('partial', 'Partial'),
        ('paid', 'Paid'),
        ('refunded', 'Refunded'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='bookings')
    surgery = models.ForeignKey(Surgery, on_delete=models.PROTECT, related_name='bookings')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='bookings')
    hospital = models.ForeignKey(Hospital, on_delete=models.PROTECT, related_name='bookings')
    implant = models.ForeignKey(Implant, null=True, blank=True, on_delete=models.SET_NULL, related_name='bookings')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending', db_index=True)
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='pending')
    total_cost = models.DecimalField(max_digits=12, decimal_places=2)
    advance_payment = models.DecimalField(max_digits=12, decimal_places=2)
    appointment_date = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"Booking #{self.pk} ({self.status})"


class CommissionAgreement(models.Model):
    ENTITY_CHOICES = [
        ('doctor', 'Doctor'),
        ('hospital', 'Hospital'),
        ('implant_company', 'Implant Company'),
    ]
    TYPE_CHOICES = [
        ('percentage', 'Percentage'),
        ('fixed_amount', 'Fixed Amount'),
        ('tiered', 'Tiered'),
        ('hybrid', 'Hybrid'),
    ]
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('active', 'Active'),
        ('suspended', 'Suspended'),
        ('terminated', 'Terminated'),
        ('expired', 'Expired'),
    ]
    entity_type = models.CharField(max_length=20, choices=ENTITY_CHOICES)
    entity_id = models.PositiveIntegerField()
    commission_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    commission_rate = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    fixed_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    tiered_structure = models.JSONField(default=list, blank=True)
    minimum_monthly_volume = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    payment_terms = models.CharField(max_length=20, default='net_30')
    currency = models.CharField(max_length=3, default='INR')
    applicable_services = models.JSONField(default=list, blank=True)
    excluded_services = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='draft', db_index=True)
    effective_date = models.DateField()
    expiry_date = models.DateField(null=True, blank=True)
    auto_renewal = models.BooleanField(default=False)
    agreement_document_url = models.URLField(blank=True)
    tax_treatment = models.CharField(max_length=100, blank=True)
    compliance_notes = models.TextField(blank=True)
    total_transactions = models.PositiveIntegerField(default=0)
    total_commission_earned = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    last_commission_date = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    approved_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    approved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id', 'status'], name='marketplace_entity__6c1f0e_idx'),
            models.Index(fields=['effective_date', 'expiry_date'], name='marketplace_effecti_9b2d4a_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.entity_type}:{self.entity_id} {self.commission_type} ({self.status})"


class CommissionTransaction(models.Model):
    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('paid', 'Paid'),
        ('disputed', 'Disputed'),
        ('refunded', 'Refunded'),
    ]
    agreement = models.ForeignKey(CommissionAgreement, on_delete=models.PROTECT, related_name='transactions')
    booking = models.ForeignKey(Booking, on_delete=models.PROTECT, related_name='commission_transactions')
    transaction_amount = models.DecimalField(max_digits=12, decimal_places=2)
    commission_rate_applied = models.DecimalField(max_digits=12, decimal_places=2)
    commission_amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='pending', db_index=True)
    payment_date = models.DateField(null=True, blank=True)
    payment_reference = models.CharField(max_length=255, blank=True)
    service_type = models.CharField(max_length=100, blank=True)
    transaction_date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-transaction_date']
        constraints = [
            models.UniqueConstraint(fields=['agreement', 'booking'], name='uniq_commission_per_booking'),
        ]

    def __str__(self) -> str:
        return f"Commission {self.commission_amount} on booking {self.booking_id}"


class Review(models.Model):
    """A rating left by a patient, doctor or hospital about a marketplace entity.

    Reviews start ``pending`` and only count towards an entity's rating
    once an administrator approves them.
    """
    REVIEWABLE_CHOICES = [
        ('doctor', 'Doctor'),
        ('hospital', 'Hospital'),
        ('implant_company', 'Implant Company'),
        ('booking_experience', 'Booking Experience'),
    ]
    REVIEWER_CHOICES = [
        ('patient', 'Patient'),
        ('doctor', 'Doctor'),
        ('hospital', 'Hospital'),
    ]
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('flagged', 'Flagged'),
    ]
    reviewable_type = models.CharField(max_length=20, choices=REVIEWABLE_CHOICES)
    reviewable_id = models.PositiveIntegerField()
    reviewer = models.ForeignKey(User, on_delete=models.CASCADE, related_name='reviews')
    reviewer_type = models.CharField(max_length=10, choices=REVIEWER_CHOICES)
    booking = models.ForeignKey(Booking, null=True, blank=True, on_delete=models.SET_NULL, related_name='reviews')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    review_title = models.CharField(max_length=200, blank=True)
    review_text = models.TextField(blank=True)
    detailed_ratings = models.JSONField(default=dict, blank=True)
    procedure_type = models.CharField(max_length=255, blank=True)
    treatment_date = models.DateField(null=True, blank=True)
    is_verified = models.BooleanField(default=False)
    is_anonymous = models.BooleanField(default=False)
    is_featured = models.BooleanField(default=False)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending', db_index=True)
    moderation_notes = models.TextField(blank=True)
    moderated_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    moderated_at = models.DateTimeField(null=True, blank=True)
    helpful_count = models.PositiveIntegerField(default=0)
    not_helpful_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['reviewable_type', 'reviewable_id', 'status'], name='marketplace_reviewa_3f8c2d_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.rating}/5 on {self.reviewable_type}:{self.reviewable_id} ({self.status})"


class DoctorAvailability(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='availability')
    available_date = models.DateField(db_index=True)
    available_time_slots = models.JSONField(default=list, blank=True)
    willing_to_travel = models.BooleanField(default=False)
    max_travel_distance_km = models.PositiveIntegerField(default=0)
    preferred_cities = models.JSONField(default=list, blank=True)
    consultation_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    surgery_fee = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    travel_allowance = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    required_equipment = models.JSONField(default=list, blank=True)
    required_support_staff = models.PositiveSmallIntegerField(default=2)
    is_available = models.BooleanField(default=True)
    booking_lead_time_hours = models.PositiveSmallIntegerField(default=48)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['available_date', '-created_at']
        verbose_name_plural = 'doctor availability'

    def __str__(self) -> str:
        return f"Doctor {self.doctor_id} on {self.available_date}"


class HospitalAvailability(models.Model):
    FACILITY_CHOICES = [
        ('operation_theater', 'Operation Theater'),
        ('consultation_room', 'Consultation Room'),
        ('diagnostic_center', 'Diagnostic Center'),
    ]
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='availability')
    facility_type = models.CharField(max_length=20, choices=FACILITY_CHOICES)
    facility_name = models.CharField(max_length=255)
    specialization_supported = models.JSONField(default=list, blank=True)
    equipment_available = models.JSONField(default=list, blank=True)
    available_date = models.DateField(db_index=True)
    available_time_slots = models.JSONField(default=list, blank=True)
    facility_cost_per_hour = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    equipment_cost = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    support_staff_cost = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    total_package_cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    is_available = models.BooleanField(default=True)
    booking_lead_time_hours = models.PositiveSmallIntegerField(default=24)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['available_date', 'facility_type']
        verbose_name_plural = 'hospital availability'

    def __str__(self) -> str:
        return f"{self.facility_name} @ {self.hospital_id} on {self.available_date}"


class PatientTestimonial(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='testimonials')
    patient = models.ForeignKey(Patient, null=True, blank=True, on_delete=models.SET_NULL,
                                related_name='testimonials')
    hospital = models.ForeignKey(Hospital, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    booking = models.ForeignKey(Booking, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    testimonial_text = models.TextField()
    treatment_type = models.CharField(max_length=255, blank=True)
    is_featured = models.BooleanField(default=False)
    display_order = models.PositiveIntegerField(default=0)
    region = models.CharField(max_length=100, default='global', db_index=True)
    consent_for_display = models.BooleanField(default=False)
    is_anonymous = models.BooleanField(default=False)
    patient_name_display = models.CharField(max_length=100, blank=True)
    is_verified = models.BooleanField(default=False)
    verified_at = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['display_order', '-created_at']

    def __str__(self) -> str:
        return f"Testimonial for doctor {self.doctor_id} ({self.rating}/5)"


class Notification(models.Model):
    TYPE_CHOICES = [
        ('info', 'Info'),
        ('success', 'Success'),
        ('warning', 'Warning'),
        ('error', 'Error'),
    ]
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='info')
    category = models.CharField(max_length=50, default='system')
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    action_url = models.CharField(max_length=500, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read', 'created_at'], name='marketplace_user_id_4e7a1b_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.title} -> {self.user_id}"


class OtpLog(models.Model):
    TYPE_CHOICES = [
        ('login', 'Login'),
        ('registration', 'Registration'),
        ('password_reset', 'Password Reset'),
        ('phone_verification', 'Phone Verification'),
        ('email_verification', 'Email Verification'),
    ]
    DELIVERY_CHOICES = [
        ('sms', 'SMS'),
        ('email', 'Email'),
        ('whatsapp', 'WhatsApp'),
    ]
    STATUS_CHOICES = [
        ('sent', 'Sent'),
        ('verified', 'Verified'),
        ('expired', 'Expired'),
        ('failed', 'Failed'),
    ]
    user = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='otp_logs')
    phone = models.CharField(max_length=20, blank=True, db_index=True)
    email = models.EmailField(blank=True, db_index=True)
    otp_code = models.CharField(max_length=10)
    otp_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    delivery_method = models.CharField(max_length=10, choices=DELIVERY_CHOICES)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='sent', db_index=True)
    attempts = models.PositiveSmallIntegerField(default=0)
    max_attempts = models.PositiveSmallIntegerField(default=3)
    expires_at = models.DateTimeField()
    verified_at = models.DateTimeField(null=True, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"OTP {self.otp_type} via {self.delivery_method} ({self.status})"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='marketplace_action_2f8c3d_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='marketplace_object__7a5e9f_idx'),
        ]
