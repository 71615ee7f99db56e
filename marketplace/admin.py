"""
Django admin registrations for the marketplace models.

Approvals and agreement activation go through the API; the admin site
is for inspection and manual fixes.
"""

from django.contrib import admin

from .models import (
    AdminProfile,
    AuditEvent,
    Booking,
    CommissionAgreement,
    CommissionTransaction,
    Doctor,
    DoctorAvailability,
    DoctorSurgery,
    Hospital,
    HospitalAvailability,
    HospitalUser,
    Implant,
    ImplantUser,
    Notification,
    OtpLog,
    Patient,
    PatientTestimonial,
    Review,
    Surgery,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'role', 'is_active', 'email_verified', 'failed_login_attempts', 'last_login')
    list_filter = ('role', 'is_active', 'email_verified')
    search_fields = ('email', 'username')


@admin.register(AdminProfile)
class AdminProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'full_name', 'created_at')
    search_fields = ('full_name', 'user__email')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'phone', 'city', 'profile_completeness')
    list_filter = ('gender', 'city')
    search_fields = ('full_name', 'phone', 'user__email')


@admin.register(Surgery)
class SurgeryAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category', 'base_price')
    list_filter = ('category',)
    search_fields = ('name',)


class DoctorSurgeryInline(admin.TabularInline):
    model = DoctorSurgery
    extra = 0


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'primary_specialization', 'city', 'status', 'approved_at')
    list_filter = ('status', 'city')
    search_fields = ('full_name', 'medical_council_number', 'user__email')
    inlines = [DoctorSurgeryInline]


class HospitalUserInline(admin.TabularInline):
    model = HospitalUser
    extra = 0


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'city', 'status', 'approved_at')
    list_filter = ('status', 'city')
    search_fields = ('name',)
    inlines = [HospitalUserInline]


class ImplantUserInline(admin.TabularInline):
    model = ImplantUser
    extra = 0


@admin.register(Implant)
class ImplantAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'brand', 'price', 'status')
    list_filter = ('status',)
    search_fields = ('name', 'brand', 'manufacturer')
    inlines = [ImplantUserInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'surgery', 'doctor', 'hospital', 'status', 'payment_status', 'total_cost')
    list_filter = ('status', 'payment_status')
    search_fields = ('id', 'patient__full_name', 'doctor__full_name')


@admin.register(CommissionAgreement)
class CommissionAgreementAdmin(admin.ModelAdmin):
    list_display = ('id', 'entity_type', 'entity_id', 'commission_type', 'status', 'effective_date', 'expiry_date')
    list_filter = ('status', 'entity_type', 'commission_type')
    readonly_fields = ('total_transactions', 'total_commission_earned', 'last_commission_date')


@admin.register(CommissionTransaction)
class CommissionTransactionAdmin(admin.ModelAdmin):
    list_display = ('id', 'agreement', 'booking', 'transaction_amount', 'commission_amount', 'payment_status')
    list_filter = ('payment_status',)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('id', 'reviewable_type', 'reviewable_id', 'rating', 'status', 'is_featured', 'created_at')
    list_filter = ('status', 'reviewable_type', 'is_featured')
    readonly_fields = ('helpful_count', 'not_helpful_count')


@admin.register(DoctorAvailability)
class DoctorAvailabilityAdmin(admin.ModelAdmin):
    list_display = ('id', 'doctor', 'available_date', 'willing_to_travel', 'is_available')
    list_filter = ('willing_to_travel', 'is_available')


@admin.register(HospitalAvailability)
class HospitalAvailabilityAdmin(admin.ModelAdmin):
    list_display = ('id', 'hospital', 'facility_type', 'facility_name', 'available_date', 'is_available')
    list_filter = ('facility_type', 'is_available')


@admin.register(PatientTestimonial)
class PatientTestimonialAdmin(admin.ModelAdmin):
    list_display = ('id', 'doctor', 'rating', 'region', 'is_verified', 'is_featured', 'consent_for_display')
    list_filter = ('is_verified', 'is_featured', 'region')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'title', 'type', 'is_read', 'created_at')
    list_filter = ('type', 'category', 'is_read')


@admin.register(OtpLog)
class OtpLogAdmin(admin.ModelAdmin):
    list_display = ('id', 'phone', 'email', 'otp_type', 'delivery_method', 'status', 'created_at')
    list_filter = ('status', 'otp_type', 'delivery_method')
    exclude = ('otp_code',)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'action', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
