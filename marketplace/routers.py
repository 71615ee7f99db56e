"""
URL table for the marketplace API.

Trailing slashes are omitted throughout (``APPEND_SLASH`` is off).
"""
from django.urls import include, path

from .views import (
    admin,
    agreements,
    auth,
    availability,
    bookings,
    doctors,
    health,
    hospitals,
    implants,
    notifications,
    otp,
    patients,
    reviews,
    testimonials,
    transactions,
)

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),

    # Authentication
    path('api/auth/login', auth.login_view, name='login'),
    path('api/auth/refresh', auth.refresh_view, name='token_refresh'),
    path('api/auth/logout', auth.logout_view, name='logout'),
    path('api/auth/me', auth.me, name='me'),
    path('api/auth/registration-options', auth.registration_options, name='registration_options'),
    path('api/auth/register/patient', auth.register_patient, name='register_patient'),
    path('api/auth/register/doctor', auth.register_doctor, name='register_doctor'),
    path('api/auth/register/hospital', auth.register_hospital, name='register_hospital'),
    path('api/auth/register/implant', auth.register_implant, name='register_implant'),
    path('api/auth/register/admin', auth.register_admin, name='register_admin'),

    # Patients
    path('api/patients/<int:patient_id>', patients.patient_detail, name='patient_detail'),
    path('api/patients/<int:patient_id>/update', patients.update_patient, name='patient_update'),
    path('api/patients/<int:patient_id>/bookings', patients.patient_bookings, name='patient_bookings'),

    # Doctors and surgeries
    path('api/doctors', doctors.list_doctors, name='doctor_list'),
    path('api/doctors/pending', doctors.pending_doctors, name='doctor_pending'),
    path('api/doctors/<int:doctor_id>', doctors.doctor_detail, name='doctor_detail'),
    path('api/doctors/<int:doctor_id>/update', doctors.update_doctor, name='doctor_update'),
    path('api/doctors/<int:doctor_id>/surgeries', doctors.doctor_surgeries, name='doctor_surgeries'),
    path('api/doctors/<int:doctor_id>/approve', doctors.approve_doctor, name='doctor_approve'),
    path('api/doctors/<int:doctor_id>/reject', doctors.reject_doctor, name='doctor_reject'),
    path('api/doctors/<int:doctor_id>/bookings', bookings.doctor_bookings, name='doctor_bookings'),
    path('api/surgeries', doctors.list_surgeries, name='surgery_list'),
    path('api/surgeries/<int:surgery_id>', doctors.surgery_detail, name='surgery_detail'),

    # Hospitals
    path('api/hospitals', hospitals.list_hospitals, name='hospital_list'),
    path('api/hospitals/pending', hospitals.pending_hospitals, name='hospital_pending'),
    path('api/hospitals/<int:hospital_id>', hospitals.hospital_detail, name='hospital_detail'),
    path('api/hospitals/<int:hospital_id>/update', hospitals.update_hospital, name='hospital_update'),
    path('api/hospitals/<int:hospital_id>/staff', hospitals.hospital_staff, name='hospital_staff'),
    path('api/hospitals/<int:hospital_id>/approve', hospitals.approve_hospital, name='hospital_approve'),
    path('api/hospitals/<int:hospital_id>/reject', hospitals.reject_hospital, name='hospital_reject'),
    path('api/hospitals/<int:hospital_id>/bookings', bookings.hospital_bookings, name='hospital_bookings'),

    # Implants
    path('api/implants', implants.list_implants, name='implant_list'),
    path('api/implants/pending', implants.pending_implants, name='implant_pending'),
    path('api/implants/<int:implant_id>', implants.implant_detail, name='implant_detail'),
    path('api/implants/<int:implant_id>/update', implants.update_implant, name='implant_update'),
    path('api/implants/<int:implant_id>/price', implants.update_implant_price, name='implant_price'),
    path('api/implants/<int:implant_id>/approve', implants.approve_implant, name='implant_approve'),
    path('api/implants/<int:implant_id>/reject', implants.reject_implant, name='implant_reject'),
    path('api/implants/<int:implant_id>/bookings', bookings.implant_bookings, name='implant_bookings'),

    # Bookings
    path('api/bookings', bookings.create_booking, name='booking_create'),
    path('api/bookings/<int:booking_id>', bookings.booking_detail, name='booking_detail'),

    # Administrator console
    path('api/admin/doctors', admin.admin_doctors, name='admin_doctors'),
    path('api/admin/doctors/<int:doctor_id>/approve', admin.admin_approve_doctor, name='admin_doctor_approve'),
    path('api/admin/doctors/<int:doctor_id>/reject', admin.admin_reject_doctor, name='admin_doctor_reject'),
    path('api/admin/patients', admin.admin_patients, name='admin_patients'),
    path('api/admin/bookings', admin.admin_bookings, name='admin_bookings'),
    path('api/admin/hospitals', admin.admin_create_hospital, name='admin_hospital_create'),
    path('api/admin/hospitals/<int:hospital_id>', admin.admin_delete_hospital, name='admin_hospital_delete'),
    path('api/admin/implants', admin.admin_create_implant, name='admin_implant_create'),
    path('api/admin/implants/<int:implant_id>', admin.admin_delete_implant, name='admin_implant_delete'),

    # Commission agreements
    path('api/commission-agreements', agreements.agreements, name='agreement_list'),
    path('api/commission-agreements/active', agreements.active_agreements, name='agreement_active'),
    path('api/commission-agreements/entity/<str:entity_type>/<int:entity_id>', agreements.entity_agreements,
         name='agreement_entity'),
    path('api/commission-agreements/<int:agreement_id>', agreements.agreement_detail, name='agreement_detail'),
    path('api/commission-agreements/<int:agreement_id>/status', agreements.agreement_status, name='agreement_status'),
    path('api/commission-agreements/<int:agreement_id>/approve', agreements.approve_agreement,
         name='agreement_approve'),
    path('api/commission-agreements/<int:agreement_id>/transactions', transactions.agreement_transactions,
         name='agreement_transactions'),

    # Commission transactions
    path('api/commission-transactions', transactions.transactions, name='transaction_list'),
    path('api/commission-transactions/<int:transaction_id>', transactions.transaction_detail,
         name='transaction_detail'),
    path('api/commission-transactions/<int:transaction_id>/payment-status', transactions.transaction_payment,
         name='transaction_payment'),

    # Reviews
    path('api/reviews', reviews.reviews, name='review_list'),
    path('api/reviews/my', reviews.my_reviews, name='review_my'),
    path('api/reviews/entity/<str:reviewable_type>/<int:reviewable_id>', reviews.entity_reviews,
         name='review_entity'),
    path('api/reviews/<int:review_id>', reviews.review_detail, name='review_detail'),
    path('api/reviews/<int:review_id>/moderate', reviews.moderate_review, name='review_moderate'),
    path('api/reviews/<int:review_id>/helpful', reviews.helpful_review, name='review_helpful'),

    # Availability
    path('api/doctor-availability', availability.doctor_availability, name='doctor_availability_list'),
    path('api/doctor-availability/my', availability.my_doctor_availability, name='doctor_availability_my'),
    path('api/doctor-availability/search/traveling', availability.traveling_doctors,
         name='doctor_availability_traveling'),
    path('api/doctor-availability/<int:availability_id>', availability.doctor_availability_detail,
         name='doctor_availability_detail'),
    path('api/hospital-availability', availability.hospital_availability, name='hospital_availability_list'),
    path('api/hospital-availability/<int:availability_id>', availability.hospital_availability_detail,
         name='hospital_availability_detail'),

    # Testimonials
    path('api/testimonials', testimonials.testimonials, name='testimonial_list'),
    path('api/testimonials/featured', testimonials.featured_testimonials, name='testimonial_featured'),
    path('api/testimonials/my', testimonials.my_testimonials, name='testimonial_my'),
    path('api/testimonials/doctor/<int:doctor_id>', testimonials.doctor_testimonials, name='testimonial_doctor'),
    path('api/testimonials/<int:testimonial_id>', testimonials.testimonial_detail, name='testimonial_detail'),
    path('api/testimonials/<int:testimonial_id>/verify', testimonials.verify_testimonial, name='testimonial_verify'),

    # Notifications
    path('api/notifications', notifications.send_notification, name='notification_send'),
    path('api/notifications/user/<int:user_id>', notifications.user_notifications, name='notification_list'),
    path('api/notifications/user/<int:user_id>/read-all', notifications.mark_all_notifications_read,
         name='notification_read_all'),
    path('api/notifications/<int:notification_id>/read', notifications.mark_notification_read,
         name='notification_read'),
    path('api/notifications/<int:notification_id>', notifications.delete_notification, name='notification_delete'),

    # OTP
    path('api/otp-logs/generate', otp.generate_otp, name='otp_generate'),
    path('api/otp-logs/verify', otp.verify_otp, name='otp_verify'),
    path('api/otp-logs', otp.otp_logs, name='otp_list'),
    path('api/otp-logs/user/<int:user_id>', otp.user_otp_logs, name='otp_user_list'),
    path('api/otp-logs/cleanup', otp.cleanup_otp_logs, name='otp_cleanup'),
    path('api/otp-logs/<int:otp_id>', otp.delete_otp_log, name='otp_delete'),
]
