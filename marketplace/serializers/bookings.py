from rest_framework import serializers

from marketplace.models import Booking

from .fields import CleanCharField


class BookingCreateSerializer(serializers.Serializer):
    patient_id = serializers.IntegerField(required=False, min_value=1)
    surgery_id = serializers.IntegerField(min_value=1)
    doctor_id = serializers.IntegerField(min_value=1)
    hospital_id = serializers.IntegerField(min_value=1)
    implant_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    appointment_date = serializers.DateTimeField(required=False, allow_null=True)
    notes = CleanCharField(required=False, allow_blank=True)


class BookingUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Booking.STATUS_CHOICES], required=False)
    payment_status = serializers.ChoiceField(choices=[c[0] for c in Booking.PAYMENT_STATUS_CHOICES], required=False)
    appointment_date = serializers.DateTimeField(required=False, allow_null=True)
    notes = CleanCharField(required=False, allow_blank=True)


class BookingListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Booking.STATUS_CHOICES], required=False)
