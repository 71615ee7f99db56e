from rest_framework import serializers

from marketplace.models import HospitalAvailability

from .fields import CleanCharField, StringListField


class TimeSlotSerializer(serializers.Serializer):
    start_time = serializers.TimeField(format='%H:%M')
    end_time = serializers.TimeField(format='%H:%M')

    def validate(self, attrs):
        if attrs['end_time'] <= attrs['start_time']:
            raise serializers.ValidationError('end_time must be after start_time')
        return attrs


class _SlotsMixin:
    def validate_available_time_slots(self, slots):
        # slots live in a JSON column, so times are stored as HH:MM strings
        return [
            {'start_time': s['start_time'].strftime('%H:%M'), 'end_time': s['end_time'].strftime('%H:%M')}
            for s in slots
        ]


class DoctorAvailabilitySerializer(_SlotsMixin, serializers.Serializer):
    doctor_id = serializers.IntegerField(min_value=1, required=False)
    available_date = serializers.DateField()
    available_time_slots = TimeSlotSerializer(many=True, required=False)
    willing_to_travel = serializers.BooleanField(required=False)
    max_travel_distance_km = serializers.IntegerField(min_value=0, required=False)
    preferred_cities = StringListField(required=False)
    consultation_fee = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False,
                                                allow_null=True)
    surgery_fee = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False,
                                           allow_null=True)
    travel_allowance = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False,
                                                allow_null=True)
    required_equipment = StringListField(required=False)
    required_support_staff = serializers.IntegerField(min_value=0, max_value=50, required=False)
    is_available = serializers.BooleanField(required=False)
    booking_lead_time_hours = serializers.IntegerField(min_value=0, max_value=720, required=False)


class HospitalAvailabilitySerializer(_SlotsMixin, serializers.Serializer):
    hospital_id = serializers.IntegerField(min_value=1, required=False)
    facility_type = serializers.ChoiceField(choices=[c[0] for c in HospitalAvailability.FACILITY_CHOICES])
    facility_name = CleanCharField(max_length=255)
    specialization_supported = StringListField(required=False)
    equipment_available = StringListField(required=False)
    available_date = serializers.DateField()
    available_time_slots = TimeSlotSerializer(many=True, required=False)
    facility_cost_per_hour = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False,
                                                      allow_null=True)
    equipment_cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False,
                                              allow_null=True)
    support_staff_cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False,
                                                  allow_null=True)
    total_package_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False,
                                                  allow_null=True)
    is_available = serializers.BooleanField(required=False)
    booking_lead_time_hours = serializers.IntegerField(min_value=0, max_value=720, required=False)


class DoctorAvailabilityQuerySerializer(serializers.Serializer):
    doctor_id = serializers.IntegerField(min_value=1, required=False)
    available_date = serializers.DateField(required=False)
    willing_to_travel = serializers.BooleanField(required=False, allow_null=True, default=None)
    city = CleanCharField(max_length=100, required=False)
    specialization = CleanCharField(max_length=255, required=False)


class TravelingDoctorQuerySerializer(serializers.Serializer):
    target_city = CleanCharField(max_length=100, required=False)
    specialization = CleanCharField(max_length=255, required=False)
    available_date = serializers.DateField(required=False)
    max_distance = serializers.IntegerField(min_value=0, required=False)


class MyAvailabilityQuerySerializer(serializers.Serializer):
    upcoming_only = serializers.BooleanField(required=False, allow_null=True, default=None)


class HospitalAvailabilityQuerySerializer(serializers.Serializer):
    hospital_id = serializers.IntegerField(min_value=1, required=False)
    facility_type = serializers.ChoiceField(choices=[c[0] for c in HospitalAvailability.FACILITY_CHOICES],
                                            required=False)
    available_date = serializers.DateField(required=False)
    specialization = CleanCharField(max_length=255, required=False)
    city = CleanCharField(max_length=100, required=False)
