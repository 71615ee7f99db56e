from rest_framework import serializers

from .fields import CleanCharField, StringListField


class PatientUpdateSerializer(serializers.Serializer):
    full_name = CleanCharField(max_length=255, required=False)
    phone = CleanCharField(max_length=20, required=False, allow_blank=True)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=['male', 'female', 'other'], required=False, allow_blank=True)
    blood_group = CleanCharField(max_length=5, required=False, allow_blank=True)
    address = CleanCharField(required=False, allow_blank=True)
    city = CleanCharField(max_length=100, required=False, allow_blank=True)
    state = CleanCharField(max_length=100, required=False, allow_blank=True)
    pincode = CleanCharField(max_length=10, required=False, allow_blank=True)
    emergency_contact_name = CleanCharField(max_length=255, required=False, allow_blank=True)
    emergency_contact_phone = CleanCharField(max_length=20, required=False, allow_blank=True)
    emergency_contact_relation = CleanCharField(max_length=50, required=False, allow_blank=True)
    current_medications = CleanCharField(required=False, allow_blank=True)
    allergies = CleanCharField(required=False, allow_blank=True)
    chronic_conditions = CleanCharField(required=False, allow_blank=True)
    insurance_provider = CleanCharField(max_length=255, required=False, allow_blank=True)
    insurance_number = CleanCharField(max_length=100, required=False, allow_blank=True)


class DoctorUpdateSerializer(serializers.Serializer):
    full_name = CleanCharField(max_length=255, required=False)
    phone = CleanCharField(max_length=20, required=False, allow_blank=True)
    gender = CleanCharField(max_length=10, required=False, allow_blank=True)
    primary_specialization = CleanCharField(max_length=255, required=False, allow_blank=True)
    secondary_specializations = StringListField(required=False)
    medical_council_state = CleanCharField(max_length=100, required=False, allow_blank=True)
    experience_years = serializers.IntegerField(required=False, min_value=0, max_value=80)
    consultation_fee = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=0)
    surgery_fee = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True, min_value=0)
    followup_fee = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=0)
    bio = CleanCharField(required=False, allow_blank=True)
    training_type = CleanCharField(max_length=100, required=False, allow_blank=True)
    fellowships = StringListField(required=False)
    procedures_completed = serializers.IntegerField(required=False, min_value=0)
    languages_spoken = StringListField(required=False)
    clinic_address = CleanCharField(required=False, allow_blank=True)
    city = CleanCharField(max_length=100, required=False, allow_blank=True)
    state = CleanCharField(max_length=100, required=False, allow_blank=True)
    pincode = CleanCharField(max_length=10, required=False, allow_blank=True)
    online_consultation = serializers.BooleanField(required=False)
    in_person_consultation = serializers.BooleanField(required=False)
    emergency_services = serializers.BooleanField(required=False)
    website_url = serializers.URLField(required=False, allow_blank=True)
    linkedin_url = serializers.URLField(required=False, allow_blank=True)
    image_url = serializers.URLField(required=False, allow_blank=True)


class DoctorSurgeryItemSerializer(serializers.Serializer):
    surgery_id = serializers.IntegerField(min_value=1)
    is_primary = serializers.BooleanField(required=False, default=False)
    experience_years = serializers.IntegerField(required=False, min_value=0, default=0)
    procedures_completed = serializers.IntegerField(required=False, min_value=0, default=0)


class DoctorSurgeriesSerializer(serializers.Serializer):
    surgeries = DoctorSurgeryItemSerializer(many=True)


class DoctorListQuerySerializer(serializers.Serializer):
    specialization = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
    surgery_id = serializers.IntegerField(required=False, min_value=1)
    search = serializers.CharField(required=False, allow_blank=True)


class HospitalUpdateSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255, required=False)
    zone = CleanCharField(max_length=100, required=False, allow_blank=True)
    address = CleanCharField(required=False, allow_blank=True)
    city = CleanCharField(max_length=100, required=False, allow_blank=True)
    state = CleanCharField(max_length=100, required=False, allow_blank=True)
    pincode = CleanCharField(max_length=10, required=False, allow_blank=True)
    facilities = StringListField(required=False)
    accreditations = StringListField(required=False)
    total_beds = serializers.IntegerField(required=False, min_value=0)
    icu_beds = serializers.IntegerField(required=False, min_value=0)
    operation_theaters = serializers.IntegerField(required=False, min_value=0)
    emergency_services = serializers.BooleanField(required=False)
    insurance_accepted = StringListField(required=False)
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=0)
    consumables_cost = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=0)
    room_charges_per_day = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    phone = CleanCharField(max_length=20, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    website = serializers.URLField(required=False, allow_blank=True)


class StaffCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8, trim_whitespace=False)
    full_name = CleanCharField(max_length=255)
    phone = CleanCharField(max_length=20, required=False, allow_blank=True)
    designation = CleanCharField(max_length=100, required=False, allow_blank=True)
    department = CleanCharField(max_length=100, required=False, allow_blank=True)


class ImplantUpdateSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255, required=False)
    brand = CleanCharField(max_length=255, required=False, allow_blank=True)
    manufacturer = CleanCharField(max_length=255, required=False, allow_blank=True)
    material = CleanCharField(max_length=255, required=False, allow_blank=True)
    surgery_type = CleanCharField(max_length=255, required=False, allow_blank=True)
    expected_life = CleanCharField(max_length=100, required=False, allow_blank=True)
    warranty = CleanCharField(max_length=100, required=False, allow_blank=True)
    success_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True,
                                            min_value=0, max_value=100)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=0)
    description = CleanCharField(required=False, allow_blank=True)
    features = StringListField(required=False)


class ImplantPriceSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class RejectSerializer(serializers.Serializer):
    reason = CleanCharField(required=False, allow_blank=True, default='')
