from rest_framework import serializers

from .fields import CleanCharField, StringListField


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class _AccountSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8, trim_whitespace=False)
    full_name = CleanCharField(max_length=255)


class AdminRegisterSerializer(_AccountSerializer):
    pass


class PatientRegisterSerializer(_AccountSerializer):
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


class DoctorRegisterSerializer(_AccountSerializer):
    medical_council_number = CleanCharField(max_length=100)
    medical_council_state = CleanCharField(max_length=100, required=False, allow_blank=True)
    phone = CleanCharField(max_length=20, required=False, allow_blank=True)
    gender = CleanCharField(max_length=10, required=False, allow_blank=True)
    primary_specialization = CleanCharField(max_length=255, required=False, allow_blank=True)
    secondary_specializations = StringListField(required=False)
    experience_years = serializers.IntegerField(required=False, min_value=0, max_value=80)
    consultation_fee = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    surgery_fee = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=0)
    bio = CleanCharField(required=False, allow_blank=True)
    city = CleanCharField(max_length=100, required=False, allow_blank=True)
    state = CleanCharField(max_length=100, required=False, allow_blank=True)
    clinic_address = CleanCharField(required=False, allow_blank=True)
    languages_spoken = StringListField(required=False)
    surgery_types = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)


class HospitalRegisterSerializer(_AccountSerializer):
    hospital_name = CleanCharField(max_length=255)
    contact_phone = CleanCharField(max_length=20, required=False, allow_blank=True)
    designation = CleanCharField(max_length=100, required=False, allow_blank=True)
    department = CleanCharField(max_length=100, required=False, allow_blank=True)
    zone = CleanCharField(max_length=100, required=False, allow_blank=True)
    address = CleanCharField(required=False, allow_blank=True)
    city = CleanCharField(max_length=100, required=False, allow_blank=True)
    state = CleanCharField(max_length=100, required=False, allow_blank=True)
    pincode = CleanCharField(max_length=10, required=False, allow_blank=True)
    facilities = StringListField(required=False)
    accreditations = StringListField(required=False)
    total_beds = serializers.IntegerField(required=False, min_value=0)
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=0)
    consumables_cost = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=0)


class ImplantRegisterSerializer(_AccountSerializer):
    implant_name = CleanCharField(max_length=255)
    contact_phone = CleanCharField(max_length=20, required=False, allow_blank=True)
    designation = CleanCharField(max_length=100, required=False, allow_blank=True)
    brand = CleanCharField(max_length=255, required=False, allow_blank=True)
    manufacturer = CleanCharField(max_length=255, required=False, allow_blank=True)
    material = CleanCharField(max_length=255, required=False, allow_blank=True)
    surgery_type = CleanCharField(max_length=255, required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=0)
    description = CleanCharField(required=False, allow_blank=True)


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField()
