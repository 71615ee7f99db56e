from rest_framework import serializers

from marketplace.models import OtpLog


class OtpGenerateSerializer(serializers.Serializer):
    otp_type = serializers.ChoiceField(choices=[c[0] for c in OtpLog.TYPE_CHOICES])
    delivery_method = serializers.ChoiceField(choices=[c[0] for c in OtpLog.DELIVERY_CHOICES])
    phone = serializers.RegexField(r'^\+?[0-9]{7,15}$', required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    user_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    expires_in_minutes = serializers.IntegerField(required=False, min_value=1, max_value=60)


class OtpVerifySerializer(serializers.Serializer):
    otp_code = serializers.RegexField(r'^[0-9]{4,10}$')
    otp_type = serializers.ChoiceField(choices=[c[0] for c in OtpLog.TYPE_CHOICES])
    phone = serializers.CharField(required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)


class OtpListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in OtpLog.STATUS_CHOICES], required=False)
    otp_type = serializers.ChoiceField(choices=[c[0] for c in OtpLog.TYPE_CHOICES], required=False)
    delivery_method = serializers.ChoiceField(choices=[c[0] for c in OtpLog.DELIVERY_CHOICES], required=False)
