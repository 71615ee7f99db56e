from rest_framework import serializers

from marketplace.models import CommissionAgreement, CommissionTransaction

from .fields import CleanCharField, StringListField


class TierSerializer(serializers.Serializer):
    min_amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, default=0)
    max_amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True)
    rate = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100)


class AgreementSerializer(serializers.Serializer):
    entity_type = serializers.ChoiceField(choices=[c[0] for c in CommissionAgreement.ENTITY_CHOICES])
    entity_id = serializers.IntegerField(min_value=1)
    commission_type = serializers.ChoiceField(choices=[c[0] for c in CommissionAgreement.TYPE_CHOICES])
    commission_rate = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100,
                                               required=False, allow_null=True)
    fixed_amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0,
                                            required=False, allow_null=True)
    tiered_structure = serializers.ListField(child=serializers.DictField(), required=False)
    minimum_monthly_volume = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0,
                                                      required=False, allow_null=True)
    payment_terms = CleanCharField(max_length=20, required=False)
    currency = serializers.RegexField(r'^[A-Z]{3}$', required=False)
    applicable_services = StringListField(required=False)
    excluded_services = StringListField(required=False)
    effective_date = serializers.DateField()
    expiry_date = serializers.DateField(required=False, allow_null=True)
    auto_renewal = serializers.BooleanField(required=False)
    agreement_document_url = serializers.URLField(required=False, allow_blank=True)
    tax_treatment = CleanCharField(max_length=100, required=False, allow_blank=True)
    compliance_notes = CleanCharField(required=False, allow_blank=True)

    def validate_tiered_structure(self, tiers):
        out = []
        for tier in tiers:
            s = TierSerializer(data=tier)
            s.is_valid(raise_exception=True)
            out.append(s.validated_data)
        return out


class AgreementUpdateSerializer(AgreementSerializer):
    """Partial update: identity fields are fixed once created."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('partial', True)
        super().__init__(*args, **kwargs)
        for name in ('entity_type', 'entity_id'):
            self.fields.pop(name)


class AgreementStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in CommissionAgreement.STATUS_CHOICES])


class AgreementListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in CommissionAgreement.STATUS_CHOICES], required=False)
    entity_type = serializers.ChoiceField(choices=[c[0] for c in CommissionAgreement.ENTITY_CHOICES], required=False)
    commission_type = serializers.ChoiceField(choices=[c[0] for c in CommissionAgreement.TYPE_CHOICES], required=False)


class TransactionCreateSerializer(serializers.Serializer):
    agreement_id = serializers.IntegerField(min_value=1)
    booking_id = serializers.IntegerField(min_value=1)
    transaction_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    service_type = CleanCharField(max_length=100, required=False, allow_blank=True)
    transaction_date = serializers.DateTimeField(required=False)

    def validate_transaction_amount(self, v):
        if v <= 0:
            raise serializers.ValidationError('transaction_amount must be greater than zero')
        return v


class PaymentStatusSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=[c[0] for c in CommissionTransaction.PAYMENT_STATUS_CHOICES])
    payment_date = serializers.DateField(required=False, allow_null=True)
    payment_reference = CleanCharField(max_length=255, required=False, allow_blank=True)


class TransactionListQuerySerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=[c[0] for c in CommissionTransaction.PAYMENT_STATUS_CHOICES],
                                             required=False)
    agreement_id = serializers.IntegerField(required=False, min_value=1)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
