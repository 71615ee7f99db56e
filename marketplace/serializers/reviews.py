from rest_framework import serializers

from marketplace.models import Review

from .fields import CleanCharField

MODERATION_CHOICES = ('approved', 'rejected', 'flagged')


class ReviewCreateSerializer(serializers.Serializer):
    reviewable_type = serializers.ChoiceField(choices=[c[0] for c in Review.REVIEWABLE_CHOICES])
    reviewable_id = serializers.IntegerField(min_value=1)
    booking_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    rating = serializers.IntegerField(min_value=1, max_value=5)
    review_title = CleanCharField(max_length=200, required=False, allow_blank=True)
    review_text = CleanCharField(required=False, allow_blank=True)
    detailed_ratings = serializers.DictField(child=serializers.IntegerField(min_value=1, max_value=5), required=False)
    procedure_type = CleanCharField(max_length=255, required=False, allow_blank=True)
    treatment_date = serializers.DateField(required=False, allow_null=True)
    is_anonymous = serializers.BooleanField(required=False)


class ReviewUpdateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    review_title = CleanCharField(max_length=200, required=False, allow_blank=True)
    review_text = CleanCharField(required=False, allow_blank=True)
    detailed_ratings = serializers.DictField(child=serializers.IntegerField(min_value=1, max_value=5), required=False)
    procedure_type = CleanCharField(max_length=255, required=False, allow_blank=True)
    treatment_date = serializers.DateField(required=False, allow_null=True)
    is_anonymous = serializers.BooleanField(required=False)


class ReviewModerationSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=MODERATION_CHOICES)
    moderation_notes = CleanCharField(required=False, allow_blank=True, default='')
    is_featured = serializers.BooleanField(required=False)


class ReviewHelpfulSerializer(serializers.Serializer):
    is_helpful = serializers.BooleanField()


class ReviewListQuerySerializer(serializers.Serializer):
    reviewable_type = serializers.ChoiceField(choices=[c[0] for c in Review.REVIEWABLE_CHOICES], required=False)
    reviewable_id = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(choices=[c[0] for c in Review.STATUS_CHOICES], required=False)
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    is_featured = serializers.BooleanField(required=False, allow_null=True, default=None)


class TestimonialCreateSerializer(serializers.Serializer):
    doctor_id = serializers.IntegerField(min_value=1)
    patient_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    hospital_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    booking_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    rating = serializers.IntegerField(min_value=1, max_value=5)
    testimonial_text = CleanCharField()
    treatment_type = CleanCharField(max_length=255, required=False, allow_blank=True)
    region = CleanCharField(max_length=100, required=False, allow_blank=True)
    consent_for_display = serializers.BooleanField(required=False)
    is_anonymous = serializers.BooleanField(required=False)
    patient_name_display = CleanCharField(max_length=100, required=False, allow_blank=True)


class TestimonialUpdateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    testimonial_text = CleanCharField(required=False)
    treatment_type = CleanCharField(max_length=255, required=False, allow_blank=True)
    region = CleanCharField(max_length=100, required=False, allow_blank=True)
    consent_for_display = serializers.BooleanField(required=False)
    is_anonymous = serializers.BooleanField(required=False)
    patient_name_display = CleanCharField(max_length=100, required=False, allow_blank=True)


class TestimonialVerifySerializer(serializers.Serializer):
    is_featured = serializers.BooleanField(required=False, default=False)
    display_order = serializers.IntegerField(min_value=0, required=False, default=0)


class TestimonialListQuerySerializer(serializers.Serializer):
    doctor_id = serializers.IntegerField(min_value=1, required=False)
    hospital_id = serializers.IntegerField(min_value=1, required=False)
    region = CleanCharField(max_length=100, required=False)
    is_featured = serializers.BooleanField(required=False, allow_null=True, default=None)
    is_verified = serializers.BooleanField(required=False, allow_null=True, default=None)


class FeaturedTestimonialQuerySerializer(serializers.Serializer):
    region = CleanCharField(max_length=100, required=False)
    limit = serializers.IntegerField(min_value=1, max_value=50, required=False, default=6)


class DoctorTestimonialQuerySerializer(serializers.Serializer):
    # query-string booleans read as False when absent, so None stands for "not given"
    verified_only = serializers.BooleanField(required=False, allow_null=True, default=None)
