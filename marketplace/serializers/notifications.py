from rest_framework import serializers

from marketplace.models import Notification

from .fields import CleanCharField


class NotificationSendSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(min_value=1)
    title = CleanCharField(max_length=255)
    message = CleanCharField()
    type = serializers.ChoiceField(choices=[c[0] for c in Notification.TYPE_CHOICES], default='info')
    category = CleanCharField(max_length=50, default='system')
    action_url = CleanCharField(max_length=500, required=False, allow_blank=True)
    metadata = serializers.DictField(required=False)


class NotificationListQuerySerializer(serializers.Serializer):
    unread_only = serializers.BooleanField(required=False, default=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=50)
