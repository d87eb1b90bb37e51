import re

from rest_framework import serializers
from .models import NewsletterSubscriber

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


class SubscribeSerializer(serializers.Serializer):
    email = serializers.CharField(
        allow_blank=True,
        max_length=254,
        trim_whitespace=True,
        error_messages={'required': 'Please enter an e-mail address'},
    )

    def validate_email(self, value):
        value = value.strip().lower()
        if not value:
            raise serializers.ValidationError('Please enter an e-mail address')
        if not EMAIL_RE.match(value):
            raise serializers.ValidationError('Please enter a valid e-mail address')
        return value


class UnsubscribeSerializer(serializers.Serializer):
    token = serializers.UUIDField(error_messages={'invalid': 'Invalid unsubscribe link'})


class NewsletterSubscriberSerializer(serializers.ModelSerializer):
    class Meta:
        model = NewsletterSubscriber
        fields = ['id', 'email', 'is_active', 'subscribed_at', 'unsubscribed_at']
