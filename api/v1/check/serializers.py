"""
Serializers for the license check endpoint.
"""

from rest_framework import serializers


class CheckLicenseQuerySerializer(serializers.Serializer):
    """Serializer for check license query parameters."""

    version = serializers.CharField(required=False, allow_blank=True)
    feature = serializers.CharField(required=False, allow_blank=True)


class CheckLicenseResponseSerializer(serializers.Serializer):
    """Serializer for CheckLicenseResultDTO."""

    valid = serializers.BooleanField()
    expires_at = serializers.DateTimeField(allow_null=True)
    reason = serializers.CharField(required=False)
    token = serializers.CharField(required=False)

    def to_representation(self, instance):
        """Omit reason and token when they are empty."""
        data = super().to_representation(instance)
        for optional in ("reason", "token"):
            if not data.get(optional):
                data.pop(optional, None)
        return data
