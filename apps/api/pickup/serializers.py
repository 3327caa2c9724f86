"""
Pickup API Serializers for EMall
"""

from rest_framework import serializers


class PickupCodeInputSerializer(serializers.Serializer):
    """Code typed or scanned by the merchant. Format checks happen in the service"""

    code = serializers.CharField(max_length=32, allow_blank=True, trim_whitespace=True)
