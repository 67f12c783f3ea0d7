"""OpenAPI shapes for the error envelope built by ``apps.api.utils.error_response``."""
from rest_framework import serializers

from .utils import ERROR_STATUS_MAP


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.ChoiceField(choices=sorted(ERROR_STATUS_MAP))
    message = serializers.CharField()
    status = serializers.IntegerField()
    # Offending ids or fields, e.g. {"cartItemIds": ["12"]}
    details = serializers.JSONField(required=False)
    hint = serializers.CharField(required=False, allow_blank=True)


class ErrorResponseSerializer(serializers.Serializer):
    error = ErrorDetailSerializer()
