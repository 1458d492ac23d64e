from rest_framework import serializers

from .models import SavedReport


class AssetAnalysisRequestSerializer(serializers.Serializer):
    assetName = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_assetName(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Asset name is required.")
        return value


class CategorySuggestionRequestSerializer(serializers.Serializer):
    assetName = serializers.CharField(max_length=255)
    categories = serializers.ListField(
        child=serializers.CharField(max_length=255), required=False, allow_empty=True
    )

    def validate_assetName(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Asset name is required.")
        return value


class ReportRequestSerializer(serializers.Serializer):
    prompt = serializers.CharField()

    def validate_prompt(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Prompt is required.")
        return value


class SavedReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = SavedReport
        fields = ['id', 'name', 'description', 'prompt', 'parameters', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_parameters(self, value):
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise serializers.ValidationError("Parameters must be a JSON object.")
        return value
