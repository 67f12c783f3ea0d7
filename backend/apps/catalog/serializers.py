from rest_framework import serializers


class ProductSnapshotSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    images = serializers.ListField(child=serializers.CharField())
    creatorId = serializers.IntegerField(source="creator_id")
