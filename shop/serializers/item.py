from rest_framework import serializers

from shop.models import Item


class ItemSerializer(serializers.ModelSerializer):
    createdBy = serializers.CharField(source="created_by", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Item
        fields = (
            "id",
            "name",
            "icon",
            "description",
            "price",
            "createdBy",
            "createdAt",
        )
        read_only_fields = ("id", "createdBy", "createdAt")
        extra_kwargs = {"price": {"min_value": 1}}
