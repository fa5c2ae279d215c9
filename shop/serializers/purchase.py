from rest_framework import serializers

from shop.models import Purchase


class PurchaseSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    itemId = serializers.IntegerField(source="item_id", read_only=True)
    itemName = serializers.CharField(source="item_name", read_only=True)
    purchaseDate = serializers.DateTimeField(source="purchase_date", read_only=True)

    class Meta:
        model = Purchase
        fields = ("id", "userId", "itemId", "itemName", "price", "purchaseDate")
        read_only_fields = fields
