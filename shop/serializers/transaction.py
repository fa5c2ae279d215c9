from rest_framework import serializers

from shop.models import Transaction


class TransactionSerializer(serializers.ModelSerializer):
    """Read-only serializer for ledger entries."""

    userId = serializers.IntegerField(source="user_id", read_only=True)
    type = serializers.CharField(source="transaction_type", read_only=True)
    itemId = serializers.IntegerField(source="item_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Transaction
        fields = (
            "id",
            "userId",
            "type",
            "amount",
            "itemId",
            "status",
            "description",
            "createdAt",
        )
        read_only_fields = fields
