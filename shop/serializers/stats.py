from rest_framework import serializers


class StatsSerializer(serializers.Serializer):
    totalUsers = serializers.IntegerField(source="total_users")
    totalItems = serializers.IntegerField(source="total_items")
    totalPurchases = serializers.IntegerField(source="total_purchases")
    totalRevenue = serializers.IntegerField(source="total_revenue")
