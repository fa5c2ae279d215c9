from rest_framework import serializers

from shop.models import User


class UserSerializer(serializers.ModelSerializer):
    """Public view of a user. The password hash is never part of it."""

    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = User
        fields = ("id", "name", "username", "email", "role", "wallet", "createdAt")
        read_only_fields = fields
