from django.conf import settings
from rest_framework import serializers


class AmountSerializer(serializers.Serializer):
    """
    Validates deposit and withdrawal requests.

    Only the type and the storage ceiling are checked here; `WalletService`
    rejects non-positive amounts so that the API and direct service calls
    fail the same way.
    """

    amount = serializers.IntegerField(max_value=settings.MAX_WALLET_BALANCE)
