from shop.serializers.user import UserSerializer
from shop.serializers.auth import LoginSerializer, RegisterSerializer
from shop.serializers.wallet import AmountSerializer
from shop.serializers.item import ItemSerializer
from shop.serializers.transaction import TransactionSerializer
from shop.serializers.purchase import PurchaseSerializer
from shop.serializers.stats import StatsSerializer

__all__ = [
    "UserSerializer",
    "RegisterSerializer",
    "LoginSerializer",
    "AmountSerializer",
    "ItemSerializer",
    "TransactionSerializer",
    "PurchaseSerializer",
    "StatsSerializer",
]
