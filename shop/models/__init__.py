from shop.models.user import User
from shop.models.item import Item
from shop.models.transaction import Transaction
from shop.models.purchase import Purchase

__all__ = [
    "User",
    "Item",
    "Transaction",
    "Purchase",
]
