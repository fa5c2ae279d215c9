from shop.views.auth import LoginView, RegisterView
from shop.views.wallet import BalanceView, DepositView, WithdrawView
from shop.views.item import BuyItemView, ItemDetailView, ItemListCreateView
from shop.views.history import PurchaseListView, TransactionListView
from shop.views.admin import AdminStatsView, AdminUserListView

__all__ = [
    "RegisterView",
    "LoginView",
    "BalanceView",
    "DepositView",
    "WithdrawView",
    "ItemListCreateView",
    "ItemDetailView",
    "BuyItemView",
    "PurchaseListView",
    "TransactionListView",
    "AdminUserListView",
    "AdminStatsView",
]
