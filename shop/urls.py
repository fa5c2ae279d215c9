from django.urls import path

from shop.views import (
    AdminStatsView,
    AdminUserListView,
    BalanceView,
    BuyItemView,
    DepositView,
    ItemDetailView,
    ItemListCreateView,
    LoginView,
    PurchaseListView,
    RegisterView,
    TransactionListView,
    WithdrawView,
)

urlpatterns = [
    path("auth/register", RegisterView.as_view(), name="auth-register"),
    path("auth/login", LoginView.as_view(), name="auth-login"),
    path("wallet/balance", BalanceView.as_view(), name="wallet-balance"),
    path("wallet/deposit", DepositView.as_view(), name="wallet-deposit"),
    path("wallet/withdraw", WithdrawView.as_view(), name="wallet-withdraw"),
    path("items", ItemListCreateView.as_view(), name="item-list"),
    path("items/<int:pk>", ItemDetailView.as_view(), name="item-detail"),
    path("items/<int:pk>/buy", BuyItemView.as_view(), name="item-buy"),
    path("user/purchases", PurchaseListView.as_view(), name="user-purchases"),
    path("user/transactions", TransactionListView.as_view(), name="user-transactions"),
    path("admin/users", AdminUserListView.as_view(), name="admin-users"),
    path("admin/stats", AdminStatsView.as_view(), name="admin-stats"),
]
