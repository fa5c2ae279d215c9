from rest_framework.generics import ListAPIView
from rest_framework.permissions import IsAuthenticated

from shop.serializers import PurchaseSerializer, TransactionSerializer
from shop.services import WalletService


class PurchaseListView(ListAPIView):
    """GET /api/user/purchases - The caller's purchases, newest first."""

    serializer_class = PurchaseSerializer
    permission_classes = (IsAuthenticated,)
    failure_message = "Failed to fetch purchases"

    def get_queryset(self):
        return WalletService.list_purchases(self.request.user.pk)


class TransactionListView(ListAPIView):
    """GET /api/user/transactions - The caller's 50 most recent ledger entries."""

    serializer_class = TransactionSerializer
    permission_classes = (IsAuthenticated,)
    failure_message = "Failed to fetch transactions"

    def get_queryset(self):
        return WalletService.list_transactions(self.request.user.pk)
