import logging

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from shop.serializers import AmountSerializer
from shop.services import WalletService

logger = logging.getLogger(__name__)


class BalanceView(APIView):
    """GET /api/wallet/balance - Current wallet balance."""

    permission_classes = (IsAuthenticated,)
    failure_message = "Failed to fetch balance"

    def get(self, request, *args, **kwargs):
        return Response({"balance": WalletService.get_balance(request.user.pk)})


class DepositView(APIView):
    """
    POST /api/wallet/deposit - Add funds to the wallet.

    Request body: {"amount": <positive integer>}
    """

    permission_classes = (IsAuthenticated,)
    failure_message = "Deposit failed"

    def post(self, request, *args, **kwargs):
        serializer = AmountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        balance = WalletService.deposit(
            user_id=request.user.pk,
            amount=serializer.validated_data["amount"],
        )
        return Response({"message": "Deposit successful", "balance": balance})


class WithdrawView(APIView):
    """
    POST /api/wallet/withdraw - Take funds out of the wallet.

    Request body: {"amount": <positive integer>}
    """

    permission_classes = (IsAuthenticated,)
    failure_message = "Withdrawal failed"

    def post(self, request, *args, **kwargs):
        serializer = AmountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        balance = WalletService.withdraw(
            user_id=request.user.pk,
            amount=serializer.validated_data["amount"],
        )
        return Response({"message": "Withdrawal successful", "balance": balance})
