import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from shop.permissions import IsAdminRole
from shop.serializers import ItemSerializer, PurchaseSerializer
from shop.services import CatalogService, WalletService

logger = logging.getLogger(__name__)


class ItemListCreateView(APIView):
    """
    GET  /api/items - List the catalog, newest first. No authentication.
    POST /api/items - Add an item (admin only).
    """

    def perform_authentication(self, request):
        # Resolved lazily by the permission check, so browsing the catalog
        # never fails on a stale Authorization header.
        pass

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAdminRole()]

    @property
    def failure_message(self):
        if self.request.method == "GET":
            return "Failed to fetch items"
        return "Failed to add item"

    def get(self, request, *args, **kwargs):
        items = CatalogService.list_items()
        return Response(ItemSerializer(items, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = ItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = CatalogService.create_item(
            created_by=request.user.username, **serializer.validated_data
        )
        return Response(ItemSerializer(item).data, status=status.HTTP_201_CREATED)


class ItemDetailView(APIView):
    """
    PUT    /api/items/<id> - Overwrite the given item fields (admin only).
    DELETE /api/items/<id> - Remove an item (admin only).
    """

    permission_classes = (IsAdminRole,)

    @property
    def failure_message(self):
        if self.request.method == "DELETE":
            return "Failed to delete item"
        return "Failed to update item"

    def put(self, request, pk, *args, **kwargs):
        serializer = ItemSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        item = CatalogService.update_item(pk, **serializer.validated_data)
        return Response(ItemSerializer(item).data)

    def delete(self, request, pk, *args, **kwargs):
        CatalogService.delete_item(pk)
        return Response({"message": "Item deleted successfully"})


class BuyItemView(APIView):
    """POST /api/items/<id>/buy - Buy an item with the wallet balance."""

    permission_classes = (IsAuthenticated,)
    failure_message = "Purchase failed"

    def post(self, request, pk, *args, **kwargs):
        balance, purchase = WalletService.purchase(user_id=request.user.pk, item_id=pk)
        return Response(
            {
                "message": "Purchase successful",
                "balance": balance,
                "purchase": PurchaseSerializer(purchase).data,
            }
        )
