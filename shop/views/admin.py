from rest_framework.generics import ListAPIView
from rest_framework.response import Response
from rest_framework.views import APIView

from shop.permissions import IsAdminRole
from shop.serializers import StatsSerializer, UserSerializer
from shop.services import ReportingService


class AdminUserListView(ListAPIView):
    """GET /api/admin/users - Every account, without password hashes."""

    serializer_class = UserSerializer
    permission_classes = (IsAdminRole,)
    failure_message = "Failed to fetch users"

    def get_queryset(self):
        return ReportingService.list_users()


class AdminStatsView(APIView):
    """GET /api/admin/stats - Dashboard totals."""

    permission_classes = (IsAdminRole,)
    failure_message = "Failed to fetch stats"

    def get(self, request, *args, **kwargs):
        return Response(StatsSerializer(ReportingService.get_stats()).data)
