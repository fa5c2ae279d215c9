from django.db.models import Sum

from shop.models import Item, Purchase, User


class ReportingService:
    """Aggregate figures for the admin dashboard, computed on every call."""

    @staticmethod
    def get_stats() -> dict:
        revenue = Purchase.objects.aggregate(total=Sum("price"))["total"]
        return {
            # Regular users only; the admin account is not counted
            "total_users": User.objects.filter(role=User.Role.USER).count(),
            "total_items": Item.objects.count(),
            "total_purchases": Purchase.objects.count(),
            "total_revenue": revenue or 0,
        }

    @staticmethod
    def list_users():
        return User.objects.order_by("-created_at", "-id")
