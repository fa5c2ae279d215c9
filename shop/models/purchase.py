from django.conf import settings
from django.db import models


class Purchase(models.Model):
    """
    Record of an item acquisition.

    Item name and price are copied at purchase time, so later catalog edits
    or deletions do not change past purchases.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="purchases",
    )
    item_id = models.BigIntegerField()
    item_name = models.CharField(max_length=200)
    price = models.BigIntegerField()
    purchase_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-purchase_date", "-id"]

    def __str__(self):
        return f"Purchase {self.id} | {self.item_name} | {self.price}"
