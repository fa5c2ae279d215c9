from django.db import models

from shop.models.base import BaseModel


class Item(BaseModel):
    """A catalog entry that users can buy with their wallet balance."""

    name = models.CharField(max_length=200)
    icon = models.CharField(max_length=200)
    description = models.TextField()
    price = models.PositiveIntegerField()
    created_by = models.CharField(max_length=150, default="admin")

    class Meta(BaseModel.Meta):
        pass

    def __str__(self):
        return f"Item {self.name} (${self.price})"
