from django.db import models


class BaseModel(models.Model):
    """
    Abstract base model providing the creation timestamp.

    Records in the shop app are listed newest-first unless a model
    says otherwise; `-id` breaks ties between rows created in the same instant.
    """

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ["-created_at", "-id"]
