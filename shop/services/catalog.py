import logging

from shop.exceptions import NotFound, ValidationError
from shop.models import Item

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("name", "icon", "description", "price")


class CatalogService:
    """CRUD over catalog items. Past purchases keep their own item snapshot."""

    @staticmethod
    def list_items():
        return Item.objects.order_by("-created_at", "-id")

    @staticmethod
    def create_item(name, icon, description, price, created_by: str) -> Item:
        """
        Raises:
            ValidationError: If any field is missing or empty.
        """
        if not all((name, icon, description, price)):
            raise ValidationError()

        item = Item.objects.create(
            name=name,
            icon=icon,
            description=description,
            price=price,
            created_by=created_by,
        )
        logger.info("Item created: id=%d name=%s by=%s", item.id, name, created_by)
        return item

    @staticmethod
    def update_item(item_id: int, **fields) -> Item:
        """
        Overwrite the given item fields and return the updated item.

        Raises:
            NotFound: If the item doesn't exist.
        """
        item = Item.objects.filter(pk=item_id).first()
        if item is None:
            raise NotFound("Item not found")

        changed = [name for name in ITEM_FIELDS if name in fields]
        for name in changed:
            setattr(item, name, fields[name])
        if changed:
            item.save(update_fields=changed)

        logger.info("Item updated: id=%d fields=%s", item.id, ",".join(changed))
        return item

    @staticmethod
    def delete_item(item_id: int) -> None:
        """
        Raises:
            NotFound: If the item doesn't exist.
        """
        deleted, _ = Item.objects.filter(pk=item_id).delete()
        if not deleted:
            raise NotFound("Item not found")
        logger.info("Item deleted: id=%d", item_id)
