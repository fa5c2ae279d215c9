import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F

from shop.exceptions import InsufficientBalance, InvalidAmount, NotFound
from shop.models import Item, Purchase, Transaction, User

logger = logging.getLogger(__name__)


class WalletService:
    """
    Owns every change to a user's wallet balance.

    Each mutation runs in one database transaction and takes a row-level lock
    on the user with select_for_update(), so concurrent requests for the same
    user are applied one after another. The balance write and its ledger entry
    (and purchase record) commit together or not at all.
    """

    @staticmethod
    def get_balance(user_id: int) -> int:
        return User.objects.values_list("wallet", flat=True).get(pk=user_id)

    @staticmethod
    def _lock_user(user_id: int) -> User:
        return User.objects.select_for_update().get(pk=user_id)

    @staticmethod
    def _apply(user: User, delta: int) -> int:
        User.objects.filter(pk=user.pk).update(wallet=F("wallet") + delta)
        user.refresh_from_db(fields=["wallet"])
        return user.wallet

    @staticmethod
    @transaction.atomic
    def deposit(user_id: int, amount: int) -> int:
        """
        Credit the wallet and record a deposit entry.

        Returns:
            The new balance.

        Raises:
            InvalidAmount: If amount is not positive, or the new balance would
                exceed MAX_WALLET_BALANCE.
            User.DoesNotExist: If the user doesn't exist.
        """
        if amount <= 0:
            logger.warning("Deposit rejected: user=%s amount=%s", user_id, amount)
            raise InvalidAmount()

        user = WalletService._lock_user(user_id)

        if user.wallet + amount > settings.MAX_WALLET_BALANCE:
            logger.warning(
                "Deposit rejected (balance ceiling): user=%s balance=%d amount=%d",
                user_id,
                user.wallet,
                amount,
            )
            raise InvalidAmount()

        balance = WalletService._apply(user, amount)

        tx = Transaction.objects.create(
            user=user,
            transaction_type=Transaction.TransactionType.DEPOSIT,
            amount=amount,
            status=Transaction.Status.COMPLETED,
            description=f"Deposited ${amount}",
        )

        logger.info(
            "Deposit completed: user=%s amount=%d new_balance=%d tx=%d",
            user_id,
            amount,
            balance,
            tx.id,
        )
        return balance

    @staticmethod
    @transaction.atomic
    def withdraw(user_id: int, amount: int) -> int:
        """
        Debit the wallet and record a withdraw entry.

        Returns:
            The new balance.

        Raises:
            InvalidAmount: If amount is not positive.
            InsufficientBalance: If the balance is lower than amount.
        """
        if amount <= 0:
            logger.warning("Withdrawal rejected: user=%s amount=%s", user_id, amount)
            raise InvalidAmount()

        user = WalletService._lock_user(user_id)

        if user.wallet < amount:
            logger.warning(
                "Withdrawal failed (insufficient balance): user=%s balance=%d amount=%d",
                user_id,
                user.wallet,
                amount,
            )
            raise InsufficientBalance()

        balance = WalletService._apply(user, -amount)

        tx = Transaction.objects.create(
            user=user,
            transaction_type=Transaction.TransactionType.WITHDRAW,
            amount=amount,
            status=Transaction.Status.COMPLETED,
            description=f"Withdrew ${amount}",
        )

        logger.info(
            "Withdrawal completed: user=%s amount=%d new_balance=%d tx=%d",
            user_id,
            amount,
            balance,
            tx.id,
        )
        return balance

    @staticmethod
    @transaction.atomic
    def purchase(user_id: int, item_id: int):
        """
        Buy an item with the wallet balance.

        The purchase record keeps the item's name and price as they are now.

        Returns:
            Tuple of (new balance, created Purchase).

        Raises:
            NotFound: If the item doesn't exist.
            InsufficientBalance: If the balance is lower than the item price.
                Carries `required` and `balance` for display.
        """
        item = Item.objects.filter(pk=item_id).first()
        if item is None:
            raise NotFound("Item not found")

        user = WalletService._lock_user(user_id)

        if user.wallet < item.price:
            logger.warning(
                "Purchase failed (insufficient balance): user=%s item=%s "
                "price=%d balance=%d",
                user_id,
                item.id,
                item.price,
                user.wallet,
            )
            raise InsufficientBalance(required=item.price, balance=user.wallet)

        balance = WalletService._apply(user, -item.price)

        purchase = Purchase.objects.create(
            user=user,
            item_id=item.id,
            item_name=item.name,
            price=item.price,
        )
        tx = Transaction.objects.create(
            user=user,
            transaction_type=Transaction.TransactionType.PURCHASE,
            amount=item.price,
            item_id=item.id,
            status=Transaction.Status.COMPLETED,
            description=f"Purchased {item.name} for ${item.price}",
        )

        logger.info(
            "Purchase completed: user=%s item=%s price=%d new_balance=%d "
            "purchase=%d tx=%d",
            user_id,
            item.id,
            item.price,
            balance,
            purchase.id,
            tx.id,
        )
        return balance, purchase

    @staticmethod
    def list_purchases(user_id: int):
        """Return the user's purchases, newest first."""
        return Purchase.objects.filter(user_id=user_id).order_by(
            "-purchase_date", "-id"
        )

    @staticmethod
    def list_transactions(user_id: int, limit: int = None):
        """Return the user's most recent ledger entries, newest first."""
        if limit is None:
            limit = settings.TRANSACTION_HISTORY_LIMIT
        return Transaction.objects.filter(user_id=user_id).order_by(
            "-created_at", "-id"
        )[:limit]
