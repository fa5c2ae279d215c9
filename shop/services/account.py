import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Q

from shop.exceptions import Conflict, InvalidCredentials
from shop.models import User
from shop.tokens import issue_token

logger = logging.getLogger(__name__)


class AccountService:
    """Registration, login and the bootstrap admin account."""

    @staticmethod
    def register(name: str, username: str, email: str, password: str):
        """
        Create a regular user with the signup bonus in the wallet.

        Returns:
            Tuple of (token, User).

        Raises:
            Conflict: If the username or email is already taken.
        """
        if User.objects.filter(Q(username=username) | Q(email=email)).exists():
            logger.info("Registration conflict: username=%s", username)
            raise Conflict()

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=username,
                    email=email,
                    password=password,
                    name=name,
                    role=User.Role.USER,
                    wallet=settings.SIGNUP_BONUS,
                )
        except IntegrityError:
            # Lost a race against a concurrent registration
            raise Conflict()

        logger.info("User registered: id=%d username=%s", user.id, user.username)
        return issue_token(user), user

    @staticmethod
    def login(username: str, password: str):
        """
        Check credentials and issue a fresh token.

        Returns:
            Tuple of (token, User).

        Raises:
            InvalidCredentials: If the username is unknown or the password is
                wrong. Both cases raise the same error.
        """
        user = User.objects.filter(username=username).first()
        if user is None or not user.check_password(password):
            logger.warning("Failed login attempt: username=%s", username)
            raise InvalidCredentials()

        logger.info("User logged in: id=%d username=%s", user.id, user.username)
        return issue_token(user), user

    @staticmethod
    def ensure_admin(username: str = None, password: str = None, email: str = None):
        """
        Create the admin account unless an admin already exists.

        Returns:
            The created User, or None when an admin was already present.

        Raises:
            ValueError: If an admin must be created but no password is configured.
        """
        if User.objects.admin_exists():
            logger.info("Admin account already exists")
            return None

        username = username or settings.ADMIN_USERNAME
        password = password or settings.ADMIN_PASSWORD
        email = email or settings.ADMIN_EMAIL
        if not password:
            raise ValueError("ADMIN_PASSWORD must be set to create the admin account.")

        admin = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            name="Global Admin",
            role=User.Role.ADMIN,
            wallet=settings.ADMIN_WALLET_BALANCE,
        )
        logger.info("Admin account created: username=%s email=%s", username, email)
        return admin
