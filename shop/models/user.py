from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.db import models

from shop.models.base import BaseModel


class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, username, email, password, name="", **extra_fields):
        user = self.model(
            username=username,
            email=self.normalize_email(email),
            name=name,
            **extra_fields,
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def admin_exists(self):
        return self.filter(role=User.Role.ADMIN).exists()


class User(AbstractBaseUser, BaseModel):
    """
    A shop account holding a wallet balance.

    The balance is only ever changed through `WalletService`, which locks the
    row for the duration of the update.
    """

    class Role(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"

    name = models.CharField(max_length=150)
    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER)
    wallet = models.BigIntegerField(default=0)

    objects = UserManager()

    USERNAME_FIELD = "username"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["email", "name"]

    class Meta(BaseModel.Meta):
        pass

    def __str__(self):
        return f"User {self.username} ({self.role}, wallet={self.wallet})"

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN
