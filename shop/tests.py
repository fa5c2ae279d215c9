import importlib
import json
import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from django.conf import settings
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import connection
from django.test import TestCase, TransactionTestCase, override_settings
from jose import jwt
from rest_framework.test import APIClient

from shop.exceptions import (
    Conflict,
    InsufficientBalance,
    InvalidAmount,
    InvalidCredentials,
    NotFound,
    ValidationError,
)
from shop.middleware import redact
from shop.models import Item, Purchase, Transaction, User
from shop.services import (
    AccountService,
    CatalogService,
    ReportingService,
    WalletService,
)
from shop.tokens import InvalidToken, decode_token, issue_token

FAST_HASHERS = override_settings(
    PASSWORD_HASHERS=["django.contrib.auth.hashers.MD5PasswordHasher"]
)


def make_user(username="alice", wallet=1000, role=User.Role.USER):
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="secret-pass",
        name=username.title(),
        role=role,
        wallet=wallet,
    )


def make_item(name="Sword", price=300):
    return Item.objects.create(
        name=name,
        icon="sword.png",
        description=f"A {name.lower()}",
        price=price,
        created_by="admin",
    )


# ============================================================
# Model Tests
# ============================================================


@FAST_HASHERS
class UserModelTest(TestCase):
    def test_create_user_hashes_password(self):
        user = make_user()
        self.assertNotEqual(user.password, "secret-pass")
        self.assertTrue(user.check_password("secret-pass"))
        self.assertEqual(user.role, User.Role.USER)
        self.assertFalse(user.is_admin)

    def test_user_str(self):
        user = make_user()
        self.assertIn("alice", str(user))


class TransactionModelTest(TestCase):
    def test_default_status_is_completed(self):
        user = User.objects.create(username="bob", email="bob@example.com", name="Bob")
        tx = Transaction.objects.create(
            user=user,
            transaction_type=Transaction.TransactionType.DEPOSIT,
            amount=100,
        )
        self.assertEqual(tx.status, "completed")
        self.assertIn("deposit", str(tx))
        self.assertIn("100", str(tx))


# ============================================================
# Token Tests
# ============================================================


@FAST_HASHERS
class TokenTest(TestCase):
    def test_issue_and_decode(self):
        user = make_user()
        payload = decode_token(issue_token(user))
        self.assertEqual(payload["userId"], user.pk)
        self.assertEqual(payload["role"], "user")

    def test_token_valid_for_seven_days(self):
        user = make_user()
        payload = decode_token(issue_token(user))
        self.assertEqual(payload["exp"] - payload["iat"], 7 * 24 * 60 * 60)

    def test_tampered_token_rejected(self):
        header, payload, _ = issue_token(make_user()).split(".")
        foreign = jwt.encode({"userId": 999}, "other-secret", algorithm="HS256")
        with self.assertRaises(InvalidToken):
            decode_token(".".join([header, payload, foreign.split(".")[2]]))

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"userId": 1}, "other-secret", algorithm="HS256")
        with self.assertRaises(InvalidToken):
            decode_token(token)

    def test_expired_token_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(days=1)
        token = jwt.encode(
            {"userId": 1, "exp": past}, settings.JWT_SECRET, algorithm="HS256"
        )
        with self.assertRaises(InvalidToken):
            decode_token(token)


# ============================================================
# Service Tests
# ============================================================


@FAST_HASHERS
class AccountServiceTest(TestCase):
    def test_register_grants_signup_bonus(self):
        token, user = AccountService.register(
            "Alice", "alice", "alice@example.com", "pw12345"
        )
        self.assertEqual(user.wallet, 1000)
        self.assertEqual(user.role, User.Role.USER)
        self.assertEqual(decode_token(token)["userId"], user.pk)
        self.assertFalse(Transaction.objects.exists())

    def test_register_duplicate_username(self):
        AccountService.register("Alice", "alice", "alice@example.com", "pw12345")
        with self.assertRaises(Conflict):
            AccountService.register("Other", "alice", "other@example.com", "pw12345")
        self.assertEqual(User.objects.count(), 1)

    def test_register_duplicate_email(self):
        AccountService.register("Alice", "alice", "alice@example.com", "pw12345")
        with self.assertRaises(Conflict):
            AccountService.register("Other", "other", "alice@example.com", "pw12345")

    def test_login_success(self):
        make_user()
        token, user = AccountService.login("alice", "secret-pass")
        self.assertEqual(decode_token(token)["userId"], user.pk)

    def test_login_wrong_password_and_unknown_user_look_the_same(self):
        make_user()
        with self.assertRaises(InvalidCredentials) as wrong_password:
            AccountService.login("alice", "nope")
        with self.assertRaises(InvalidCredentials) as unknown_user:
            AccountService.login("nobody", "secret-pass")
        self.assertEqual(
            wrong_password.exception.as_response_data(),
            unknown_user.exception.as_response_data(),
        )

    @override_settings(ADMIN_USERNAME="root", ADMIN_PASSWORD="rootpw")
    def test_ensure_admin_creates_once(self):
        admin = AccountService.ensure_admin()
        self.assertEqual(admin.username, "root")
        self.assertEqual(admin.role, User.Role.ADMIN)
        self.assertEqual(admin.wallet, 999999)
        self.assertEqual(admin.email, "admin@ahadxtoolkit.com")
        self.assertTrue(admin.check_password("rootpw"))

        self.assertIsNone(AccountService.ensure_admin())
        self.assertEqual(User.objects.filter(role=User.Role.ADMIN).count(), 1)

    def test_ensure_admin_skips_when_admin_present(self):
        make_user("boss", role=User.Role.ADMIN)
        self.assertIsNone(AccountService.ensure_admin(username="x", password="y"))
        self.assertFalse(User.objects.filter(username="x").exists())

    @override_settings(ADMIN_PASSWORD=None)
    def test_ensure_admin_requires_password(self):
        with self.assertRaises(ValueError):
            AccountService.ensure_admin()
        self.assertFalse(User.objects.exists())


@FAST_HASHERS
class WalletServiceTest(TransactionTestCase):
    def setUp(self):
        self.user = make_user(wallet=1000)

    def test_get_balance(self):
        self.assertEqual(WalletService.get_balance(self.user.pk), 1000)

    def test_deposit_success(self):
        balance = WalletService.deposit(self.user.pk, 250)

        self.assertEqual(balance, 1250)
        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet, 1250)

        tx = Transaction.objects.get(user=self.user)
        self.assertEqual(tx.transaction_type, Transaction.TransactionType.DEPOSIT)
        self.assertEqual(tx.amount, 250)
        self.assertEqual(tx.status, Transaction.Status.COMPLETED)
        self.assertEqual(tx.description, "Deposited $250")

    def test_deposit_non_positive_amount_raises(self):
        for amount in (0, -100):
            with self.assertRaises(InvalidAmount):
                WalletService.deposit(self.user.pk, amount)

        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet, 1000)
        self.assertFalse(Transaction.objects.exists())

    def test_deposit_nonexistent_user_raises(self):
        with self.assertRaises(User.DoesNotExist):
            WalletService.deposit(self.user.pk + 100, 10)

    def test_withdraw_success(self):
        balance = WalletService.withdraw(self.user.pk, 400)

        self.assertEqual(balance, 600)
        tx = Transaction.objects.get(user=self.user)
        self.assertEqual(tx.transaction_type, Transaction.TransactionType.WITHDRAW)
        self.assertEqual(tx.amount, 400)
        self.assertEqual(tx.description, "Withdrew $400")

    def test_withdraw_entire_balance(self):
        self.assertEqual(WalletService.withdraw(self.user.pk, 1000), 0)

    def test_withdraw_insufficient_balance(self):
        with self.assertRaises(InsufficientBalance):
            WalletService.withdraw(self.user.pk, 1001)

        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet, 1000)
        self.assertFalse(Transaction.objects.exists())

    def test_withdraw_non_positive_amount_raises(self):
        with self.assertRaises(InvalidAmount):
            WalletService.withdraw(self.user.pk, 0)

    def test_purchase_success(self):
        item = make_item(price=300)

        balance, purchase = WalletService.purchase(self.user.pk, item.pk)

        self.assertEqual(balance, 700)
        self.assertEqual(purchase.item_id, item.pk)
        self.assertEqual(purchase.item_name, "Sword")
        self.assertEqual(purchase.price, 300)
        self.assertEqual(Purchase.objects.count(), 1)

        tx = Transaction.objects.get(user=self.user)
        self.assertEqual(tx.transaction_type, Transaction.TransactionType.PURCHASE)
        self.assertEqual(tx.amount, 300)
        self.assertEqual(tx.item_id, item.pk)
        self.assertEqual(tx.description, "Purchased Sword for $300")

    def test_purchase_insufficient_balance(self):
        item = make_item(price=5000)

        with self.assertRaises(InsufficientBalance) as ctx:
            WalletService.purchase(self.user.pk, item.pk)

        self.assertEqual(ctx.exception.context, {"required": 5000, "balance": 1000})
        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet, 1000)
        self.assertFalse(Purchase.objects.exists())
        self.assertFalse(Transaction.objects.exists())

    def test_purchase_missing_item(self):
        with self.assertRaises(NotFound):
            WalletService.purchase(self.user.pk, 12345)

    def test_purchase_snapshot_survives_item_changes(self):
        item = make_item(price=300)
        _, purchase = WalletService.purchase(self.user.pk, item.pk)

        CatalogService.update_item(item.pk, name="Big Sword", price=900)
        purchase.refresh_from_db()
        self.assertEqual(purchase.price, 300)
        self.assertEqual(purchase.item_name, "Sword")

        CatalogService.delete_item(item.pk)
        self.assertEqual(WalletService.list_purchases(self.user.pk).count(), 1)
        self.assertEqual(WalletService.list_transactions(self.user.pk).count(), 1)

    def test_ledger_matches_balance(self):
        item = make_item(price=150)
        WalletService.deposit(self.user.pk, 500)
        WalletService.withdraw(self.user.pk, 200)
        WalletService.purchase(self.user.pk, item.pk)

        signed = {"deposit": 1, "withdraw": -1, "purchase": -1}
        delta = sum(
            signed[tx.transaction_type] * tx.amount
            for tx in Transaction.objects.filter(user=self.user)
        )
        self.assertEqual(WalletService.get_balance(self.user.pk), 1000 + delta)

    def test_failed_ledger_write_rolls_back_balance(self):
        with patch.object(
            Transaction.objects, "create", side_effect=RuntimeError("disk full")
        ):
            with self.assertRaises(RuntimeError):
                WalletService.deposit(self.user.pk, 100)

        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet, 1000)

    def test_deposit_rejects_balance_past_storage_limit(self):
        with self.assertRaises(InvalidAmount):
            WalletService.deposit(self.user.pk, settings.MAX_WALLET_BALANCE)

        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet, 1000)
        self.assertFalse(Transaction.objects.exists())

    def test_deposit_up_to_storage_limit(self):
        balance = WalletService.deposit(
            self.user.pk, settings.MAX_WALLET_BALANCE - 1000
        )
        self.assertEqual(balance, settings.MAX_WALLET_BALANCE)
        self.assertIsInstance(WalletService.get_balance(self.user.pk), int)

    def test_every_mutation_locks_the_user_row_inside_a_transaction(self):
        item = make_item(price=100)
        original = User.objects.select_for_update
        locked_in_transaction = []

        def tracking_select_for_update(*args, **kwargs):
            locked_in_transaction.append(connection.in_atomic_block)
            return original(*args, **kwargs)

        with patch.object(
            User.objects, "select_for_update", side_effect=tracking_select_for_update
        ):
            WalletService.deposit(self.user.pk, 50)
            WalletService.withdraw(self.user.pk, 25)
            WalletService.purchase(self.user.pk, item.pk)

        self.assertEqual(locked_in_transaction, [True, True, True])
        self.assertEqual(WalletService.get_balance(self.user.pk), 925)

    def test_list_transactions_newest_first_and_capped(self):
        for amount in range(1, 56):
            WalletService.deposit(self.user.pk, amount)

        txs = list(WalletService.list_transactions(self.user.pk))
        self.assertEqual(len(txs), 50)
        self.assertEqual(txs[0].amount, 55)
        self.assertEqual(txs[-1].amount, 6)

    def test_list_purchases_only_own(self):
        other = make_user("bob")
        item = make_item(price=10)
        WalletService.purchase(self.user.pk, item.pk)
        WalletService.purchase(other.pk, item.pk)

        self.assertEqual(WalletService.list_purchases(self.user.pk).count(), 1)


class CatalogServiceTest(TestCase):
    def test_create_item(self):
        item = CatalogService.create_item("Shield", "shield.png", "Sturdy", 120, "root")
        self.assertEqual(item.created_by, "root")
        self.assertEqual(item.price, 120)

    def test_create_item_missing_field(self):
        with self.assertRaises(ValidationError):
            CatalogService.create_item("Shield", "", "Sturdy", 120, "root")

    def test_list_items_newest_first(self):
        first = make_item("Sword")
        second = make_item("Shield")
        self.assertEqual(list(CatalogService.list_items()), [second, first])

    def test_update_item(self):
        item = make_item()
        updated = CatalogService.update_item(item.pk, price=450, icon="new.png")
        self.assertEqual(updated.price, 450)
        self.assertEqual(updated.icon, "new.png")
        self.assertEqual(updated.name, "Sword")

    def test_update_missing_item(self):
        with self.assertRaises(NotFound):
            CatalogService.update_item(999, price=1)

    def test_delete_item(self):
        item = make_item()
        CatalogService.delete_item(item.pk)
        self.assertFalse(Item.objects.exists())

    def test_delete_missing_item(self):
        with self.assertRaises(NotFound):
            CatalogService.delete_item(999)


@FAST_HASHERS
class ReportingServiceTest(TestCase):
    def test_stats_empty(self):
        make_user("root", role=User.Role.ADMIN)
        self.assertEqual(
            ReportingService.get_stats(),
            {
                "total_users": 0,
                "total_items": 0,
                "total_purchases": 0,
                "total_revenue": 0,
            },
        )

    def test_stats_revenue_is_sum_of_purchase_prices(self):
        make_user("root", role=User.Role.ADMIN)
        alice = make_user("alice")
        bob = make_user("bob")
        sword = make_item("Sword", 300)
        shield = make_item("Shield", 125)
        WalletService.purchase(alice.pk, sword.pk)
        WalletService.purchase(bob.pk, shield.pk)
        WalletService.purchase(bob.pk, shield.pk)

        stats = ReportingService.get_stats()
        self.assertEqual(stats["total_users"], 2)
        self.assertEqual(stats["total_items"], 2)
        self.assertEqual(stats["total_purchases"], 3)
        self.assertEqual(stats["total_revenue"], 550)


# ============================================================
# Middleware Tests
# ============================================================


class RedactTest(TestCase):
    def test_masks_credentials(self):
        body = json.dumps({"username": "alice", "password": "pw", "token": "abc"})
        redacted = json.loads(redact(body))
        self.assertEqual(redacted["username"], "alice")
        self.assertEqual(redacted["password"], "***")
        self.assertEqual(redacted["token"], "***")

    def test_non_json_passes_through(self):
        self.assertEqual(redact("plain text"), "plain text")


# ============================================================
# Management Command Tests
# ============================================================


@FAST_HASHERS
class ManagementCommandTest(TestCase):
    @override_settings(ADMIN_USERNAME="root", ADMIN_PASSWORD="rootpw")
    def test_bootstrap_admin(self):
        out = StringIO()
        call_command("bootstrap_admin", stdout=out)
        self.assertIn("Admin account created", out.getvalue())

        out = StringIO()
        call_command("bootstrap_admin", stdout=out)
        self.assertIn("already exists", out.getvalue())
        self.assertEqual(User.objects.filter(role=User.Role.ADMIN).count(), 1)

    @override_settings(ADMIN_PASSWORD=None)
    def test_bootstrap_admin_without_password_fails(self):
        with self.assertRaises(CommandError):
            call_command("bootstrap_admin", stdout=StringIO())

    def test_wait_for_db(self):
        out = StringIO()
        call_command("wait_for_db", stdout=out)
        self.assertIn("Database available!", out.getvalue())


# ============================================================
# Configuration Tests
# ============================================================


class EnvFileTest(TestCase):
    def load_settings(self, env_file, **environ):
        import config.settings

        with patch.dict(os.environ, {"DJANGO_ENV_FILE": str(env_file), **environ}):
            for name in ("JWT_EXPIRATION_DAYS", "CORS_ALLOWED_ORIGINS"):
                if name not in environ:
                    os.environ.pop(name, None)
            module = importlib.reload(config.settings)
            values = (module.JWT_EXPIRATION_DAYS, module.CORS_ALLOWED_ORIGINS)
        importlib.reload(config.settings)
        return values

    def write_env_file(self, directory):
        env_file = Path(directory) / ".env"
        env_file.write_text(
            "JWT_EXPIRATION_DAYS=3\nCORS_ALLOWED_ORIGINS=https://shop.example\n"
        )
        return env_file

    def test_settings_read_env_file(self):
        with tempfile.TemporaryDirectory() as directory:
            days, origins = self.load_settings(self.write_env_file(directory))
        self.assertEqual(days, 3)
        self.assertEqual(origins, ["https://shop.example"])

    def test_process_environment_wins_over_env_file(self):
        with tempfile.TemporaryDirectory() as directory:
            days, _ = self.load_settings(
                self.write_env_file(directory), JWT_EXPIRATION_DAYS="5"
            )
        self.assertEqual(days, 5)


class CorsTest(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_preflight_from_allowed_origin(self):
        response = self.client.options(
            "/api/wallet/deposit",
            HTTP_ORIGIN="http://localhost:5500",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
            HTTP_ACCESS_CONTROL_REQUEST_HEADERS="authorization,content-type",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response["Access-Control-Allow-Origin"], "http://localhost:5500"
        )
        self.assertEqual(response["Access-Control-Allow-Credentials"], "true")
        self.assertIn("authorization", response["Access-Control-Allow-Headers"])

    def test_preflight_from_unknown_origin(self):
        response = self.client.options(
            "/api/wallet/deposit",
            HTTP_ORIGIN="http://evil.example",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
        )
        self.assertNotIn("Access-Control-Allow-Origin", response)

    def test_simple_request_carries_cors_headers(self):
        response = self.client.get("/api/items", HTTP_ORIGIN="http://127.0.0.1:5500")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response["Access-Control-Allow-Origin"], "http://127.0.0.1:5500"
        )


class WsgiStartupTest(TestCase):
    def test_wsgi_module_bootstraps_admin_before_serving(self):
        sys.modules.pop("config.wsgi", None)
        with patch("django.core.management.call_command") as mock_call_command:
            module = importlib.import_module("config.wsgi")
        self.assertIsNotNone(module.application)
        mock_call_command.assert_called_once_with("bootstrap_admin")


# ============================================================
# API Tests
# ============================================================


class APITestMixin:
    def setUp(self):
        self.client = APIClient()
        self.admin = make_user("root", wallet=999999, role=User.Role.ADMIN)
        self.admin_token = issue_token(self.admin)

    def register(self, username="alice"):
        response = self.client.post(
            "/api/auth/register",
            {
                "name": username.title(),
                "username": username,
                "email": f"{username}@example.com",
                "password": "pw12345",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        return response.data["token"]

    def authenticate(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def as_admin(self):
        self.authenticate(self.admin_token)


@FAST_HASHERS
class AuthAPITest(APITestMixin, TestCase):
    def test_register(self):
        response = self.client.post(
            "/api/auth/register",
            {
                "name": "Alice",
                "username": "alice",
                "email": "alice@example.com",
                "password": "pw12345",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertIn("token", response.data)
        user = response.data["user"]
        self.assertEqual(user["wallet"], 1000)
        self.assertEqual(user["role"], "user")
        self.assertEqual(
            set(user), {"id", "name", "username", "email", "role", "wallet", "createdAt"}
        )

    def test_register_duplicate(self):
        self.register("alice")
        response = self.client.post(
            "/api/auth/register",
            {
                "name": "Alice 2",
                "username": "alice",
                "email": "new@example.com",
                "password": "pw12345",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.data["error"], "User with this email or username already exists"
        )

    def test_register_missing_fields(self):
        response = self.client.post(
            "/api/auth/register", {"username": "alice"}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.data)

    def test_login(self):
        self.register("alice")
        response = self.client.post(
            "/api/auth/login",
            {"username": "alice", "password": "pw12345"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user"]["username"], "alice")

        self.authenticate(response.data["token"])
        self.assertEqual(self.client.get("/api/wallet/balance").status_code, 200)

    def test_login_failures_share_one_response(self):
        self.register("alice")
        wrong_password = self.client.post(
            "/api/auth/login",
            {"username": "alice", "password": "wrong"},
            format="json",
        )
        unknown_user = self.client.post(
            "/api/auth/login",
            {"username": "ghost", "password": "pw12345"},
            format="json",
        )
        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_user.status_code, 401)
        self.assertEqual(wrong_password.data, {"error": "Invalid credentials"})
        self.assertEqual(wrong_password.data, unknown_user.data)

    def test_register_ignores_stale_authorization_header(self):
        self.authenticate("garbage")
        self.register("alice")


@FAST_HASHERS
class AccessControlAPITest(APITestMixin, TestCase):
    def test_missing_token(self):
        response = self.client.get("/api/wallet/balance")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data, {"error": "Please authenticate"})

    def test_invalid_token(self):
        self.authenticate("not-a-token")
        response = self.client.get("/api/user/transactions")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data, {"error": "Please authenticate"})

    def test_token_for_deleted_user(self):
        token = self.register("alice")
        User.objects.filter(username="alice").delete()
        self.authenticate(token)
        self.assertEqual(self.client.get("/api/wallet/balance").status_code, 401)

    def test_expired_token(self):
        past = datetime.now(timezone.utc) - timedelta(seconds=1)
        token = jwt.encode(
            {"userId": self.admin.pk, "exp": past},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        self.authenticate(token)
        self.assertEqual(self.client.get("/api/admin/stats").status_code, 401)

    def test_non_admin_gets_forbidden_on_admin_routes(self):
        self.authenticate(self.register("alice"))
        item = make_item()
        requests = [
            ("get", "/api/admin/users", None),
            ("get", "/api/admin/stats", None),
            ("post", "/api/items", {"name": "x", "icon": "x", "description": "x", "price": 1}),
            ("put", f"/api/items/{item.pk}", {"price": 1}),
            ("delete", f"/api/items/{item.pk}", None),
        ]
        for method, url, body in requests:
            response = getattr(self.client, method)(url, body, format="json")
            self.assertEqual(response.status_code, 403, url)
            self.assertEqual(response.data, {"error": "Admin access required"})

    def test_admin_routes_require_token(self):
        for url in ("/api/admin/users", "/api/admin/stats"):
            self.assertEqual(self.client.get(url).status_code, 401)
        self.assertEqual(self.client.delete("/api/items/1").status_code, 401)

    def test_role_is_read_from_store_not_token(self):
        self.as_admin()
        self.assertEqual(self.client.get("/api/admin/stats").status_code, 200)

        User.objects.filter(pk=self.admin.pk).update(role=User.Role.USER)
        self.assertEqual(self.client.get("/api/admin/stats").status_code, 403)

    def test_promoted_user_gains_admin_with_old_token(self):
        token = self.register("alice")
        User.objects.filter(username="alice").update(role=User.Role.ADMIN)
        self.authenticate(token)
        self.assertEqual(self.client.get("/api/admin/users").status_code, 200)


@FAST_HASHERS
class WalletAPITest(APITestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.authenticate(self.register("alice"))

    def test_balance(self):
        response = self.client.get("/api/wallet/balance")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"balance": 1000})

    def test_deposit(self):
        response = self.client.post("/api/wallet/deposit", {"amount": 500}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.data, {"message": "Deposit successful", "balance": 1500}
        )

    def test_deposit_invalid_amount(self):
        for amount in (0, -50):
            response = self.client.post(
                "/api/wallet/deposit", {"amount": amount}, format="json"
            )
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.data, {"error": "Invalid amount"})
        self.assertEqual(self.client.get("/api/wallet/balance").data["balance"], 1000)

    def test_deposit_non_numeric_amount(self):
        response = self.client.post(
            "/api/wallet/deposit", {"amount": "lots"}, format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_deposit_missing_amount(self):
        response = self.client.post("/api/wallet/deposit", {}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_withdraw(self):
        response = self.client.post(
            "/api/wallet/withdraw", {"amount": 300}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.data, {"message": "Withdrawal successful", "balance": 700}
        )

    def test_withdraw_insufficient(self):
        response = self.client.post(
            "/api/wallet/withdraw", {"amount": 5000}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {"error": "Insufficient balance"})

    def test_deposit_amount_beyond_storage_limit(self):
        response = self.client.post(
            "/api/wallet/deposit", {"amount": 2**63}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get("/api/wallet/balance").data["balance"], 1000)

    def test_deposit_that_would_overflow_balance(self):
        response = self.client.post(
            "/api/wallet/deposit", {"amount": 2**63 - 1}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {"error": "Invalid amount"})
        balance = self.client.get("/api/wallet/balance").data["balance"]
        self.assertEqual(balance, 1000)
        self.assertIsInstance(balance, int)

    def test_unexpected_error_returns_generic_message(self):
        with patch.object(
            WalletService, "get_balance", side_effect=RuntimeError("db down")
        ):
            response = self.client.get("/api/wallet/balance")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"error": "Failed to fetch balance"})

    def test_transactions_history(self):
        for amount in range(1, 53):
            self.client.post("/api/wallet/deposit", {"amount": amount}, format="json")

        response = self.client.get("/api/user/transactions")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 50)
        newest = response.data[0]
        self.assertEqual(newest["amount"], 52)
        self.assertEqual(newest["type"], "deposit")
        self.assertEqual(newest["status"], "completed")
        self.assertIsNone(newest["itemId"])


@FAST_HASHERS
class ItemAPITest(APITestMixin, TestCase):
    payload = {
        "name": "Sword",
        "icon": "sword.png",
        "description": "Sharp",
        "price": 300,
    }

    def test_list_items_is_public(self):
        make_item("Sword")
        make_item("Shield")
        response = self.client.get("/api/items")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["name"] for item in response.data], ["Shield", "Sword"])

    def test_list_items_ignores_bad_token(self):
        self.authenticate("garbage")
        self.assertEqual(self.client.get("/api/items").status_code, 200)

    def test_create_item(self):
        self.as_admin()
        response = self.client.post("/api/items", self.payload, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["createdBy"], "root")
        self.assertEqual(response.data["price"], 300)
        self.assertTrue(Item.objects.filter(pk=response.data["id"]).exists())

    def test_create_item_missing_field(self):
        self.as_admin()
        body = dict(self.payload)
        del body["icon"]
        response = self.client.post("/api/items", body, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Item.objects.exists())

    def test_create_item_requires_positive_price(self):
        self.as_admin()
        response = self.client.post(
            "/api/items", dict(self.payload, price=0), format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_update_item(self):
        item = make_item()
        self.as_admin()
        response = self.client.put(
            f"/api/items/{item.pk}",
            dict(self.payload, name="Longsword", price=450),
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["name"], "Longsword")
        self.assertEqual(response.data["price"], 450)

    def test_update_missing_item(self):
        self.as_admin()
        response = self.client.put("/api/items/999", self.payload, format="json")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data, {"error": "Item not found"})

    def test_delete_item(self):
        item = make_item()
        self.as_admin()
        response = self.client.delete(f"/api/items/{item.pk}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"message": "Item deleted successfully"})
        self.assertEqual(self.client.delete(f"/api/items/{item.pk}").status_code, 404)


@FAST_HASHERS
class PurchaseAPITest(APITestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.token = self.register("alice")
        self.authenticate(self.token)

    def test_buy_item(self):
        item = make_item(price=300)
        response = self.client.post(f"/api/items/{item.pk}/buy")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Purchase successful")
        self.assertEqual(response.data["balance"], 700)
        self.assertEqual(response.data["purchase"]["itemName"], "Sword")
        self.assertEqual(response.data["purchase"]["price"], 300)

    def test_buy_missing_item(self):
        response = self.client.post("/api/items/999/buy")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data, {"error": "Item not found"})

    def test_buy_insufficient_balance(self):
        item = make_item(price=1500)
        response = self.client.post(f"/api/items/{item.pk}/buy")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.data,
            {"error": "Insufficient balance", "required": 1500, "balance": 1000},
        )
        self.assertEqual(self.client.get("/api/user/purchases").data, [])

    def test_purchase_history(self):
        sword = make_item("Sword", 100)
        shield = make_item("Shield", 200)
        self.client.post(f"/api/items/{sword.pk}/buy")
        self.client.post(f"/api/items/{shield.pk}/buy")

        response = self.client.get("/api/user/purchases")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([p["itemName"] for p in response.data], ["Shield", "Sword"])
        self.assertEqual(
            set(response.data[0]),
            {"id", "userId", "itemId", "itemName", "price", "purchaseDate"},
        )

    def test_example_scenario(self):
        self.as_admin()
        response = self.client.post(
            "/api/items",
            {"name": "Sword", "icon": "s.png", "description": "Sharp", "price": 300},
            format="json",
        )
        sword_id = response.data["id"]

        self.authenticate(self.token)
        response = self.client.post(f"/api/items/{sword_id}/buy")
        self.assertEqual(response.data["balance"], 700)

        response = self.client.post(
            "/api/wallet/withdraw", {"amount": 800}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get("/api/wallet/balance").data["balance"], 700)

        response = self.client.post(
            "/api/wallet/withdraw", {"amount": 700}, format="json"
        )
        self.assertEqual(response.data["balance"], 0)

        types = [tx["type"] for tx in self.client.get("/api/user/transactions").data]
        self.assertEqual(types, ["withdraw", "purchase"])


@FAST_HASHERS
class AdminAPITest(APITestMixin, TestCase):
    def test_list_users_hides_password(self):
        self.register("alice")
        self.as_admin()
        response = self.client.get("/api/admin/users")
        self.assertEqual(response.status_code, 200)
        self.assertEqual({u["username"] for u in response.data}, {"root", "alice"})
        for user in response.data:
            self.assertNotIn("password", user)

    def test_stats(self):
        self.authenticate(self.register("alice"))
        item = make_item(price=250)
        self.client.post(f"/api/items/{item.pk}/buy")

        self.as_admin()
        response = self.client.get("/api/admin/stats")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.data,
            {
                "totalUsers": 1,
                "totalItems": 1,
                "totalPurchases": 1,
                "totalRevenue": 250,
            },
        )
