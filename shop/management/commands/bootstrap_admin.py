from django.core.management.base import BaseCommand, CommandError

from shop.services import AccountService


class Command(BaseCommand):
    help = "Creates the admin account if no admin exists yet"

    def add_arguments(self, parser):
        parser.add_argument("--username", help="Defaults to ADMIN_USERNAME.")
        parser.add_argument("--password", help="Defaults to ADMIN_PASSWORD.")

    def handle(self, *args, **options):
        try:
            admin = AccountService.ensure_admin(
                username=options.get("username"),
                password=options.get("password"),
            )
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        if admin is None:
            self.stdout.write("Admin account already exists")
        else:
            self.stdout.write(
                self.style.SUCCESS(f"Admin account created: {admin.username}")
            )
