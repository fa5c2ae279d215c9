import time

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import connections
from django.db.utils import OperationalError


class Command(BaseCommand):
    help = "Waits for the database to be available"

    def add_arguments(self, parser):
        parser.add_argument(
            "--timeout",
            type=int,
            default=settings.DB_WAIT_TIMEOUT,
            help="Seconds to keep retrying before giving up.",
        )

    def handle(self, *args, **options):
        self.stdout.write("Waiting for database...")
        deadline = time.monotonic() + options["timeout"]
        while True:
            try:
                connections["default"].ensure_connection()
                break
            except OperationalError as exc:
                if time.monotonic() >= deadline:
                    raise CommandError(f"Database unavailable: {exc}") from exc
                self.stdout.write(
                    self.style.WARNING("Database unavailable, waiting 1 second...")
                )
                time.sleep(1)
        self.stdout.write(self.style.SUCCESS("Database available!"))
