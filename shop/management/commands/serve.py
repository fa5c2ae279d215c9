from django.conf import settings
from django.core.management import call_command
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Prepares the database, ensures the admin account and starts serving"

    def add_arguments(self, parser):
        parser.add_argument("--port", type=int, default=settings.PORT)

    def handle(self, *args, **options):
        call_command("wait_for_db")
        call_command("migrate", interactive=False)
        call_command("bootstrap_admin")
        call_command("runserver", f"0.0.0.0:{options['port']}", use_reloader=False)
