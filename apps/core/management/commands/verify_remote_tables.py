"""
Management command to verify the hosted table store.

Resolves the remote credentials the application would use (pharmacy
settings, then SUPABASE_URL / SUPABASE_ANON_KEY, then the built-in
defaults), checks that every expected table is reachable and reports
row counts. Tables have to be created in the hosted project's SQL
editor; this command only verifies them.

Exits non-zero when no credentials resolve or any table is missing.

Usage:
    python manage.py verify_remote_tables
    python manage.py verify_remote_tables --table products --table invoices
"""

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError

from apps.core.exceptions import ConfigurationError
from apps.core.models import PharmacySettings
from apps.core.persistence import resolve_remote_credentials
from apps.core.persistence.remote import EXPECTED_TABLES, RemoteTableStore


class Command(BaseCommand):
    """
    Management command to check remote tables and row counts.
    """

    help = "Verify that the hosted table store has every table the pharmacy needs"

    def add_arguments(self, parser):
        parser.add_argument(
            "--table",
            action="append",
            dest="tables",
            help="Check only this table (repeatable)",
        )
        parser.add_argument(
            "--skip-settings",
            action="store_true",
            help="Ignore credentials saved in the pharmacy settings",
        )

    def _profile(self, skip_settings):
        if skip_settings:
            return None
        try:
            return PharmacySettings.load()
        except DatabaseError:
            self.stdout.write(
                self.style.WARNING("Local database not migrated, ignoring saved settings")
            )
            return None

    def handle(self, *args, **options):
        """Execute the command."""
        try:
            credentials = resolve_remote_credentials(self._profile(options["skip_settings"]))
        except ConfigurationError as e:
            raise CommandError(str(e))

        if credentials is None:
            raise CommandError(
                "No remote store credentials configured. Set SUPABASE_URL and "
                "SUPABASE_ANON_KEY or save them in the pharmacy settings."
            )

        self.stdout.write(f"Checking {credentials.url} (credentials from {credentials.source})")

        store = RemoteTableStore(
            credentials.url, credentials.api_key, timeout=settings.REMOTE_STORE_TIMEOUT
        )
        tables = options["tables"] or EXPECTED_TABLES

        self.stdout.write("\nVerifying tables...")
        statuses = store.inspect_tables(tables)
        missing = []
        for table_status in statuses:
            if table_status.exists:
                self.stdout.write(self.style.SUCCESS(f"  ✓ {table_status.name}: EXISTS"))
            else:
                missing.append(table_status.name)
                self.stdout.write(
                    self.style.ERROR(f"  ✗ {table_status.name}: NOT FOUND ({table_status.error})")
                )

        self.stdout.write("\nRow counts...")
        for table_status in statuses:
            if table_status.exists:
                count = table_status.row_count if table_status.row_count is not None else "?"
                self.stdout.write(f"  {table_status.name}: {count} rows")

        if missing:
            raise CommandError(
                f"{len(missing)} table(s) missing: {', '.join(missing)}. "
                "Create them in the hosted project's SQL editor and run this command again."
            )

        self.stdout.write(self.style.SUCCESS(f"\nAll {len(statuses)} tables are ready to use."))
