"""
Django management command to manage plugin licenses from the shell.

Actions:
- store: store a license id for a plugin
- get: print the stored license id
- delete: delete the stored license id
- activate: activate the license with the licensing service
- deactivate: deactivate the license with the licensing service
- check: report whether the license is valid
"""

import logging

from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import PLSClientError
from licenses.application.factory import build_license_manager

logger = logging.getLogger(__name__)

ACTIONS = ["store", "get", "delete", "activate", "deactivate", "check"]


class Command(BaseCommand):
    """Command to manage the license of a plugin."""

    help = "Store, activate, deactivate and check plugin licenses"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("action", choices=ACTIONS, help="License action to run")
        parser.add_argument("plugin_slug", type=str, help="Plugin slug")
        parser.add_argument(
            "--license-id",
            type=str,
            default=None,
            help="License id (required for store, optional for activate)",
        )
        parser.add_argument(
            "--domain-name",
            type=str,
            default=None,
            help="Domain to activate for (default: PLS_CLIENT SITE_URL)",
        )
        parser.add_argument(
            "--email",
            type=str,
            default=None,
            help="Contact email sent on activation (default: PLS_CLIENT ADMIN_EMAIL)",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Bypass the status cache when checking",
        )
        parser.add_argument(
            "--environment",
            type=str,
            default=None,
            help="Licensing environment: production or staging",
        )
        parser.add_argument(
            "--network",
            action="store_true",
            help="Use network-wide storage instead of site storage",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        action = options["action"]
        plugin_slug = options["plugin_slug"]
        manager = build_license_manager(
            environment=options["environment"],
            network=True if options["network"] else None,
        )

        try:
            handler = getattr(self, f"handle_{action}")
            handler(manager, plugin_slug, options)
        except PLSClientError as e:
            logger.warning("plugin_license %s failed for %s: %s", action, plugin_slug, e.code)
            raise CommandError(f"{e.code}: {e.message}") from e
        except ValueError as e:
            raise CommandError(str(e)) from e

    def handle_store(self, manager, plugin_slug, options):
        license_id = options["license_id"]
        if not license_id:
            raise CommandError("--license-id is required to store a license")
        manager.store_license_id(plugin_slug, license_id)
        self.stdout.write(self.style.SUCCESS(f"Stored license ID for {plugin_slug}"))

    def handle_get(self, manager, plugin_slug, options):
        self.stdout.write(manager.get_license_id(plugin_slug))

    def handle_delete(self, manager, plugin_slug, options):
        if manager.delete_license_id(plugin_slug):
            self.stdout.write(self.style.SUCCESS(f"Deleted license ID for {plugin_slug}"))
        else:
            self.stdout.write(self.style.WARNING(f"No license ID stored for {plugin_slug}"))

    def handle_activate(self, manager, plugin_slug, options):
        if not options["domain_name"] and not manager.site_defaults.domain_name:
            raise CommandError("No domain to activate for: pass --domain-name or set PLS_SITE_URL")
        args = {
            field: options[field]
            for field in ("domain_name", "email")
            if options[field]
        }
        manager.activate(plugin_slug, options["license_id"], args)
        self.stdout.write(self.style.SUCCESS(f"Activated license for {plugin_slug}"))

    def handle_deactivate(self, manager, plugin_slug, options):
        manager.deactivate(plugin_slug)
        self.stdout.write(self.style.SUCCESS(f"Deactivated license for {plugin_slug}"))

    def handle_check(self, manager, plugin_slug, options):
        if manager.check(plugin_slug, force=options["force"]):
            self.stdout.write(self.style.SUCCESS(f"License for {plugin_slug} is valid"))
        else:
            self.stdout.write(self.style.WARNING(f"License for {plugin_slug} is not valid"))
