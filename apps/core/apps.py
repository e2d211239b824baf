from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.core"
    verbose_name = "Core"

    def ready(self):
        """
        Import signal handlers and system checks when the app is ready.
        """
        # Settings changes reset the cached store
        import apps.core.signals  # noqa: F401

        # Storage backend / credential checks
        import apps.core.checks  # noqa: F401
