from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "features.notifications"
    verbose_name = "Notifications"

    def ready(self):
        import features.notifications.signals  # noqa: F401
