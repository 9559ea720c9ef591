from django.apps import AppConfig


class ListmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "listman"
    verbose_name = "Listman - Membership & Automation Enrollment"

    def ready(self):
        from listman import receivers  # noqa: F401
