from django.apps import AppConfig


class OffersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "offers"

    def ready(self) -> None:
        from offers import signals  # noqa: F401
