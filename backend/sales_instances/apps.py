from django.apps import AppConfig


class SalesInstancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sales_instances"
