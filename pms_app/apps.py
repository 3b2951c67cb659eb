from django.apps import AppConfig


class PmsAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pms_app'
    verbose_name = 'Projects'
