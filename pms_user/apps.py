from django.apps import AppConfig


class PmsUserConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pms_user'
    verbose_name = 'Users'
