# pms/urls.py
from django.urls import include, path

urlpatterns = [
    path('api/', include('pms_user.urls')),
    path('api/', include('pms_app.urls')),
]
