from django.urls import path
from .views import RegisterView, LoginView, UserListView, AdminUserListView, CurrentUserView

urlpatterns = [
    path('auth/register', RegisterView.as_view(), name='register'),
    path('auth/login', LoginView.as_view(), name='login'),
    path('users', UserListView.as_view(), name='user-list'),
    path('users/admin', AdminUserListView.as_view(), name='user-list-admin'),
    path('users/me', CurrentUserView.as_view(), name='user-me'),
]
