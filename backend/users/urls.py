"""
URL configuration for authentication and user management.

Login and refresh are simplejwt views; their serializers come from
``SIMPLE_JWT`` and stamp the system access level into every token.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .views import UserRoleView, UserViewSet

router = DefaultRouter()
router.register(r"users", UserViewSet, basename="user")

urlpatterns = [
    path("users/login/", TokenObtainPairView.as_view(), name="user-login"),
    path("users/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("system/users/<uuid:user_id>/role/", UserRoleView.as_view(), name="user-role"),
    path("", include(router.urls)),
]
