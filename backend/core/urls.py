"""
Root URL configuration for the Taskboard API.

All application endpoints are versioned under /api/v1/.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/", include("users.urls")),
    path("api/v1/", include("boards.urls")),
]
