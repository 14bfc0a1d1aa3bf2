"""URL configuration for HotelesCO.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
the OpenAPI schema and the application routers of each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    # Application URLs
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/', include('apps.bookings.urls')),
    path('api/v1/', include('apps.packages.urls')),
    path('api/v1/notifications/', include('apps.notifications.urls')),
]
