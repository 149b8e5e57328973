"""URL configuration for the booking service.

Routes the Django admin, the versioned REST API of every domain app and
the OpenAPI schema.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/structures/', include('apps.structures.urls')),
    path('api/v1/availability/', include('apps.availability.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/activity/', include('apps.activity.urls')),
    # OpenAPI
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
