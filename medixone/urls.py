"""
URL configuration for the MedixOne project.

Page routes and the JSON API both come from the clinic app.  The Django
admin, Prometheus metrics and the OpenAPI documentation (``/swagger/`` and
``/redoc/``) are mounted alongside.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="MedixOne API",
    default_version='v1',
    description="Session, language and dashboard services for the MedixOne clinic front-end.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('django_prometheus.urls')),
    path('', include('clinic.routers')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
