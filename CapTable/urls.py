from django.contrib import admin
from django.urls import path, include
from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from django.conf import settings
from django.conf.urls.static import static

from Contribute.views import landing

api_urlpatterns = [
    path('', include('Contribute.urls')),
    path('', include('Interview.urls')),
    path('admin/', include('Console.urls')),
]

schema_view = get_schema_view(
    openapi.Info(
        title="Cap Table Agent API",
        default_version="v1",
        description="Contributor allocation preferences and interview collection",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('', landing, name='landing'),
    path('admin/', admin.site.urls),
    path('api/', include(api_urlpatterns)),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
