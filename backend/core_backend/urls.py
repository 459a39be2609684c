"""
URL configuration for core_backend project.

Every app registers its own router; they are all mounted under ``api/``.
"""

from django.conf import settings
from django.contrib import admin
from django.urls import path, include
from django.conf.urls.static import static
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/", include("business.urls")),
    path("api/", include("employees.urls")),
    path("api/", include("suppliers.urls")),
    path("api/", include("goods.urls")),
    path("api/", include("orders.urls")),
    path("api/", include("sales_instances.urls")),
    path("api/", include("reports.urls")),
    path("api/", include("inventory.urls")),
    path("api/", include("purchases.urls")),
    path("api/", include("schedules.urls")),
    path("api/", include("promotions.urls")),
    path("api/", include("printers.urls")),
    path("api/", include("customers.urls")),
    path("api/", include("notifications.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
