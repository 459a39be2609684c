from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

# Create a router and register viewsets
router = DefaultRouter()
router.register(r"daily-sales-reports", views.DailySalesReportViewSet, basename="daily-sales-report")
router.register(r"monthly-business-reports", views.MonthlyBusinessReportViewSet, basename="monthly-business-report")

urlpatterns = [
    path("", include(router.urls)),
]

# URL patterns reference:
#
# PATCH /daily-sales-reports/{id}/calculate-business-report/   {"employee": id}
# PATCH /daily-sales-reports/{id}/calculate-employee-report/   {"employee": id}
# PATCH /daily-sales-reports/{id}/close/                       {"employee": id}
# PATCH /monthly-business-reports/{id}/calculate/
# PATCH /monthly-business-reports/{id}/close/
