from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("customer_name", "email", "business", "created_at")
    search_fields = ("customer_name", "email")
    exclude = ("password",)
