"""
Customer models - self-ordering identities scoped to one business.
"""
from django.db import models
from django.contrib.auth.hashers import make_password, check_password


class IdType(models.TextChoices):
    NATIONAL_ID = "National ID", "National ID"
    PASSPORT = "Passport", "Passport"
    DRIVING_LICENSE = "Driving License", "Driving License"


class CustomerManager(models.Manager):
    """Custom manager for Customer model"""

    def create_customer(self, business, email, password=None, **extra_fields):
        """Create and return a customer with email and password"""
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        customer = self.model(business=business, email=email, **extra_fields)
        if password:
            customer.set_password(password)
        customer.save(using=self._db)
        return customer

    def normalize_email(self, email):
        """Normalize email address"""
        if email:
            email = email.strip().lower()
        return email


class Customer(models.Model):
    """
    A guest known to the business, used for self-ordering.
    Email is unique within a business.
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="customers")
    customer_name = models.CharField(max_length=150)
    email = models.EmailField()
    password = models.CharField(max_length=128, blank=True, help_text="Customer's hashed password")
    phone_number = models.CharField(max_length=20, blank=True)
    id_type = models.CharField(max_length=20, choices=IdType.choices, blank=True)
    id_number = models.CharField(max_length=50, blank=True)
    address = models.JSONField(default=dict, blank=True)
    image_url = models.URLField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomerManager()

    class Meta:
        ordering = ["customer_name"]
        constraints = [
            models.UniqueConstraint(fields=["business", "email"], name="unique_customer_email_per_business"),
        ]

    def __str__(self):
        return self.customer_name

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)
