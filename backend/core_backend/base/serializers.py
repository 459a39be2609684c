from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer that provides common functionality.

    Features:
    - Optimization field declarations read by OptimizedQuerysetMixin
    - Common validation hook
    """

    class Meta:
        # Default optimization fields (can be overridden)
        select_related_fields = []
        prefetch_related_fields = []

    def validate(self, data):
        """
        Base validation that can be extended by child classes.
        """
        data = super().validate(data)
        return data


class BusinessOwnedSerializerMixin:
    """
    Rejects related objects that belong to a different business than the
    object being written.

    Every POS model hangs off a Business. A serializer using this mixin checks
    each field listed in ``Meta.business_scoped_fields`` (FKs or many=True
    relations) against the ``business`` being written, or the instance's
    business on partial updates.

    Usage:
        class SupplierGoodSerializer(BusinessOwnedSerializerMixin, BaseModelSerializer):
            class Meta:
                model = SupplierGood
                fields = '__all__'
                business_scoped_fields = ['supplier']
    """

    def validate(self, data):
        data = super().validate(data)
        business = data.get("business") or getattr(self.instance, "business", None)
        if business is None:
            return data

        for field_name in getattr(self.Meta, "business_scoped_fields", []):
            value = data.get(field_name)
            if value is None:
                continue
            related = value if isinstance(value, (list, tuple)) else [value]
            for obj in related:
                if getattr(obj, "business_id", None) != business.pk:
                    raise serializers.ValidationError(
                        {field_name: f"{obj} does not belong to this business."}
                    )
        return data


class TimestampedSerializer(serializers.ModelSerializer):
    """
    Base serializer for models with created_at/updated_at fields.
    Provides consistent timestamp handling.
    """

    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)

    class Meta:
        abstract = True
