from rest_framework import serializers


class AddDiscountSerializer(serializers.Serializer):
    """
    Manual discount on a batch of orders. Range and promotion checks live in
    OrderDiscountService so the same rules apply outside the API.
    """

    orders = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    discount_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    comments = serializers.CharField(allow_blank=True, required=False, default="")
