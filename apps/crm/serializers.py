"""
Serializers for customers.
"""

from rest_framework import serializers


class CustomerSerializer(serializers.Serializer):
    """
    Serializer for Customer entities.

    ``balance`` is the running total of invoiced amounts; it may be set
    when a customer is created with an opening balance and is increased
    at every checkout.
    """

    id = serializers.CharField(read_only=True)
    name = serializers.CharField(max_length=200)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    region = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    balance = serializers.DecimalField(max_digits=18, decimal_places=6, default=0)
