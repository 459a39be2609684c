"""
Core backend base components.

Foundational viewsets, serializers, mixins and filters shared by every POS app.
"""

from .viewsets import BaseViewSet, ReadOnlyBaseViewSet
from .serializers import (
    BaseModelSerializer,
    TimestampedSerializer,
    BusinessOwnedSerializerMixin,
)
from .mixins import OptimizedQuerysetMixin
from .filters import BaseFilterSet

__all__ = [
    # ViewSets
    'BaseViewSet',
    'ReadOnlyBaseViewSet',

    # Serializers
    'BaseModelSerializer',
    'TimestampedSerializer',
    'BusinessOwnedSerializerMixin',

    # Mixins
    'OptimizedQuerysetMixin',

    # Filters
    'BaseFilterSet',
]
