import django_filters

from modules.orders.models import Order


class OrderHistoryFilter(django_filters.FilterSet):
    """Optional narrowing of the customer history list."""

    estado = django_filters.CharFilter(
        field_name="current_state__code", lookup_expr="iexact"
    )
    desde = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    hasta = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    totalMin = django_filters.NumberFilter(field_name="total", lookup_expr="gte")
    totalMax = django_filters.NumberFilter(field_name="total", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["estado", "desde", "hasta", "totalMin", "totalMax"]
