"""Order URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.orders.views import (
    AssignmentListView,
    AssignOperatorView,
    CheckoutView,
    OperatorAdvanceView,
    OperatorAssignedQueueView,
    OperatorListView,
    OperatorQueueView,
    OrderEventView,
    OrderHistoryView,
    SetStateView,
    TrackingView,
)

urlpatterns = [
    path("checkout", CheckoutView.as_view(), name="checkout"),
    path("orders/history", OrderHistoryView.as_view(), name="order-history"),
    path("orders/<str:folio>/set-state", SetStateView.as_view(), name="order-set-state"),
    path("orders/<str:folio>/events", OrderEventView.as_view(), name="order-events"),
    path("orders/<str:folio>/tracking", TrackingView.as_view(), name="order-tracking"),
    path("operator/orders", OperatorQueueView.as_view(), name="operator-orders"),
    path(
        "operator/orders-assigned",
        OperatorAssignedQueueView.as_view(),
        name="operator-orders-assigned",
    ),
    path(
        "operator/orders/<str:order_id>/advance",
        OperatorAdvanceView.as_view(),
        name="operator-advance",
    ),
    path("supervisor/operators", OperatorListView.as_view(), name="supervisor-operators"),
    path(
        "supervisor/orders/assignments",
        AssignmentListView.as_view(),
        name="supervisor-assignments",
    ),
    path(
        "supervisor/orders/<str:order_id>/assign-operator",
        AssignOperatorView.as_view(),
        name="supervisor-assign-operator",
    ),
]
