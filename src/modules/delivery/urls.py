"""Courier URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.delivery.views import (
    ConfirmPaymentView,
    ConfirmReceivedView,
    FinishDeliveryView,
    ReadyQueueView,
)

urlpatterns = [
    path(
        "repartidor/orders-ready",
        ReadyQueueView.as_view(),
        name="courier-orders-ready",
    ),
    path(
        "repartidor/orders/<str:folio>/confirm-received",
        ConfirmReceivedView.as_view(),
        name="courier-confirm-received",
    ),
    path(
        "repartidor/orders/<str:folio>/confirm-payment",
        ConfirmPaymentView.as_view(),
        name="courier-confirm-payment",
    ),
    path(
        "repartidor/orders/<str:folio>/finish-delivery",
        FinishDeliveryView.as_view(),
        name="courier-finish-delivery",
    ),
]
