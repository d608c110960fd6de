"""Cart URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.carts.views import CartPreviewView

urlpatterns = [
    path("cart/preview", CartPreviewView.as_view(), name="cart-preview"),
]
