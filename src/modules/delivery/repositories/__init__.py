"""Delivery repositories package."""

from modules.delivery.repositories.django_repository import DeliveryDjangoRepository
from modules.delivery.repositories.interfaces import IDeliveryRepository

__all__ = ["DeliveryDjangoRepository", "IDeliveryRepository"]
