"""Personalization repositories package."""

from modules.personalization.repositories.django_repository import (
    PersonalizationDjangoRepository,
)
from modules.personalization.repositories.interfaces import IPersonalizationRepository

__all__ = ["IPersonalizationRepository", "PersonalizationDjangoRepository"]
