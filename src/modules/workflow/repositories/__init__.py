"""Workflow repositories package."""

from modules.workflow.repositories.django_repository import WorkflowDjangoRepository
from modules.workflow.repositories.interfaces import IWorkflowRepository

__all__ = ["IWorkflowRepository", "WorkflowDjangoRepository"]
