import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.exceptions import ConfigurationError
from modules.workflow.repositories.django_repository import WorkflowDjangoRepository
from modules.workflow.services import WorkflowDefinitionStore

logger = structlog.get_logger(__name__)

HEALTH_CACHE_KEY = "health:probe"


def _probe_database() -> None:
    with connections["default"].cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _probe_cache() -> None:
    cache.set(HEALTH_CACHE_KEY, "ok", 10)
    if cache.get(HEALTH_CACHE_KEY) != "ok":
        raise ConnectionError("cache round-trip failed")


def _timed(probe: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    probe()
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def _workflow_status() -> Dict[str, Any]:
    """Seed data is reported but never fails the probe: it is fixed by a
    deploy step (``seed_workflow``), not by restarting the process."""
    store = WorkflowDefinitionStore(WorkflowDjangoRepository())
    try:
        process = store.resolve_process()
        store.resolve_initial_state(process)
    except ConfigurationError as exc:
        return {"status": "missing", "detail": exc.message}
    return {"status": "seeded", "process": process.code}


def health_check(request: HttpRequest) -> JsonResponse:
    services: Dict[str, Dict[str, Any]] = {}

    try:
        services["database"] = _timed(_probe_database)
    except DatabaseError:
        services["database"] = {"status": "down"}
        logger.error("health.database_down")

    try:
        services["cache"] = _timed(_probe_cache)
    except Exception:
        services["cache"] = {"status": "down"}
        logger.error("health.cache_down", exc_info=True)

    if services["database"]["status"] == "up":
        services["workflow"] = _workflow_status()

    healthy = all(
        services[name]["status"] == "up" for name in ("database", "cache")
    )
    status = "healthy" if healthy else "unhealthy"
    logger.info("health.checked", status=status)
    return JsonResponse(
        {
            "status": status,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )


class MeView(APIView):
    """Identity and role groups of the bearer of the JWT."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        user = request.user
        return Response(
            {
                "usuarioId": user.pk,
                "username": user.get_username(),
                "roles": sorted(user.groups.values_list("name", flat=True)),
            }
        )
