"""Declarative route tables.

Routes are declared as ``Route(path, endpoint, auth)`` and registered for every
HTTP verb. ``auth=True`` puts ``get_current_user`` in front of the endpoint, so
an unauthenticated call is rejected before the handler runs, even when the
handler never looks at the user.
"""

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_current_user

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


@dataclass(frozen=True)
class Route:
    path: str
    endpoint: Callable
    auth: bool = False


def register_routes(router: APIRouter, routes: list[Route]) -> None:
    for route in routes:
        router.add_api_route(
            route.path,
            route.endpoint,
            methods=ALL_METHODS,
            dependencies=[Depends(get_current_user)] if route.auth else None,
        )


def client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None
