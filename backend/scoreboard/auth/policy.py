"""Route auth policies, checked at startup so no route is public by accident.

Every endpoint is wrapped by exactly one policy helper, which tags the
wrapper with ``AUTH_POLICY_ATTR``. ``validate_route_auth_policy`` refuses to
build the app while any Route lacks the tag.
"""

from __future__ import annotations

import functools
import inspect
from enum import StrEnum
from typing import TYPE_CHECKING

from starlette.authentication import requires
from starlette.routing import Route

if TYPE_CHECKING:
    import re
    from collections.abc import Callable
    from typing import Any

    from starlette.requests import Request
    from starlette.routing import BaseRoute

AUTH_POLICY_ATTR = "__auth_policy__"


class AuthPolicy(StrEnum):
    PROTECTED_API = "protected_api"
    PUBLIC = "public"


def _policy_of(route: Route) -> AuthPolicy | None:
    return getattr(route.endpoint, AUTH_POLICY_ATTR, None)


def protected_api(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Require a verified gateway identity; unauthenticated requests get a 401."""
    wrapped = requires("authenticated", status_code=401)(endpoint)
    setattr(wrapped, AUTH_POLICY_ATTR, AuthPolicy.PROTECTED_API)
    return wrapped


def public_route(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Mark endpoint as reachable without an identity token (health checks).

    The tag goes on a fresh wrapper so the original function stays untagged.
    """
    if inspect.iscoroutinefunction(endpoint):

        @functools.wraps(endpoint)
        async def wrapped(request: Request, **kwargs: str) -> Any:  # noqa: ANN401
            return await endpoint(request, **kwargs)

    else:

        @functools.wraps(endpoint)
        def wrapped(request: Request, **kwargs: str) -> Any:  # noqa: ANN401
            return endpoint(request, **kwargs)

    setattr(wrapped, AUTH_POLICY_ATTR, AuthPolicy.PUBLIC)
    return wrapped


def collect_protected_api_patterns(routes: list[BaseRoute]) -> list[re.Pattern[str]]:
    """Compiled path patterns of ``protected_api`` routes.

    Patterns, not literal paths, so ``/api/stats/group/{group_id}`` matches
    concrete request paths.
    """
    return [
        route.path_regex
        for route in routes
        if isinstance(route, Route) and _policy_of(route) == AuthPolicy.PROTECTED_API
    ]


def validate_route_auth_policy(routes: list[BaseRoute]) -> None:
    """Raise RuntimeError naming every Route without a policy. Mounts are not checked."""
    unclassified = [
        f"{route.path} ({route.name or getattr(route.endpoint, '__name__', 'unknown')})"
        for route in routes
        if isinstance(route, Route) and _policy_of(route) is None
    ]
    if unclassified:
        msg = f"Unclassified routes missing auth policy: {', '.join(unclassified)}"
        raise RuntimeError(msg)
