"""Scoreboard authentication: Starlette backend, user model, and route policy."""

from scoreboard.auth.backend import GatewayTokenBackend
from scoreboard.auth.models import AuthenticatedUser
from scoreboard.auth.policy import (
    AuthPolicy,
    collect_protected_api_patterns,
    protected_api,
    public_route,
    validate_route_auth_policy,
)

__all__ = [
    "AuthPolicy",
    "AuthenticatedUser",
    "GatewayTokenBackend",
    "collect_protected_api_patterns",
    "protected_api",
    "public_route",
    "validate_route_auth_policy",
]
