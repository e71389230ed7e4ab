from __future__ import annotations

import contextlib
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from scoreboard.auth.backend import GatewayTokenBackend
from scoreboard.auth.policy import (
    collect_protected_api_patterns,
    protected_api,
    public_route,
    validate_route_auth_policy,
)
from scoreboard.server.middleware import (
    LogContextMiddleware,
    SecurityHeadersMiddleware,
    SlashNormalizationMiddleware,
)
from scoreboard.server.settings import ScoreboardServerSettings
from scoreboard.views import group_stats, personal_stats, user_status
from shared.auth.settings import AuthSettings
from shared.db import Database, SqliteGroupRepository, SqliteRecordRepository, SqliteUserRepository
from shared.logging import setup_logging
from stats.access import AccessGate
from stats.group import GroupStatsAggregator
from stats.personal import PersonalStatsAggregator

logger = structlog.get_logger()

if TYPE_CHECKING:
    import re
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.requests import Request


def _make_http_error_handler(
    protected_api_patterns: list[re.Pattern[str]],
) -> Callable[[Request, Exception], Awaitable[Response]]:
    """Build an HTTPException handler that answers in JSON, like every route here."""

    async def _http_error_handler(request: Request, exc: Exception) -> Response:
        http_exc = cast("HTTPException", exc)
        if http_exc.status_code in {HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED}:
            return Response(status_code=http_exc.status_code, headers=http_exc.headers)
        if http_exc.status_code == HTTPStatus.UNAUTHORIZED and any(
            pattern.match(request.url.path) for pattern in protected_api_patterns
        ):
            return JSONResponse({"error": "Authentication required"}, status_code=HTTPStatus.UNAUTHORIZED)
        return JSONResponse({"error": http_exc.detail}, status_code=http_exc.status_code, headers=http_exc.headers)

    return _http_error_handler


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def create_app(
    settings: ScoreboardServerSettings | None = None,
    auth_settings: AuthSettings | None = None,  # required in production (via get_app)
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = ScoreboardServerSettings()
    if auth_settings is None:  # pragma: no cover
        auth_settings = AuthSettings()  # type: ignore[call-arg]

    routes = [
        # Protected JSON routes (return 401 JSON when unauthenticated)
        Route("/api/stats/personal", protected_api(personal_stats), methods=["GET"], name="personal_stats"),
        Route("/api/stats/group/{group_id}", protected_api(group_stats), methods=["GET"], name="group_stats"),
        Route("/api/user-status", protected_api(user_status), methods=["GET"], name="user_status"),
        # Public routes
        Route("/health", public_route(health), methods=["GET"], name="health"),
    ]

    validate_route_auth_policy(routes)
    protected_api_patterns = collect_protected_api_patterns(routes)

    db = Database(auth_settings.database_path)
    db.connect()
    record_repo = SqliteRecordRepository(db)
    group_repo = SqliteGroupRepository(db)
    access_gate = AccessGate(SqliteUserRepository(db))

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:  # pragma: no cover
        yield
        db.close()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={HTTPException: _make_http_error_handler(protected_api_patterns)},
    )
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(AuthenticationMiddleware, backend=GatewayTokenBackend(auth_settings.gateway_secret))  # type: ignore[arg-type]
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["X-Identity-Token"],
    )
    app.add_middleware(SecurityHeadersMiddleware)  # type: ignore[arg-type]
    app.add_middleware(LogContextMiddleware)  # type: ignore[arg-type]

    app.state.db = db
    app.state.settings = settings
    app.state.auth_settings = auth_settings
    app.state.access_gate = access_gate
    app.state.personal_stats = PersonalStatsAggregator(record_repo, access_gate)
    app.state.group_stats = GroupStatsAggregator(record_repo, group_repo, access_gate)

    logger.info("scoreboard server ready")
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory scoreboard.server.app:get_app."""
    s = ScoreboardServerSettings()
    auth = AuthSettings()  # type: ignore[call-arg]
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, auth_settings=auth)
