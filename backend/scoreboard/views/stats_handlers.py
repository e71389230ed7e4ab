"""Statistics and entitlement JSON endpoints."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

import structlog
from starlette.responses import JSONResponse

from stats.errors import GroupNotFoundError, InvalidGroupIdError, StatsUnavailableError
from stats.types import UserStatus

if TYPE_CHECKING:
    from starlette.requests import Request

    from stats.access import AccessGate
    from stats.group import GroupStatsAggregator
    from stats.personal import PersonalStatsAggregator

logger = structlog.get_logger()


async def personal_stats(request: Request) -> JSONResponse:
    """GET /api/stats/personal - statistics over every record the caller owns."""
    aggregator: PersonalStatsAggregator = request.app.state.personal_stats
    user_id: str = request.user.user_id
    structlog.contextvars.bind_contextvars(user_id=user_id)

    try:
        stats = await aggregator.compute_stats(user_id)
    except StatsUnavailableError:
        return JSONResponse({"message": "Failed to fetch stats"}, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)

    return JSONResponse(stats.model_dump(mode="json", by_alias=True))


async def group_stats(request: Request) -> JSONResponse:
    """GET /api/stats/group/{group_id}?gameTitle=... - statistics for a group the caller owns."""
    aggregator: GroupStatsAggregator = request.app.state.group_stats
    user_id: str = request.user.user_id
    group_id: str = request.path_params["group_id"]
    selected_game_title = request.query_params.get("gameTitle") or None
    structlog.contextvars.bind_contextvars(user_id=user_id, group_id=group_id)

    try:
        stats = await aggregator.compute_stats(user_id, group_id, selected_game_title)
    except InvalidGroupIdError:
        return JSONResponse({"message": "Invalid Group ID format"}, status_code=HTTPStatus.BAD_REQUEST)
    except GroupNotFoundError:
        return JSONResponse({"message": "Group not found"}, status_code=HTTPStatus.NOT_FOUND)
    except StatsUnavailableError:
        return JSONResponse(
            {"message": "An unexpected server error occurred."},
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(stats.model_dump(mode="json", by_alias=True))


async def user_status(request: Request) -> JSONResponse:
    """GET /api/user-status - whether the caller only gets restricted statistics."""
    access: AccessGate = request.app.state.access_gate
    user_id: str = request.user.user_id
    structlog.contextvars.bind_contextvars(user_id=user_id)

    try:
        entitled = await access.is_entitled(user_id)
    except Exception:
        logger.exception("user status lookup failed")
        return JSONResponse({"message": "Internal Server Error"}, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)

    return JSONResponse(UserStatus(is_restricted=not entitled).model_dump(by_alias=True))
