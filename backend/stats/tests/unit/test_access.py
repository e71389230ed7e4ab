from unittest.mock import AsyncMock

import pytest

from shared.dal.models import Entitlement, SubscriptionStatus
from stats.access import AccessGate, restricted_group_stats, restricted_personal_stats


def _gate(entitlement):
    user_repo = AsyncMock()
    user_repo.get_entitlement.return_value = entitlement
    return AccessGate(user_repo)


class TestAccessGate:
    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (SubscriptionStatus.ACTIVE, True),
            (SubscriptionStatus.TRIALING, True),
            (SubscriptionStatus.CANCELED, False),
            (SubscriptionStatus.INACTIVE, False),
            ("unpaid", False),
        ],
    )
    async def test_entitlement_by_status(self, status, expected):
        gate = _gate(Entitlement(user_id="u1", status=status))
        assert await gate.is_entitled("u1") is expected

    async def test_missing_profile_is_not_entitled(self):
        assert await _gate(None).is_entitled("u1") is False


class TestRestrictedPlaceholders:
    def test_personal_placeholder_is_zeroed(self):
        payload = restricted_personal_stats().model_dump(by_alias=True)
        assert payload == {
            "totalPlays": 0,
            "mostPlayedGame": "N/A",
            "totalRankings": {"first": 0, "second": 0, "third": 0},
            "gameDetails": [],
            "isRestricted": True,
        }

    def test_group_placeholder_is_zeroed(self):
        payload = restricted_group_stats().model_dump(by_alias=True)
        assert payload == {
            "groupName": "",
            "totalPlays": 0,
            "availableGames": [],
            "mostPlayedGame": {"title": "N/A", "plays": 0},
            "totalGroupRankings": {"first": 0, "second": 0, "third": 0},
            "playerDetails": [],
            "selectedGameStats": None,
            "isRestricted": True,
        }
