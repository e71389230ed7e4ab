from unittest.mock import AsyncMock

import pytest

from shared.dal.models import Entitlement
from stats.access import AccessGate
from stats.errors import GroupNotFoundError, InvalidGroupIdError, StatsUnavailableError
from stats.group import GroupStatsAggregator, build_group_stats, resolve_member_id
from stats.tests.helpers import GROUP_ID, OWNER_ID, guest, make_group, make_record, member
from stats.types import GroupStats, MostPlayedGame, RankCounts


def _group_record(totals, players, *, game_title="Catan", record_id="r1", sequence=0):
    return make_record(
        totals,
        players=players,
        game_title=game_title,
        record_id=record_id,
        group_id=GROUP_ID,
        sequence=sequence,
    )


def _details_by_name(player_details):
    return {d.player_name: d for d in player_details}


@pytest.fixture
def group():
    return make_group({"m-alex": "Alex", "m-bea": "Bea", "m-cy": "Cy"})


class TestResolveMemberId:
    def test_uses_member_id(self):
        record = _group_record([1, 2], [member("m-alex"), guest()])
        assert resolve_member_id(record, 0) == "m-alex"

    def test_synthesizes_id_for_non_member(self):
        record = _group_record([1, 2], [member("m-alex"), guest()])
        assert resolve_member_id(record, 1) == "NonMember-1"


class TestBuildGroupStats:
    def test_empty_records_keep_real_group_name(self, group):
        stats = build_group_stats(group, [])

        assert stats == GroupStats(group_name="Friday Night")
        assert stats.most_played_game == MostPlayedGame(title="N/A", plays=0)
        assert stats.available_games == []
        assert stats.selected_game_stats is None

    def test_current_member_name_overrides_snapshot(self, group):
        records = [_group_record([10, 4], [member("m-alex", "Al"), member("m-bea", "Bea")])]

        stats = build_group_stats(group, records)

        names = [d.player_name for d in stats.player_details]
        assert "Alex" in names
        assert "Al" not in names

    def test_members_without_plays_are_omitted(self, group):
        records = [_group_record([10, 4], [member("m-alex"), member("m-bea")])]

        stats = build_group_stats(group, records)

        assert [d.player_name for d in stats.player_details] == ["Alex", "Bea"]

    def test_player_details_follow_group_member_order(self, group):
        records = [_group_record([1, 2, 3], [member("m-cy"), member("m-bea"), member("m-alex")])]

        stats = build_group_stats(group, records)

        assert [d.player_name for d in stats.player_details] == ["Alex", "Bea", "Cy"]

    def test_non_member_affects_rank_but_gets_no_entry(self, group):
        records = [_group_record([8, 12, 5], [member("m-alex"), guest("Visitor"), member("m-cy")])]

        stats = build_group_stats(group, records)

        details = _details_by_name(stats.player_details)
        assert set(details) == {"Alex", "Cy"}
        assert details["Alex"].ranks == RankCounts(first=0, second=1, third=0)
        assert details["Cy"].ranks == RankCounts(first=0, second=0, third=1)

    def test_former_member_is_excluded(self, group):
        records = [_group_record([20, 10], [member("m-gone", "Dana"), member("m-bea")])]

        stats = build_group_stats(group, records)

        assert [d.player_name for d in stats.player_details] == ["Bea"]
        assert stats.player_details[0].ranks.second == 1

    def test_group_tally_counts_every_slot(self, group):
        records = [_group_record([8, 12, 5], [member("m-alex"), guest("Visitor"), member("m-cy")])]

        stats = build_group_stats(group, records)

        # The non-member's first place counts toward the group-wide tally only.
        assert stats.total_group_rankings == RankCounts(first=1, second=1, third=1)
        assert sum(d.ranks.first for d in stats.player_details) == 0

    def test_tied_first_places(self, group):
        records = [_group_record([10, 10, 5], [member("m-alex"), member("m-bea"), member("m-cy")])]

        stats = build_group_stats(group, records)

        details = _details_by_name(stats.player_details)
        assert details["Alex"].total_first_places == 1
        assert details["Bea"].total_first_places == 1
        assert details["Cy"].ranks == RankCounts(third=1)
        assert stats.total_group_rankings == RankCounts(first=2, second=0, third=1)

    def test_overall_player_aggregates(self, group):
        records = [
            _group_record([12, 3], [member("m-alex"), member("m-bea")], record_id="r1"),
            _group_record([18, 30], [member("m-alex"), member("m-bea")], game_title="Azul", record_id="r2"),
        ]

        stats = build_group_stats(group, records)

        alex = _details_by_name(stats.player_details)["Alex"]
        assert alex.total_plays == 2
        assert alex.average_score == 15
        assert alex.highest_score == 18
        assert alex.lowest_score == 12
        assert alex.ranks == RankCounts(first=1, second=1, third=0)
        assert alex.total_first_places == 1

    def test_totals_and_available_games(self, group):
        records = [
            _group_record([1, 2], [member("m-alex"), member("m-bea")], game_title="Azul", record_id="r1"),
            _group_record([1, 2], [member("m-alex"), member("m-bea")], game_title="Catan", record_id="r2"),
            _group_record([1, 2], [member("m-alex"), member("m-bea")], game_title="Catan", record_id="r3"),
        ]

        stats = build_group_stats(group, records)

        assert stats.group_name == "Friday Night"
        assert stats.total_plays == 3
        assert stats.available_games == ["Azul", "Catan"]
        assert stats.most_played_game == MostPlayedGame(title="Catan", plays=2)

    def test_most_played_tie_goes_to_first_seen(self, group):
        players = [member("m-alex"), member("m-bea")]
        records = [
            _group_record([1, 2], players, game_title="Azul", record_id="r1"),
            _group_record([1, 2], players, game_title="Catan", record_id="r2"),
            _group_record([1, 2], players, game_title="Catan", record_id="r3"),
            _group_record([1, 2], players, game_title="Azul", record_id="r4"),
        ]

        stats = build_group_stats(group, records)

        assert stats.most_played_game == MostPlayedGame(title="Azul", plays=2)

    def test_no_selected_game_gives_null(self, group):
        records = [_group_record([1, 2], [member("m-alex"), member("m-bea")])]
        assert build_group_stats(group, records).selected_game_stats is None

    def test_unplayed_selected_game_gives_null(self, group):
        records = [_group_record([1, 2], [member("m-alex"), member("m-bea")])]
        assert build_group_stats(group, records, "Wingspan").selected_game_stats is None

    def test_selected_game_summary(self, group):
        records = [
            _group_record([12, 3, 7], [member("m-alex"), member("m-bea"), guest()], record_id="r1"),
            _group_record([5, 9], [member("m-alex"), member("m-bea")], game_title="Azul", record_id="r2"),
            _group_record([20, 4], [member("m-alex"), member("m-cy")], record_id="r3"),
        ]

        stats = build_group_stats(group, records, "Catan")

        selected = stats.selected_game_stats
        assert selected is not None
        assert selected.game_title == "Catan"
        assert selected.total_plays == 2
        # Attributed member scores only: 12, 3, 20, 4
        assert selected.average_score == 39 / 4
        assert selected.highest_score == 20
        assert selected.lowest_score == 3
        assert selected.ranks == RankCounts(first=2, second=1, third=1)

        details = _details_by_name(selected.player_details)
        assert set(details) == {"Alex", "Bea", "Cy"}
        assert details["Alex"].total_plays == 2
        assert details["Alex"].average_score == 16
        assert details["Alex"].total_first_places == 2
        assert details["Bea"].ranks == RankCounts(third=1)
        assert details["Bea"].total_first_places == 2
        assert details["Cy"].total_first_places == 2

    def test_guest_win_in_selected_game_skips_game_ranks(self, group):
        records = [
            _group_record([5, 10, 1], [member("m-alex"), member("m-bea"), guest()], game_title="Azul"),
            _group_record([2, 12], [member("m-alex"), guest()], game_title="Azul", record_id="r2"),
        ]

        stats = build_group_stats(group, records, "Azul")

        selected = stats.selected_game_stats
        assert selected is not None
        assert selected.ranks == RankCounts(first=1, second=2, third=0)
        # The group-wide tally still counts the guest.
        assert stats.total_group_rankings == RankCounts(first=2, second=2, third=1)
        details = _details_by_name(selected.player_details)
        assert details["Alex"].ranks == RankCounts(second=2)
        assert details["Alex"].total_first_places == 1
        assert details["Bea"].total_first_places == 1

    def test_selected_game_does_not_change_overall_view(self, group):
        records = [
            _group_record([12, 3], [member("m-alex"), member("m-bea")], record_id="r1"),
            _group_record([5, 9], [member("m-alex"), member("m-bea")], game_title="Azul", record_id="r2"),
        ]

        unfiltered = build_group_stats(group, records)
        filtered = build_group_stats(group, records, "Azul")

        assert filtered.player_details == unfiltered.player_details
        assert filtered.total_group_rankings == unfiltered.total_group_rankings
        assert filtered.selected_game_stats is not None
        assert [d.total_plays for d in filtered.selected_game_stats.player_details] == [1, 1]

    def test_serializes_with_camel_case_fields(self, group):
        records = [_group_record([12, 3], [member("m-alex"), member("m-bea")])]

        payload = build_group_stats(group, records, "Catan").model_dump(by_alias=True)

        assert set(payload) == {
            "groupName",
            "totalPlays",
            "availableGames",
            "mostPlayedGame",
            "totalGroupRankings",
            "playerDetails",
            "selectedGameStats",
            "isRestricted",
        }
        assert set(payload["playerDetails"][0]) == {
            "playerName",
            "totalPlays",
            "averageScore",
            "highestScore",
            "lowestScore",
            "ranks",
            "totalFirstPlaces",
        }
        assert set(payload["selectedGameStats"]) == {
            "gameTitle",
            "totalPlays",
            "averageScore",
            "highestScore",
            "lowestScore",
            "ranks",
            "playerDetails",
        }


def _aggregator(group, records, status="active"):
    record_repo = AsyncMock()
    record_repo.find_by_group.return_value = records
    group_repo = AsyncMock()
    group_repo.find_owned_group.return_value = group
    user_repo = AsyncMock()
    user_repo.get_entitlement.return_value = Entitlement(user_id=OWNER_ID, status=status)
    return GroupStatsAggregator(record_repo, group_repo, AccessGate(user_repo)), record_repo, group_repo


class TestGroupStatsAggregator:
    async def test_computes_stats_for_owner(self, group):
        records = [_group_record([12, 3], [member("m-alex"), member("m-bea")])]
        aggregator, record_repo, group_repo = _aggregator(group, records)

        stats = await aggregator.compute_stats(OWNER_ID, GROUP_ID, "Catan")

        group_repo.find_owned_group.assert_awaited_once_with(GROUP_ID, OWNER_ID)
        record_repo.find_by_group.assert_awaited_once_with(GROUP_ID)
        assert stats.group_name == "Friday Night"
        assert stats.selected_game_stats is not None

    async def test_restricted_user_skips_group_and_records(self, group):
        aggregator, record_repo, group_repo = _aggregator(group, [], status="inactive")

        stats = await aggregator.compute_stats(OWNER_ID, GROUP_ID)

        group_repo.find_owned_group.assert_not_awaited()
        record_repo.find_by_group.assert_not_awaited()
        assert stats == GroupStats(is_restricted=True)

    @pytest.mark.parametrize("group_id", ["not-an-id", "", "65a1f0c2e4b0a1b2c3d4e5fz", "65a1f0c2e4b0a1b2c3d4e5f"])
    async def test_invalid_group_id(self, group, group_id):
        aggregator, _, group_repo = _aggregator(group, [])

        with pytest.raises(InvalidGroupIdError):
            await aggregator.compute_stats(OWNER_ID, group_id)

        group_repo.find_owned_group.assert_not_awaited()

    async def test_group_not_owned(self):
        aggregator, record_repo, _ = _aggregator(None, [])

        with pytest.raises(GroupNotFoundError):
            await aggregator.compute_stats("someone-else", GROUP_ID)

        record_repo.find_by_group.assert_not_awaited()

    async def test_store_failure_maps_to_unavailable(self, group, caplog):
        aggregator, record_repo, _ = _aggregator(group, [])
        record_repo.find_by_group.side_effect = TimeoutError("store timed out")

        with pytest.raises(StatsUnavailableError) as exc_info:
            await aggregator.compute_stats(OWNER_ID, GROUP_ID)

        assert "store timed out" not in str(exc_info.value)
        assert "group stats computation failed" in caplog.text

    async def test_repeated_calls_are_identical(self, group):
        records = [
            _group_record([12, 3, 8], [member("m-alex"), guest(), member("m-cy")], record_id="r1"),
            _group_record([5, 9], [member("m-bea"), member("m-alex")], game_title="Azul", record_id="r2"),
        ]
        aggregator, _, _ = _aggregator(group, records)

        first = await aggregator.compute_stats(OWNER_ID, GROUP_ID, "Azul")
        second = await aggregator.compute_stats(OWNER_ID, GROUP_ID, "Azul")

        assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)
