import pytest

from schedule_checker import grid
from schedule_checker.grid import HeatTier


def _p(name: str, *busy: str) -> dict:
    return {"user_id": name.lower(), "user_name": name, "availability": list(busy)}


class TestSlotKeys:
    def test_slot_key_round_trip_edges(self):
        assert grid.slot_key(0, 0) == "0-0"
        assert grid.slot_key(6, 23) == "6-23"
        assert grid.parse_slot_key("6-23") == (6, 23)

    @pytest.mark.parametrize(
        "key", ["7-0", "0-24", "3-07", "a-1", "1", "", "1-2\n", "-1-3", "٣-5", "3-٥"]
    )
    def test_invalid_keys_rejected(self, key):
        with pytest.raises(ValueError):
            grid.parse_slot_key(key)

    def test_slot_key_range_checked(self):
        with pytest.raises(ValueError):
            grid.slot_key(7, 0)
        with pytest.raises(ValueError):
            grid.slot_key(0, -1)

    def test_all_slot_keys_cover_grid(self):
        keys = grid.all_slot_keys()
        assert len(keys) == 168
        assert keys[0] == "0-0"
        assert keys[-1] == "6-23"
        assert len(set(keys)) == 168

    def test_format_hour(self):
        assert grid.format_hour(0) == "00:00"
        assert grid.format_hour(13) == "13:00"


class TestToggle:
    def test_toggle_adds_missing_key(self):
        assert grid.toggle_slot(["0-1"], "2-3") == ["0-1", "2-3"]

    def test_toggle_removes_present_key(self):
        assert grid.toggle_slot(["0-1", "2-3"], "0-1") == ["2-3"]

    def test_toggle_does_not_mutate_input(self):
        current = ["0-1"]
        grid.toggle_slot(current, "0-1")
        assert current == ["0-1"]

    def test_toggle_rejects_bad_key(self):
        with pytest.raises(ValueError):
            grid.toggle_slot([], "9-9")


class TestHeatTier:
    @pytest.mark.parametrize(
        "available,total,expected",
        [
            (0, 4, HeatTier.NONE_AVAILABLE),
            (1, 4, HeatTier.MOST_UNAVAILABLE),
            (2, 4, HeatTier.MOST_AVAILABLE),
            (3, 4, HeatTier.MOST_AVAILABLE),
            (4, 4, HeatTier.ALL_AVAILABLE),
            (0, 1, HeatTier.NONE_AVAILABLE),
            (1, 1, HeatTier.ALL_AVAILABLE),
        ],
    )
    def test_thresholds(self, available, total, expected):
        assert grid.heat_tier(available, total) is expected

    def test_empty_event_reads_all_available(self):
        assert grid.heat_tier(0, 0) is HeatTier.ALL_AVAILABLE


class TestSummarize:
    def test_counts_never_exceed_participants(self):
        participants = [_p("Alice", "0-9", "0-10"), _p("Bob", "0-9"), _p("Carol")]
        cells = grid.summarize(participants)
        assert len(cells) == 168
        for cell in cells:
            assert cell["available_count"] + cell["unavailable_count"] == 3
            assert cell["unavailable_count"] <= 3

    def test_available_names_and_tiers(self):
        participants = [_p("Alice", "0-9", "0-10"), _p("Bob", "0-9"), _p("Carol")]
        cells = {c["key"]: c for c in grid.summarize(participants)}

        assert cells["0-9"]["available_names"] == ["Carol"]
        assert cells["0-9"]["tier"] is HeatTier.MOST_UNAVAILABLE
        assert cells["0-10"]["available_names"] == ["Bob", "Carol"]
        assert cells["0-10"]["tier"] is HeatTier.MOST_AVAILABLE
        assert cells["5-5"]["tier"] is HeatTier.ALL_AVAILABLE

    def test_everyone_busy(self):
        cells = {c["key"]: c for c in grid.summarize([_p("Alice", "2-2"), _p("Bob", "2-2")])}
        assert cells["2-2"]["available_count"] == 0
        assert cells["2-2"]["tier"] is HeatTier.NONE_AVAILABLE

    def test_no_participants(self):
        cells = grid.summarize([])
        assert all(c["tier"] is HeatTier.ALL_AVAILABLE for c in cells)
        assert all(c["available_names"] == [] for c in cells)

    def test_available_participants(self):
        participants = [_p("Alice", "1-1"), _p("Bob")]
        assert [p["user_name"] for p in grid.available_participants(participants, "1-1")] == ["Bob"]


def test_individual_grid_marks_only_busy_cells():
    cells = grid.individual_grid(_p("Alice", "0-0", "6-23"))
    busy = [c["key"] for c in cells if c["unavailable"]]
    assert busy == ["0-0", "6-23"]
    assert len(cells) == 168


def test_normalize_availability_dedupes_in_order():
    assert grid.normalize_availability(["1-1", "0-0", "1-1"]) == ["1-1", "0-0"]
