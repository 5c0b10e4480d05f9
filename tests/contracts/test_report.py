"""Tests for EventResult and report grouping keys."""

from travelprint.contracts.enums import GroupKind
from travelprint.contracts.report import EventResult, GroupKey, TransportTypeStats


class TestGroupKey:
    def test_known_label(self):
        key = GroupKey.known("car")
        assert key.kind == GroupKind.KNOWN
        assert key.label == "car"

    def test_other_with_detail(self):
        key = GroupKey.other("  volunteer ")
        assert key.detail == "volunteer"
        assert key.label == "other: volunteer"

    def test_blank_detail_falls_back_to_other(self):
        assert GroupKey.other("   ") == GroupKey.other()
        assert GroupKey.other(None).label == "other"

    def test_detail_text_cannot_collide_with_known(self):
        # A category literally named like a refined key stays distinct
        assert GroupKey.known("other: volunteer") != GroupKey.other("volunteer")

    def test_hashable(self):
        groups = {GroupKey.other("a"): 1, GroupKey.other("a"): 2}
        assert len(groups) == 1


class TestEventResult:
    def test_trees_needed_rounds_up(self):
        assert EventResult(total_footprint_kg=22.0).trees_needed == 1
        assert EventResult(total_footprint_kg=22.01).trees_needed == 2
        assert EventResult().trees_needed == 0

    def test_to_report_uses_labels(self):
        result = EventResult(
            total_footprint_kg=10.0,
            by_transport_type={
                GroupKey.known("train"): TransportTypeStats(distance_km=300.0, trips=1),
                GroupKey.other(): TransportTypeStats(distance_km=5.0, trips=2),
            },
        )
        report = result.to_report()
        assert report["trees_needed"] == 1
        assert report["by_transport_type"] == {
            "train": {"distance_km": 300.0, "trips": 1},
            "other": {"distance_km": 5.0, "trips": 2},
        }
        assert report["by_user_type"] == {}
