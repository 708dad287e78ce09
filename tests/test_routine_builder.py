"""
Unit tests for the skincare routine and makeup style builder.
"""

from services.findings import RoutineFlags
from services.routine_builder import build_makeup_styles, build_skincare_routine

BASE_MORNING = ["洁面", "爽肤水", "精华", "乳液", "防晒"]
BASE_EVENING = ["卸妆", "洁面", "爽肤水", "精华", "面霜"]


class TestSkinTypeSubstitution:

    def test_neutral_keeps_base_routine(self):
        routine = build_skincare_routine(2, RoutineFlags())
        assert routine.morning == BASE_MORNING
        assert routine.evening == BASE_EVENING
        assert routine.weekly == ["面膜"]

    def test_oily(self):
        routine = build_skincare_routine(0, RoutineFlags())
        assert routine.morning[3] == "控油乳液"
        assert routine.evening[4] == "控油面霜"

    def test_dry(self):
        routine = build_skincare_routine(1, RoutineFlags())
        assert routine.morning[3] == "保湿乳液"
        assert routine.evening[4] == "保湿面霜"

    def test_combination_only_changes_morning(self):
        routine = build_skincare_routine(3, RoutineFlags())
        assert routine.morning[3] == "分区护理（T区控油、U区保湿）"
        assert routine.evening == BASE_EVENING


class TestConcernSteps:

    def test_acne_inserted_before_serum(self):
        routine = build_skincare_routine(2, RoutineFlags(has_acne=True))
        assert routine.morning == ["洁面", "爽肤水", "祛痘精华", "精华", "乳液", "防晒"]
        assert routine.evening == ["卸妆", "洁面", "爽肤水", "祛痘精华", "精华", "面霜"]

    def test_spots_are_morning_only(self):
        routine = build_skincare_routine(2, RoutineFlags(has_spots_or_moles=True))
        assert "美白/淡斑精华" in routine.morning
        assert "美白/淡斑精华" not in routine.evening

    def test_blackhead_appends_weekly_mask(self):
        routine = build_skincare_routine(2, RoutineFlags(has_blackhead=True))
        assert routine.weekly == ["面膜", "清洁面膜"]

    def test_stacking_order(self):
        flags = RoutineFlags(has_acne=True, has_dark_circle=True, has_spots_or_moles=True)
        routine = build_skincare_routine(0, flags)
        assert routine.morning == [
            "洁面", "爽肤水", "祛痘精华", "眼霜", "美白/淡斑精华", "精华", "控油乳液", "防晒",
        ]
        assert routine.evening == ["卸妆", "洁面", "爽肤水", "祛痘精华", "眼霜", "精华", "控油面霜"]

    def test_routines_do_not_leak_between_calls(self):
        build_skincare_routine(0, RoutineFlags(has_acne=True, has_blackhead=True))
        routine = build_skincare_routine(2, RoutineFlags())
        assert routine.morning == BASE_MORNING
        assert routine.weekly == ["面膜"]


class TestMakeupStyles:

    def test_presets_unchanged_without_concerns(self):
        styles = build_makeup_styles(RoutineFlags())
        assert [s.id for s in styles] == ["1", "2", "3"]
        assert styles[0].steps == ["保湿打底", "轻透底妆", "自然眉"]
        assert styles[1].steps == ["遮瑕", "哑光底妆", "大地色眼影"]

    def test_dark_circle_concealer(self):
        styles = build_makeup_styles(RoutineFlags(has_dark_circle=True))
        assert styles[0].steps == ["保湿打底", "眼下遮瑕", "轻透底妆", "自然眉"]
        assert styles[1].steps[0] == "眼下遮瑕 · 局部遮瑕"

    def test_acne_and_dark_circle_stack(self):
        styles = build_makeup_styles(RoutineFlags(has_acne=True, has_dark_circle=True))
        assert styles[0].steps == ["保湿打底", "痘痘遮瑕", "眼下遮瑕", "轻透底妆", "自然眉"]
        assert styles[2].steps == ["提亮", "轻薄底妆", "粉色系眼唇"]
