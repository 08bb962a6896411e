"""Tests for staged scene heading parsing."""

import pytest

from scriptdesk.smarttype.stages import (
    SceneHeadingParts,
    parse_scene_heading,
    prefix_suggestions,
)


class TestParseSceneHeading:
    """Test stage detection."""

    def test_stage_one(self):
        assert parse_scene_heading("IN") == SceneHeadingParts(stage=1, location="IN")

    def test_prefix_needs_trailing_space(self):
        assert parse_scene_heading("INT.").stage == 1

    def test_stage_two(self):
        parts = parse_scene_heading("INT. KITCH")
        assert parts.stage == 2
        assert parts.prefix == "INT. "
        assert parts.location == "KITCH"

    def test_stage_three(self):
        parts = parse_scene_heading("EXT. BEACH - NI")
        assert parts.stage == 3
        assert parts.location == "BEACH"
        assert parts.time == "NI"

    def test_location_with_separator_uses_last_one(self):
        parts = parse_scene_heading("INT. HOUSE - KITCHEN - DAY")
        assert parts.location == "HOUSE - KITCHEN"
        assert parts.time == "DAY"

    def test_hyphenated_location_is_stage_two(self):
        assert parse_scene_heading("INT. SELF-STORAGE").stage == 2

    def test_empty_time_after_separator(self):
        parts = parse_scene_heading("INT. HOUSE - ")
        assert parts.stage == 3
        assert parts.time == ""


class TestPrefixSuggestions:
    """Test prefix completion."""

    @pytest.mark.parametrize(
        ("typed", "expected"),
        [
            ("i", ["INT.", "I/E"]),
            ("E", ["EXT."]),
            ("INT", ["INT."]),
            ("INT.", []),
            ("", []),
            ("X", []),
        ],
    )
    def test_completions(self, typed, expected):
        assert prefix_suggestions(typed) == expected
