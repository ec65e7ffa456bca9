"""
Room ID Generator Unit Tests

Tests slug normalization of display names and random suffix generation.
"""

import random

import pytest

from src.utils.room_id_generator import append_random_suffix, format_string_to_room_id, random_suffix


class TestFormatStringToRoomId:
    """Test display name to room id normalization"""

    @pytest.mark.parametrize("name,expected", [
        ("Sprint 12", "sprint-12"),
        ("  Team   Rocket  ", "team-rocket"),
        ("Équipe / Backlog!!", "equipe-backlog"),
        ("already-a-slug", "already-a-slug"),
        ("UPPER_case", "upper-case"),
        ("--edge--", "edge"),
    ])
    def test_normalizes_names(self, name, expected):
        assert format_string_to_room_id(name) == expected

    def test_empty_and_symbol_only_names_produce_empty_id(self):
        assert format_string_to_room_id("") == ""
        assert format_string_to_room_id("!!! ???") == ""
        assert format_string_to_room_id(None) == ""

    def test_truncates_to_max_length_without_trailing_hyphen(self):
        room_id = format_string_to_room_id("abcd efgh", max_length=5)
        assert room_id == "abcd"

    def test_result_only_contains_slug_characters(self):
        room_id = format_string_to_room_id("Ünïcödé ✓ room #42")
        assert room_id == "unicode-room-42"


class TestRandomSuffix:
    """Test random suffix helpers"""

    def test_suffix_has_requested_number_of_digits(self):
        rng = random.Random(7)
        for digits in (2, 4, 6):
            suffix = random_suffix(digits, rng)
            assert len(suffix) == digits
            assert suffix.isdigit()
            assert suffix[0] != '0'

    def test_append_random_suffix_is_deterministic_with_seeded_rng(self):
        first = append_random_suffix("sprint-12", 4, random.Random(42))
        second = append_random_suffix("sprint-12", 4, random.Random(42))

        assert first == second
        assert first.startswith("sprint-12-")
        assert len(first) == len("sprint-12-") + 4
