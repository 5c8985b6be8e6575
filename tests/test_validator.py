"""Tests for room id and text validation."""
import pytest

from chatrelay.services.validator import is_non_empty_text, is_valid_room_id


@pytest.mark.parametrize("room_id", [
    "11111111-1111-1111-1111-111111111111",
    "79ca2f40-7871-4a1e-a3a0-b4907c69d699",
    "79CA2F40-7871-4A1E-A3A0-B4907C69D699",
])
def test_valid_room_ids(room_id):
    assert is_valid_room_id(room_id)


@pytest.mark.parametrize("room_id", [
    "",
    "general",
    "79ca2f4078714a1ea3a0b4907c69d699",          # no hyphens
    "79ca2f40-7871-4a1e-a3a0-b4907c69d69",       # short last group
    "79ca2f40-7871-4a1e-a3a0-b4907c69d6999",     # long last group
    "g9ca2f40-7871-4a1e-a3a0-b4907c69d699",      # non-hex
    " 79ca2f40-7871-4a1e-a3a0-b4907c69d699",
    "79ca2f40-7871-4a1e-a3a0-b4907c69d699\n",
    None,
    42,
])
def test_invalid_room_ids(room_id):
    assert not is_valid_room_id(room_id)


def test_non_empty_text():
    assert is_non_empty_text("hi")
    assert is_non_empty_text("  hi  ")
    assert not is_non_empty_text("")
    assert not is_non_empty_text("   \t\n")
    assert not is_non_empty_text(None)
    assert not is_non_empty_text(5)
