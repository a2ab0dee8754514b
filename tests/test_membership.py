"""Tests for collection membership rules."""

import pytest

from lightwaves.models.inscription import Inscription, canonical_sat, parse_sat
from lightwaves.services.membership import PatternMembership, RangeMembership

# Ordinals well past 2**53
START = 1_952_000_000_000_000
SUPPLY = 3333


@pytest.fixture
def by_range() -> RangeMembership:
    return RangeMembership(start=START, supply=SUPPLY)


@pytest.fixture
def by_pattern(base_id: str) -> PatternMembership:
    return PatternMembership(base_id=base_id, max_index=3332)


class TestParseSat:
    def test_parses_digit_string(self) -> None:
        assert parse_sat("1952000000000000") == 1_952_000_000_000_000

    def test_large_values_keep_precision(self) -> None:
        """Values beyond float precision are exact."""
        assert parse_sat("9007199254740993") == 9_007_199_254_740_993

    def test_accepts_int(self) -> None:
        assert parse_sat(42) == 42

    @pytest.mark.parametrize("value", ["-5", "+5", "12a", "", "1.5", "0x10", None, 1.5, True, -1])
    def test_rejects_invalid(self, value: object) -> None:
        assert parse_sat(value) is None

    def test_oversized_digit_string_rejected(self) -> None:
        """Digit strings past the int conversion limit are not sats."""
        assert parse_sat("9" * 5000) is None
        assert canonical_sat("9" * 5000) is None

    def test_canonical_form_strips_padding(self) -> None:
        assert canonical_sat("007") == "7"
        assert canonical_sat(" 7 ") == "7"
        assert canonical_sat(7) == "7"


class TestRangeMembership:
    def test_bounds_are_inclusive(self, by_range: RangeMembership) -> None:
        assert by_range.contains_sat(START)
        assert by_range.contains_sat(START + SUPPLY - 1)

    def test_just_outside_bounds(self, by_range: RangeMembership) -> None:
        assert not by_range.contains_sat(START - 1)
        assert not by_range.contains_sat(START + SUPPLY)

    def test_string_sats(self, by_range: RangeMembership) -> None:
        assert by_range.contains_sat(str(START + 10))
        assert not by_range.contains_sat("not-a-sat")

    def test_index_is_offset_from_start(self, by_range: RangeMembership) -> None:
        inscription = Inscription(id="x", sat=str(START + 41))
        assert by_range.index_of(inscription) == 41

    def test_resolved_sat_overrides_listing(self, by_range: RangeMembership) -> None:
        inscription = Inscription(id="x", sat=None)
        assert by_range.index_of(inscription) is None
        assert by_range.index_of(inscription, str(START)) == 0

    def test_end(self, by_range: RangeMembership) -> None:
        assert by_range.end == START + SUPPLY - 1

    def test_rejects_empty_supply(self) -> None:
        with pytest.raises(ValueError):
            RangeMembership(start=START, supply=0)


class TestPatternMembership:
    def test_member_index(self, by_pattern: PatternMembership, base_id: str) -> None:
        assert by_pattern.parse_index(f"{base_id}i0") == 0
        assert by_pattern.parse_index(f"{base_id}i3332") == 3332

    def test_index_past_max_is_not_member(
        self, by_pattern: PatternMembership, base_id: str
    ) -> None:
        assert by_pattern.parse_index(f"{base_id}i3333") is None

    def test_other_base_is_not_member(
        self, by_pattern: PatternMembership, other_base_id: str
    ) -> None:
        assert by_pattern.parse_index(f"{other_base_id}i5") is None

    @pytest.mark.parametrize(
        "suffix",
        ["i-1", "i", "ix5", "i5x", "i 5", "i+5", "5", "i1.0", "i5\n"],
    )
    def test_malformed_ids(self, by_pattern: PatternMembership, base_id: str, suffix: str) -> None:
        assert by_pattern.parse_index(f"{base_id}{suffix}") is None

    def test_uppercase_hex_rejected(self, by_pattern: PatternMembership, base_id: str) -> None:
        assert by_pattern.parse_index(f"{base_id.upper()}i1") is None

    def test_leading_garbage_rejected(self, by_pattern: PatternMembership, base_id: str) -> None:
        assert by_pattern.parse_index(f"0{base_id}i1") is None

    def test_contains_ignores_sat(self, by_pattern: PatternMembership, base_id: str) -> None:
        assert by_pattern.contains(Inscription(id=f"{base_id}i7", sat=None))

    def test_enumerate_ids_full_range(self, base_id: str) -> None:
        membership = PatternMembership(base_id=base_id, max_index=2)
        assert list(membership.enumerate_ids()) == [
            f"{base_id}i0",
            f"{base_id}i1",
            f"{base_id}i2",
        ]

    def test_enumerate_ids_window_is_clamped(self, base_id: str) -> None:
        membership = PatternMembership(base_id=base_id, max_index=4)
        assert list(membership.enumerate_ids(3, 100)) == [f"{base_id}i3", f"{base_id}i4"]

    def test_rejects_bad_base_id(self) -> None:
        with pytest.raises(ValueError):
            PatternMembership(base_id="not-hex", max_index=1)

    def test_describe(self, by_pattern: PatternMembership, base_id: str) -> None:
        assert by_pattern.describe() == {
            "strategy": "pattern",
            "baseId": base_id,
            "maxIndex": 3332,
        }
