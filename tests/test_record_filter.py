"""Tests for record filtering."""

import logging

import pytest

from cardsifter.filtering.record_filter import FilterResult, filter_records, matches
from cardsifter.models.criteria import FilterCriteria
from cardsifter.models.record import RecordStore


def _codes(result: FilterResult) -> list[str]:
    return [record["code"] for record in result.records]


class TestNoCriteria:
    def test_returns_everything_in_order(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria())

        assert _codes(result) == ["a1", "b2", "c3", "d4", "e5"]
        assert result.not_found == ()

    def test_accepts_record_store(self, sample_cards: list[dict]) -> None:
        result = filter_records(RecordStore.from_rows(sample_cards), FilterCriteria())

        assert len(result) == 5

    def test_empty_dataset_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            result = filter_records([], FilterCriteria(series="naruto"))

        assert result.records == ()
        assert "Dataset is empty" in caplog.text


class TestCodeSearch:
    def test_matches_in_search_order(self, make_card) -> None:
        """Result follows the typed order, not dataset order."""
        cards = [make_card("a1"), make_card("a2"), make_card("a3")]

        result = filter_records(cards, FilterCriteria(codes="a1, zzz, a2"))

        assert _codes(result) == ["a1", "a2"]
        assert result.not_found == ("zzz",)

    def test_reverse_order_kept(self, make_card) -> None:
        cards = [make_card("a1"), make_card("a2"), make_card("a3")]

        result = filter_records(cards, FilterCriteria(codes="a3,a1"))

        assert _codes(result) == ["a3", "a1"]

    def test_case_insensitive(self, make_card) -> None:
        cards = [make_card("AbC1")]

        result = filter_records(cards, FilterCriteria(codes="abc1"))

        assert _codes(result) == ["AbC1"]

    def test_duplicate_codes_return_whole_group(self, make_card) -> None:
        cards = [make_card("a1", series="x"), make_card("b2"), make_card("a1", series="y")]

        result = filter_records(cards, FilterCriteria(codes="a1"))

        assert [record["series"] for record in result.records] == ["x", "y"]

    def test_repeated_key_listed_once(self, make_card) -> None:
        cards = [make_card("a1")]

        result = filter_records(cards, FilterCriteria(codes="a1, A1"))

        assert _codes(result) == ["a1"]

    def test_overrides_every_other_criterion(self, sample_cards: list[dict]) -> None:
        """Other criteria are ignored while codes are set."""
        criteria = FilterCriteria(
            codes="b2",
            series="naruto",
            exclude_morphed=True,
            number_to=1,
            none_tag=True,
        )

        result = filter_records(sample_cards, criteria)

        assert _codes(result) == ["b2"]

    def test_all_missing_on_empty_dataset(self) -> None:
        result = filter_records([], FilterCriteria(codes="a1, b2"))

        assert result.records == ()
        assert result.not_found == ("a1", "b2")

    def test_not_found_logged(self, make_card, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            filter_records([make_card("a1")], FilterCriteria(codes="nope"))

        assert "codes_not_found" in caplog.text


class TestSubstringFilters:
    def test_series_any_term(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(series="titan, one piece"))

        assert _codes(result) == ["b2", "d4", "e5"]

    def test_series_substring_case_insensitive(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(series="NARUTO"))

        assert _codes(result) == ["a1", "c3"]

    def test_blacklist_series(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(blacklist_series="naruto"))

        assert _codes(result) == ["b2", "d4", "e5"]

    def test_blacklist_character_any_term(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(blacklist_character="luffy, zoro"))

        assert _codes(result) == ["a1", "c3", "e5"]

    def test_blacklist_tag(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(blacklist_tag="fav"))

        assert _codes(result) == ["b2", "c3", "d4"]

    def test_blacklist_beats_include(self, sample_cards: list[dict]) -> None:
        criteria = FilterCriteria(series="naruto", blacklist_series="shippuden")

        result = filter_records(sample_cards, criteria)

        assert _codes(result) == ["a1"]

    def test_missing_columns_do_not_crash(self) -> None:
        """Rows without series/character/tag read as empty strings."""
        rows = [{"code": "x1"}, {"code": "x2", "series": "Bleach"}]

        result = filter_records(rows, FilterCriteria(series="bleach", blacklist_tag="burn"))

        assert _codes(result) == ["x2"]


class TestNumericRanges:
    def test_number_range_inclusive(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(number_from=12, number_to=340))

        assert _codes(result) == ["a1", "b2", "e5"]

    def test_wishlists_lower_bound(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(wishlists_from=100))

        assert _codes(result) == ["a1", "b2"]

    def test_blank_wishlists_fails_both_bounds(self, sample_cards: list[dict]) -> None:
        """e5 has an empty wishlists cell: it fails ">= 1" and "<= 100"."""
        assert "e5" not in _codes(filter_records(sample_cards, FilterCriteria(wishlists_to=100)))
        assert "e5" not in _codes(filter_records(sample_cards, FilterCriteria(wishlists_from=1)))

    def test_blank_cell_passes_zero_lower_bound(self, make_card) -> None:
        """Only the lower bound reads an unparsable cell as 0."""
        cards = [make_card("blank", wishlists="")]

        assert _codes(filter_records(cards, FilterCriteria(wishlists_from=0))) == ["blank"]

    def test_unparsable_cells_fail_upper_bound(self, make_card) -> None:
        cards = [
            make_card("blank", wishlists="", number="5"),
            make_card("txt", wishlists="3", number="n/a"),
            make_card("ok", wishlists="3", number="5"),
        ]

        assert _codes(filter_records(cards, FilterCriteria(wishlists_to=10))) == ["txt", "ok"]
        assert _codes(filter_records(cards, FilterCriteria(number_to=10))) == ["blank", "ok"]

    def test_leading_integer_read_for_upper_bound(self, make_card) -> None:
        cards = [make_card("x", number="12abc")]

        assert _codes(filter_records(cards, FilterCriteria(number_to=12))) == ["x"]

    def test_zero_bound_is_a_real_bound(self, make_card) -> None:
        cards = [make_card("neg", number="-5"), make_card("pos", number="5")]

        result = filter_records(cards, FilterCriteria(number_from=0))

        assert _codes(result) == ["pos"]


class TestEditions:
    def test_edition_membership(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(editions=frozenset({"1", "4"})))

        assert _codes(result) == ["a1", "d4", "e5"]

    def test_empty_set_means_any(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(editions=frozenset()))

        assert len(result) == 5


class TestPresenceFilters:
    def test_morphed(self, sample_cards: list[dict]) -> None:
        assert _codes(filter_records(sample_cards, FilterCriteria(morphed=True))) == ["b2"]

    def test_trimmed(self, sample_cards: list[dict]) -> None:
        assert _codes(filter_records(sample_cards, FilterCriteria(trimmed=True))) == ["c3"]

    def test_frame(self, sample_cards: list[dict]) -> None:
        assert _codes(filter_records(sample_cards, FilterCriteria(frame=True))) == ["b2"]

    def test_has_dye_name(self, sample_cards: list[dict]) -> None:
        assert _codes(filter_records(sample_cards, FilterCriteria(has_dye_name=True))) == ["c3"]

    def test_exclusions(self, sample_cards: list[dict]) -> None:
        criteria = FilterCriteria(
            exclude_morphed=True,
            exclude_trimmed=True,
            exclude_frame=True,
            exclude_dye_name=True,
        )

        assert _codes(filter_records(sample_cards, criteria)) == ["a1", "d4", "e5"]

    def test_include_and_exclude_same_flag_is_empty(self, sample_cards: list[dict]) -> None:
        criteria = FilterCriteria(morphed=True, exclude_morphed=True)

        assert filter_records(sample_cards, criteria).records == ()


class TestTagFilters:
    def test_tag_substring(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(tag="FAV"))

        assert _codes(result) == ["a1", "e5"]

    def test_none_tag_matches_blank_and_whitespace(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(none_tag=True))

        assert _codes(result) == ["b2", "d4"]

    def test_none_tag_wins_over_tag_text(self, sample_cards: list[dict]) -> None:
        result = filter_records(sample_cards, FilterCriteria(tag="fav", none_tag=True))

        assert _codes(result) == ["b2", "d4"]

    def test_whitespace_tag_is_a_literal_substring(self, make_card) -> None:
        """A tag filter of spaces matches only tags containing those spaces."""
        cards = [make_card("spaced", tag="  "), make_card("plain", tag="fav")]

        result = filter_records(cards, FilterCriteria(tag="  "))

        assert _codes(result) == ["spaced"]

    def test_none_tag_with_missing_column(self) -> None:
        result = filter_records([{"code": "x1"}], FilterCriteria(none_tag=True))

        assert _codes(result) == ["x1"]


class TestMatches:
    def test_single_row(self, make_card) -> None:
        card = make_card("a1", series="Naruto", wishlists="30")

        assert matches(card, FilterCriteria(series="naruto", wishlists_from=30))
        assert not matches(card, FilterCriteria(series="bleach"))
