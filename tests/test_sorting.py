"""Sort / rank engine."""

import pytest

from appstores.projection import to_summaries, to_summary
from appstores.sorting import (
    SortOption, is_valid_sort_option, overall_rating, parse_sort_option, sort_summaries,
)
from appstores.taxonomy import RatingDimension


def slugs(cards):
    return [c.slug for c in cards]


@pytest.fixture()
def cards(sample_catalog):
    return to_summaries(sample_catalog)


def test_commission_ascending(alpha, beta):
    assert slugs(sort_summaries(to_summaries([alpha, beta]), "commission-asc")) == ["b", "a"]


def test_missing_commission_sorts_last(cards):
    # gpt-store has no commission tiers; f-droid 0, google-play 15, steam 30
    assert slugs(sort_summaries(cards, SortOption.COMMISSION_ASC)) == ["f-droid", "google-play", "steam", "gpt-store"]


def test_name_ascending_and_descending(new_entry):
    cards = to_summaries([new_entry("z", "zeta"), new_entry("a", "Alpha"), new_entry("b", "beta")])

    assert slugs(sort_summaries(cards, SortOption.NAME_ASC)) == ["a", "b", "z"]
    assert slugs(sort_summaries(cards, SortOption.NAME_DESC)) == ["z", "b", "a"]


def test_app_count_descending(cards):
    assert slugs(sort_summaries(cards, "app-count-desc")) == ["google-play", "steam", "f-droid", "gpt-store"]


def test_featured_first_then_name(cards):
    assert slugs(sort_summaries(cards, SortOption.FEATURED)) == ["google-play", "gpt-store", "steam", "f-droid"]


def test_overall_rating(cards):
    # google-play 4.25, f-droid 4.67, steam 5, gpt-store unrated
    assert slugs(sort_summaries(cards, "rating-overall-desc")) == ["steam", "f-droid", "google-play", "gpt-store"]


def test_dimension_rating_ties_break_by_name(cards):
    # google-play and steam both 5 on stability
    assert slugs(sort_summaries(cards, "rating-stability-desc")) == ["google-play", "steam", "f-droid", "gpt-store"]
    assert slugs(sort_summaries(cards, "rating-technicalFreedom-desc"))[0] == "f-droid"


def test_unknown_option_falls_back_to_featured(cards):
    assert slugs(sort_summaries(cards, "most-popular")) == slugs(sort_summaries(cards, SortOption.FEATURED))
    assert parse_sort_option(None) is SortOption.FEATURED
    assert parse_sort_option(" name-asc ") is SortOption.NAME_ASC


def test_sorting_does_not_mutate_input(cards):
    before = list(cards)
    sort_summaries(cards, SortOption.NAME_DESC)
    assert cards == before


def test_sort_wrapped_items(sample_catalog):
    wrapped = [{"card": to_summary(e)} for e in sample_catalog]
    ordered = sort_summaries(wrapped, SortOption.NAME_ASC, summary_of=lambda item: item["card"])
    assert [w["card"].slug for w in ordered] == ["f-droid", "google-play", "gpt-store", "steam"]


def test_is_valid_sort_option():
    assert is_valid_sort_option("rating-reviewProcess-desc")
    assert is_valid_sort_option(SortOption.NAME_ASC)
    assert not is_valid_sort_option("rating-reviewprocess-desc")
    assert not is_valid_sort_option(None)


def test_rating_dimension_of_option():
    assert SortOption.RATING_REVIEW_PROCESS_DESC.rating_dimension is RatingDimension.REVIEW_PROCESS
    assert SortOption.RATING_ANALYTICS_DESC.rating_dimension is RatingDimension.ANALYTICS
    assert SortOption.RATING_OVERALL_DESC.rating_dimension is None
    assert SortOption.NAME_ASC.rating_dimension is None


def test_overall_rating_values():
    assert overall_rating(None) == 0
    assert overall_rating({}) == 0
    assert overall_rating({RatingDimension.STABILITY: 5, RatingDimension.COMMISSION: 3}) == 4


def test_no_commission_tiers_sort_after_full_commission(new_entry):
    cards = to_summaries([
        new_entry("aaa", "Aardvark Store"),
        new_entry("zzz", "Zed Store", fees={"commissionTiers": [{"percentage": 100}]}),
    ])
    assert slugs(sort_summaries(cards, "commission-asc")) == ["zzz", "aaa"]


@pytest.mark.parametrize("option", list(SortOption))
def test_sorting_twice_changes_nothing(cards, option):
    once = sort_summaries(cards, option)
    assert sort_summaries(once, option) == once


def test_name_descending_is_name_ascending_reversed(cards):
    ascending = sort_summaries(cards, SortOption.NAME_ASC)
    assert sort_summaries(cards, SortOption.NAME_DESC) == list(reversed(ascending))


def test_overall_rating_of_two_dimensions():
    assert overall_rating({RatingDimension.COMMISSION: 4, RatingDimension.STABILITY: 2}) == 3
