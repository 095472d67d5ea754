"""Filter engine: criteria, fail-closed vocabularies and query parameter parsing."""

import pytest

from appstores.filters import (
    FilterCriteria, MinRating, by_capability, filter_entries, matches, parse_filter_params,
)
from appstores.projection import to_summaries
from appstores.taxonomy import RatingDimension


def slugs(entries):
    return [e.slug for e in entries]


def test_category_then_platform(alpha, beta):
    entries = [alpha, beta]

    assert slugs(filter_entries(entries, FilterCriteria(categories=frozenset({"gaming"})))) == ["a", "b"]
    assert slugs(filter_entries(entries, FilterCriteria(
        categories=frozenset({"gaming"}), platforms=frozenset({"android"}),
    ))) == ["a"]


def test_multi_value_criteria_match_any(sample_catalog):
    criteria = FilterCriteria(categories=frozenset({"gaming", "open-source"}))
    assert slugs(filter_entries(sample_catalog, criteria)) == ["f-droid", "steam"]

    criteria = FilterCriteria(platforms=frozenset({"web", "linux"}))
    assert slugs(filter_entries(sample_catalog, criteria)) == ["google-play", "steam", "gpt-store"]


def test_unknown_values_fail_closed(sample_catalog):
    assert filter_entries(sample_catalog, FilterCriteria(categories=frozenset({"arcade"}))) == []
    assert filter_entries(sample_catalog, FilterCriteria(platforms=frozenset({"symbian"}))) == []
    # valid values still count when mixed with unknown ones
    mixed = FilterCriteria(categories=frozenset({"arcade", "gaming"}))
    assert slugs(filter_entries(sample_catalog, mixed)) == ["steam"]


def test_capabilities(sample_catalog):
    has_api = FilterCriteria(capabilities=(("hasApi", True),))
    assert slugs(filter_entries(sample_catalog, has_api)) == ["google-play", "steam"]

    no_api = FilterCriteria(capabilities=(("hasApi", False),))
    assert slugs(filter_entries(sample_catalog, no_api)) == ["f-droid", "gpt-store"]

    both = FilterCriteria(capabilities=(("hasApi", True), ("hasBetaTesting", True)))
    assert slugs(filter_entries(sample_catalog, both)) == ["google-play"]


def test_unknown_capability_never_matches(alpha):
    assert by_capability("hasTeleport", True)(alpha) is False
    assert by_capability("hasTeleport", False)(alpha) is False


def test_fee_status(sample_catalog):
    free = FilterCriteria(free_to_publish=True)
    assert slugs(filter_entries(sample_catalog, free)) == ["f-droid", "gpt-store"]

    paid = FilterCriteria(free_to_publish=False)
    assert slugs(filter_entries(sample_catalog, paid)) == ["google-play", "steam"]


def test_min_rating(alpha, beta, sample_catalog):
    criteria = FilterCriteria(min_rating=MinRating(RatingDimension.STABILITY, 4))
    assert slugs(filter_entries([alpha, beta], criteria)) == ["a"]

    # stores without ratings never pass
    assert "gpt-store" not in slugs(filter_entries(sample_catalog, criteria))


def test_min_rating_unknown_dimension_matches_nothing(sample_catalog):
    criteria = FilterCriteria(min_rating=MinRating("vibes", 1))
    assert filter_entries(sample_catalog, criteria) == []


def test_empty_criteria_keep_everything(sample_catalog):
    assert FilterCriteria().is_empty()
    assert slugs(filter_entries(sample_catalog, FilterCriteria())) == sample_catalog.get_slugs()
    assert slugs(filter_entries(sample_catalog)) == sample_catalog.get_slugs()


def test_filter_returns_new_list(alpha, beta):
    entries = [alpha, beta]
    result = filter_entries(entries, FilterCriteria(platforms=frozenset({"ios"})))

    assert result == [beta]
    assert entries == [alpha, beta]


def test_matches_single_entry(alpha):
    assert matches(alpha, FilterCriteria(categories=frozenset({"gaming"})))
    assert not matches(alpha, FilterCriteria(platforms=frozenset({"ios"})))


# ---- Query parameters ----

def test_parse_params_lists_and_commas():
    criteria = parse_filter_params({"category": "gaming,official", "platform": ["ios", " android "]})

    assert criteria.categories == frozenset({"gaming", "official"})
    assert criteria.platforms == frozenset({"ios", "android"})


@pytest.mark.parametrize("raw", ["", "all", " ", "ALL"])
def test_parse_params_unset_values(raw):
    criteria = parse_filter_params({"category": raw, "platform": raw, "minRating": raw})
    assert criteria.is_empty()


def test_parse_params_booleans():
    criteria = parse_filter_params({"hasApi": "true", "hasSdk": "0", "supportsAds": "maybe", "free": "yes"})

    assert criteria.capabilities == (("hasApi", True), ("hasSdk", False))
    assert criteria.free_to_publish is True

    assert parse_filter_params({"free": "sometimes"}).free_to_publish is None


def test_parse_params_min_rating():
    criteria = parse_filter_params({"minRating": "reviewProcess"})
    assert criteria.min_rating == MinRating(RatingDimension.REVIEW_PROCESS, 4)

    unknown = parse_filter_params({"minRating": "vibes"})
    assert unknown.min_rating.dimension == "vibes"


def test_parse_params_unknown_category_narrows_to_nothing(sample_catalog):
    criteria = parse_filter_params({"category": "arcade"})
    assert filter_entries(sample_catalog, criteria) == []


def test_criteria_order_does_not_matter(sample_catalog):
    by_category = FilterCriteria(categories=frozenset({"official", "open-source"}))
    by_platform = FilterCriteria(platforms=frozenset({"web"}))

    category_first = filter_entries(filter_entries(sample_catalog, by_category), by_platform)
    platform_first = filter_entries(filter_entries(sample_catalog, by_platform), by_category)

    assert slugs(category_first) == slugs(platform_first) == ["google-play"]


def test_cards_can_be_filtered(sample_catalog):
    cards = to_summaries(sample_catalog)

    assert slugs(filter_entries(cards, FilterCriteria(platforms=frozenset({"android"})))) == ["google-play", "f-droid"]
    assert slugs(filter_entries(cards, FilterCriteria(min_rating=MinRating("stability", 5)))) == ["google-play", "steam"]
    # capability and fee flags live on the full entry only
    assert filter_entries(cards, FilterCriteria(capabilities=(("hasApi", True),))) == []
    assert filter_entries(cards, FilterCriteria(free_to_publish=True)) == []
