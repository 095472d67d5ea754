"""
Sort / rank engine — orders store cards for a named sort option.

Every option breaks ties by name (A-Z), except name-desc which is the exact
reverse of name-asc. Sorting always returns a new list.
"""

from enum import Enum
from typing import Callable, Optional

from appstores.config import DEFAULT_SORT
from appstores.taxonomy import RatingDimension


class SortOption(str, Enum):
    FEATURED = "featured"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    APP_COUNT_DESC = "app-count-desc"
    COMMISSION_ASC = "commission-asc"
    RATING_OVERALL_DESC = "rating-overall-desc"
    RATING_COMMISSION_DESC = "rating-commission-desc"
    RATING_REVIEW_PROCESS_DESC = "rating-reviewProcess-desc"
    RATING_STABILITY_DESC = "rating-stability-desc"
    RATING_DEVELOPER_SUPPORT_DESC = "rating-developerSupport-desc"
    RATING_DISCOVERABILITY_DESC = "rating-discoverability-desc"
    RATING_COMPETITIVENESS_DESC = "rating-competitiveness-desc"
    RATING_ENTRY_BARRIERS_DESC = "rating-entryBarriers-desc"
    RATING_TECHNICAL_FREEDOM_DESC = "rating-technicalFreedom-desc"
    RATING_ANALYTICS_DESC = "rating-analytics-desc"

    @property
    def rating_dimension(self) -> Optional[RatingDimension]:
        """The dimension a per-dimension rating sort ranks by, else None."""
        if not self.value.startswith("rating-") or self is SortOption.RATING_OVERALL_DESC:
            return None
        return RatingDimension.parse(self.value[len("rating-"):-len("-desc")])


# Labels shown in the sort dropdown
SORT_LABELS = {
    SortOption.FEATURED: "Featured",
    SortOption.NAME_ASC: "Name (A-Z)",
    SortOption.NAME_DESC: "Name (Z-A)",
    SortOption.APP_COUNT_DESC: "Most Apps",
    SortOption.COMMISSION_ASC: "Lowest Commission",
    SortOption.RATING_OVERALL_DESC: "Best Overall Rating",
    SortOption.RATING_COMMISSION_DESC: "Best Commission",
    SortOption.RATING_REVIEW_PROCESS_DESC: "Best Review Process",
    SortOption.RATING_STABILITY_DESC: "Most Stable",
    SortOption.RATING_DEVELOPER_SUPPORT_DESC: "Best Support",
    SortOption.RATING_DISCOVERABILITY_DESC: "Best Discoverability",
    SortOption.RATING_COMPETITIVENESS_DESC: "Most Competitive",
    SortOption.RATING_ENTRY_BARRIERS_DESC: "Easiest Entry",
    SortOption.RATING_TECHNICAL_FREEDOM_DESC: "Most Freedom",
    SortOption.RATING_ANALYTICS_DESC: "Best Analytics",
}

# Missing first commission tier sorts as the worst case
MISSING_COMMISSION = 100


def _option_or_none(raw) -> Optional[SortOption]:
    if isinstance(raw, SortOption):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return SortOption(raw.strip())
    except ValueError:
        return None


def parse_sort_option(raw) -> SortOption:
    """Return the matching option, falling back to the default sort for anything unknown."""
    return _option_or_none(raw) or _option_or_none(DEFAULT_SORT) or SortOption.FEATURED


def is_valid_sort_option(raw) -> bool:
    return _option_or_none(raw) is not None


def overall_rating(ratings: Optional[dict]) -> float:
    """
    Mean of the dimensions that are present.
    Missing dimensions are left out entirely; no ratings at all gives 0.
    """
    if not ratings:
        return 0
    values = [v for v in ratings.values() if v is not None]
    if not values:
        return 0
    return sum(values) / len(values)


def first_commission(summary) -> float:
    tiers = summary.commission_tiers
    return tiers[0].percentage if tiers else MISSING_COMMISSION


def rating_for(summary, dimension: RatingDimension) -> int:
    if not summary.ratings:
        return 0
    return summary.ratings.get(dimension) or 0


def name_key(summary) -> tuple:
    return (summary.name.casefold(), summary.name)


def _sort_key(option: SortOption) -> Callable:
    if option is SortOption.NAME_ASC or option is SortOption.NAME_DESC:
        return name_key
    if option is SortOption.APP_COUNT_DESC:
        return lambda s: (-(s.app_count or 0), name_key(s))
    if option is SortOption.COMMISSION_ASC:
        # a store without tiers sorts after a real 100% tier
        return lambda s: (first_commission(s), not s.commission_tiers, name_key(s))
    if option is SortOption.FEATURED:
        return lambda s: (not s.featured, name_key(s))
    if option is SortOption.RATING_OVERALL_DESC:
        return lambda s: (-overall_rating(s.ratings), name_key(s))
    dimension = option.rating_dimension
    return lambda s: (-rating_for(s, dimension), name_key(s))


def sort_summaries(items, option=SortOption.FEATURED, summary_of: Optional[Callable] = None) -> list:
    """
    Order store cards by a sort option.

    Args:
        items:      Store cards, or anything holding one (see `summary_of`).
        option:     A SortOption or its string value; unknown strings fall back
                    to the default sort.
        summary_of: Extracts the card from each item, e.g. `lambda r: r.summary`
                    for search results. Defaults to the item itself.

    Returns:
        A new list. Python's sort is stable, so items with identical keys keep
        their input order.
    """
    option = parse_sort_option(option)
    key = _sort_key(option)
    if summary_of is not None:
        inner = key
        key = lambda item: inner(summary_of(item))
    return sorted(items, key=key, reverse=option is SortOption.NAME_DESC)
