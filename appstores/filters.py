"""
Filter engine — narrows a list of stores down by category, platform,
capabilities, registration fee and minimum rating.

Criteria combine with AND; a multi-value criterion (several categories, several
platforms) matches if any of its values does. A criterion left as None imposes
no constraint. Values outside the fixed vocabularies never match anything:
filters usually come straight from query parameters, so an unknown value
narrows the result to nothing instead of raising.

Filters are meant for full entries. Store cards can be filtered by category,
platform and rating; capability and fee criteria never match a card.
"""

from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from appstores.config import MIN_RATING_THRESHOLD
from appstores.taxonomy import Category, Platform, RatingDimension


# Capability flags a listing can be filtered on, keyed by their dataset name.
CAPABILITIES: dict[str, Callable] = {
    "hasApi": lambda e: e.technical.has_api,
    "hasSdk": lambda e: e.technical.has_sdk,
    "supportsInAppPurchases": lambda e: e.technical.supports_in_app_purchases,
    "supportsSubscriptions": lambda e: e.technical.supports_subscriptions,
    "supportsAds": lambda e: e.technical.supports_ads,
    "hasEditorialContent": lambda e: e.features.has_editorial_content,
    "hasAppBundles": lambda e: e.features.has_app_bundles,
    "hasPreRegistration": lambda e: e.features.has_pre_registration,
    "hasBetaTesting": lambda e: e.features.has_beta_testing,
    "hasAnalyticsDashboard": lambda e: e.features.has_analytics_dashboard,
    "hasABTesting": lambda e: e.features.has_ab_testing,
    "hasUserReviews": lambda e: e.features.has_user_reviews,
    "hasRatings": lambda e: e.features.has_ratings,
}


@dataclass(frozen=True)
class MinRating:
    dimension: object               # RatingDimension, or the raw value if unknown
    value: int = MIN_RATING_THRESHOLD


@dataclass(frozen=True)
class FilterCriteria:
    categories: Optional[frozenset] = None
    platforms: Optional[frozenset] = None
    capabilities: Optional[tuple] = None      # ((name, expected_bool), ...)
    free_to_publish: Optional[bool] = None
    min_rating: Optional[MinRating] = None

    def is_empty(self) -> bool:
        return (self.categories is None and self.platforms is None
                and not self.capabilities and self.free_to_publish is None
                and self.min_rating is None)


# ---- Single-criterion predicates ----

def _valid_members(values, enum_cls) -> frozenset:
    """Keep only values that belong to the enum. May return an empty set."""
    parsed = (enum_cls.parse(v) for v in values)
    return frozenset(p for p in parsed if p is not None)


def by_category(categories) -> Callable:
    allowed = _valid_members(categories, Category)
    return lambda entry: entry.category in allowed


def by_platform(platforms) -> Callable:
    allowed = _valid_members(platforms, Platform)
    return lambda entry: any(p in allowed for p in entry.platforms)


def by_capability(name: str, expected: bool) -> Callable:
    """Store cards carry no capability flags, so they never match."""
    getter = CAPABILITIES.get(name)
    if getter is None:
        return lambda entry: False

    def predicate(entry) -> bool:
        try:
            return bool(getter(entry)) == expected
        except AttributeError:
            return False

    return predicate


def by_fee_status(free_to_publish: bool) -> Callable:
    """A store with no registration fee counts as free. Store cards never match."""
    def predicate(entry) -> bool:
        fees = getattr(entry, "fees", None)
        if fees is None:
            return False
        return fees.is_free_to_publish == free_to_publish

    return predicate


def by_min_rating(dimension, minimum: int = MIN_RATING_THRESHOLD) -> Callable:
    parsed = RatingDimension.parse(dimension)
    if parsed is None:
        return lambda entry: False

    def predicate(entry) -> bool:
        if not entry.ratings:
            return False
        score = entry.ratings.get(parsed)
        return score is not None and score >= minimum

    return predicate


# ---- Combined ----

def build_predicates(criteria: FilterCriteria) -> list[Callable]:
    predicates = []
    if criteria.categories is not None:
        predicates.append(by_category(criteria.categories))
    if criteria.platforms is not None:
        predicates.append(by_platform(criteria.platforms))
    for name, expected in criteria.capabilities or ():
        predicates.append(by_capability(name, expected))
    if criteria.free_to_publish is not None:
        predicates.append(by_fee_status(criteria.free_to_publish))
    if criteria.min_rating is not None:
        predicates.append(by_min_rating(criteria.min_rating.dimension, criteria.min_rating.value))
    return predicates


def matches(entry, criteria: FilterCriteria) -> bool:
    return all(p(entry) for p in build_predicates(criteria))


def filter_entries(entries, criteria: Optional[FilterCriteria] = None) -> list:
    """
    Return the entries satisfying every criterion, in their original order.
    The input is never modified.
    """
    if criteria is None:
        return list(entries)
    predicates = build_predicates(criteria)
    return [e for e in entries if all(p(e) for p in predicates)]


# ---- Query parameter parsing ----

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}
_UNSET = {"", "all"}


def _parse_bool(raw) -> Optional[bool]:
    value = str(raw).strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return None


def _split_values(raw) -> Optional[list[str]]:
    """'a,b' or ['a', 'b'] -> ['a', 'b']. None when the parameter is unset."""
    if raw is None:
        return None
    items = raw if isinstance(raw, (list, tuple)) else str(raw).split(",")
    values = [str(v).strip() for v in items if str(v).strip()]
    if not values or all(v.lower() in _UNSET for v in values):
        return None
    return values


def parse_filter_params(params: Mapping) -> FilterCriteria:
    """
    Turn raw query parameters into filter criteria.

    Recognised keys: category, platform, minRating, free, and any capability
    name from CAPABILITIES (hasApi, hasSdk, ...). Unknown category, platform or
    dimension values are kept so that they match nothing. Unreadable booleans
    are ignored.
    """
    categories = _split_values(params.get("category"))
    platforms = _split_values(params.get("platform"))

    capabilities = []
    for name in CAPABILITIES:
        if name in params:
            expected = _parse_bool(params[name])
            if expected is not None:
                capabilities.append((name, expected))

    free_to_publish = _parse_bool(params["free"]) if "free" in params else None

    min_rating = None
    raw_dimension = params.get("minRating")
    if raw_dimension is not None and str(raw_dimension).strip().lower() not in _UNSET:
        dimension = RatingDimension.parse(raw_dimension) or str(raw_dimension)
        min_rating = MinRating(dimension=dimension, value=MIN_RATING_THRESHOLD)

    return FilterCriteria(
        categories=frozenset(categories) if categories is not None else None,
        platforms=frozenset(platforms) if platforms is not None else None,
        capabilities=tuple(capabilities) or None,
        free_to_publish=free_to_publish,
        min_rating=min_rating,
    )
