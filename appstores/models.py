"""
Data models — store records and the cards derived from them.
Every store document, once compiled, gets converted into these shapes.

The dataset uses camelCase keys (it is shared with the content authors);
attributes here are snake_case. `from_dict` / `to_dict` translate between the two.
Optional fields stay None when the source leaves them out, so "absent" and
"present but zero" never get confused.
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

from appstores.taxonomy import (
    Category, Platform, RatingDimension, PricingModel, EntryStatus,
    RATING_MIN, RATING_MAX,
)


# ---- Helpers ----

def _compact(data: dict) -> dict:
    """Drop keys whose value is None."""
    return {k: v for k, v in data.items() if v is not None}


def _tuple(value) -> Optional[tuple]:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def _list(value) -> Optional[list]:
    return list(value) if value is not None else None


def _text(data: dict, key: str, default: Optional[str] = "") -> Optional[str]:
    """A text field. YAML turns bare numbers into ints, so anything but a string is rejected."""
    value = data.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be text, got {value!r}")
    return value


def _parse_date(value) -> Optional[date]:
    """Dates arrive as ISO strings from JSON, or as date objects from YAML."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date_parser.isoparse(str(value)).date()


def _format_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_ratings(raw) -> Optional[dict]:
    """Keep the nine known dimensions; every present score must be 1-5."""
    if raw is None:
        return None
    ratings = {}
    for key, value in raw.items():
        dimension = RatingDimension.parse(key)
        if dimension is None or value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value != int(value):
            raise ValueError(f"Rating '{key}' must be a whole number, got {value!r}")
        if not RATING_MIN <= value <= RATING_MAX:
            raise ValueError(f"Rating '{key}' must be between {RATING_MIN} and {RATING_MAX}, got {value}")
        ratings[dimension] = int(value)
    return ratings


def _ratings_to_dict(ratings: Optional[dict]) -> Optional[dict]:
    if ratings is None:
        return None
    return {dimension.value: score for dimension, score in ratings.items()}


# ---- Sub-records ----

@dataclass(frozen=True)
class Company:
    name: str
    headquarters: Optional[str] = None
    founded_year: Optional[int] = None
    website: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Company":
        return cls(
            name=_text(data, "name"),
            headquarters=data.get("headquarters"),
            founded_year=data.get("foundedYear"),
            website=data.get("website"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "name": self.name,
            "headquarters": self.headquarters,
            "foundedYear": self.founded_year,
            "website": self.website,
        })


@dataclass(frozen=True)
class Metrics:
    app_count: Optional[int] = None
    app_count_source: Optional[str] = None
    app_count_last_updated: Optional[str] = None
    monthly_active_users: Optional[int] = None
    monthly_downloads: Optional[int] = None
    developer_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Metrics":
        last_updated = data.get("appCountLastUpdated")
        return cls(
            app_count=data.get("appCount"),
            app_count_source=data.get("appCountSource"),
            app_count_last_updated=str(last_updated) if last_updated is not None else None,
            monthly_active_users=data.get("monthlyActiveUsers"),
            monthly_downloads=data.get("monthlyDownloads"),
            developer_count=data.get("developerCount"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "appCount": self.app_count,
            "appCountSource": self.app_count_source,
            "appCountLastUpdated": self.app_count_last_updated,
            "monthlyActiveUsers": self.monthly_active_users,
            "monthlyDownloads": self.monthly_downloads,
            "developerCount": self.developer_count,
        })


@dataclass(frozen=True)
class RegistrationFee:
    amount: float
    currency: str = "USD"
    type: str = "one-time"          # "one-time" or "annual"

    @classmethod
    def from_dict(cls, data: dict) -> "RegistrationFee":
        return cls(
            amount=data.get("amount", 0),
            currency=data.get("currency", "USD"),
            type=data.get("type", "one-time"),
        )

    def to_dict(self) -> dict:
        return {"amount": self.amount, "currency": self.currency, "type": self.type}


@dataclass(frozen=True)
class CommissionTier:
    """A revenue share rate applying under stated conditions."""
    percentage: float
    description: str = ""
    conditions: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "CommissionTier":
        percentage = data.get("percentage")
        if isinstance(percentage, bool) or not isinstance(percentage, (int, float)):
            raise ValueError(f"Commission percentage must be a number, got {percentage!r}")
        if not 0 <= percentage <= 100:
            raise ValueError(f"Commission percentage must be within 0-100, got {percentage}")
        return cls(
            percentage=percentage,
            description=data.get("description", ""),
            conditions=data.get("conditions"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "percentage": self.percentage,
            "description": self.description,
            "conditions": self.conditions,
        })


@dataclass(frozen=True)
class Fees:
    registration_fee: Optional[RegistrationFee] = None
    commission_tiers: tuple = ()
    has_reduced_commission: Optional[bool] = None
    reduced_commission_details: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Fees":
        fee = data.get("registrationFee")
        return cls(
            registration_fee=RegistrationFee.from_dict(fee) if fee is not None else None,
            commission_tiers=tuple(CommissionTier.from_dict(t) for t in data.get("commissionTiers") or []),
            has_reduced_commission=data.get("hasReducedCommission"),
            reduced_commission_details=data.get("reducedCommissionDetails"),
        )

    @property
    def is_free_to_publish(self) -> bool:
        """No registration fee, or a fee of zero."""
        return self.registration_fee is None or not self.registration_fee.amount

    def to_dict(self) -> dict:
        return _compact({
            "registrationFee": self.registration_fee.to_dict() if self.registration_fee else None,
            "commissionTiers": [t.to_dict() for t in self.commission_tiers],
            "hasReducedCommission": self.has_reduced_commission,
            "reducedCommissionDetails": self.reduced_commission_details,
        })


@dataclass(frozen=True)
class Technical:
    has_api: bool = False
    has_sdk: bool = False
    supports_in_app_purchases: bool = False
    supports_subscriptions: bool = False
    supports_ads: bool = False
    api_documentation_url: Optional[str] = None
    sdk_platforms: Optional[tuple] = None
    sdk_documentation_url: Optional[str] = None
    supported_ad_networks: Optional[tuple] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Technical":
        return cls(
            has_api=bool(data.get("hasApi", False)),
            has_sdk=bool(data.get("hasSdk", False)),
            supports_in_app_purchases=bool(data.get("supportsInAppPurchases", False)),
            supports_subscriptions=bool(data.get("supportsSubscriptions", False)),
            supports_ads=bool(data.get("supportsAds", False)),
            api_documentation_url=data.get("apiDocumentationUrl"),
            sdk_platforms=_tuple(data.get("sdkPlatforms")),
            sdk_documentation_url=data.get("sdkDocumentationUrl"),
            supported_ad_networks=_tuple(data.get("supportedAdNetworks")),
        )

    def to_dict(self) -> dict:
        return _compact({
            "hasApi": self.has_api,
            "apiDocumentationUrl": self.api_documentation_url,
            "hasSdk": self.has_sdk,
            "sdkPlatforms": _list(self.sdk_platforms),
            "sdkDocumentationUrl": self.sdk_documentation_url,
            "supportsInAppPurchases": self.supports_in_app_purchases,
            "supportsSubscriptions": self.supports_subscriptions,
            "supportsAds": self.supports_ads,
            "supportedAdNetworks": _list(self.supported_ad_networks),
        })


@dataclass(frozen=True)
class Monetization:
    models: tuple = ()
    payment_methods: Optional[tuple] = None
    payout_methods: Optional[tuple] = None
    minimum_payout: Optional[float] = None
    payout_currency: Optional[str] = None
    payout_frequency: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Monetization":
        models = []
        for raw in data.get("models") or []:
            model = PricingModel.parse(raw)
            if model is None:
                raise ValueError(f"Unknown pricing model: {raw!r}")
            models.append(model)
        return cls(
            models=tuple(models),
            payment_methods=_tuple(data.get("paymentMethods")),
            payout_methods=_tuple(data.get("payoutMethods")),
            minimum_payout=data.get("minimumPayout"),
            payout_currency=data.get("payoutCurrency"),
            payout_frequency=data.get("payoutFrequency"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "models": [m.value for m in self.models],
            "paymentMethods": _list(self.payment_methods),
            "payoutMethods": _list(self.payout_methods),
            "minimumPayout": self.minimum_payout,
            "payoutCurrency": self.payout_currency,
            "payoutFrequency": self.payout_frequency,
        })


@dataclass(frozen=True)
class Submission:
    has_automated_review: bool = False
    has_human_review: bool = False
    requires_approval: bool = False
    guidelines_url: Optional[str] = None
    guidelines_summary: Optional[str] = None
    typical_review_time: Optional[str] = None
    common_rejection_reasons: Optional[tuple] = None
    appeals_process: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Submission":
        return cls(
            has_automated_review=bool(data.get("hasAutomatedReview", False)),
            has_human_review=bool(data.get("hasHumanReview", False)),
            requires_approval=bool(data.get("requiresApproval", False)),
            guidelines_url=data.get("guidelinesUrl"),
            guidelines_summary=data.get("guidelinesSummary"),
            typical_review_time=data.get("typicalReviewTime"),
            common_rejection_reasons=_tuple(data.get("commonRejectionReasons")),
            appeals_process=data.get("appealsProcess"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "guidelinesUrl": self.guidelines_url,
            "guidelinesSummary": self.guidelines_summary,
            "typicalReviewTime": self.typical_review_time,
            "hasAutomatedReview": self.has_automated_review,
            "hasHumanReview": self.has_human_review,
            "commonRejectionReasons": _list(self.common_rejection_reasons),
            "appealsProcess": self.appeals_process,
            "requiresApproval": self.requires_approval,
        })


@dataclass(frozen=True)
class Geographic:
    available_regions: tuple = ()
    restricted_regions: Optional[tuple] = None
    supported_languages: Optional[tuple] = None
    localized_stores: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Geographic":
        return cls(
            available_regions=_tuple(data.get("availableRegions")) or (),
            restricted_regions=_tuple(data.get("restrictedRegions")),
            supported_languages=_tuple(data.get("supportedLanguages")),
            localized_stores=data.get("localizedStores"),
        )

    def to_dict(self) -> dict:
        return _compact({
            "availableRegions": list(self.available_regions),
            "restrictedRegions": _list(self.restricted_regions),
            "supportedLanguages": _list(self.supported_languages),
            "localizedStores": self.localized_stores,
        })


@dataclass(frozen=True)
class Features:
    has_editorial_content: bool = False
    has_app_bundles: bool = False
    has_pre_registration: bool = False
    has_beta_testing: bool = False
    has_analytics_dashboard: bool = False
    has_ab_testing: bool = False
    has_user_reviews: bool = False
    has_ratings: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Features":
        return cls(
            has_editorial_content=bool(data.get("hasEditorialContent", False)),
            has_app_bundles=bool(data.get("hasAppBundles", False)),
            has_pre_registration=bool(data.get("hasPreRegistration", False)),
            has_beta_testing=bool(data.get("hasBetaTesting", False)),
            has_analytics_dashboard=bool(data.get("hasAnalyticsDashboard", False)),
            has_ab_testing=bool(data.get("hasABTesting", False)),
            has_user_reviews=bool(data.get("hasUserReviews", False)),
            has_ratings=bool(data.get("hasRatings", False)),
        )

    def to_dict(self) -> dict:
        return {
            "hasEditorialContent": self.has_editorial_content,
            "hasAppBundles": self.has_app_bundles,
            "hasPreRegistration": self.has_pre_registration,
            "hasBetaTesting": self.has_beta_testing,
            "hasAnalyticsDashboard": self.has_analytics_dashboard,
            "hasABTesting": self.has_ab_testing,
            "hasUserReviews": self.has_user_reviews,
            "hasRatings": self.has_ratings,
        }


@dataclass(frozen=True)
class Metadata:
    featured: bool = False
    verified: bool = False
    status: EntryStatus = EntryStatus.ACTIVE
    featured_order: Optional[int] = None
    last_updated: Optional[date] = None
    date_added: Optional[date] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Metadata":
        status = EntryStatus.parse(data.get("status", "active"))
        if status is None:
            raise ValueError(f"Unknown status: {data.get('status')!r}")
        return cls(
            featured=bool(data.get("featured", False)),
            verified=bool(data.get("verified", False)),
            status=status,
            featured_order=data.get("featuredOrder"),
            last_updated=_parse_date(data.get("lastUpdated")),
            date_added=_parse_date(data.get("dateAdded")),
        )

    def to_dict(self) -> dict:
        return _compact({
            "featured": self.featured,
            "featuredOrder": self.featured_order,
            "verified": self.verified,
            "lastUpdated": _format_date(self.last_updated),
            "dateAdded": _format_date(self.date_added),
            "status": self.status.value,
        })


@dataclass(frozen=True)
class Seo:
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: Optional[tuple] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Seo":
        return cls(
            meta_title=data.get("metaTitle"),
            meta_description=data.get("metaDescription"),
            keywords=_tuple(data.get("keywords")),
        )

    def to_dict(self) -> dict:
        return _compact({
            "metaTitle": self.meta_title,
            "metaDescription": self.meta_description,
            "keywords": _list(self.keywords),
        })


# ---- The core entity ----

@dataclass(frozen=True)
class DirectoryEntry:
    """One app-distribution marketplace. `slug` is its only external key."""
    id: str
    slug: str
    name: str
    category: Category
    platforms: tuple                      # non-empty tuple of Platform
    tagline: str = ""
    description: str = ""
    url: str = ""
    logo: str = ""
    company: Company = field(default_factory=lambda: Company(name=""))
    metrics: Metrics = field(default_factory=Metrics)
    fees: Fees = field(default_factory=Fees)
    technical: Technical = field(default_factory=Technical)
    monetization: Monetization = field(default_factory=Monetization)
    submission: Submission = field(default_factory=Submission)
    geographic: Geographic = field(default_factory=Geographic)
    features: Features = field(default_factory=Features)
    metadata: Metadata = field(default_factory=Metadata)
    screenshots: Optional[tuple] = None
    seo: Optional[Seo] = None
    ratings: Optional[dict] = None        # {RatingDimension: 1-5}
    related_stores: Optional[tuple] = None
    pros: Optional[tuple] = None
    cons: Optional[tuple] = None
    content: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "DirectoryEntry":
        """
        Build an entry from the dataset shape.

        Raises:
            ValueError: a required field is missing, or a value falls outside
                        its allowed set or range.
        """
        for required in ("slug", "name", "category", "platforms"):
            if not data.get(required):
                raise ValueError(f"Missing required field '{required}'")

        category = Category.parse(data["category"])
        if category is None:
            raise ValueError(f"Unknown category: {data['category']!r}")

        platforms = []
        for raw in _tuple(data["platforms"]):
            platform = Platform.parse(raw)
            if platform is None:
                raise ValueError(f"Unknown platform: {raw!r}")
            platforms.append(platform)

        seo = data.get("seo")
        return cls(
            id=str(data.get("id") or data["slug"]),
            slug=_text(data, "slug"),
            name=_text(data, "name"),
            category=category,
            platforms=tuple(platforms),
            tagline=_text(data, "tagline"),
            description=_text(data, "description"),
            url=_text(data, "url"),
            logo=_text(data, "logo"),
            company=Company.from_dict(data.get("company") or {}),
            metrics=Metrics.from_dict(data.get("metrics") or {}),
            fees=Fees.from_dict(data.get("fees") or {}),
            technical=Technical.from_dict(data.get("technical") or {}),
            monetization=Monetization.from_dict(data.get("monetization") or {}),
            submission=Submission.from_dict(data.get("submission") or {}),
            geographic=Geographic.from_dict(data.get("geographic") or {}),
            features=Features.from_dict(data.get("features") or {}),
            metadata=Metadata.from_dict(data.get("metadata") or {}),
            screenshots=_tuple(data.get("screenshots")),
            seo=Seo.from_dict(seo) if seo is not None else None,
            ratings=_parse_ratings(data.get("ratings")),
            related_stores=_tuple(data.get("relatedStores")),
            pros=_tuple(data.get("pros")),
            cons=_tuple(data.get("cons")),
            content=_text(data, "content", None),
        )

    def to_dict(self) -> dict:
        return _compact({
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "tagline": self.tagline,
            "description": self.description,
            "url": self.url,
            "logo": self.logo,
            "screenshots": _list(self.screenshots),
            "category": self.category.value,
            "platforms": [p.value for p in self.platforms],
            "company": self.company.to_dict(),
            "metrics": self.metrics.to_dict(),
            "fees": self.fees.to_dict(),
            "technical": self.technical.to_dict(),
            "monetization": self.monetization.to_dict(),
            "submission": self.submission.to_dict(),
            "geographic": self.geographic.to_dict(),
            "features": self.features.to_dict(),
            "metadata": self.metadata.to_dict(),
            "seo": self.seo.to_dict() if self.seo else None,
            "ratings": _ratings_to_dict(self.ratings),
            "relatedStores": _list(self.related_stores),
            "pros": _list(self.pros),
            "cons": _list(self.cons),
            "content": self.content,
        })


@dataclass(frozen=True)
class DirectoryEntrySummary:
    """The card shown in list views. Always derived from a DirectoryEntry, never stored."""
    id: str
    name: str
    slug: str
    tagline: str
    logo: str
    category: Category
    platforms: tuple
    app_count: Optional[int]
    commission_tiers: tuple
    featured: bool
    verified: bool
    ratings: Optional[dict]

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def to_dict(self) -> dict:
        """Nested card shape, as the listing templates expect it."""
        return _compact({
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "tagline": self.tagline,
            "logo": self.logo,
            "category": self.category.value,
            "platforms": [p.value for p in self.platforms],
            "metrics": _compact({"appCount": self.app_count}),
            "fees": {"commissionTiers": [t.to_dict() for t in self.commission_tiers]},
            "metadata": {"featured": self.featured, "verified": self.verified},
            "ratings": _ratings_to_dict(self.ratings),
        })
