"""
Reference data — the fixed vocabularies every store is described with.

Categories, platforms, rating dimensions and pricing models are closed sets.
Values coming from query strings go through `parse()`, which returns None for
anything outside the set instead of raising, so callers can fail closed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class _ParseableEnum(str, Enum):

    @classmethod
    def parse(cls, raw) -> Optional["_ParseableEnum"]:
        """Return the member whose value equals `raw`, or None."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip())
        except ValueError:
            return None


class Category(_ParseableEnum):
    OFFICIAL = "official"
    MANUFACTURER = "manufacturer"
    THIRD_PARTY = "third-party"
    GAMING = "gaming"
    ENTERPRISE = "enterprise"
    OPEN_SOURCE = "open-source"
    REGIONAL = "regional"
    SPECIALTY = "specialty"
    AI_ASSISTANTS = "ai-assistants"
    AI_COPILOTS = "ai-copilots"
    AI_AGENTS = "ai-agents"
    AI_DEVELOPER = "ai-developer"


AI_CATEGORIES = (
    Category.AI_ASSISTANTS,
    Category.AI_COPILOTS,
    Category.AI_AGENTS,
    Category.AI_DEVELOPER,
)


class Platform(_ParseableEnum):
    IOS = "ios"
    ANDROID = "android"
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    WEB = "web"
    CROSS_PLATFORM = "cross-platform"


class RatingDimension(_ParseableEnum):
    COMMISSION = "commission"
    REVIEW_PROCESS = "reviewProcess"
    STABILITY = "stability"
    DEVELOPER_SUPPORT = "developerSupport"
    DISCOVERABILITY = "discoverability"
    COMPETITIVENESS = "competitiveness"
    ENTRY_BARRIERS = "entryBarriers"
    TECHNICAL_FREEDOM = "technicalFreedom"
    ANALYTICS = "analytics"


class PricingModel(_ParseableEnum):
    FREE = "free"
    PAID = "paid"
    FREEMIUM = "freemium"
    SUBSCRIPTION = "subscription"
    ONE_TIME = "one-time"


class EntryStatus(_ParseableEnum):
    ACTIVE = "active"
    DEPRECATED = "deprecated"
    BETA = "beta"


RATING_MIN = 1
RATING_MAX = 5


# ---- Display metadata ----

@dataclass(frozen=True)
class CategoryInfo:
    id: Category
    name: str
    slug: str
    description: str
    icon: str


@dataclass(frozen=True)
class PlatformInfo:
    id: Platform
    name: str
    icon: str


@dataclass(frozen=True)
class RatingDimensionInfo:
    id: RatingDimension
    name: str
    short_name: str
    description: str
    icon: str


CATEGORIES = [
    CategoryInfo(Category.OFFICIAL, "Official Stores", "official",
                 "Platform-native app stores from OS makers like Apple and Google", "shield-check"),
    CategoryInfo(Category.MANUFACTURER, "Manufacturer Stores", "manufacturer",
                 "Device manufacturer app marketplaces like Samsung and Huawei", "smartphone"),
    CategoryInfo(Category.THIRD_PARTY, "Third-Party Stores", "third-party",
                 "Independent app distribution platforms", "store"),
    CategoryInfo(Category.GAMING, "Gaming Stores", "gaming",
                 "Platforms focused on game distribution", "gamepad-2"),
    CategoryInfo(Category.ENTERPRISE, "Enterprise Stores", "enterprise",
                 "Business-focused app distribution solutions", "building-2"),
    CategoryInfo(Category.OPEN_SOURCE, "Open Source Stores", "open-source",
                 "Platforms for free and open-source software", "code"),
    CategoryInfo(Category.REGIONAL, "Regional Stores", "regional",
                 "Region-specific app marketplaces", "globe"),
    CategoryInfo(Category.SPECIALTY, "Specialty Stores", "specialty",
                 "Niche or vertical-specific app platforms", "sparkles"),
    CategoryInfo(Category.AI_ASSISTANTS, "AI Assistant Stores", "ai-assistants",
                 "Marketplaces for custom GPTs, AI bots, and conversational AI characters", "bot"),
    CategoryInfo(Category.AI_COPILOTS, "AI Copilot Stores", "ai-copilots",
                 "Plugin and extension marketplaces for productivity AI copilots", "sparkles"),
    CategoryInfo(Category.AI_AGENTS, "AI Agent Stores", "ai-agents",
                 "Marketplaces for autonomous AI agents that execute workflows", "workflow"),
    CategoryInfo(Category.AI_DEVELOPER, "AI Developer Stores", "ai-developer",
                 "Developer-focused platforms for AI tools, MCP servers, and model hosting", "code"),
]

PLATFORMS = [
    PlatformInfo(Platform.IOS, "iOS", "apple"),
    PlatformInfo(Platform.ANDROID, "Android", "smartphone"),
    PlatformInfo(Platform.WINDOWS, "Windows", "monitor"),
    PlatformInfo(Platform.MACOS, "macOS", "laptop"),
    PlatformInfo(Platform.LINUX, "Linux", "terminal"),
    PlatformInfo(Platform.WEB, "Web", "globe"),
    PlatformInfo(Platform.CROSS_PLATFORM, "Cross-Platform", "layers"),
]

RATING_DIMENSIONS = [
    RatingDimensionInfo(RatingDimension.COMMISSION, "Commission", "Commission",
                        "Revenue share and fee structure favorability", "percent"),
    RatingDimensionInfo(RatingDimension.REVIEW_PROCESS, "Review Process Clarity & Efficiency", "Review",
                        "Transparency and speed of the app review process", "clipboard-check"),
    RatingDimensionInfo(RatingDimension.STABILITY, "Stability & Reliability", "Stability",
                        "Technical and political stability of the platform", "shield"),
    RatingDimensionInfo(RatingDimension.DEVELOPER_SUPPORT, "Developer Support & Account Management", "Support",
                        "Quality of developer relations and support", "headphones"),
    RatingDimensionInfo(RatingDimension.DISCOVERABILITY, "Discoverability & Anti-Scam Protection", "Discovery",
                        "App visibility and protection against spam/scams", "search"),
    RatingDimensionInfo(RatingDimension.COMPETITIVENESS, "Competitiveness", "Compete",
                        "Market reach and audience size potential", "trending-up"),
    RatingDimensionInfo(RatingDimension.ENTRY_BARRIERS, "Entry Barriers & Costs", "Entry",
                        "Ease of getting started and ongoing costs", "door-open"),
    RatingDimensionInfo(RatingDimension.TECHNICAL_FREEDOM, "Technical Freedom", "Freedom",
                        "Flexibility in implementation and monetization", "code"),
    RatingDimensionInfo(RatingDimension.ANALYTICS, "Data & Analytics", "Analytics",
                        "Quality of insights and reporting tools", "bar-chart"),
]


def get_category_info(category) -> Optional[CategoryInfo]:
    parsed = Category.parse(category)
    return next((c for c in CATEGORIES if c.id == parsed), None)


def get_category_by_slug(slug: str) -> Optional[CategoryInfo]:
    return next((c for c in CATEGORIES if c.slug == slug), None)


def get_platform_info(platform) -> Optional[PlatformInfo]:
    parsed = Platform.parse(platform)
    return next((p for p in PLATFORMS if p.id == parsed), None)


def get_rating_dimension_info(dimension) -> Optional[RatingDimensionInfo]:
    parsed = RatingDimension.parse(dimension)
    return next((d for d in RATING_DIMENSIONS if d.id == parsed), None)
