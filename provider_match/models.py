"""Domain records for provider matching and pricing.

Providers, booking requests and matching options are plain dataclasses so the
engines can treat them as read-only input. Results (``ProviderMatch``,
``PricingResult``) are derived per call and never persisted.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional


class SkillLevel(IntEnum):
    """Ordered skill tiers. Comparisons rely on the numeric value."""

    BEGINNER = 1
    INTERMEDIATE = 2
    ADVANCED = 3
    EXPERT = 4


MAX_SKILL_LEVEL = max(SkillLevel)


class HomeSize(Enum):
    SMALL = "SMALL"  # < 1000 sq ft
    MEDIUM = "MEDIUM"  # 1000-2000 sq ft
    LARGE = "LARGE"  # 2000-3500 sq ft
    XLARGE = "XLARGE"  # > 3500 sq ft


class PricingTimeSlot(Enum):
    STANDARD = "STANDARD"
    PEAK = "PEAK"
    OFF_PEAK = "OFF_PEAK"


class BookingFrequency(Enum):
    ONE_TIME = "one-time"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


@dataclass(slots=True)
class Location:
    latitude: float
    longitude: float


@dataclass(slots=True)
class ServiceCapability:
    service_id: str
    skill_level: SkillLevel


@dataclass(slots=True)
class AvailabilitySlot:
    """A declared working window. Times are ``HH:MM`` wall-clock strings."""

    date: date
    start_time: str
    end_time: str


@dataclass(slots=True)
class Provider:
    id: str
    rating: float
    completed_jobs: int
    max_travel_distance: float  # miles
    location: Location
    capabilities: List[ServiceCapability] = field(default_factory=list)
    availability: List[AvailabilitySlot] = field(default_factory=list)
    name: str = ""

    def capability_for(self, service_id: str) -> Optional[ServiceCapability]:
        """Return the first capability declared for ``service_id``."""
        for capability in self.capabilities:
            if capability.service_id == service_id:
                return capability
        return None


@dataclass(slots=True)
class TimeWindow:
    start_time: str
    end_time: str


@dataclass(slots=True)
class BookingRequest:
    service_id: str
    date: date
    time_slot: TimeWindow
    location: Location
    preferred_providers: Optional[List[str]] = None
    excluded_providers: Optional[List[str]] = None


@dataclass(slots=True)
class MatchingOptions:
    """Per-query constraints. ``None`` means "use the engine default"."""

    min_rating: Optional[float] = None
    max_distance: Optional[float] = None
    prioritize_rating: bool = False
    prioritize_experience: bool = False
    min_completed_jobs: Optional[int] = None
    required_skill_level: Optional[SkillLevel] = None


@dataclass(slots=True)
class ScoreBreakdown:
    distance: float
    rating: float
    experience: float
    skill_level: float


@dataclass(slots=True)
class ProviderMatch:
    provider: Provider
    distance: float  # miles
    match_score: float
    scores: ScoreBreakdown


@dataclass(slots=True)
class ServiceAddon:
    id: str
    name: str
    price: float


@dataclass(slots=True)
class PricingConfig:
    base_pricing: Dict[HomeSize, float]
    time_slot_multipliers: Dict[PricingTimeSlot, float]


@dataclass(slots=True)
class PricingParams:
    home_size: HomeSize
    time_slot: PricingTimeSlot
    addons: List[ServiceAddon] = field(default_factory=list)
    frequency: BookingFrequency = BookingFrequency.ONE_TIME


@dataclass(slots=True)
class PricingResult:
    base_price: float
    addon_price: float
    time_slot_adjustment: float
    total_price: float
    breakdown: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping suitable for rendering a line-itemized receipt."""
        return {
            "base_price": self.base_price,
            "addon_price": self.addon_price,
            "time_slot_adjustment": self.time_slot_adjustment,
            "total_price": self.total_price,
            "breakdown": self.breakdown,
        }
