from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Rating = Annotated[int, Field(ge=1, le=10)]

PRIORITY_DIMENSIONS: tuple[str, ...] = (
    "safety",
    "schools",
    "nightlife",
    "outdoor_access",
    "public_transit",
    "walkability",
    "cost_of_living",
    "diversity",
)


class _CamelModel(BaseModel):
    """Accepts the client's camelCase keys and snake_case field names alike."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        coerce_numbers_to_str=True,
    )


# ── Assessment input ─────────────────────────────────────────────────────


class PersonalProfile(_CamelModel):
    age_range: str = ""
    household_size: str = ""
    income: str = ""
    has_children: bool = False
    has_pets: bool = False
    children_ages: list[str] = Field(default_factory=list)
    children_needs: list[str] = Field(default_factory=list)


class LocationPreferences(_CamelModel):
    city: str = ""
    state: str = ""
    preferred_areas: list[str] = Field(default_factory=list)
    custom_areas: list[str] = Field(default_factory=list)


class LifestyleFactors(_CamelModel):
    work_location: str = ""
    commute_preference: str = ""
    activity_level: list[Rating] = Field(default_factory=lambda: [5])
    social_preference: list[Rating] = Field(default_factory=lambda: [5])
    noise_preference: list[Rating] = Field(default_factory=lambda: [5])


class NeighborhoodPriorities(_CamelModel):
    """Each dimension is a single-element slider value; an empty list means unrated."""

    safety: list[Rating] = Field(default_factory=list)
    schools: list[Rating] = Field(default_factory=list)
    nightlife: list[Rating] = Field(default_factory=list)
    outdoor_access: list[Rating] = Field(default_factory=list)
    public_transit: list[Rating] = Field(default_factory=list)
    walkability: list[Rating] = Field(default_factory=list)
    cost_of_living: list[Rating] = Field(default_factory=list)
    diversity: list[Rating] = Field(default_factory=list)


class UserProfile(_CamelModel):
    personal_profile: PersonalProfile = Field(default_factory=PersonalProfile)
    location_preferences: LocationPreferences = Field(default_factory=LocationPreferences)
    lifestyle_factors: LifestyleFactors = Field(default_factory=LifestyleFactors)
    neighborhood_priorities: NeighborhoodPriorities = Field(default_factory=NeighborhoodPriorities)
    essential_amenities: list[str] = Field(default_factory=list)
    custom_amenities: list[str] = Field(default_factory=list)
    deal_breakers: list[str] = Field(default_factory=list)
    custom_deal_breakers: list[str] = Field(default_factory=list)


# ── Recommendation output ────────────────────────────────────────────────


class Demographics(_CamelModel):
    median_age: float | None = None
    median_income: float | None = None
    population_density: float | None = None
    diversity_index: float | None = None


class Lifestyle(_CamelModel):
    walk_score: float | None = None
    transit_score: float | None = None
    bike_score: float | None = None
    crime_rate: float | None = None
    school_rating: float | None = None
    cost_of_living_index: float | None = None


class Amenities(_CamelModel):
    restaurants: int | None = None
    parks: int | None = None
    gyms: int | None = None
    grocery_stores: int | None = None
    entertainment: int | None = None
    hospitals: int | None = None
    schools: int | None = None
    malls: int | None = None


class Transportation(_CamelModel):
    nearest_metro_station: str | None = None
    metro_distance: str | None = None
    bus_connectivity: str | None = None
    auto_rickshaw_availability: str | None = None
    parking_availability: str | None = None


class CostBreakdown(_CamelModel):
    rent_1bhk: float | None = Field(default=None, alias="rent1BHK")
    rent_2bhk: float | None = Field(default=None, alias="rent2BHK")
    rent_3bhk: float | None = Field(default=None, alias="rent3BHK")
    grocery_cost_per_month: float | None = None
    dining_out_average: float | None = None
    utilities_per_month: float | None = None


class NeighborhoodRecord(_CamelModel):
    """
    A recommended neighborhood.

    Only ``name``, ``city`` and ``match_score`` are guaranteed; model output may
    omit any other group, so consumers must treat them as optional.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    match_score: float
    id: str | None = None
    state: str | None = None
    area: str | None = None
    pincode: str | None = None
    google_maps_url: str | None = None
    strengths: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    demographics: Demographics | None = None
    lifestyle: Lifestyle | None = None
    amenities: Amenities | None = None
    transportation: Transportation | None = None
    cost_breakdown: CostBreakdown | None = None
    explanation: str | None = None
    ai_insights: str | None = None
    recommended_actions: list[str] = Field(default_factory=list)
    nearby_landmarks: list[str] | None = None
    best_time_to_visit: str | None = None
    local_tips: list[str] | None = None


class ReportRequest(_CamelModel):
    profile: UserProfile = Field(default_factory=UserProfile)
    neighborhoods: list[dict[str, Any]] = Field(..., min_length=1)
