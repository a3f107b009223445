from __future__ import annotations

from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .models import UserProfile
from .priorities import top_priorities

# Field-by-field example of one record; the model fills in real values.
_RECORD_SHAPE = """\
{{
  "id": "1",
  "name": "Real neighborhood name in {city}",
  "city": "{city}",
  "state": "{state}",
  "area": "Locality description",
  "pincode": "Real pincode for {city}",
  "googleMapsUrl": "https://www.google.com/maps/search/[neighborhood]+{city_query}+{state_query}",
  "matchScore": 85-95,
  "strengths": ["4 specific strengths"],
  "concerns": ["2 considerations"],
  "demographics": {{"medianAge": 30, "medianIncome": 1200000, "populationDensity": 15000, "diversityIndex": 0.8}},
  "lifestyle": {{"walkScore": 80, "transitScore": 85, "bikeScore": 70, "crimeRate": 2.0, "schoolRating": 8.0, "costOfLivingIndex": 120}},
  "amenities": {{"restaurants": 100, "parks": 5, "gyms": 15, "groceryStores": 12, "entertainment": 20, "hospitals": 8, "schools": 10, "malls": 3}},
  "transportation": {{"nearestMetroStation": "Station name", "metroDistance": "1 km", "busConnectivity": "Good", "autoRickshawAvailability": "High", "parkingAvailability": "Limited"}},
  "costBreakdown": {{"rent1BHK": 25000, "rent2BHK": 40000, "rent3BHK": 65000, "groceryCostPerMonth": 5000, "diningOutAverage": 500, "utilitiesPerMonth": 2500}},
  "explanation": "Why this matches user preferences",
  "aiInsights": "Lifestyle analysis",
  "recommendedActions": ["4 specific actions"],
  "nearbyLandmarks": ["3 real landmarks"],
  "bestTimeToVisit": "Best time to visit",
  "localTips": ["2 local tips"]
}}"""


def resolve_location(
    profile: UserProfile,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> tuple[str, str]:
    """Return the target ``(city, state)``, substituting defaults for blank values."""
    prefs = profile.location_preferences
    city = prefs.city.strip() or config.default_city
    state = prefs.state.strip() or config.default_state
    return city, state


def url_query(text: str) -> str:
    """Join whitespace-separated words with ``+`` for a maps search URL."""
    return "+".join(text.split())


def format_priorities(profile: UserProfile) -> str:
    return ", ".join(f"{name}: {rating}/10" for name, rating in top_priorities(profile))


def build_prompt(
    profile: UserProfile,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> str:
    city, state = resolve_location(profile, config)
    personal = profile.personal_profile
    children = "Has children" if personal.has_children else "No children"
    count = config.neighborhood_count

    shape = _RECORD_SHAPE.format(
        city=city,
        state=state,
        city_query=url_query(city),
        state_query=url_query(state),
    )

    lines = [
        f"Generate exactly {count} REAL neighborhoods in {city}, {state}, India as a JSON array.",
        "",
        f"USER: Age {personal.age_range}, Income {personal.income}, {children}",
        "",
        f"TOP PRIORITIES: {format_priorities(profile)}",
        "",
        f"Return a JSON array with this structure for each REAL neighborhood in {city}:",
        shape,
        "",
        f"Use ONLY real neighborhoods in {city}. Return the JSON array only, with no text before or after it.",
    ]
    return "\n".join(lines)
