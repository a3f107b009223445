from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any

from pydantic import ValidationError

from ..recommendations.models import NeighborhoodRecord, UserProfile

logger = logging.getLogger(__name__)

NA = "N/A"
_RULE = "=" * 50
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9-]+")


def _money(value: float | None) -> str:
    return f"₹{value:,.0f}" if value is not None else NA


def _value(value: Any) -> str:
    if value is None or value == "":
        return NA
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _bullets(items: list[str] | None, indent: str = "   ") -> str:
    if not items:
        return f"{indent}• {NA}"
    return "\n".join(f"{indent}• {item}" for item in items)


def parse_record(raw: dict[str, Any]) -> NeighborhoodRecord | None:
    """
    Validate a record leniently: top-level groups that fail validation are
    dropped and rendered as missing. Returns None if the core fields are bad.
    """
    try:
        return NeighborhoodRecord.model_validate(raw)
    except ValidationError as exc:
        bad_keys = {err["loc"][0] for err in exc.errors() if err["loc"]}
    trimmed = {k: v for k, v in raw.items() if k not in bad_keys}
    try:
        record = NeighborhoodRecord.model_validate(trimmed)
    except ValidationError:
        logger.warning("Skipping unreadable record in report: %.200r", raw)
        return None
    logger.info("Report dropped malformed fields %s from %s", sorted(bad_keys), record.name)
    return record


def _render_neighborhood(index: int, n: NeighborhoodRecord) -> str:
    cost = n.cost_breakdown
    life = n.lifestyle
    amen = n.amenities

    safety = f"{10 - life.crime_rate:.1f}/10" if life and life.crime_rate is not None else NA
    lines = [
        f"{index}. {n.name.upper()}",
        f"   Location: {n.city}, {_value(n.state)}",
        f"   Area: {_value(n.area)}",
        f"   Pincode: {_value(n.pincode)}",
        f"   Match Score: {_value(n.match_score)}%",
        "",
        "   STRENGTHS:",
        _bullets(n.strengths),
        "",
        "   CONSIDERATIONS:",
        _bullets(n.concerns),
        "",
        "   COST BREAKDOWN (Monthly):",
        f"   • 1 BHK Rent: {_money(cost.rent_1bhk if cost else None)}",
        f"   • 2 BHK Rent: {_money(cost.rent_2bhk if cost else None)}",
        f"   • 3 BHK Rent: {_money(cost.rent_3bhk if cost else None)}",
        f"   • Groceries: {_money(cost.grocery_cost_per_month if cost else None)}",
        f"   • Dining Out (Avg): {_money(cost.dining_out_average if cost else None)}",
        f"   • Utilities: {_money(cost.utilities_per_month if cost else None)}",
        "",
        "   LIFESTYLE SCORES:",
        f"   • Walkability: {_value(life.walk_score if life else None)}/100",
        f"   • Public Transit: {_value(life.transit_score if life else None)}/100",
        f"   • Safety: {safety}",
        f"   • Schools: {_value(life.school_rating if life else None)}/10",
        "",
        "   AMENITIES:",
        f"   • Restaurants: {_value(amen.restaurants if amen else None)}",
        f"   • Parks: {_value(amen.parks if amen else None)}",
        f"   • Gyms: {_value(amen.gyms if amen else None)}",
        f"   • Grocery Stores: {_value(amen.grocery_stores if amen else None)}",
        f"   • Entertainment: {_value(amen.entertainment if amen else None)}",
        "",
        "   AI INSIGHTS:",
        f"   {_value(n.ai_insights)}",
        "",
        "   RECOMMENDED ACTIONS:",
        _bullets(n.recommended_actions),
        "",
        "   NEARBY LANDMARKS:",
        _bullets(n.nearby_landmarks),
        "",
        "   LOCAL TIPS:",
        _bullets(n.local_tips),
        "",
        f"   Google Maps: {_value(n.google_maps_url)}",
    ]
    return "\n".join(lines)


def render_report(
    profile: UserProfile,
    neighborhoods: list[dict[str, Any]],
    generated_on: date | None = None,
) -> str:
    """Format a recommendation list as the downloadable plain-text report."""
    generated_on = generated_on or date.today()
    personal = profile.personal_profile
    location = profile.location_preferences

    records = [r for r in (parse_record(raw) for raw in neighborhoods) if r is not None]
    body = f"\n{_RULE}\n".join(
        _render_neighborhood(i, record) for i, record in enumerate(records, 1)
    )

    sections = [
        "SMARTHOOD AI - NEIGHBORHOOD ANALYSIS REPORT",
        "==========================================",
        "",
        f"Generated on: {generated_on.isoformat()}",
        f"Location: {location.city}, {location.state}",
        "",
        "PERSONAL PROFILE",
        "================",
        f"Age Range: {_value(personal.age_range)}",
        f"Household Size: {_value(personal.household_size)}",
        f"Annual Income: {_value(personal.income)}",
        f"Has Children: {'Yes' if personal.has_children else 'No'}",
        f"Has Pets: {'Yes' if personal.has_pets else 'No'}",
        "",
        "TOP NEIGHBORHOOD MATCHES",
        "========================",
        "",
        body or f"   {NA}",
        "",
        "ASSESSMENT SUMMARY",
        "==================",
        "This report was generated based on your lifestyle assessment. The neighborhoods "
        "listed above have been ranked according to their compatibility with your stated "
        "preferences and priorities.",
        "",
        "For the most up-to-date information, please visit the neighborhoods in person and "
        "verify current rental rates and amenities.",
        "",
        "Report generated by SmartHood AI - Intelligent Neighborhood Discovery Platform",
    ]
    return "\n".join(sections) + "\n"


def report_filename(profile: UserProfile, generated_on: date | None = None) -> str:
    generated_on = generated_on or date.today()
    city = _UNSAFE_FILENAME_CHARS.sub("_", profile.location_preferences.city.strip()) or "Report"
    return f"SmartHood_Report_{city}_{generated_on.isoformat()}.txt"
