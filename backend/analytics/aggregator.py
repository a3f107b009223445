from __future__ import annotations

from collections import Counter
from typing import Any


def _share(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    generations = [e for e in events if e["type"] == "generation"]
    total = len(generations)

    # Average response time
    times = [g["response_time_ms"] for g in generations if "response_time_ms" in g]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # AI vs fallback
    source_counter: Counter[str] = Counter(g.get("source", "unknown") for g in generations)
    fallback_total = source_counter.get("fallback", 0)
    reason_counter: Counter[str] = Counter(
        g["fallback_reason"] for g in generations if g.get("fallback_reason")
    )

    # Top cities
    city_counter: Counter[str] = Counter(g.get("city", "unknown") for g in generations)
    top_cities = [{"name": n, "count": c} for n, c in city_counter.most_common(10)]

    # Priorities users rank in their top 3
    priority_counter: Counter[str] = Counter()
    for g in generations:
        for p in g.get("top_priorities", []) or []:
            priority_counter[p] += 1

    families = sum(1 for g in generations if g.get("has_children"))

    return {
        "total_generations": total,
        "avg_response_time_ms": avg_time,
        "sources": {
            "ai": source_counter.get("ai", 0),
            "fallback": fallback_total,
            "fallback_rate": _share(fallback_total, total),
        },
        "fallback_reasons": dict(reason_counter),
        "top_cities": top_cities,
        "top_priorities": dict(priority_counter.most_common()),
        "families_share": _share(families, total),
    }
