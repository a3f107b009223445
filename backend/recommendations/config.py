from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class RecommendationConfig:
    default_city: str = os.getenv("DEFAULT_CITY", "Mumbai")
    default_state: str = os.getenv("DEFAULT_STATE", "Maharashtra")
    neighborhood_count: int = 3
    catalog_path: Path = Path(__file__).resolve().parent.parent / "data" / "neighborhoods.json"


DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()
