from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, NamedTuple, Optional


class AccessTier(str, Enum):
    GOOD = "Good"
    AVERAGE = "Average"
    POOR = "Poor"


class NearestMatch(NamedTuple):
    feature_id: object
    distance: float


@dataclass(frozen=True)
class RegionMetrics:
    """
    Derived per-region indicators. ``None`` marks a value as unavailable
    (undefined denominator or missing population record); it is never a
    stand-in for zero.
    """
    region: str
    facility_count: int
    facility_count_by_type: Dict[str, int] = field(default_factory=dict)
    area_km2: Optional[float] = None
    density: Optional[float] = None
    population: Optional[int] = None
    population_per_facility: Optional[float] = None
    facilities_per_100k: Optional[float] = None
    emergency_coverage_pct: Optional[float] = None
    avg_distance_to_road: Dict[str, Optional[float]] = field(default_factory=dict)
    access_tier: Optional[AccessTier] = None
