# config.py
# Defaults for CRS, search radius, tier thresholds, district aliases

from dataclasses import dataclass, field

from .constants import DISTRICT_ALIASES

DEFAULT_CRS = "EPSG:4326"
PROJECTED_CRS = "EPSG:32643"  # WGS 84 / UTM zone 43N (meters), covers Rajasthan

DEFAULT_SEARCH_RADIUS_M = 5000
DEFAULT_ROAD_CATEGORIES = ("NH", "SH")

GOOD_FACTOR = 0.8
POOR_FACTOR = 1.2


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Settings shared by every pipeline stage.

    Swap ``target_crs`` and ``district_aliases`` to run the same analysis for
    another state without touching the code.
    """
    target_crs: str = PROJECTED_CRS
    road_categories: tuple = DEFAULT_ROAD_CATEGORIES
    search_radius_m: float = DEFAULT_SEARCH_RADIUS_M
    good_factor: float = GOOD_FACTOR
    poor_factor: float = POOR_FACTOR
    district_aliases: dict = field(default_factory=lambda: dict(DISTRICT_ALIASES))

    def __post_init__(self):
        if self.search_radius_m <= 0:
            raise ValueError("search_radius_m must be positive.")
        if not 0 < self.good_factor <= self.poor_factor:
            raise ValueError("Tier factors must satisfy 0 < good_factor <= poor_factor.")
