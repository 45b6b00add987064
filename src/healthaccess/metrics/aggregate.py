import math
import warnings

import numpy as np
import pandas as pd

from healthaccess.cleaning import canonical_district, merge_duplicate_regions
from healthaccess.constants import EMERGENCY_YES, UNKNOWN_AMENITY
from healthaccess.exceptions import DataQualityWarning, DataSchemaError
from healthaccess.spatial.normalize import require_planar
from healthaccess.types import RegionMetrics


def is_emergency(value):
    """True only for an affirmative 'yes'; no, unknown and missing are all False."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return False
    return str(value).strip().casefold() == EMERGENCY_YES


def _defined(value):
    return value is not None and not (isinstance(value, float) and math.isnan(value))


def compute_region_metrics(region_name, area_km2, facilities, population, road_categories=()):
    """
    Per-region indicators for one region.

    Pure function of the region, its assigned facilities and its population.

    Args:
        region_name (str): Region name.
        area_km2 (float or None): Planar area of the region in square kilometers.
        facilities (pandas.DataFrame): Facilities assigned to this region. Uses
            'amenity', 'emergency' and optional 'road_dist_<category>' columns.
        population (int or None): Population count, None if there is no record.
            Zero or negative counts are treated as missing.
        road_categories (iterable of str): Categories to average road distances for.

    Returns:
        RegionMetrics: Metrics with None for every unavailable value.
    """
    facility_count = len(facilities)

    if facility_count:
        amenity = facilities["amenity"].where(facilities["amenity"].notna(), UNKNOWN_AMENITY)
        by_type = {str(k): int(v) for k, v in amenity.value_counts(sort=False).items()}
    else:
        by_type = {}

    density = None
    if _defined(area_km2) and area_km2 > 0:
        density = facility_count / area_km2

    # a zero or negative head count is not a usable denominator
    if not _defined(population) or population <= 0:
        population = None

    population_per_facility = None
    if population is not None and facility_count > 0:
        population_per_facility = population / facility_count

    facilities_per_100k = None
    if population is not None:
        facilities_per_100k = facility_count / population * 100000

    emergency_coverage_pct = None
    if facility_count > 0:
        emergency_yes = sum(is_emergency(v) for v in facilities["emergency"])
        emergency_coverage_pct = 100.0 * emergency_yes / facility_count

    avg_distance_to_road = {}
    for category in road_categories:
        col = f"road_dist_{category}"
        if col in facilities.columns:
            found = facilities[col].dropna()
            avg_distance_to_road[category] = float(found.mean()) if len(found) else None
        else:
            avg_distance_to_road[category] = None

    return RegionMetrics(
        region=region_name,
        facility_count=facility_count,
        facility_count_by_type=by_type,
        area_km2=area_km2 if _defined(area_km2) else None,
        density=density,
        population=population,
        population_per_facility=population_per_facility,
        facilities_per_100k=facilities_per_100k,
        emergency_coverage_pct=emergency_coverage_pct,
        avg_distance_to_road=avg_distance_to_road,
    )


def population_lookup(population, aliases=None):
    """
    Map canonical district key -> population count.

    Args:
        population (pandas.DataFrame or None): 'district' and 'population' columns.
        aliases (dict, optional): District alias table.

    Returns:
        dict: Canonical district key -> population.
    """
    if population is None or population.empty:
        return {}

    for col in ("district", "population"):
        if col not in population.columns:
            raise DataSchemaError(f"Population table must have a '{col}' column.")

    lookup = {}
    for district, count in zip(population["district"], population["population"]):
        key = canonical_district(district, aliases)
        if key is None or not _defined(count):
            warnings.warn(f"Skipping population record with no district or count: {district!r}.", DataQualityWarning)
            continue
        if count <= 0:
            warnings.warn(f"Skipping non-positive population {count!r} for district {district!r}.", DataQualityWarning)
            continue
        if key in lookup:
            warnings.warn(f"Duplicate population record for district {district!r}; keeping the first.", DataQualityWarning)
            continue
        lookup[key] = int(count)
    return lookup


def aggregate_regions(regions, facilities, population, config):
    """
    Compute RegionMetrics for every region.

    Args:
        regions (geopandas.GeoDataFrame): Region polygons (planar CRS) with 'name'.
        facilities (geopandas.GeoDataFrame): Facilities with a 'region' column
            from assign_regions and optional road distance columns.
        population (pandas.DataFrame or None): Population table.
        config (AnalysisConfig): Pipeline settings.

    Returns:
        list[RegionMetrics]: One record per region, in region order. Rows
        sharing a district name are merged first (see merge_duplicate_regions).
    """
    require_planar(regions, "regions")
    if "region" not in facilities.columns:
        raise DataSchemaError("Facilities need a 'region' column. Run assign_regions() first.")

    regions = merge_duplicate_regions(regions, config.district_aliases)
    lookup = population_lookup(population, config.district_aliases)
    areas_km2 = np.asarray(regions.geometry.area) / 1_000_000.0
    grouped = {name: group for name, group in facilities.groupby("region", sort=False)}
    empty = facilities.iloc[0:0]

    results = []
    for name, area in zip(regions["name"], areas_km2):
        key = canonical_district(name, config.district_aliases)
        pop = lookup.get(key)
        if pop is None:
            warnings.warn(f"No population record matches region {name!r}.", DataQualityWarning)

        results.append(compute_region_metrics(
            region_name=name,
            area_km2=float(area) if pd.notna(area) else None,
            facilities=grouped.get(name, empty),
            population=pop,
            road_categories=config.road_categories,
        ))
    return results
