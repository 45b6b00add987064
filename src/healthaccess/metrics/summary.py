"""
State-wide summaries and district rankings built from RegionMetrics.
"""

import numpy as np
import pandas as pd

from healthaccess.constants import UNKNOWN_AMENITY
from healthaccess.metrics.aggregate import population_lookup


def statewide_summary(metrics, population=None, aliases=None):
    """
    Totals across all regions.

    Without a population table, total_population sums the populations matched
    to regions, so census districts with no boundary polygon are left out.
    With one, every usable record of the table is summed whether or not a
    region matches it, as a state total read straight off the census would be.

    Args:
        metrics (list[RegionMetrics]): Per-region records.
        population (pandas.DataFrame, optional): district, population table.
        aliases (dict, optional): District alias table for the population lookup.

    Returns:
        dict: total_population, total_facilities, facilities_per_100k
        (None when the total population is zero).
    """
    if population is not None:
        total_population = sum(population_lookup(population, aliases).values())
    else:
        total_population = sum(m.population for m in metrics if m.population is not None)
    total_facilities = sum(m.facility_count for m in metrics)

    per_100k = None
    if total_population > 0:
        per_100k = total_facilities / total_population * 100000

    return {
        "total_population": total_population,
        "total_facilities": total_facilities,
        "facilities_per_100k": per_100k,
    }


def facility_type_counts(facilities):
    """
    Facility counts by amenity tag, most common first.

    Returns:
        pandas.DataFrame: facility_type, facility_count.
    """
    amenity = facilities["amenity"].where(facilities["amenity"].notna(), UNKNOWN_AMENITY)
    counts = amenity.value_counts()
    out = pd.DataFrame({"facility_type": counts.index.astype(str), "facility_count": counts.values})
    return out.sort_values(["facility_count", "facility_type"], ascending=[False, True], ignore_index=True)


def rank_regions(metrics, by="facility_count"):
    """
    Rank regions by a numeric RegionMetrics field, highest first.

    Tied values share a rank and the next rank is skipped (SQL RANK()).
    Regions where the field is unavailable get no rank and come last.

    Returns:
        pandas.DataFrame: region, <by>, rank.
    """
    values = pd.Series([getattr(m, by) for m in metrics], dtype=float)
    df = pd.DataFrame({"region": [m.region for m in metrics], by: values})
    df["rank"] = df[by].rank(method="min", ascending=False).astype("Int64")
    return df.sort_values(["rank", "region"], na_position="last", ignore_index=True)


def top_regions(metrics, n=5, by="facility_count"):
    """The n highest ranked regions."""
    ranked = rank_regions(metrics, by=by)
    return ranked.dropna(subset=[by]).head(n).reset_index(drop=True)


def bottom_regions(metrics, n=5, by="facility_count"):
    """The n lowest ranked regions, lowest first."""
    ranked = rank_regions(metrics, by=by).dropna(subset=[by])
    ranked = ranked.sort_values([by, "region"], ascending=[True, True])
    return ranked.head(n).reset_index(drop=True)


def underserved_regions(metrics, min_population=1_000_000, max_facilities=10):
    """
    Populous regions with few facilities: population above min_population and
    fewer than max_facilities facilities, fewest facilities first.
    """
    rows = [
        {"region": m.region, "population": m.population, "facility_count": m.facility_count}
        for m in metrics
        if m.population is not None and m.population > min_population and m.facility_count < max_facilities
    ]
    out = pd.DataFrame(rows, columns=["region", "population", "facility_count"])
    return out.sort_values(["facility_count", "region"], ignore_index=True)


def road_proximity_counts(facilities, categories):
    """
    Number of facilities with a road of each category inside the search radius.

    Expects the 'road_dist_<category>' columns added by nearest_road_distances.

    Returns:
        pandas.DataFrame: category, facility_count (most first).
    """
    rows = []
    for category in categories:
        col = f"road_dist_{category}"
        count = int(np.isfinite(facilities[col].astype(float)).sum()) if col in facilities.columns else 0
        rows.append({"category": category, "facility_count": count})
    out = pd.DataFrame(rows, columns=["category", "facility_count"])
    return out.sort_values(["facility_count", "category"], ascending=[False, True], ignore_index=True)
