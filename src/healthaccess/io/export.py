import pandas as pd


def metrics_to_frame(metrics, road_categories=None):
    """
    Flatten RegionMetrics records into a table for export.

    Unavailable values stay missing (NaN / None) rather than being filled in.

    Args:
        metrics (list[RegionMetrics]): Records, typically from classify().
        road_categories (iterable of str, optional): Road categories to emit
            'avg_dist_<category>_km' columns for. Defaults to every category
            seen in the records.

    Returns:
        pandas.DataFrame: One row per region, in input order.
    """
    if road_categories is None:
        road_categories = []
        for m in metrics:
            for category in m.avg_distance_to_road:
                if category not in road_categories:
                    road_categories.append(category)

    rows = []
    for m in metrics:
        row = {
            "region": m.region,
            "population": m.population,
            "facility_count": m.facility_count,
            "area_km2": m.area_km2,
            "density_per_km2": m.density,
            "population_per_facility": m.population_per_facility,
            "facilities_per_100k": m.facilities_per_100k,
            "emergency_coverage_pct": m.emergency_coverage_pct,
        }
        for category in road_categories:
            dist = m.avg_distance_to_road.get(category)
            row[f"avg_dist_{category}_km"] = dist / 1000.0 if dist is not None else None
        row["facility_types"] = ", ".join(
            f"{k}:{v}" for k, v in sorted(m.facility_count_by_type.items())
        )
        row["access_tier"] = m.access_tier.value if m.access_tier is not None else None
        rows.append(row)

    frame = pd.DataFrame(rows)
    if "population" in frame.columns:
        frame["population"] = frame["population"].astype("Int64")
    return frame


def export_metrics_csv(metrics, path, road_categories=None, float_precision=2):
    """
    Write region metrics to CSV. Unavailable values are written as empty cells.

    Returns:
        pandas.DataFrame: The table that was written.
    """
    frame = metrics_to_frame(metrics, road_categories=road_categories)
    frame.round(float_precision).to_csv(path, index=False)
    return frame
