import warnings

import numpy as np
import pandas as pd
import geopandas as gpd
import shapely

from healthaccess.exceptions import DataQualityWarning
from healthaccess.spatial.index import build_nearest_neighbor_index, query_nearest
from healthaccess.spatial.normalize import require_planar, require_same_crs
from healthaccess.types import NearestMatch


def assign_region(point, regions):
    """
    Find the single region polygon that contains a point.

    Args:
        point (shapely.geometry.Point): Facility location (planar CRS).
        regions (geopandas.GeoDataFrame): Region polygons with a 'name' column.

    Returns:
        str or None: Region name, or None when zero or several regions contain it.
    """
    names = regions.loc[regions.geometry.contains(point), "name"]
    if len(names) == 1:
        return names.iloc[0]

    if len(names) == 0:
        warnings.warn(f"Point {point.wkt} is not inside any region.", DataQualityWarning)
    else:
        warnings.warn(
            f"Point {point.wkt} is inside {len(names)} overlapping regions: {list(names)}.",
            DataQualityWarning,
        )
    return None


def assign_regions(facilities, regions):
    """
    Vectorised assign_region for a whole facilities layer.

    Args:
        facilities (geopandas.GeoDataFrame): Facility points.
        regions (geopandas.GeoDataFrame): Region polygons with a 'name' column, same CRS.

    Returns:
        geopandas.GeoDataFrame: Copy of facilities with a 'region' column
        (None where the point matched zero or several regions).
    """
    require_same_crs(facilities, regions, "facilities", "regions")

    out = facilities.copy()
    if out.empty:
        out["region"] = pd.Series(dtype=object)
        return out

    left = gpd.GeoDataFrame(
        {"_pos": np.arange(len(facilities))},
        geometry=facilities.geometry.values,
        crs=facilities.crs,
    )
    right = regions[["name", "geometry"]].rename(columns={"name": "_region"})
    joined = gpd.sjoin(left, right, how="left", predicate="within")

    grouped = joined.groupby("_pos")["_region"]
    counts = grouped.count().reindex(left["_pos"], fill_value=0).to_numpy()
    first = grouped.first().reindex(left["_pos"]).to_numpy()

    unmatched = int((counts == 0).sum())
    ambiguous = int((counts > 1).sum())
    if unmatched:
        warnings.warn(f"{unmatched} facilities are not inside any region.", DataQualityWarning)
    if ambiguous:
        warnings.warn(f"{ambiguous} facilities fall inside overlapping regions.", DataQualityWarning)

    out["region"] = [name if count == 1 else None for name, count in zip(first, counts)]
    return out


def _nearest_within(geoms, candidates, max_distance):
    """
    For each geometry, the row position of the closest candidate within
    max_distance and its distance. Ties go to the earlier candidate row.

    Returns:
        tuple: (positions, distances); -1 / NaN where nothing is in range.
    """
    geoms = np.asarray(geoms, dtype=object)
    positions = np.full(len(geoms), -1, dtype=int)
    distances = np.full(len(geoms), np.nan)
    if len(geoms) == 0 or candidates.empty:
        return positions, distances

    geom_idx, cand_idx = candidates.sindex.query(geoms, predicate="dwithin", distance=max_distance)
    if len(geom_idx) == 0:
        return positions, distances

    pair_dist = shapely.distance(geoms[geom_idx], np.asarray(candidates.geometry.values, dtype=object)[cand_idx])
    order = np.lexsort((cand_idx, pair_dist, geom_idx))
    geom_idx, cand_idx, pair_dist = geom_idx[order], cand_idx[order], pair_dist[order]

    first = np.unique(geom_idx, return_index=True)[1]
    positions[geom_idx[first]] = cand_idx[first]
    distances[geom_idx[first]] = pair_dist[first]
    return positions, distances


def nearest_road(point, roads, category, max_distance):
    """
    Closest road of one category within a search radius.

    Args:
        point (shapely.geometry.Point): Query location (planar CRS).
        roads (geopandas.GeoDataFrame): Roads with 'road_id' and 'category' columns.
        category (str): Road category to search (e.g. 'NH').
        max_distance (float): Search radius in CRS units (meters).

    Returns:
        NearestMatch or None: (road_id, distance), or None when no road of that
        category is in range. Roads of other categories are never returned.
    """
    require_planar(roads, "roads")
    candidates = roads.loc[roads["category"] == category]
    positions, distances = _nearest_within([point], candidates, max_distance)

    if positions[0] < 0:
        return None
    return NearestMatch(candidates["road_id"].iloc[positions[0]], float(distances[0]))


def nearest_road_distances(facilities, roads, categories, max_distance):
    """
    Annotate facilities with their nearest road of each category.

    Adds 'road_id_<category>' and 'road_dist_<category>' columns; the distance
    is NaN (and the id None) when no road of that category is within range.

    Args:
        facilities (geopandas.GeoDataFrame): Facility points.
        roads (geopandas.GeoDataFrame or None): Road network, same CRS.
        categories (iterable of str): Road categories to search.
        max_distance (float): Search radius in meters.

    Returns:
        geopandas.GeoDataFrame: Annotated copy of facilities.
    """
    out = facilities.copy()
    if roads is not None and not roads.empty:
        require_planar(roads, "roads")
        require_same_crs(facilities, roads, "facilities", "roads")

    geoms = facilities.geometry.values
    for category in categories:
        if roads is None or roads.empty:
            out[f"road_id_{category}"] = None
            out[f"road_dist_{category}"] = np.nan
            continue

        candidates = roads.loc[roads["category"] == category]
        positions, distances = _nearest_within(geoms, candidates, max_distance)
        ids = candidates["road_id"].to_numpy()
        out[f"road_id_{category}"] = [ids[p] if p >= 0 else None for p in positions]
        out[f"road_dist_{category}"] = distances

    return out


def nearest_facility(point, facilities):
    """
    Unrestricted nearest facility to a location.

    Args:
        point (shapely.geometry.Point): Query location, e.g. a region centroid.
        facilities (geopandas.GeoDataFrame): Facility points with 'facility_id'.

    Returns:
        NearestMatch or None: (facility_id, distance in meters), None when there
        are no facilities.
    """
    require_planar(facilities, "facilities")
    if facilities.empty:
        warnings.warn("No facilities provided; nearest facility is undefined.", DataQualityWarning)
        return None

    tree = build_nearest_neighbor_index(facilities)
    distances, positions = query_nearest(tree, point.x, point.y)
    return NearestMatch(facilities["facility_id"].iloc[positions[0]], float(distances[0]))


def nearest_facility_to_centroids(regions, facilities):
    """
    Closest facility to each region's centroid.

    Args:
        regions (geopandas.GeoDataFrame): Region polygons with 'name'.
        facilities (geopandas.GeoDataFrame): Facility points, same CRS.

    Returns:
        pandas.DataFrame: region, facility_id, facility_name, distance_km.
    """
    require_planar(regions, "regions")
    require_same_crs(regions, facilities, "regions", "facilities")

    if facilities.empty:
        warnings.warn("No facilities provided; nearest facility is undefined.", DataQualityWarning)
        return pd.DataFrame({
            "region": regions["name"].values,
            "facility_id": None,
            "facility_name": None,
            "distance_km": np.nan,
        })

    centroids = regions.geometry.centroid
    tree = build_nearest_neighbor_index(facilities)
    distances, positions = query_nearest(tree, centroids.x.values, centroids.y.values)

    return pd.DataFrame({
        "region": regions["name"].values,
        "facility_id": facilities["facility_id"].values[positions],
        "facility_name": facilities["name"].values[positions],
        "distance_km": distances / 1000.0,
    })
