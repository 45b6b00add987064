import warnings

import numpy as np
import pandas as pd
from pyproj import CRS, Transformer

from healthaccess.config import DEFAULT_CRS
from healthaccess.exceptions import CRSMismatchError, DataQualityWarning


def require_planar(gdf, layer="layer"):
    """
    Make sure a GeoDataFrame is in a projected (metric) CRS.

    Raises:
        CRSMismatchError: If the CRS is missing or geographic.
    """
    if gdf.crs is None:
        raise CRSMismatchError(f"The {layer} layer has no CRS, so it can't be reprojected.")
    if gdf.crs.is_geographic:
        raise CRSMismatchError(
            f"The {layer} layer is in a geographic CRS ({gdf.crs.to_string()}). "
            "Distances would be in degrees. Run normalize_geometries() first."
        )


def require_same_crs(left, right, left_name="left", right_name="right"):
    if left.crs != right.crs:
        raise CRSMismatchError(
            f"The {left_name} and {right_name} layers must share a CRS "
            f"({left.crs} != {right.crs})."
        )


def normalize_geometries(gdf, target_crs, layer="layer"):
    """
    Drop unusable geometries and reproject a layer into the planar CRS.

    Null, empty and invalid geometries are reported with a DataQualityWarning
    and excluded; they never abort the batch.

    Args:
        gdf (geopandas.GeoDataFrame): Points, lines or polygons with a CRS set.
        target_crs (str): Projected CRS to reproject into (e.g. "EPSG:32643").
        layer (str): Layer name used in messages.

    Returns:
        geopandas.GeoDataFrame: A reprojected copy without the bad rows.

    Raises:
        CRSMismatchError: If the layer has no CRS or target_crs is geographic.
    """
    if gdf.crs is None:
        raise CRSMismatchError(f"The {layer} layer has no CRS, so it can't be reprojected.")
    if CRS.from_user_input(target_crs).is_geographic:
        raise CRSMismatchError(f"Target CRS {target_crs} is geographic; a projected CRS is required.")

    missing = gdf.geometry.isna() | gdf.geometry.is_empty
    invalid = ~missing & ~gdf.geometry.is_valid
    bad = missing | invalid

    if bad.any():
        warnings.warn(
            f"Dropping {int(missing.sum())} null/empty and {int(invalid.sum())} invalid "
            f"geometries from the {layer} layer.",
            DataQualityWarning,
        )

    clean = gdf.loc[~bad].copy()
    return clean.to_crs(target_crs)


def to_lonlat(x, y, source_crs):
    """
    Convert planar coordinates back to (longitude, latitude) in EPSG:4326.

    Pure function: no state is kept between calls, so it can be used on its
    own by mapping tools.

    Args:
        x, y (float or array-like): Easting / northing in source_crs.
        source_crs (str or pyproj.CRS): CRS of the input coordinates.

    Returns:
        tuple: (longitude, latitude), scalars or numpy arrays matching the input.
    """
    transformer = Transformer.from_crs(source_crs, DEFAULT_CRS, always_xy=True)
    return transformer.transform(x, y)


def from_lonlat(lon, lat, target_crs):
    """Inverse of to_lonlat."""
    transformer = Transformer.from_crs(DEFAULT_CRS, target_crs, always_xy=True)
    return transformer.transform(lon, lat)


def facility_coordinates(facilities):
    """
    Longitude/latitude table of facility points, for heatmaps and web maps.

    Args:
        facilities (geopandas.GeoDataFrame): Facility points in a planar CRS.

    Returns:
        pandas.DataFrame: Columns name, district, longitude, latitude.
    """
    if facilities.crs is None:
        raise CRSMismatchError("The facilities layer has no CRS.")

    if facilities.empty:
        return pd.DataFrame(columns=["name", "district", "longitude", "latitude"])

    lon, lat = to_lonlat(
        np.asarray(facilities.geometry.x), np.asarray(facilities.geometry.y), facilities.crs
    )
    return pd.DataFrame({
        "name": facilities["name"].values,
        "district": facilities["district"].values,
        "longitude": lon,
        "latitude": lat,
    }, index=facilities.index)
