import osmnx as ox
import geopandas as gpd
import pandas as pd

from healthaccess.constants import HEALTHCARE_TAGS, FACILITY_COLS


def download_facilities(bbox=None, custom_geometry=None, tags=None):
    """
    Download healthcare facilities from OSM and map them onto the facilities schema.

    Args:
        bbox (tuple, optional): Bounding box as (west, south, east, north).
        custom_geometry (str or shapely.geometry.BaseGeometry, optional): Path to a GeoJSON file or a Shapely geometry.
        tags (dict, optional): OSM tags to query. Defaults to HEALTHCARE_TAGS.

    Returns:
        geopandas.GeoDataFrame: facility_id, name, amenity, district, emergency,
        geometry (points, EPSG:4326). Polygon features are reduced to centroids.

    Raises:
        ValueError: If neither bbox nor custom_geometry is provided, or if both are provided.
    """
    if bbox is None and custom_geometry is None:
        raise ValueError("Either bbox or custom_geometry must be provided.")
    if bbox is not None and custom_geometry is not None:
        raise ValueError("Provide either bbox or custom_geometry, not both.")

    if tags is None:
        tags = HEALTHCARE_TAGS

    if custom_geometry is not None:
        if isinstance(custom_geometry, str):
            # Assume it's a file path (e.g. GeoJSON)
            gdf_boundary = gpd.read_file(custom_geometry)
            if gdf_boundary.crs is not None and gdf_boundary.crs != "EPSG:4326":
                gdf_boundary = gdf_boundary.to_crs("EPSG:4326")
            polygon = gdf_boundary.union_all()
        else:
            polygon = custom_geometry
        raw = ox.features.features_from_polygon(polygon, tags=tags)
    else:
        raw = ox.features.features_from_bbox(bbox=bbox, tags=tags)

    return osm_to_facilities(raw)


def osm_to_facilities(raw):
    """
    Convert an osmnx features GeoDataFrame to the facilities schema.

    The OSM index is (element, id); it becomes facility_id "node/123" etc.
    """
    if raw is None or raw.empty:
        return gpd.GeoDataFrame(columns=FACILITY_COLS, geometry="geometry", crs="EPSG:4326")

    def column(name):
        # object dtype keeps missing tags as None instead of NaN
        if name in raw.columns:
            col = raw[name].astype(object)
            values = col.where(col.notna(), None).tolist()
        else:
            values = [None] * len(raw)
        return pd.Series(values, dtype=object)

    if isinstance(raw.index, pd.MultiIndex):
        ids = [f"{element}/{osm_id}" for element, osm_id in raw.index]
    else:
        ids = [str(i) for i in raw.index]

    # representative_point stays inside the footprint polygon
    points = raw.geometry.representative_point()

    amenity = column("amenity")
    if "healthcare" in raw.columns:
        healthcare = column("healthcare")
        amenity = pd.Series(
            [a if a is not None else h for a, h in zip(amenity, healthcare)], dtype=object
        )

    return gpd.GeoDataFrame({
        "facility_id": pd.Series(ids, dtype=object),
        "name": column("name"),
        "amenity": amenity,
        "district": column("addr:district"),
        "emergency": column("emergency"),
    }, geometry=points.values, crs=raw.crs).reset_index(drop=True)
