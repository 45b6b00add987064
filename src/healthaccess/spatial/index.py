import numpy as np
from scipy.spatial import cKDTree

def build_nearest_neighbor_index(gdf):
    """
    Build a cKDTree from a GeoDataFrame of points.

    Args:
        gdf (geopandas.GeoDataFrame): GeoDataFrame containing point geometries.

    Returns:
        scipy.spatial.cKDTree: The KD-Tree index.
    """
    if gdf.empty:
        raise ValueError("Cannot build index for empty GeoDataFrame.")

    coords = np.column_stack([gdf.geometry.x, gdf.geometry.y])
    return cKDTree(coords)

def query_nearest(tree, xs, ys):
    """
    Query the nearest indexed point for each query coordinate.

    Args:
        tree (scipy.spatial.cKDTree): The KD-Tree index.
        xs, ys (array-like): Query coordinates in the index CRS.

    Returns:
        tuple: (distances, positions) as numpy arrays. Positions are row
        positions in the GeoDataFrame the tree was built from.
    """
    query_coords = np.column_stack([np.atleast_1d(xs), np.atleast_1d(ys)])
    if len(query_coords) == 0:
        return np.array([]), np.array([], dtype=int)

    distances, positions = tree.query(query_coords, k=1)
    return distances, positions
