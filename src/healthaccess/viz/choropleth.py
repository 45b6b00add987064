"""
Choropleth mapping functions for district-level accessibility results.
"""

import numpy as np
import pandas as pd
import geopandas as gpd
import matplotlib.pyplot as plt
from matplotlib.patches import Patch

from healthaccess.io.export import metrics_to_frame
from healthaccess.spatial.normalize import facility_coordinates
from healthaccess.types import AccessTier


TIER_COLORS = {
    AccessTier.GOOD.value: "#1a9850",
    AccessTier.AVERAGE.value: "#fee08b",
    AccessTier.POOR.value: "#d73027",
}
UNCLASSIFIED_COLOR = "lightgrey"


def _regions_with_metrics(regions, metrics):
    table = metrics_to_frame(metrics)
    return regions.merge(table, left_on="name", right_on="region", how="left")


def plot_choropleth(regions, metrics, column, title, log1p=False):
    """
    Create a choropleth map of one metrics column per region.

    Parameters

    regions : GeoDataFrame
        Region polygons with a 'name' column
    metrics : list of RegionMetrics
        Metrics to plot
    column : str
        Column of metrics_to_frame() to visualize (e.g. 'density_per_km2')
    title : str
        Map title
    log1p : bool, optional
        If True, apply log(1+x) transformation to the data

    Returns

    tuple
        (fig, ax) matplotlib figure and axes objects
    """
    d = _regions_with_metrics(regions, metrics)
    # unavailable values stay NaN and are drawn as "No data"
    d[column] = pd.to_numeric(d[column], errors="coerce")
    if log1p:
        d[column] = np.log1p(d[column])

    fig, ax = plt.subplots(figsize=(9, 9))
    d.plot(
        ax=ax,
        column=column,
        legend=True,
        linewidth=0.35,
        edgecolor="white",
        cmap="viridis",
        missing_kwds={"color": "lightgrey", "label": "No data"},
    )
    ax.set_axis_off()
    ax.set_title(title)
    return fig, ax


def plot_access_tiers(regions, metrics, title="Healthcare access by district"):
    """
    Map each region coloured by its access tier.

    Regions without a tier (not classified) are grey.

    Returns

    tuple
        (fig, ax) matplotlib figure and axes objects
    """
    d = _regions_with_metrics(regions, metrics)
    colors = d["access_tier"].map(TIER_COLORS)
    unclassified = colors.isna()
    colors = colors.fillna(UNCLASSIFIED_COLOR)

    fig, ax = plt.subplots(figsize=(9, 9))
    d.plot(ax=ax, color=colors.tolist(), linewidth=0.35, edgecolor="white")

    handles = [Patch(color=c, label=tier) for tier, c in TIER_COLORS.items()]
    if unclassified.any():
        handles.append(Patch(color=UNCLASSIFIED_COLOR, label="Unclassified"))
    ax.legend(handles=handles, title="Access tier", loc="lower left")
    ax.set_axis_off()
    ax.set_title(title)
    return fig, ax


def facility_map(facilities, regions=None, zoom_start=7):
    """
    Create an interactive Folium map of facility locations.

    Parameters

    facilities : GeoDataFrame
        Facility points in a planar CRS
    regions : GeoDataFrame, optional
        Region polygons to outline
    zoom_start : int, optional
        Initial zoom level

    Returns

    folium.Map
        Interactive map object (use .save('filename.html') to export)
    """
    try:
        import folium
    except ImportError:
        raise ImportError("folium is required. Install with: pip install folium")

    coords = facility_coordinates(facilities)
    if coords.empty:
        raise ValueError("No facilities to map.")

    center = [float(coords["latitude"].mean()), float(coords["longitude"].mean())]
    m = folium.Map(location=center, zoom_start=zoom_start, tiles="CartoDB positron")

    if regions is not None:
        folium.GeoJson(
            data=gpd.GeoDataFrame(regions[["name"]], geometry=regions.geometry.values, crs=regions.crs)
            .to_crs(epsg=4326).to_json(),
            name="Districts",
            style_function=lambda x: {"fillOpacity": 0, "color": "black", "weight": 1},
            tooltip=folium.GeoJsonTooltip(fields=["name"], aliases=["District"]),
        ).add_to(m)

    layer = folium.FeatureGroup(name="Facilities")
    for row in coords.itertuples(index=False):
        folium.CircleMarker(
            location=[row.latitude, row.longitude],
            radius=3,
            fill=True,
            fill_opacity=0.7,
            tooltip=row.name if isinstance(row.name, str) else None,
        ).add_to(layer)
    layer.add_to(m)

    folium.LayerControl().add_to(m)
    return m
