"""
Report maps for healthcare accessibility results.
"""

from .choropleth import plot_choropleth, plot_access_tiers, facility_map

__all__ = [
    'plot_choropleth',
    'plot_access_tiers',
    'facility_map',
]
