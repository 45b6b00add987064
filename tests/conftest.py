import pytest
import geopandas as gpd
import pandas as pd
from shapely.geometry import LineString, Point, box

# Three 10 km x 10 km districts side by side, UTM 43N (meters)
X0, Y0 = 500000, 3000000


@pytest.fixture
def mock_proj_crs():
    return "EPSG:32643"


@pytest.fixture
def regions_gdf(mock_proj_crs):
    return gpd.GeoDataFrame(
        {'name': ['Alpha', 'Beta', 'Gamma']},
        geometry=[
            box(X0, Y0, X0 + 10000, Y0 + 10000),
            box(X0 + 10000, Y0, X0 + 20000, Y0 + 10000),
            box(X0 + 20000, Y0, X0 + 30000, Y0 + 10000),
        ],
        crs=mock_proj_crs
    )


@pytest.fixture
def facilities_gdf(mock_proj_crs):
    # Alpha: 2 facilities, Beta: none, Gamma: 5
    return gpd.GeoDataFrame(
        {
            'facility_id': ['f1', 'f2', 'f3', 'f4', 'f5', 'f6', 'f7'],
            'name': ['Alpha General', 'Alpha Clinic', 'Gamma District Hospital', 'Gamma Mission Hospital',
                     'Gamma Clinic', 'Gamma Pharmacy', 'Gamma Trauma Centre'],
            'amenity': ['hospital', 'clinic', 'hospital', 'hospital', 'clinic', 'pharmacy', 'hospital'],
            'district': ['Alpha', 'alpha ', 'Gamma', 'GAMMA', 'Gamma', None, 'Gamma'],
            'emergency': ['yes', None, 'Yes', 'no', None, 'unknown', ' yes '],
        },
        geometry=[
            Point(X0 + 2000, Y0 + 2000),
            Point(X0 + 7000, Y0 + 7000),
            Point(X0 + 21000, Y0 + 1000),
            Point(X0 + 23000, Y0 + 3000),
            Point(X0 + 25000, Y0 + 5000),
            Point(X0 + 27000, Y0 + 7000),
            Point(X0 + 29000, Y0 + 9000),
        ],
        crs=mock_proj_crs
    )


@pytest.fixture
def roads_gdf(mock_proj_crs):
    # NH runs east-west through the middle of all districts,
    # SH runs north-south through Alpha only
    return gpd.GeoDataFrame(
        {
            'road_id': ['n1', 's1'],
            'name': ['NH 48', 'SH 2'],
            'category': ['NH', 'SH'],
        },
        geometry=[
            LineString([(X0, Y0 + 5000), (X0 + 30000, Y0 + 5000)]),
            LineString([(X0 + 3000, Y0), (X0 + 3000, Y0 + 10000)]),
        ],
        crs=mock_proj_crs
    )


@pytest.fixture
def population_df():
    # labels deliberately differ in case/whitespace from the region names
    return pd.DataFrame({
        'district': ['Alpha', '  BETA ', 'gamma'],
        'population': [100000, 200000, 50000],
    })
