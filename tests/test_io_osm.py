import pytest
from unittest.mock import patch
import pandas as pd
import geopandas as gpd
from shapely.geometry import Point, box
from healthaccess.io.osm import download_facilities, osm_to_facilities

@pytest.fixture
def mock_osm_features():
    index = pd.MultiIndex.from_tuples([('node', 101), ('way', 202), ('node', 303)], names=['element', 'id'])
    return gpd.GeoDataFrame(
        {
            'name': ['SMS Hospital', 'Mahatma Gandhi Hospital', None],
            'amenity': ['hospital', None, 'pharmacy'],
            'healthcare': ['hospital', 'hospital', None],
            'addr:district': ['Jaipur', 'Jaipur', None],
            'emergency': ['yes', None, 'no'],
        },
        geometry=[Point(75.81, 26.90), box(75.78, 26.85, 75.79, 26.86), Point(75.80, 26.92)],
        index=index,
        crs="EPSG:4326"
    )

@patch('healthaccess.io.osm.ox.features.features_from_bbox')
def test_download_facilities_bbox(mock_features, mock_osm_features):
    mock_features.return_value = mock_osm_features
    bbox = (75.7, 26.8, 75.9, 27.0)

    gdf = download_facilities(bbox=bbox)

    mock_features.assert_called_once()
    assert mock_features.call_args.kwargs['bbox'] == bbox
    assert list(gdf.columns) == ['facility_id', 'name', 'amenity', 'district', 'emergency', 'geometry']
    assert list(gdf['facility_id']) == ['node/101', 'way/202', 'node/303']
    assert gdf.crs == "EPSG:4326"

@patch('healthaccess.io.osm.ox.features.features_from_polygon')
def test_download_facilities_polygon(mock_features, mock_osm_features):
    mock_features.return_value = mock_osm_features
    area = box(75.7, 26.8, 75.9, 27.0)

    gdf = download_facilities(custom_geometry=area, tags={'amenity': 'hospital'})

    mock_features.assert_called_once_with(area, tags={'amenity': 'hospital'})
    assert len(gdf) == 3

def test_osm_to_facilities_mapping(mock_osm_features):
    gdf = osm_to_facilities(mock_osm_features)

    # amenity falls back to the healthcare tag
    assert list(gdf['amenity']) == ['hospital', 'hospital', 'pharmacy']
    assert gdf['district'].iloc[0] == 'Jaipur'
    assert gdf['district'].iloc[2] is None
    assert gdf['emergency'].iloc[1] is None
    # building footprints become points inside the footprint
    assert all(gdf.geometry.geom_type == 'Point')
    assert box(75.78, 26.85, 75.79, 26.86).contains(gdf.geometry.iloc[1])

def test_osm_to_facilities_empty():
    gdf = osm_to_facilities(gpd.GeoDataFrame(geometry=[], crs="EPSG:4326"))
    assert gdf.empty
    assert 'facility_id' in gdf.columns

def test_download_facilities_requires_area():
    with pytest.raises(ValueError):
        download_facilities()
    with pytest.raises(ValueError):
        download_facilities(bbox=(0, 0, 1, 1), custom_geometry=box(0, 0, 1, 1))

def test_osm_to_facilities_missing_tags_stay_none(mock_osm_features):
    raw = mock_osm_features.drop(columns=['addr:district', 'healthcare'])
    raw['emergency'] = None

    gdf = osm_to_facilities(raw)

    assert gdf['district'].dtype == object
    assert all(d is None for d in gdf['district'])
    assert all(e is None for e in gdf['emergency'])
    assert gdf['amenity'].iloc[1] is None
