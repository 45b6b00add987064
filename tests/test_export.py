import pandas as pd
from healthaccess.io.export import metrics_to_frame, export_metrics_csv
from healthaccess.types import AccessTier, RegionMetrics

def sample_metrics():
    return [
        RegionMetrics(
            region='Alpha', facility_count=2, facility_count_by_type={'hospital': 1, 'clinic': 1},
            area_km2=100.0, density=0.02, population=100000, population_per_facility=50000.0,
            facilities_per_100k=2.0, emergency_coverage_pct=50.0,
            avg_distance_to_road={'NH': 2500.0, 'SH': None}, access_tier=AccessTier.POOR,
        ),
        RegionMetrics(
            region='Beta', facility_count=0, area_km2=100.0, density=0.0, population=200000,
            facilities_per_100k=0.0, avg_distance_to_road={'NH': None, 'SH': None},
            access_tier=AccessTier.POOR,
        ),
    ]

def test_metrics_to_frame():
    frame = metrics_to_frame(sample_metrics())

    assert list(frame['region']) == ['Alpha', 'Beta']
    assert frame.loc[0, 'avg_dist_NH_km'] == 2.5
    assert pd.isna(frame.loc[0, 'avg_dist_SH_km'])
    assert frame.loc[0, 'facility_types'] == 'clinic:1, hospital:1'
    assert list(frame['access_tier']) == ['Poor', 'Poor']
    # unavailable stays missing, never zero
    assert pd.isna(frame.loc[1, 'population_per_facility'])
    assert pd.isna(frame.loc[1, 'emergency_coverage_pct'])

def test_metrics_to_frame_selected_categories():
    frame = metrics_to_frame(sample_metrics(), road_categories=['NH'])
    assert 'avg_dist_NH_km' in frame.columns
    assert 'avg_dist_SH_km' not in frame.columns

def test_export_metrics_csv(tmp_path):
    path = tmp_path / "district_access.csv"
    export_metrics_csv(sample_metrics(), path)

    written = pd.read_csv(path)
    assert list(written['region']) == ['Alpha', 'Beta']
    assert written.loc[0, 'population_per_facility'] == 50000.0
    assert pd.isna(written.loc[1, 'population_per_facility'])
