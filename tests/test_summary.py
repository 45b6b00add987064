import pytest
import numpy as np
import pandas as pd
from healthaccess.metrics.summary import (
    statewide_summary, facility_type_counts, rank_regions, top_regions, bottom_regions,
    underserved_regions, road_proximity_counts
)
from healthaccess.types import RegionMetrics

@pytest.fixture
def metrics():
    return [
        RegionMetrics(region='Jaipur', facility_count=40, population=6626178, population_per_facility=165654.45),
        RegionMetrics(region='Jodhpur', facility_count=25, population=3687165, population_per_facility=147486.6),
        RegionMetrics(region='Ajmer', facility_count=25, population=2583052, population_per_facility=103322.08),
        RegionMetrics(region='Barmer', facility_count=4, population=2603751, population_per_facility=650937.75),
        RegionMetrics(region='Jaisalmer', facility_count=0, population=669919),
        RegionMetrics(region='Pratapgarh', facility_count=3, population=None),
    ]

def test_statewide_summary(metrics):
    summary = statewide_summary(metrics)

    assert summary['total_facilities'] == 97
    assert summary['total_population'] == 6626178 + 3687165 + 2583052 + 2603751 + 669919
    assert np.isclose(summary['facilities_per_100k'], 97 / summary['total_population'] * 100000)

def test_statewide_summary_without_population():
    summary = statewide_summary([RegionMetrics(region='X', facility_count=3)])
    assert summary['total_population'] == 0
    assert summary['facilities_per_100k'] is None

def test_statewide_summary_sums_whole_population_table(metrics):
    population = pd.DataFrame({
        'district': ['Jaipur', 'Pratapgarh', 'Sikar', 'Nowhere'],
        'population': [6626178, 867848, 2677333, 0],
    })
    with pytest.warns(UserWarning, match='non-positive'):
        summary = statewide_summary(metrics, population)

    # Sikar has no region record but still counts towards the state total
    assert summary['total_population'] == 6626178 + 867848 + 2677333
    assert summary['total_facilities'] == 97

def test_facility_type_counts(facilities_gdf):
    counts = facility_type_counts(facilities_gdf)

    assert list(counts['facility_type']) == ['hospital', 'clinic', 'pharmacy']
    assert list(counts['facility_count']) == [4, 2, 1]

def test_rank_regions_sql_rank(metrics):
    ranked = rank_regions(metrics, by='facility_count')

    assert list(ranked['region'][:4]) == ['Jaipur', 'Ajmer', 'Jodhpur', 'Barmer']
    # Ajmer and Jodhpur tie for 2nd, so the next rank is 4
    assert list(ranked['rank'][:4]) == [1, 2, 2, 4]

def test_rank_regions_unavailable_last(metrics):
    ranked = rank_regions(metrics, by='population_per_facility')

    assert ranked['region'].iloc[0] == 'Barmer'
    assert set(ranked['region'].iloc[-2:]) == {'Jaisalmer', 'Pratapgarh'}
    assert ranked['rank'].iloc[-2:].isna().all()

def test_top_and_bottom_regions(metrics):
    top = top_regions(metrics, n=2)
    assert list(top['region']) == ['Jaipur', 'Ajmer']

    bottom = bottom_regions(metrics, n=2)
    assert list(bottom['region']) == ['Jaisalmer', 'Pratapgarh']

def test_underserved_regions(metrics):
    out = underserved_regions(metrics, min_population=1_000_000, max_facilities=10)
    assert list(out['region']) == ['Barmer']

def test_underserved_regions_none(metrics):
    out = underserved_regions(metrics, min_population=10_000_000)
    assert out.empty
    assert list(out.columns) == ['region', 'population', 'facility_count']

def test_road_proximity_counts():
    facilities = pd.DataFrame({
        'road_dist_NH': [100.0, np.nan, 4000.0],
        'road_dist_SH': [np.nan, 200.0, np.nan],
    })
    out = road_proximity_counts(facilities, ['NH', 'SH', 'MDR'])

    assert list(out['category']) == ['NH', 'SH', 'MDR']
    assert list(out['facility_count']) == [2, 1, 0]
