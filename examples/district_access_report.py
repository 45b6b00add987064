from pathlib import Path
import sys
import warnings

import geopandas as gpd
import pandas as pd

from healthaccess import HealthAccessLab, AnalysisConfig
from healthaccess.exceptions import DataQualityWarning
from healthaccess.io.export import export_metrics_csv
from healthaccess.metrics.summary import facility_type_counts, road_proximity_counts, underserved_regions

# Layer files exported from the state GIS database
DATA_DIR = Path("./data")
HOSPITALS = DATA_DIR / "raj_totalhospital.geojson"
BOUNDARY = DATA_DIR / "raj_boundary.geojson"
ROADS = DATA_DIR / "raj_roads.geojson"
POPULATION = DATA_DIR / "raj_population.csv"
OUT_CSV = Path("district_access.csv")


def load_layers():
    hospitals = gpd.read_file(HOSPITALS).rename(columns={"ogc_fid": "facility_id", "addr:district": "district"})
    boundary = gpd.read_file(BOUNDARY).rename(columns={"name_2": "name"})
    roads = gpd.read_file(ROADS).rename(columns={"roadname": "name", "roadcatego": "category"})
    roads["road_id"] = roads.index.astype(str)
    population = pd.read_csv(POPULATION).rename(columns={"distname": "district", "tot_p": "population"})
    return hospitals, boundary, roads, population


def main():
    print("=== healthaccess: District Healthcare Access Report ===")

    print("1. Loading layers...")
    try:
        hospitals, boundary, roads, population = load_layers()
    except Exception as e:
        print(f"   Failed to load layers: {e}")
        sys.exit(1)
    print(f"   {len(hospitals)} facilities, {len(boundary)} districts, {len(roads)} road segments.")

    print("2. Running pipeline (UTM 43N, 5 km road search radius)...")
    lab = HealthAccessLab(hospitals, boundary, roads, population, config=AnalysisConfig())
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", DataQualityWarning)
        result = lab.run()
    for w in caught:
        print(f"   [data quality] {w.message}")

    summary = result["summary"]
    print(f"   Facilities after cleaning: {summary['total_facilities']}")
    print(f"   State population: {summary['total_population']:,}")
    if summary["facilities_per_100k"] is not None:
        print(f"   Facilities per 100,000 people: {summary['facilities_per_100k']:.2f}")

    print("3. Facility types:")
    for row in facility_type_counts(lab.facilities).itertuples(index=False):
        print(f"   - {row.facility_type}: {row.facility_count}")

    print("4. Facilities within 5 km of a highway:")
    for row in road_proximity_counts(lab.facilities, lab.config.road_categories).itertuples(index=False):
        print(f"   - {row.category}: {row.facility_count}")

    print("5. Access tiers (most underserved first):")
    for m in result["metrics"]:
        ratio = f"{m.population_per_facility:,.0f}" if m.population_per_facility is not None else "n/a"
        tier = m.access_tier.value if m.access_tier is not None else "unclassified"
        print(f"   {m.region:<20} {ratio:>12} people/facility  {tier}")

    print("6. Populous districts with fewer than 10 facilities:")
    for row in underserved_regions(result["metrics"]).itertuples(index=False):
        print(f"   - {row.region}: {row.population:,} people, {row.facility_count} facilities")

    export_metrics_csv(result["metrics"], OUT_CSV, road_categories=lab.config.road_categories)
    print(f"=== Report saved: {OUT_CSV} ===")


if __name__ == "__main__":
    main()
