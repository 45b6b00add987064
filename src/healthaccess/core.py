from healthaccess.cleaning import clean_facilities, merge_duplicate_regions
from healthaccess.config import AnalysisConfig
from healthaccess.constants import FACILITY_COLS, REGION_COLS, ROAD_COLS, POPULATION_COLS
from healthaccess.exceptions import DataSchemaError, MissingInputError
from healthaccess.io.export import metrics_to_frame
from healthaccess.metrics.aggregate import aggregate_regions
from healthaccess.metrics.classify import classify
from healthaccess.metrics.summary import statewide_summary
from healthaccess.spatial.join import assign_regions, nearest_facility_to_centroids, nearest_road_distances
from healthaccess.spatial.normalize import normalize_geometries, facility_coordinates


def _check_columns(df, required, layer):
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise DataSchemaError(f"The {layer} layer is missing required columns: {missing}")


class HealthAccessLab:
    """
    Core class for healthcare accessibility analysis.
    Holds the input layers and runs normalisation, joins, aggregation and
    access classification.
    """

    def __init__(self, facilities, regions, roads=None, population=None, config=None):
        """
        Initialize the analysis.

        Args:
            facilities (geopandas.GeoDataFrame): facility_id, name, amenity, district, emergency, geometry.
            regions (geopandas.GeoDataFrame): name, geometry (district polygons).
            roads (geopandas.GeoDataFrame, optional): road_id, name, category, geometry.
            population (pandas.DataFrame, optional): district, population.
            config (AnalysisConfig, optional): Pipeline settings.
        """
        if regions is None or regions.empty:
            raise MissingInputError("No regions supplied; the regions collection is required.")
        if facilities is None or facilities.empty:
            raise MissingInputError("No facilities supplied; the facilities collection is required.")

        _check_columns(facilities, FACILITY_COLS, "facilities")
        _check_columns(regions, REGION_COLS, "regions")
        if roads is not None:
            _check_columns(roads, ROAD_COLS, "roads")
        if population is not None:
            _check_columns(population, POPULATION_COLS, "population")

        self.config = config if config is not None else AnalysisConfig()
        self.raw_facilities = facilities
        self.raw_regions = regions
        self.raw_roads = roads
        self.population = population

        self.facilities = None
        self.regions = None
        self.roads = None
        self.metrics = None

    def prepare(self):
        """
        Project every layer to the target CRS, merge split districts, clean
        the facilities, assign them to regions and measure distances to each
        road category.

        Returns:
            geopandas.GeoDataFrame: The prepared facilities.
        """
        target = self.config.target_crs
        self.regions = normalize_geometries(self.raw_regions, target, layer="regions")
        if self.regions.empty:
            raise MissingInputError("Every region geometry was unusable; no regions left to analyse.")
        self.regions = merge_duplicate_regions(self.regions, self.config.district_aliases)

        facilities = normalize_geometries(self.raw_facilities, target, layer="facilities")
        if self.raw_roads is not None:
            self.roads = normalize_geometries(self.raw_roads, target, layer="roads")

        facilities = clean_facilities(facilities, self.regions, aliases=self.config.district_aliases)
        facilities = assign_regions(facilities, self.regions)
        self.facilities = nearest_road_distances(
            facilities,
            self.roads,
            self.config.road_categories,
            self.config.search_radius_m,
        )
        return self.facilities

    def calculate_region_metrics(self):
        """
        Compute unclassified RegionMetrics for every region.

        Returns:
            list[RegionMetrics]
        """
        if self.facilities is None:
            self.prepare()
        return aggregate_regions(self.regions, self.facilities, self.population, self.config)

    def classify_regions(self):
        """
        Compute metrics and attach access tiers, highest population per facility first.

        Returns:
            list[RegionMetrics]
        """
        self.metrics = classify(self.calculate_region_metrics(), self.config)
        return self.metrics

    def nearest_facilities(self):
        """Closest facility to each region centroid."""
        if self.facilities is None:
            self.prepare()
        return nearest_facility_to_centroids(self.regions, self.facilities)

    def facility_coordinates(self):
        """Longitude/latitude of each cleaned facility, for display."""
        if self.facilities is None:
            self.prepare()
        return facility_coordinates(self.facilities)

    def run(self):
        """
        Run the whole pipeline.

        Returns:
            dict: { 'metrics': list[RegionMetrics], 'table': DataFrame, 'summary': dict }
        """
        self.prepare()
        metrics = self.classify_regions()
        return {
            "metrics": metrics,
            "table": metrics_to_frame(metrics, self.config.road_categories),
            "summary": statewide_summary(metrics, self.population, self.config.district_aliases),
        }
