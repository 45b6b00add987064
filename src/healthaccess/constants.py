# constants.py

FACILITY_COLS = ["facility_id", "name", "amenity", "district", "emergency", "geometry"]
REGION_COLS = ["name", "geometry"]
ROAD_COLS = ["road_id", "name", "category", "geometry"]
POPULATION_COLS = ["district", "population"]

# OSM tags describing healthcare facilities
HEALTHCARE_TAGS = {
    "amenity": ["hospital", "clinic", "doctors", "dentist", "pharmacy"],
    "healthcare": ["hospital", "clinic", "centre"]
}

EMERGENCY_YES = "yes"
UNKNOWN_AMENITY = "unknown"

# Known spelling variants of Rajasthan district names (case-folded variant -> canonical name)
DISTRICT_ALIASES = {
    "dhaulpur": "dholpur",
    "jalor": "jalore",
    "jhunjhunun": "jhunjhunu",
    "chittaurgarh": "chittorgarh",
    "chittaurgarh district": "chittorgarh",
    "ganganagar": "sri ganganagar",
    "shri ganganagar": "sri ganganagar",
    "sawai madhopur district": "sawai madhopur",
}
