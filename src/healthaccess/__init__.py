import os
import sys


def _drop_postgis_proj_lib():
    # The PostGIS installer on Windows exports PROJ_LIB pointing at its own
    # proj.db, which pyproj rejects as the wrong database version.
    proj_lib = os.environ.get("PROJ_LIB", "")
    if sys.platform == "win32" and "postgresql" in proj_lib.lower():
        os.environ.pop("PROJ_LIB")


_drop_postgis_proj_lib()

from .core import HealthAccessLab
from .config import AnalysisConfig
from .types import AccessTier, RegionMetrics
from .__about__ import __version__
