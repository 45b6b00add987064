"""
Cleaning steps applied to the facilities and regions layers before any spatial analysis.

District labels are free text in OSM (``addr:district``) and in census
tables, so every join on district name goes through ``canonical_district``.
"""

import warnings

import pandas as pd

from healthaccess.exceptions import DataQualityWarning
from healthaccess.spatial.normalize import require_same_crs


def _squash(value):
    if value is None or pd.isna(value):
        return None
    text = " ".join(str(value).split())
    return text or None


def canonical_district(label, aliases=None):
    """
    Stable join key for a district label.

    Trims, collapses inner whitespace, case-folds, then resolves known
    spelling variants through ``aliases`` (canonical variant -> canonical name).

    Args:
        label (str or None): Raw district label.
        aliases (dict, optional): Alias lookup table.

    Returns:
        str or None: The join key, or None for blank/missing labels.
    """
    text = _squash(label)
    if text is None:
        return None
    key = text.casefold()
    if aliases:
        return aliases.get(key, key)
    return key


def display_district(label):
    """Trim and Title Case a district label for reporting; blank becomes None."""
    text = _squash(label)
    return text.title() if text is not None else None


def drop_duplicate_facilities(facilities, aliases=None):
    """
    Remove facilities sharing the same (name, district) pair.

    Names are compared after whitespace/case normalisation and districts by
    their canonical key. The last record of a duplicate group is kept.
    Records with a missing name or district are never considered duplicates
    of each other.

    Args:
        facilities (geopandas.GeoDataFrame): Facilities with 'name' and 'district'.
        aliases (dict, optional): District alias table.

    Returns:
        geopandas.GeoDataFrame: Deduplicated copy.
    """
    name_key = facilities["name"].map(_squash).map(lambda n: n.casefold() if isinstance(n, str) else None)
    district_key = facilities["district"].map(lambda d: canonical_district(d, aliases))
    keyed = name_key.notna() & district_key.notna()

    keys = pd.DataFrame({"name": name_key, "district": district_key}, index=facilities.index)
    dupes = keyed & keys.duplicated(keep="last")

    if dupes.any():
        warnings.warn(f"Removed {int(dupes.sum())} duplicate facility records.", DataQualityWarning)

    return facilities.loc[~dupes].copy()


def drop_outside_boundary(facilities, regions):
    """
    Drop facilities that fall outside every region polygon.

    Args:
        facilities (geopandas.GeoDataFrame): Facility points.
        regions (geopandas.GeoDataFrame): Region polygons in the same CRS.

    Returns:
        geopandas.GeoDataFrame: Facilities inside the combined boundary.
    """
    require_same_crs(facilities, regions, "facilities", "regions")

    boundary = regions.union_all()
    inside = facilities.geometry.within(boundary)

    if (~inside).any():
        warnings.warn(
            f"Dropped {int((~inside).sum())} facilities located outside the region boundaries.",
            DataQualityWarning,
        )

    return facilities.loc[inside].copy()


def clean_facilities(facilities, regions, aliases=None):
    """
    Standardise district labels, remove duplicates and out-of-boundary records.

    Returns:
        geopandas.GeoDataFrame: Cleaned copy of the facilities layer.
    """
    out = facilities.copy()
    out["district"] = out["district"].map(display_district)
    out = drop_duplicate_facilities(out, aliases=aliases)
    return drop_outside_boundary(out, regions)


def merge_duplicate_regions(regions, aliases=None):
    """
    Dissolve region rows that share a district name into one row.

    Boundary files often store a district as several single-part polygons;
    left alone, every part would be counted as a district of its own. Names
    are compared by canonical key and the first row's attributes are kept.
    Rows without a name are left as they are.

    Returns:
        geopandas.GeoDataFrame: Regions with one row per district name, in
        order of first appearance.
    """
    keys = [
        key if key is not None else f"#row{i}"
        for i, key in enumerate(regions["name"].map(lambda n: canonical_district(n, aliases)))
    ]
    keys = pd.Series(keys, index=regions.index, dtype=object)
    shared = keys.duplicated(keep=False)
    if not shared.any():
        return regions

    names = sorted({str(n) for n in regions.loc[shared, "name"]})
    warnings.warn(
        f"Merged {int(shared.sum())} region rows sharing a district name: {names}.",
        DataQualityWarning,
    )
    merged = regions.assign(_district_key=keys).dissolve(by="_district_key", as_index=False, sort=False)
    return merged.drop(columns="_district_key")
