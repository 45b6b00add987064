from dataclasses import replace

from healthaccess.config import GOOD_FACTOR, POOR_FACTOR
from healthaccess.types import AccessTier


def mean_ratio(metrics):
    """
    Arithmetic mean of population_per_facility over regions where it is defined.

    Returns:
        float or None: None when no region has a defined ratio.
    """
    ratios = [m.population_per_facility for m in metrics if m.population_per_facility is not None]
    if not ratios:
        return None
    return sum(ratios) / len(ratios)


def assign_tier(ratio, mean, good_factor=GOOD_FACTOR, poor_factor=POOR_FACTOR):
    """
    Access tier for one ratio relative to the state-wide mean.

    Both band edges are inclusive on the better side: ratio == good_factor * mean
    is Good and ratio == poor_factor * mean is Average. A region without a
    ratio (no facilities) is Poor.
    """
    if ratio is None or mean is None:
        return AccessTier.POOR
    if ratio <= good_factor * mean:
        return AccessTier.GOOD
    if ratio <= poor_factor * mean:
        return AccessTier.AVERAGE
    return AccessTier.POOR


def ranking_key(metrics):
    """
    Total order for reports: highest population_per_facility first,
    unavailable ratios last, ties broken by region name.
    """
    ratio = metrics.population_per_facility
    if ratio is None:
        return (1, 0.0, str(metrics.region))
    return (0, -ratio, str(metrics.region))


def classify(metrics, config=None):
    """
    Attach an access tier to every region and sort the result.

    A region without a population record is left unclassified (access_tier
    None): its need is unknown, which is not the same as underserved.

    Args:
        metrics (list[RegionMetrics]): Output of aggregate_regions.
        config (AnalysisConfig, optional): Supplies the tier factors.

    Returns:
        list[RegionMetrics]: New records with access_tier set, ordered by ranking_key.
    """
    good_factor = config.good_factor if config is not None else GOOD_FACTOR
    poor_factor = config.poor_factor if config is not None else POOR_FACTOR

    mean = mean_ratio(metrics)
    tiered = []
    for m in metrics:
        tier = None
        if m.population is not None:
            tier = assign_tier(m.population_per_facility, mean, good_factor, poor_factor)
        tiered.append(replace(m, access_tier=tier))
    return sorted(tiered, key=ranking_key)
