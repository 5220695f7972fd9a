"""
Loss severity classification.

Turns the chart series and the free-form initial area of an analysis into a
loss percentage, then into one of five canned descriptions that are embedded
in the image-generation prompt.
"""

import re
import logging
from typing import NamedTuple, Optional, Tuple

from forest_watch.models.schemas import AnalysisResult, DeforestationStatus, SeverityLevel

logger = logging.getLogger(__name__)

# First run of digits (with thousands separators) and an optional decimal part
AREA_NUMBER = re.compile(r"\d[\d,]*(?:\.\d+)?")
YEAR_RANGE = re.compile(r"(\d{4})\D+(\d{4})")


class SeverityBucket(NamedTuple):
    level: SeverityLevel
    upper_bound: Optional[float]
    description: str


# Ordered by upper bound; a percentage lands in the first bucket whose bound it does not exceed
SEVERITY_BUCKETS: Tuple[SeverityBucket, ...] = (
    SeverityBucket(
        SeverityLevel.IMPERCEPTIBLE, 1.0,
        "The forest is healthy and stable with almost no change. Instruct the image model to show only "
        "imperceptible differences, perhaps a very slight lightening of green in one or two small spots. "
        "There should be no visible change at first glance.",
    ),
    SeverityBucket(
        SeverityLevel.MINOR, 5.0,
        "The deforestation is minor but present. Instruct the image model to show small, scattered patches "
        "of light brown, exposed earth, indicating some agricultural clearing or logging. The overall canopy "
        "must remain mostly dense. The change should be noticeable upon inspection.",
    ),
    SeverityBucket(
        SeverityLevel.SIGNIFICANT, 15.0,
        "The deforestation is clear and significant. Instruct the image model to show multiple, noticeable "
        "patches of brown, cleared land. Some of these patches should connect into larger clearings. The "
        "forest edge should appear fragmented or \"eaten away\" in some areas.",
    ),
    SeverityBucket(
        SeverityLevel.SEVERE, 30.0,
        "The deforestation is widespread and severe. Instruct the image model to render large swathes of the "
        "green canopy replaced by brown and yellow earth. A visible network of thin logging roads is "
        "essential. The contrast between before and after must be stark.",
    ),
    SeverityBucket(
        SeverityLevel.EXTREME, None,
        "The deforestation is dramatic and extreme. Instruct the image model to show a landscape that is "
        "visibly scarred. A \"fishbone\" pattern of roads and massive clearings should dominate the 'after' "
        "image. More than a third of the green canopy must be visibly gone, replaced by huge expanses of bare "
        "earth, representing industrial-scale agriculture. The visual impact should be shocking.",
    ),
)


def parse_area(area: Optional[str]) -> float:
    """
    Pull the first number out of a free-form area string.

    >>> parse_area("approx. 6,000,000 sq km")
    6000000.0
    """
    if not area:
        return 0.0
    match = AREA_NUMBER.search(area)
    if not match:
        return 0.0
    return float(match.group(0).replace(",", ""))


def total_loss(result: AnalysisResult) -> float:
    return sum(point.loss for point in result.chart_data)


def loss_percentage(result: AnalysisResult) -> float:
    """Total charted loss as a percentage of the estimated initial area (0 when unknown)."""
    initial_area = parse_area(result.estimated_initial_area)
    if initial_area == 0:
        return 0.0
    return total_loss(result) / initial_area * 100


def classify_severity(percentage: float, status: Optional[DeforestationStatus] = None) -> SeverityBucket:
    """
    Map a loss percentage to its severity bucket.

    Bucket bounds are inclusive, so ties go to the lower severity.

    Passing a status enables the status-aware override used by the server-side
    relay: a forest reported as stable is always drawn as unchanged, whatever
    its percentage. Without a status the bucket is chosen by range alone.
    """
    if status == DeforestationStatus.STABLE:
        return SEVERITY_BUCKETS[0]

    for bucket in SEVERITY_BUCKETS:
        if bucket.upper_bound is None or percentage <= bucket.upper_bound:
            return bucket
    return SEVERITY_BUCKETS[-1]


def derive_year_range(result: AnalysisResult) -> Optional[Tuple[int, int]]:
    """
    Work out the comparison years for an analysis.

    Uses the chart series when it spans more than one year, otherwise the
    first two four-digit years found in the time period.
    """
    years = sorted(point.year for point in result.chart_data)
    if years and years[0] < years[-1]:
        return years[0], years[-1]

    match = YEAR_RANGE.search(result.time_period or "")
    if match:
        start, end = int(match.group(1)), int(match.group(2))
        if start < end:
            return start, end

    logger.warning(f"Could not derive a year range for {result.forest_name}")
    return None
