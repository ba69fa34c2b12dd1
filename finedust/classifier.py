# file: finedust/classifier.py
"""
Overall air quality classification.

Every pollutant in the record resolves to at most one severity level: the
upstream grade when it is a valid 1-4 ordinal, otherwise the concentration
bucketed against THRESHOLDS. The worst resolved level governs the overall
status. Nothing here raises; unusable input degrades to NO_DATA.
"""

import math
from typing import Any, List, Optional, Tuple

from finedust.models import (
    POLLUTANT_PRIORITY,
    MeasurementRecord,
    OverallStatus,
    Pollutant,
    SeverityLevel,
)
from finedust.utils import format_value

NO_DATA_EXPLANATION = "유효한 측정값이 없습니다."

# Inclusive upper bounds for GOOD, MODERATE, UNHEALTHY; anything above is VERY_UNHEALTHY
THRESHOLDS = {
    Pollutant.PM25: (15, 35, 75),
    Pollutant.PM10: (30, 80, 150),
    Pollutant.COMPOSITE: (50, 100, 150),
}


def usable_value(value: Any) -> Optional[float]:
    """Return the value as a float when it is a finite, non-negative number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return float(value)


def grade_to_level(grade: Any) -> Optional[SeverityLevel]:
    if isinstance(grade, bool) or not isinstance(grade, (int, float)):
        return None
    if not math.isfinite(grade) or grade != int(grade):
        return None
    if int(grade) not in (1, 2, 3, 4):
        return None
    return SeverityLevel(int(grade))


def bucket(pollutant: Pollutant, value: Any) -> Optional[SeverityLevel]:
    value = usable_value(value)
    if value is None:
        return None
    good, moderate, unhealthy = THRESHOLDS[pollutant]
    if value <= good:
        return SeverityLevel.GOOD
    if value <= moderate:
        return SeverityLevel.MODERATE
    if value <= unhealthy:
        return SeverityLevel.UNHEALTHY
    return SeverityLevel.VERY_UNHEALTHY


def _raw_value(pollutant: Pollutant, reading) -> Any:
    if pollutant is Pollutant.COMPOSITE:
        return getattr(reading, "value", None)
    return getattr(reading, "concentration", None)


def resolve_severity(pollutant: Pollutant, reading) -> Optional[SeverityLevel]:
    """Grade wins over bucketing; returns None when the reading says nothing."""
    if reading is None:
        return None
    level = grade_to_level(getattr(reading, "grade", None))
    if level is not None:
        return level
    return bucket(pollutant, _raw_value(pollutant, reading))


def _describe(pollutant: Pollutant, reading) -> str:
    value = usable_value(_raw_value(pollutant, reading))
    if value is None:
        return f"{pollutant.label}: 등급 {reading.grade}"
    return f"{pollutant.label}: {format_value(value)}{pollutant.unit}"


def classify(record: Optional[MeasurementRecord]) -> OverallStatus:
    if record is None:
        return OverallStatus(level=SeverityLevel.NO_DATA, explanation=NO_DATA_EXPLANATION)

    resolved: List[Tuple[Pollutant, SeverityLevel]] = []
    dominant_pollutant = None
    dominant_value = None

    for pollutant in POLLUTANT_PRIORITY:
        reading = record.reading(pollutant)
        level = resolve_severity(pollutant, reading)
        if level is None:
            continue
        resolved.append((pollutant, level))
        # Display priority is independent of which pollutant is worst
        value = usable_value(_raw_value(pollutant, reading))
        if dominant_pollutant is None and value is not None:
            dominant_pollutant, dominant_value = pollutant, value

    if not resolved:
        return OverallStatus(level=SeverityLevel.NO_DATA, explanation=NO_DATA_EXPLANATION)

    explanation = ", ".join(_describe(pollutant, record.reading(pollutant)) for pollutant, _ in resolved)
    return OverallStatus(
        level=max(level for _, level in resolved),
        dominant_pollutant=dominant_pollutant,
        dominant_value=dominant_value,
        explanation=explanation,
    )
