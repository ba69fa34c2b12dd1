# file: finedust/models.py

import math
from enum import Enum, IntEnum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SeverityLevel(IntEnum):
    """Air quality levels ordered by ordinal; NO_DATA sits outside the 1-4 scale."""

    NO_DATA = 0
    GOOD = 1
    MODERATE = 2
    UNHEALTHY = 3
    VERY_UNHEALTHY = 4

    @property
    def label(self) -> str:
        return _LEVEL_LABELS[self]

    @property
    def color(self) -> str:
        return _LEVEL_COLORS[self]

    @property
    def icon(self) -> str:
        return _LEVEL_ICONS[self]


_LEVEL_LABELS = {
    SeverityLevel.NO_DATA: "데이터 없음",
    SeverityLevel.GOOD: "좋음",
    SeverityLevel.MODERATE: "보통",
    SeverityLevel.UNHEALTHY: "나쁨",
    SeverityLevel.VERY_UNHEALTHY: "매우나쁨",
}

_LEVEL_COLORS = {
    SeverityLevel.NO_DATA: "#808080",
    SeverityLevel.GOOD: "#007bff",
    SeverityLevel.MODERATE: "#28a745",
    SeverityLevel.UNHEALTHY: "#ffc107",
    SeverityLevel.VERY_UNHEALTHY: "#dc3545",
}

# LaMetric icon ids: warning, then smiling to very sad face
_LEVEL_ICONS = {
    SeverityLevel.NO_DATA: "i120",
    SeverityLevel.GOOD: "i2395",
    SeverityLevel.MODERATE: "i2396",
    SeverityLevel.UNHEALTHY: "i2397",
    SeverityLevel.VERY_UNHEALTHY: "i2398",
}


class Pollutant(str, Enum):
    PM25 = "pm25"
    PM10 = "pm10"
    COMPOSITE = "khai"

    @property
    def label(self) -> str:
        return {"pm25": "PM2.5", "pm10": "PM10", "khai": "통합지수"}[self.value]

    @property
    def unit(self) -> str:
        return "" if self is Pollutant.COMPOSITE else "㎍/㎥"


# Display and explanation order
POLLUTANT_PRIORITY = (Pollutant.PM25, Pollutant.PM10, Pollutant.COMPOSITE)


def _to_number(value: Any) -> Optional[float]:
    """Upstream sends numbers as strings and "-" for missing readings."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def _to_grade(value: Any) -> Optional[int]:
    number = _to_number(value)
    if number is None or not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


class PollutantReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    concentration: Optional[float] = Field(None, description="Concentration (㎍/㎥)")
    grade: Optional[int] = Field(None, description="Upstream grade, 1 (good) to 4 (very unhealthy)")

    @field_validator("concentration", mode="before")
    @classmethod
    def _parse_concentration(cls, value: Any) -> Optional[float]:
        return _to_number(value)

    @field_validator("grade", mode="before")
    @classmethod
    def _parse_grade(cls, value: Any) -> Optional[int]:
        return _to_grade(value)

    @property
    def value(self) -> Optional[float]:
        return self.concentration

    @property
    def is_present(self) -> bool:
        return self.concentration is not None or self.grade is not None


class CompositeIndex(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: Optional[float] = Field(None, description="Integrated air quality index (khai)")
    grade: Optional[int] = Field(None, description="Upstream grade, 1 (good) to 4 (very unhealthy)")

    @field_validator("value", mode="before")
    @classmethod
    def _parse_value(cls, value: Any) -> Optional[float]:
        return _to_number(value)

    @field_validator("grade", mode="before")
    @classmethod
    def _parse_grade(cls, value: Any) -> Optional[int]:
        return _to_grade(value)

    @property
    def is_present(self) -> bool:
        return self.value is not None or self.grade is not None


class MeasurementRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    station_name: str = Field("", description="Air Korea station name, e.g. 종로구")
    observed_at: Optional[str] = Field(None, description="Upstream dataTime, kept opaque")
    pm10: Optional[PollutantReading] = None
    pm25: Optional[PollutantReading] = None
    composite_index: Optional[CompositeIndex] = None
    so2: Optional[float] = Field(None, description="SO2 concentration (ppm)")
    co: Optional[float] = Field(None, description="CO concentration (ppm)")
    o3: Optional[float] = Field(None, description="O3 concentration (ppm)")
    no2: Optional[float] = Field(None, description="NO2 concentration (ppm)")

    @field_validator("so2", "co", "o3", "no2", mode="before")
    @classmethod
    def _parse_gas(cls, value: Any) -> Optional[float]:
        return _to_number(value)

    def reading(self, pollutant: Pollutant):
        if pollutant is Pollutant.PM25:
            return self.pm25
        if pollutant is Pollutant.PM10:
            return self.pm10
        return self.composite_index

    def has_particulate_data(self) -> bool:
        """True when PM10 or PM2.5 carries a concentration."""
        return any(
            reading is not None and reading.concentration is not None
            for reading in (self.pm10, self.pm25)
        )


class OverallStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: SeverityLevel
    dominant_pollutant: Optional[Pollutant] = None
    dominant_value: Optional[float] = None
    explanation: str


class DisplayFrame(BaseModel):
    text: str
    icon: str


class FrameResponse(BaseModel):
    frames: List[DisplayFrame]
