"""
Tests for the measurement data model.

Tests cover:
- Parsing of upstream string values and "-" placeholders
- Presence checks on readings and records
- Immutability of records and statuses
"""

import pydantic
import pytest

from finedust.models import (
    POLLUTANT_PRIORITY,
    CompositeIndex,
    MeasurementRecord,
    Pollutant,
    PollutantReading,
    SeverityLevel,
)


class TestPollutantReading:

    def test_numeric_strings_are_parsed(self):
        reading = PollutantReading(concentration="28", grade="2")
        assert reading.concentration == 28.0
        assert reading.grade == 2

    @pytest.mark.parametrize("raw", ["-", "", "  ", None, "통신장애"])
    def test_placeholders_become_absent(self, raw):
        reading = PollutantReading(concentration=raw, grade=raw)
        assert reading.concentration is None
        assert reading.grade is None
        assert reading.is_present is False

    def test_fractional_grade_is_absent(self):
        assert PollutantReading(grade="2.5").grade is None

    def test_out_of_range_values_are_kept_for_the_classifier(self):
        reading = PollutantReading(concentration=-4, grade=9)
        assert reading.concentration == -4
        assert reading.grade == 9
        assert reading.is_present is True

    def test_grade_alone_is_present(self):
        assert PollutantReading(grade=3).is_present is True

    def test_readings_are_frozen(self):
        reading = PollutantReading(concentration=10)
        with pytest.raises(pydantic.ValidationError):
            reading.concentration = 20


class TestMeasurementRecord:

    def test_empty_record_is_valid(self):
        record = MeasurementRecord()
        assert record.pm10 is None
        assert record.pm25 is None
        assert record.composite_index is None
        assert record.has_particulate_data() is False

    def test_reading_lookup_by_pollutant(self, jongno_record):
        assert jongno_record.reading(Pollutant.PM25) is jongno_record.pm25
        assert jongno_record.reading(Pollutant.PM10) is jongno_record.pm10
        assert jongno_record.reading(Pollutant.COMPOSITE) is jongno_record.composite_index

    def test_particulate_data_requires_a_concentration(self):
        assert MeasurementRecord(pm10=PollutantReading(grade=2)).has_particulate_data() is False
        assert MeasurementRecord(pm25=PollutantReading(concentration=3)).has_particulate_data() is True

    def test_composite_alone_is_not_particulate_data(self):
        record = MeasurementRecord(composite_index=CompositeIndex(value=85))
        assert record.has_particulate_data() is False

    def test_gas_placeholders_become_absent(self):
        record = MeasurementRecord(so2="0.003", no2="-")
        assert record.so2 == 0.003
        assert record.no2 is None

    def test_records_are_frozen(self, jongno_record):
        with pytest.raises(pydantic.ValidationError):
            jongno_record.station_name = "중구"


class TestEnumerations:

    def test_severity_levels_are_ordered(self):
        assert SeverityLevel.NO_DATA < SeverityLevel.GOOD < SeverityLevel.MODERATE
        assert SeverityLevel.MODERATE < SeverityLevel.UNHEALTHY < SeverityLevel.VERY_UNHEALTHY

    def test_level_labels_and_colors(self):
        assert SeverityLevel.GOOD.label == "좋음"
        assert SeverityLevel.MODERATE.label == "보통"
        assert SeverityLevel.UNHEALTHY.label == "나쁨"
        assert SeverityLevel.VERY_UNHEALTHY.label == "매우나쁨"
        assert SeverityLevel.VERY_UNHEALTHY.color == "#dc3545"
        assert SeverityLevel.NO_DATA.color == "#808080"

    def test_level_icons(self):
        assert [level.icon for level in SeverityLevel] == ["i120", "i2395", "i2396", "i2397", "i2398"]

    def test_pollutant_priority(self):
        assert POLLUTANT_PRIORITY == (Pollutant.PM25, Pollutant.PM10, Pollutant.COMPOSITE)
        assert [p.label for p in POLLUTANT_PRIORITY] == ["PM2.5", "PM10", "통합지수"]
        assert Pollutant.COMPOSITE.unit == ""
