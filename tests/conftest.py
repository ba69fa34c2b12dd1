"""
Pytest configuration for the fine dust tests.

Registers custom markers and provides shared fixtures.
"""

import pytest

from finedust.config import Settings
from finedust.models import CompositeIndex, MeasurementRecord, PollutantReading


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "http: tests that exercise the FastAPI application"
    )


@pytest.fixture
def settings(tmp_path):
    """Settings with a usable key and no delays, writing into a temp dir."""
    return Settings(
        api_key="test-key",
        output_dir=str(tmp_path / "docs"),
        stations=["종로구", "중구"],
        request_delay=0,
    )


@pytest.fixture
def jongno_record():
    """The reference snapshot: PM2.5 28 (grade 2), PM10 45 (grade 2), khai 85."""
    return MeasurementRecord(
        station_name="종로구",
        observed_at="2024-01-15 14:00",
        pm25=PollutantReading(concentration=28, grade=2),
        pm10=PollutantReading(concentration=45, grade=2),
        composite_index=CompositeIndex(value=85, grade=2),
    )


@pytest.fixture
def airkorea_item():
    """A raw item as returned by getMsrstnAcctoRltmMesureDnsty."""
    return {
        "dataTime": "2024-01-15 14:00",
        "pm10Value": "45",
        "pm10Grade": "2",
        "pm25Value": "28",
        "pm25Grade": "2",
        "khaiValue": "85",
        "khaiGrade": "2",
        "so2Value": "0.003",
        "coValue": "0.6",
        "o3Value": "0.020",
        "no2Value": "-",
    }
