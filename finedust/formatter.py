# file: finedust/formatter.py

from finedust.models import DisplayFrame, FrameResponse, OverallStatus, SeverityLevel
from finedust.utils import format_value

NO_DATA_TEXT = "데이터 없음"
LOAD_ERROR_TEXT = "데이터 로딩 실패"
WARNING_ICON = SeverityLevel.NO_DATA.icon

HEALTH_RECOMMENDATIONS = {
    SeverityLevel.GOOD: "외출 및 실외 활동에 좋은 날씨입니다.",
    SeverityLevel.MODERATE: "일반적인 외출에는 무리가 없으나, 민감한 분들은 주의하세요.",
    SeverityLevel.UNHEALTHY: "장시간 외출을 자제하고, 외출시 마스크 착용을 권장합니다.",
    SeverityLevel.VERY_UNHEALTHY: "외출을 최대한 자제하고, 실내 공기정화에 신경쓰세요.",
}


def icon_for(level) -> str:
    try:
        return SeverityLevel(level).icon
    except ValueError:
        return WARNING_ICON


def format_status(status: OverallStatus, station_name: str, detailed: bool) -> DisplayFrame:
    """Render a classification as a single LaMetric frame."""
    if status.level == SeverityLevel.NO_DATA:
        return DisplayFrame(text=NO_DATA_TEXT, icon=WARNING_ICON)

    label = status.level.label
    icon = status.level.icon
    if status.dominant_pollutant is not None and status.dominant_value is not None:
        pollutant = status.dominant_pollutant.label
        value = format_value(status.dominant_value)
        if detailed:
            return DisplayFrame(text=f"{station_name} {pollutant}:{value} ({label})", icon=icon)
        return DisplayFrame(text=f"{pollutant} {value} ({label})", icon=icon)

    return DisplayFrame(text=f"{station_name}: {label}", icon=icon)


def frame_response(*frames: DisplayFrame) -> FrameResponse:
    return FrameResponse(frames=list(frames))


def error_response() -> FrameResponse:
    """Frame shown when upstream data could not be loaded."""
    return frame_response(DisplayFrame(text=LOAD_ERROR_TEXT, icon=WARNING_ICON))


def health_recommendation(status: OverallStatus) -> str:
    return HEALTH_RECOMMENDATIONS.get(status.level, "대기질 정보를 확인할 수 없습니다.")
