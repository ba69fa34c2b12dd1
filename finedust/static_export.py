# file: finedust/static_export.py

import asyncio
import json
import logging
import os
from typing import Any, Dict

from tqdm import tqdm

from finedust.airkorea_api import try_get_measurement
from finedust.classifier import classify
from finedust.config import Settings
from finedust.formatter import format_status, frame_response, health_recommendation
from finedust.models import MeasurementRecord
from finedust.utils import get_current_time, get_local_time


def _write_json(path: str, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def render_station(record: MeasurementRecord) -> Dict[str, Any]:
    """Classify one record and render both display variants."""
    status = classify(record)
    return {
        "raw": record.model_dump(mode="json"),
        "status": status.model_dump(mode="json"),
        "advice": health_recommendation(status),
        "lametric": frame_response(format_status(status, record.station_name, detailed=True)).model_dump(),
        "lametric_simple": frame_response(format_status(status, record.station_name, detailed=False)).model_dump(),
    }


def render_readme(summary: Dict[str, Any]) -> str:
    files = "\n".join(
        f"- `{station}.json` - {result['lametric']['frames'][0]['text']}"
        for station, result in summary["data"].items()
    )
    return f"""# 미세먼지 데이터 API

마지막 업데이트: {get_local_time()}

## 현재 상태
- 총 측정소: {summary['totalStations']}개
- 성공: {summary['successCount']}개
- 실패: {summary['errorCount']}개

## 사용 가능한 파일

- `index.json` - 기본 측정소 (상세)
- `<측정소>-simple.json` - 간단한 형식
- `all-stations.json` - 전체 결과

{files}
"""


async def export_stations(settings: Settings) -> Dict[str, Any]:
    """Fetch every configured station and write LaMetric JSON files to output_dir."""
    os.makedirs(settings.output_dir, exist_ok=True)
    results: Dict[str, Dict[str, Any]] = {}
    error_count = 0

    for index, station in enumerate(tqdm(settings.stations, desc="Updating stations")):
        if index and settings.request_delay:
            await asyncio.sleep(settings.request_delay)
        record = await try_get_measurement(settings, station)
        if record is None:
            error_count += 1
            continue
        if not record.has_particulate_data():
            logging.warning(f"{station}: no PM10 or PM2.5 concentration reported")
        results[station] = render_station(record)
        _write_json(os.path.join(settings.output_dir, f"{station}.json"), results[station]["lametric"])
        _write_json(os.path.join(settings.output_dir, f"{station}-simple.json"), results[station]["lametric_simple"])
        logging.info(f"{station}: {results[station]['lametric']['frames'][0]['text']}")

    summary = {
        "lastUpdated": get_current_time(),
        "totalStations": len(settings.stations),
        "successCount": len(results),
        "errorCount": error_count,
        "stations": list(results),
        "data": results,
    }
    _write_json(os.path.join(settings.output_dir, "all-stations.json"), summary)
    if settings.default_station in results:
        _write_json(os.path.join(settings.output_dir, "index.json"), results[settings.default_station]["lametric"])
    with open(os.path.join(settings.output_dir, "README.md"), "w", encoding="utf-8") as f:
        f.write(render_readme(summary))

    logging.info(f"Exported {len(results)} stations to {settings.output_dir} ({error_count} failed)")
    if error_count:
        logging.warning("Some stations could not be fetched")
    return summary


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    asyncio.run(export_stations(Settings.from_env()))
