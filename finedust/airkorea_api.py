# file: finedust/airkorea_api.py

import aiohttp
import asyncio
import logging
import ssl
from typing import Any, Dict, List, Optional

import certifi

from finedust.config import Settings
from finedust.models import CompositeIndex, MeasurementRecord, PollutantReading

MEASUREMENT_PATH = "/ArpltnInforInqireSvc/getMsrstnAcctoRltmMesureDnsty"
STATION_LIST_PATH = "/MsrstnInfoInqireSvc/getMsrstnList"

FALLBACK_STATIONS = [
    {"station_name": "종로구", "addr": "서울 종로구", "lat": 37.5729, "lon": 126.9794},
    {"station_name": "중구", "addr": "서울 중구", "lat": 37.5640, "lon": 126.9759},
    {"station_name": "강남구", "addr": "서울 강남구", "lat": 37.5172, "lon": 127.0473},
]


class AirKoreaAPIError(Exception):
    """Raised when Air Korea does not return a usable measurement."""


def parse_measurement(item: Dict[str, Any], station_name: str) -> MeasurementRecord:
    """Normalize one Air Korea response item; unparseable fields become absent."""
    return MeasurementRecord(
        station_name=station_name,
        observed_at=str(item["dataTime"]) if item.get("dataTime") else None,
        pm10=PollutantReading(concentration=item.get("pm10Value"), grade=item.get("pm10Grade")),
        pm25=PollutantReading(concentration=item.get("pm25Value"), grade=item.get("pm25Grade")),
        composite_index=CompositeIndex(value=item.get("khaiValue"), grade=item.get("khaiGrade")),
        so2=item.get("so2Value"),
        co=item.get("coValue"),
        o3=item.get("o3Value"),
        no2=item.get("no2Value"),
    )


def _unwrap_items(data: Any) -> List[Dict[str, Any]]:
    """Validate the data.go.kr envelope and return its items."""
    header = data.get("response", {}).get("header") if isinstance(data, dict) else None
    if not header:
        raise AirKoreaAPIError("Unexpected response format")
    result_code = header.get("resultCode")
    if result_code != "00":
        raise AirKoreaAPIError(f"API error {result_code}: {header.get('resultMsg')}")
    body = data["response"].get("body") or {}
    items = body.get("items") or []
    if not isinstance(items, list):
        raise AirKoreaAPIError("Unexpected response format")
    return items


async def _get_json(session: aiohttp.ClientSession, settings: Settings, path: str, params: Dict[str, str]) -> Any:
    if not settings.api_key_configured:
        raise AirKoreaAPIError("AIR_KOREA_API_KEY is not configured")
    url = f"{settings.base_url}{path}"
    query = {"serviceKey": settings.api_key, "returnType": "json", "pageNo": "1", **params}
    async with session.get(url, params=query) as response:
        logging.info(f"GET {url} {params} -> HTTP {response.status}")
        if response.status != 200:
            raise AirKoreaAPIError(f"HTTP {response.status}")
        # data.go.kr answers with text/html content type on some gateways,
        # and with an XML error document when the service key is rejected
        try:
            return await response.json(content_type=None)
        except ValueError as e:
            raise AirKoreaAPIError("Unexpected response format") from e


async def fetch_measurement(session: aiohttp.ClientSession, settings: Settings, station_name: str) -> MeasurementRecord:
    params = {"numOfRows": "1", "stationName": station_name, "dataTerm": "DAILY", "ver": "1.3"}
    data = await _get_json(session, settings, MEASUREMENT_PATH, params)
    items = _unwrap_items(data)
    if not items:
        raise AirKoreaAPIError(f"No data for station {station_name}")
    return parse_measurement(items[0], station_name)


async def fetch_station_list(session: aiohttp.ClientSession, settings: Settings, addr: str = "서울") -> List[Dict[str, Any]]:
    """Look up stations by address; falls back to a built-in list on any error."""
    try:
        data = await _get_json(session, settings, STATION_LIST_PATH, {"numOfRows": "100", "addr": addr})
        return [
            {
                "station_name": item.get("stationName"),
                "addr": item.get("addr"),
                "lat": float(item["dmX"]) if item.get("dmX") else None,
                "lon": float(item["dmY"]) if item.get("dmY") else None,
            }
            for item in _unwrap_items(data)
        ]
    except (AirKoreaAPIError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logging.error(f"Error fetching station list for {addr}: {e}")
        return list(FALLBACK_STATIONS)


def _create_session(settings: Settings) -> aiohttp.ClientSession:
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    ssl_context.set_ciphers("DEFAULT@SECLEVEL=1")  # data.go.kr still negotiates legacy ciphers
    timeout = aiohttp.ClientTimeout(total=settings.request_timeout)
    return aiohttp.ClientSession(connector=aiohttp.TCPConnector(ssl=ssl_context), timeout=timeout)


async def get_measurement(settings: Settings, station_name: str) -> MeasurementRecord:
    logging.info(f"Fetching Air Korea measurement for {station_name}")
    async with _create_session(settings) as session:
        return await fetch_measurement(session, settings, station_name)


async def get_station_list(settings: Settings, addr: str = "서울") -> List[Dict[str, Any]]:
    async with _create_session(settings) as session:
        return await fetch_station_list(session, settings, addr)


async def try_get_measurement(settings: Settings, station_name: str) -> Optional[MeasurementRecord]:
    """Like get_measurement, but logs failures and returns None."""
    try:
        return await get_measurement(settings, station_name)
    except (AirKoreaAPIError, aiohttp.ClientError, asyncio.TimeoutError) as e:
        logging.error(f"Error fetching measurement for {station_name}: {e}")
        return None
