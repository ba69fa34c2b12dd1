# file: finedust/lametric_push.py

import asyncio
import logging

import requests

from finedust.airkorea_api import try_get_measurement
from finedust.classifier import classify
from finedust.config import Settings
from finedust.formatter import format_status, frame_response
from finedust.models import FrameResponse


def push_frames(settings: Settings, payload: FrameResponse) -> bool:
    """Push frames to a LaMetric device through its local push API."""
    if not settings.lametric_push_url:
        logging.warning("LAMETRIC_PUSH_URL not set, skipping device push")
        return False

    headers = {"Content-Type": "application/json", "X-Access-Token": settings.lametric_access_token}
    try:
        response = requests.post(
            settings.lametric_push_url,
            headers=headers,
            json=payload.model_dump(),
            timeout=settings.request_timeout,
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logging.error(f"Error pushing frames to LaMetric: {e}")
        return False

    logging.info(f"Pushed to LaMetric: {payload.frames[0].text if payload.frames else ''}")
    return True


def update_device(settings: Settings) -> bool:
    """Fetch the default station, classify it and push the detailed frame."""
    record = asyncio.run(try_get_measurement(settings, settings.default_station))
    if record is not None:
        logging.info(f"{record.station_name} @ {record.observed_at}: so2={record.so2} co={record.co} o3={record.o3} no2={record.no2}")
    status = classify(record)
    logging.info(f"{settings.default_station}: {status.level.label} ({status.explanation})")
    frame = format_status(status, settings.default_station, detailed=True)
    return push_frames(settings, frame_response(frame))
