# file: finedust/scheduler.py

import asyncio
import logging
import threading
import time

import schedule

from finedust.config import Settings
from finedust.lametric_push import update_device
from finedust.static_export import export_stations


def refresh(settings: Settings) -> None:
    """One polling cycle: rewrite the static files and update the device."""
    try:
        asyncio.run(export_stations(settings))
    except OSError as e:
        logging.error(f"Static export failed: {e}")
    if settings.lametric_push_url:
        update_device(settings)


def run_schedule(settings: Settings) -> threading.Thread:
    """Schedule periodic refreshes every refresh_minutes in a background thread."""

    def job():
        try:
            refresh(settings)
        except Exception as e:
            logging.error(f"Scheduled job failed: {e}")

    schedule.every(settings.refresh_minutes).minutes.do(job)

    def run_continuously():
        while True:
            schedule.run_pending()
            time.sleep(60)

    thread = threading.Thread(target=run_continuously, daemon=True)
    thread.start()
    logging.info(f"Scheduler started in background thread, every {settings.refresh_minutes} minutes")
    return thread
