# file: finedust/config.py

import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

AIR_KOREA_BASE_URL = "http://apis.data.go.kr/B552584"
PLACEHOLDER_KEYS = {"YOUR_API_KEY_HERE", "여기에_발급받은_API키_입력"}
DEFAULT_STATIONS = ["종로구", "중구", "강남구", "마포구", "송파구", "강서구", "영등포구", "성북구", "용산구", "서초구"]


class Settings(BaseModel):
    """Runtime configuration, built once and handed to every collaborator."""

    api_key: str = ""
    base_url: str = AIR_KOREA_BASE_URL
    default_station: str = "종로구"
    stations: List[str] = Field(default_factory=lambda: list(DEFAULT_STATIONS))
    output_dir: str = "docs"
    refresh_minutes: int = Field(15, gt=0)
    min_poll_interval: float = Field(300, ge=0, description="Seconds between requests per client")
    cache_ttl: float = Field(300, ge=0, description="Seconds a rendered response stays cached")
    request_delay: float = Field(1.0, ge=0, description="Pause between upstream calls in batch export")
    request_timeout: float = Field(30, gt=0)
    environment: str = "development"
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    lametric_push_url: str = ""
    lametric_access_token: str = ""
    scheduler_enabled: bool = False
    port: int = 3000

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from the environment and an optional .env file."""
        load_dotenv()
        stations = os.getenv("STATIONS")
        origins = os.getenv("ALLOWED_ORIGINS", "*")
        return cls(
            api_key=os.getenv("AIR_KOREA_API_KEY", ""),
            base_url=os.getenv("AIR_KOREA_BASE_URL", AIR_KOREA_BASE_URL),
            default_station=os.getenv("DEFAULT_STATION", "종로구"),
            stations=[s.strip() for s in stations.split(",") if s.strip()] if stations else list(DEFAULT_STATIONS),
            output_dir=os.getenv("OUTPUT_DIR", "docs"),
            refresh_minutes=int(os.getenv("REFRESH_MINUTES", "15")),
            min_poll_interval=float(os.getenv("MIN_POLL_INTERVAL", "300")),
            cache_ttl=float(os.getenv("CACHE_TTL", "300")),
            request_delay=float(os.getenv("REQUEST_DELAY", "1")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
            environment=os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development",
            allowed_origins=[o.strip() for o in origins.split(",") if o.strip()],
            lametric_push_url=os.getenv("LAMETRIC_PUSH_URL", ""),
            lametric_access_token=os.getenv("LAMETRIC_ACCESS_TOKEN", ""),
            scheduler_enabled=os.getenv("SCHEDULER_ENABLED", "false").lower() == "true",
            port=int(os.getenv("PORT", "3000")),
        )

    @property
    def api_key_configured(self) -> bool:
        return bool(self.api_key) and self.api_key not in PLACEHOLDER_KEYS

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate_config(self) -> List[str]:
        """Return warnings about missing configuration."""
        warnings = []
        if not self.api_key_configured:
            warnings.append("AIR_KOREA_API_KEY not set - upstream requests will fail")
        if self.lametric_push_url and not self.lametric_access_token:
            warnings.append("LAMETRIC_PUSH_URL set without LAMETRIC_ACCESS_TOKEN")
        if self.default_station not in self.stations:
            warnings.append(f"DEFAULT_STATION {self.default_station} is not in STATIONS")
        return warnings
