"""
Public-IP geolocation with provider fallback.

Providers are tried in order; the first that answers with a finite
latitude/longitude wins.  None of them needs an API key.

  1. ipapi.co     https://ipapi.co/json/
  2. ipinfo.io    https://ipinfo.io/json
  3. ip-api.com   http://ip-api.com/json/?fields=61439

Usage
-----
    from lockon.ingest.ip_locate import locate_by_ip
    fix = locate_by_ip()
    print(fix.provider, fix.position, fix.place)
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

from ..geo.coords import Coordinate
from . import fetch_json

log = logging.getLogger(__name__)


class LocateError(RuntimeError):
    """Every provider in the chain failed."""


@dataclass
class GeoFix:
    """One geolocation answer."""
    provider: str
    lat: float
    lon: float
    ip: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    org: Optional[str] = None
    timezone: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def position(self) -> Coordinate:
        return Coordinate(self.lat, self.lon).normalized()

    @property
    def place(self) -> str:
        head = f"{self.city}," if self.city else ""
        return " ".join(p for p in (head, self.region or "", self.country or "") if p).strip()


def _float(v: Any) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return math.nan


def _pick_ipapi_co(d: Dict[str, Any]) -> Dict[str, Any]:
    return dict(
        ip=d.get("ip"), city=d.get("city"), region=d.get("region"),
        country=d.get("country_name"), lat=_float(d.get("latitude")),
        lon=_float(d.get("longitude")), org=d.get("org"), timezone=d.get("timezone"),
    )


def _pick_ipinfo(d: Dict[str, Any]) -> Dict[str, Any]:
    lat_s, _, lon_s = str(d.get("loc") or ",").partition(",")
    return dict(
        ip=d.get("ip"), city=d.get("city"), region=d.get("region"),
        country=d.get("country"), lat=_float(lat_s), lon=_float(lon_s),
        org=d.get("org"), timezone=d.get("timezone"),
    )


def _pick_ip_api(d: Dict[str, Any]) -> Dict[str, Any]:
    return dict(
        ip=d.get("query"), city=d.get("city"), region=d.get("regionName"),
        country=d.get("country"), lat=_float(d.get("lat")), lon=_float(d.get("lon")),
        org=d.get("org"), timezone=d.get("timezone"),
    )


Provider = Tuple[str, str, Callable[[Dict[str, Any]], Dict[str, Any]]]

PROVIDERS: List[Provider] = [
    ("ipapi.co", "https://ipapi.co/json/", _pick_ipapi_co),
    ("ipinfo.io", "https://ipinfo.io/json", _pick_ipinfo),
    ("ip-api.com", "http://ip-api.com/json/?fields=61439", _pick_ip_api),
]


def locate_by_ip(
    providers: Optional[List[Provider]] = None,
    timeout: float = 10.0,
) -> GeoFix:
    """Resolve the public IP to a :class:`GeoFix` using the first provider that works."""
    last_error: Optional[Exception] = None
    for name, url, pick in providers or PROVIDERS:
        log.info("Contacting %s…", name)
        try:
            data = fetch_json(url, timeout=timeout)
            if not isinstance(data, dict):
                raise ValueError(f"{name} returned {type(data).__name__}, expected an object")
            picked = pick(data)
            if not (math.isfinite(picked["lat"]) and math.isfinite(picked["lon"])):
                raise ValueError(f"{name} missing lat/lon")
        except (requests.RequestException, ValueError) as exc:
            log.warning("Geolocation via %s failed: %s", name, exc)
            last_error = exc
            continue
        fix = GeoFix(provider=name, raw=data, **picked)
        log.info("Located %s via %s at %s", fix.ip or "?", name, fix.position)
        return fix
    raise LocateError("All IP geolocation providers failed") from last_error
