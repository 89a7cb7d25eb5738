"""
Environment report shown after the lock.

Collects what the running host reveals about itself (interpreter, OS,
locale, timezone, display) alongside the geolocation answer, flattens the
nested dictionary into dotted keys and renders it as a two-column table.
"""
from __future__ import annotations

import locale
import os
import platform
import sys
import time
from typing import Any, Dict, Optional

from .ip_locate import GeoFix


def gather_environment(fix: Optional[GeoFix] = None, provider: Optional[str] = None) -> Dict[str, Any]:
    lang, encoding = locale.getlocale()
    return {
        "ip": fix.ip if fix else None,
        "city": fix.city if fix else None,
        "region": fix.region if fix else None,
        "country": fix.country if fix else None,
        "org": fix.org if fix else None,
        "timezone": fix.timezone if fix else None,
        "geo_provider": fix.provider if fix else provider,
        "host": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
            "node": platform.node(),
            "cpu_count": os.cpu_count(),
        },
        "python": {
            "implementation": platform.python_implementation(),
            "version": platform.python_version(),
            "executable": sys.executable,
        },
        "locale": {
            "language": lang,
            "encoding": encoding,
            "preferred_encoding": locale.getpreferredencoding(False),
        },
        "clock": {
            "tzname": list(time.tzname),
            "utc_offset_s": -time.timezone,
        },
        "terminal": {
            "stdout_tty": sys.stdout.isatty(),
            "display": os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"),
            "term": os.environ.get("TERM"),
        },
    }


def flatten(obj: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Dot-join nested dictionaries; lists and scalars are kept as values."""
    out: Dict[str, Any] = {}
    for key, value in obj.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict) and value:
            out.update(flatten(value, name))
        else:
            out[name] = value
    return out


def render_table(flat: Dict[str, Any]) -> str:
    if not flat:
        return ""
    width = max(len(k) for k in flat)
    lines = []
    for key, value in flat.items():
        shown = "null" if value is None else str(value)
        lines.append(f"{key.ljust(width)}  {shown}")
    return "\n".join(lines)
