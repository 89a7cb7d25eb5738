from __future__ import annotations

import argparse
import asyncio
import json
import logging
import math
import random
import sys
import threading
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .audio.cues import AudioCueEngine
from .audio.context import AudioContext
from .camera.sim import SimulatedCamera
from .config import HuntConfig, load_config
from .geo.coords import Coordinate
from .hunt import HuntDirector
from .ingest.environment import flatten, gather_environment, render_table
from .ingest.ip_locate import GeoFix, LocateError, locate_by_ip
from .logger import setup_logging
from .osc.bridge import OscCameraSurface

log = logging.getLogger(__name__)


def _listen_for_gesture(loop: asyncio.AbstractEventLoop, audio: AudioCueEngine) -> None:
    """Treat the first Enter on stdin as the user gesture that unlocks audio."""
    def _wait() -> None:
        try:
            line = sys.stdin.readline()
        except (OSError, ValueError):
            return
        if line:
            loop.call_soon_threadsafe(audio.unlock)

    print("Press Enter to enable sound.", flush=True)
    threading.Thread(target=_wait, daemon=True, name="gesture-listener").start()


def acquire_target(args: argparse.Namespace, cfg: HuntConfig):
    """Return ``(coordinate, label, fix)``; raises LocateError when nothing works."""
    if args.lat is not None and args.lon is not None:
        target = Coordinate(args.lat, args.lon).normalized()
        return target, args.label or "Manual location", None
    fix = locate_by_ip(timeout=cfg.locate_timeout_s)
    label = args.label or f"{fix.ip or '?'} {fix.place}".strip()
    return fix.position, label, fix


async def run_hunts(args: argparse.Namespace, cfg: HuntConfig) -> int:
    rng = random.Random(args.seed)

    if args.osc_host:
        surface = OscCameraSurface(args.osc_host, args.osc_port, cfg.osc.prefix)
    else:
        surface = SimulatedCamera()

    audio: Optional[AudioCueEngine] = None
    if cfg.audio.enabled and not args.no_audio:
        audio = AudioCueEngine(
            AudioContext(sample_rate=cfg.audio.sample_rate), cfg.heartbeat, rng=rng,
        )
        if args.unlock:
            audio.unlock()
        else:
            _listen_for_gesture(asyncio.get_running_loop(), audio)

    director = HuntDirector(surface, audio, cfg, rng=rng)
    fix: Optional[GeoFix] = None
    status = 0
    try:
        try:
            log.info("Fetching public IP & location…")
            target, label, fix = await asyncio.to_thread(acquire_target, args, cfg)
        except LocateError as exc:
            log.error("Unable to determine location: %s", exc)
            status = 1
        else:
            for i in range(1 + max(0, args.replay)):
                result = await director.run(target, label, replay=i > 0)
                if result.fallback:
                    status = 2
                print(f"Locked on {result.target}: {label}", flush=True)
                if args.linger > 0:
                    await asyncio.sleep(args.linger)

        env = gather_environment(fix, provider=None if fix else "manual")
        if args.json:
            print(json.dumps(env, indent=2, default=str))
        else:
            print(render_table(flatten(env)))
    finally:
        director.close()
        if audio is not None:
            audio.close()
        if isinstance(surface, OscCameraSurface):
            surface.close()
    return status


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Theatrical search-and-lock-on map hunt.\n"
            "Locates the public IP (or uses --lat/--lon), flies a randomised\n"
            "camera hunt with radar pings, then pins a pulsing marker."
        )
    )
    parser.add_argument("--lat", type=float, default=None, help="Target latitude (skips IP lookup).")
    parser.add_argument("--lon", type=float, default=None, help="Target longitude (skips IP lookup).")
    parser.add_argument("--label", default="", help="Marker label.")
    parser.add_argument("--seed", type=int, default=None, help="Seed the random source.")
    parser.add_argument("--no-audio", action="store_true", help="Run silently.")
    parser.add_argument(
        "--unlock",
        action="store_true",
        help="Enable sound immediately instead of waiting for Enter.",
    )
    parser.add_argument("--osc-host", default=None, help="Mirror the camera to this OSC host.")
    parser.add_argument("--osc-port", type=int, default=HuntConfig().osc.port, help="OSC port.")
    parser.add_argument("--replay", type=int, default=0, help="Replay the hunt N more times.")
    parser.add_argument(
        "--linger",
        type=float,
        default=2.0,
        help="Seconds to keep the marker pulsing after each lock.",
    )
    parser.add_argument("--json", action="store_true", help="Print the environment report as JSON.")
    parser.add_argument("--config", type=Path, default=None, help="JSON config overrides.")
    parser.add_argument("--timeout", type=float, default=None, help="Per-provider lookup timeout (s).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every hop.")
    args = parser.parse_args(argv)

    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")
    if args.lat is not None and not (math.isfinite(args.lat) and math.isfinite(args.lon)):
        parser.error("--lat and --lon must be finite numbers")

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    cfg = load_config(args.config)
    if args.timeout is not None:
        cfg = replace(cfg, locate_timeout_s=args.timeout)

    try:
        return asyncio.run(run_hunts(args, cfg))
    except KeyboardInterrupt:
        print("\nStopping hunt.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
