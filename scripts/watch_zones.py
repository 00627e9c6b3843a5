#!/usr/bin/env python3
"""Watch the parking feed and print each new zone snapshot.

Usage
-----
Point the script at a feed server and run::

    export PARKZONES_BASE_URL="http://localhost:3000"
    python scripts/watch_zones.py

Options::

    --interval SECONDS   Refresh interval (default: config / 30s)
    --once               Refresh a single time and exit
    --json               Output as machine-readable JSON
    --hour H             Also print each zone's traffic intensity at hour H
    --verbose            Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from parkzones import ParkZonesClient, ParkZonesConfig, ZoneSnapshot  # noqa: E402


def _snapshot_to_json(client: ParkZonesClient, snapshot: ZoneSnapshot, hour: int | None) -> dict[str, Any]:
    zones = []
    for zone in snapshot.values():
        entry = zone.model_dump(mode="json")
        if hour is not None:
            profile = client.profile(zone.id)
            entry["intensity"] = profile.at(hour) if profile else None
        zones.append(entry)
    return {
        "refreshed_at": snapshot.refreshed_at.isoformat() if snapshot.refreshed_at else None,
        "generation": snapshot.generation,
        "summary": client.summary().model_dump(mode="json"),
        "zones": zones,
    }


def _print_snapshot(client: ParkZonesClient, snapshot: ZoneSnapshot, hour: int | None, json_mode: bool) -> None:
    if json_mode:
        print(json.dumps(_snapshot_to_json(client, snapshot, hour), ensure_ascii=False))
        return

    summary = client.summary()
    stamp = snapshot.refreshed_at.isoformat(timespec="seconds") if snapshot.refreshed_at else "-"
    print(f"\n== {stamp}  {summary.zone_count} zones, {summary.available_spots}/{summary.total_spots} free "
          f"({summary.occupancy_rate}% occupied)")
    for zone in snapshot.values():
        line = f"  {zone.id:<12} {zone.band.label:<10} {zone.available_spots:>4}/{zone.total_spots:<4} {zone.street} {zone.number}"
        if hour is not None:
            profile = client.profile(zone.id)
            if profile is not None:
                line += f"  [{hour:02d}h: {profile.at(hour)}% {profile.level_at(hour)}]"
        print(line)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Watch parking zone availability.")
    parser.add_argument("--interval", type=float, help="Refresh interval in seconds")
    parser.add_argument("--once", action="store_true", help="Refresh once and exit")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--hour", type=int, choices=range(24), metavar="H", help="Show traffic intensity at hour H")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.interval is not None:
        overrides["refresh_interval"] = args.interval
    config = ParkZonesConfig.from_env(**overrides)

    async with ParkZonesClient(config) as client:
        if args.once:
            result = await client.refresh()
            if not result.ok:
                print(f"Refresh failed: {result.error}", file=sys.stderr)
                sys.exit(1)
            _print_snapshot(client, client.snapshot, args.hour, args.json_mode)
            return

        client.store.subscribe(lambda snapshot: _print_snapshot(client, snapshot, args.hour, args.json_mode))
        await client.start()
        await asyncio.Event().wait()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
