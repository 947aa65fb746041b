#!/usr/bin/env python3
"""Terminal dashboards, one per sensor, fed by the streaming server"""
import argparse
import asyncio
import sys

from peakstream.client.dashboard import SensorDashboard
from peakstream.config.settings import settings
from peakstream.models.errors import InvalidDisplayWidthError, InvalidSensorError


async def run_dashboards(dashboards: list[SensorDashboard]):
    try:
        await asyncio.gather(*(dashboard.run() for dashboard in dashboards))
    finally:
        for dashboard in dashboards:
            await dashboard.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Live peak detection dashboards - one chart per sensor"
    )
    parser.add_argument(
        "--url", "-u",
        type=str,
        default=settings.server_url,
        help=f"WebSocket server URL (default: {settings.server_url})"
    )
    parser.add_argument(
        "--sensor", "-s",
        action="append",
        dest="sensors",
        help="Sensor id to display, repeat for several charts (default: 1)"
    )
    parser.add_argument(
        "--width", "-w",
        type=int,
        default=settings.default_display_width,
        help=f"Number of readings shown per chart (max {settings.max_display_width})"
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if not args.url.startswith(('ws://', 'wss://')):
        print("⚠️  URL must start with ws:// or wss://")
        print(f"   You provided: {args.url}")
        sys.exit(1)

    try:
        dashboards = [
            SensorDashboard(sensor, url=args.url, width=args.width)
            for sensor in (args.sensors or ["1"])
        ]
    except (InvalidSensorError, InvalidDisplayWidthError) as e:
        print(f"❌ {e}")
        sys.exit(2)

    print(f"📈 Streaming sensors {', '.join(str(d.sensor_id) for d in dashboards)} from {args.url}")
    print("💡 Press Ctrl+C to stop\n")

    try:
        asyncio.run(run_dashboards(dashboards))
    except KeyboardInterrupt:
        print("\n✅ Shutdown complete")


if __name__ == "__main__":
    main()
