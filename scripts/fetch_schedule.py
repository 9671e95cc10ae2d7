#!/usr/bin/env python3
"""Print the PGA Tour schedule and the event the lab would currently display."""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from divot_lab import DataGolfClient
from divot_lab.tournament import (
    format_tournament_date,
    end_date,
    parse_field_snapshot,
    parse_schedule,
    resolve_tournament,
)


def main():
    parser = argparse.ArgumentParser(description="Fetch PGA Tour schedule from DataGolf")
    parser.add_argument("--season", type=int, default=None, help="Season year (default: current)")
    parser.add_argument("--tour", default="pga", help="Tour code (default: pga)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    client = DataGolfClient()
    events = parse_schedule(client.get_schedule(tour=args.tour, season=args.season))
    if not events:
        print("No events found.")
        return

    print(f"\n{'#':<4} {'Event':<45} {'Course':<35} {'Dates':<16} {'Event ID'}")
    print("-" * 110)
    for i, event in enumerate(events, 1):
        start = event.parsed_start()
        dates = format_tournament_date(event.start_date, end_date(start).isoformat()) if start else "TBD"
        print(f"{i:<4} {event.event_name[:44]:<45} {event.course[:34]:<35} {dates:<16} {event.event_id or ''}")

    print(f"\nTotal events: {len(events)}")

    snapshot = parse_field_snapshot(client.get_field_updates(tour=args.tour))
    info = resolve_tournament(events, snapshot)
    print(f"Showing: {info.event_name} [{info.label or 'THIS WEEK'}] phase={info.phase}")


if __name__ == "__main__":
    main()
