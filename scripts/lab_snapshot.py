#!/usr/bin/env python3
"""Run one lab load cycle against DataGolf and print what the page would show."""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from divot_lab import DataGolfClient, LabDataLoader, leaders
from divot_lab.config import Settings
from divot_lab.field_strength import playing_style
from divot_lab.formatting import format_percent, format_sg, short_name
from divot_lab.tournament import upcoming_date_label


def main():
    parser = argparse.ArgumentParser(description="Print the current lab snapshot")
    parser.add_argument("--pre", action="store_true", help="Show pre-tournament predictions while live")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = Settings.from_env()
    client = DataGolfClient(api_key=settings.api_key, cache_dir=settings.cache_dir)
    result = LabDataLoader(client, tour=settings.tour).load()

    t = result.tournament
    print(f"\n{t.label or 'THIS WEEK'}: {t.event_name}")
    if t.course:
        print(f"Course: {t.course}")
    if t.label == "UPCOMING":
        print(upcoming_date_label(t.start_date))
    if result.is_fallback:
        print("(placeholder data: every feed failed)")

    fs = result.field_strength
    print(f"\nField strength: {fs.rating_display}/10 ({fs.label})")
    print(f"  Elite (SG 1.5+): {fs.elite_count}   Top tier (SG 1.0+): {fs.top_tier}")
    print(f"  Field avg SG: {format_sg(fs.field_avg)}   Top-20 avg SG: {format_sg(fs.top20_avg)}")

    if result.leaderboard:
        print("\nLeaders")
        for row in leaders(result.leaderboard):
            print(f"  {row.position:<5} {short_name(row.player_name):<20} {row.score:>5}  thru {row.thru}")

    toggle = result.predictions.toggle()
    view = toggle.select("pre") if args.pre else toggle.view()
    source = "Live" if view.source == "live" else "Pre-Tournament"
    print(f"\n{source} predictions" + (" (stale)" if view.stale else ""))
    if view.is_empty:
        print("  No predictions available yet")
    else:
        print(f"{'Rank':<6} {'Player':<30} {'Win%':>7} {'Top10%':>8}")
        print("-" * 55)
        for rank, row in enumerate(view.rows, 1):
            print(f"{rank:<6} {row.player_name[:29]:<30} {format_percent(row.win):>7} {format_percent(row.top_10):>8}")
    if view.toggle_label:
        print(f"  [{view.toggle_label}: rerun with{'out' if args.pre else ''} --pre]")

    if result.charts.ranking:
        print("\nTop 10 by SG: Total")
        for bar in result.charts.ranking.bars:
            player = next(p for p in result.roster if p.player_name == bar.player_name)
            print(f"  {short_name(bar.player_name):<20} {format_sg(bar.value):>6}  {playing_style(player).name}")


if __name__ == "__main__":
    main()
