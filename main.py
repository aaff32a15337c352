"""
Weather Predictor: Trend vs. Forecast Reconciliation

Fetches Open-Meteo and NWS data for one city, projects the recent
temperature trend forward and prints how well it agrees with both
forecasts.

Usage:
    python main.py
    python main.py --city Chicago --days-ahead 3 --projection-days 7
    python main.py --json
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import replace

from colorama import Fore, Style, init

from weather_predictor.cities import CITIES, get_city
from weather_predictor.config import load_settings
from weather_predictor.dashboard import load_dashboard
from weather_predictor.models import Confidence
from weather_predictor.report import (
    chart_frame,
    render_forecast_table,
    render_prediction_card,
    to_json,
)

logger = logging.getLogger(__name__)

CONFIDENCE_COLORS = {
    Confidence.HIGH: Fore.GREEN,
    Confidence.MEDIUM: Fore.YELLOW,
    Confidence.LOW: Fore.RED,
}


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Weather Predictor - trend projection reconciled against Open-Meteo and NWS"
    )
    parser.add_argument("--city", help=f"One of: {', '.join(c.name for c in CITIES)}")
    parser.add_argument("--days-ahead", type=positive_int, help="Reconciled prediction days")
    parser.add_argument("--projection-days", type=positive_int, help="Trend-only line days")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    return parser.parse_args(argv)


def configure_logging(level: str):
    os.makedirs("logs", exist_ok=True)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler("logs/weather_predictor.log", mode='a', encoding='utf-8'),
            logging.StreamHandler(sys.stderr)
        ]
    )


def print_banner(city_name: str):
    print(f"\n{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}   WEATHER PREDICTOR: {city_name.upper()}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}   Linear trend reconciled with Open-Meteo + NWS{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}\n")


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = load_settings()

    overrides = {}
    if args.city:
        overrides["city"] = args.city
    if args.days_ahead is not None:
        overrides["days_ahead"] = args.days_ahead
    if args.projection_days is not None:
        overrides["projection_days"] = args.projection_days
    settings = replace(settings, **overrides)

    try:
        city = get_city(settings.city)
    except KeyError as e:
        print(f"[ERROR] {e.args[0]}")
        return 2

    configure_logging(settings.log_level)
    init()

    data = asyncio.run(load_dashboard(city, settings))

    if args.json:
        print(json.dumps(to_json(data), indent=2))
        return 1 if data.error else 0

    print_banner(city.name)

    if data.error:
        print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} {data.error}")
        return 1

    for name, ok in data.source_ok.items():
        status = f"{Fore.GREEN}OK{Style.RESET_ALL}" if ok else f"{Fore.RED}UNAVAILABLE{Style.RESET_ALL}"
        print(f"  {name}: {status}")
    print()

    if data.predictions:
        color = CONFIDENCE_COLORS[data.predictions[0].confidence]
        print(f"{color}{render_prediction_card(data.predictions, city.name)}{Style.RESET_ALL}\n")

    print(render_forecast_table(data.predictions))
    print()

    frame = chart_frame(data)
    if not frame.empty:
        print(f"{Fore.WHITE}Temperature series (°F){Style.RESET_ALL}")
        print(frame.to_string(na_rep="--"))

    return 0


if __name__ == "__main__":
    sys.exit(main())
