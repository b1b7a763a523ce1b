import argparse
import json
import logging
import sys
from datetime import date, datetime, timedelta

from .calc import PrayTimes, next_prayer
from .config import Location, load_config, local_tz_hours, location_from, prayer_config_from
from .hijri import hijri_from_gregorian
from .methods import ASR_METHODS, METHODS, HighLatMethod
from .qibla import qibla_bearing_and_distance
from .render import build_payload, format_offset, render_text

logger = logging.getLogger(__name__)


def setup_logging(level_name, verbose=False):
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, str(level_name or "WARNING").upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def resolve_location(config, args, day):
    if args.lat is not None or args.lng is not None:
        if args.lat is None or args.lng is None:
            raise ValueError("--lat and --lng must be given together")
        tz = args.tz if args.tz is not None else local_tz_hours(day)
        label = f"{args.lat}, {args.lng}"
        return label, Location(lat=args.lat, lng=args.lng, tz=tz)
    return location_from(config, args.location, tz=args.tz, day=day)


def build_prayer_config(config, args):
    if args.method:
        config["method"] = args.method
    if args.asr_method:
        config["asr_method"] = args.asr_method
    if args.high_lat:
        config["high_lat_method"] = args.high_lat
    for prayer, minutes in args.offset or []:
        try:
            config["adjustments"][prayer.lower()] = int(minutes)
        except ValueError:
            raise ValueError(f"Offset for {prayer} must be a whole number of minutes, got {minutes!r}") from None
    return prayer_config_from(config)


def handle_cli(args):
    config = load_config(args.config)
    setup_logging(config.get("log_level"), args.verbose)

    if args.list_methods:
        for method, info in METHODS.items():
            print(f"{method.name}: {info['name']}")
        for method, info in ASR_METHODS.items():
            print(f"asr {method.name}: {info['name']}")
        for policy in HighLatMethod:
            print(f"high-lat {policy.name}: {policy.label}")
        return 0

    if args.list_locations:
        for name, loc in config.get("locations", {}).items():
            label = loc.get("label") or name
            tz = loc.get("tz")
            tz_label = format_offset(float(tz)) if tz is not None else "local"
            print(f"{name}: {label} ({loc.get('lat')}, {loc.get('lng')}) [{tz_label}]")
        return 0

    day = date.fromisoformat(args.date) if args.date else date.today()
    show_all = not (args.qibla or args.hijri)
    prayer_config = build_prayer_config(config, args)
    format_24h = config.get("time_format", "24h") == "24h"
    if args.format_24h is not None:
        format_24h = args.format_24h

    hijri = hijri_from_gregorian(day) if show_all or args.hijri else None
    label = day.isoformat()
    times = upcoming = qibla = None

    if show_all or args.qibla:
        label, location = resolve_location(config, args, day)
        logger.debug(f"Location {label}: {location}")
        qibla = qibla_bearing_and_distance(location.lat, location.lng)
        if show_all:
            times = compute_day(prayer_config, location, day)
            now = datetime.now(location.tzinfo)
            if now.date() == day:
                tomorrow = compute_day(prayer_config, location, day + timedelta(days=1))
                upcoming = next_prayer(times, now, tomorrow)
            label = f"{label} ({format_offset(location.tz)})"

    payload = build_payload(
        label,
        prayer_config,
        times=times,
        upcoming=upcoming,
        qibla=qibla,
        hijri=hijri,
        format_24h=format_24h,
    )
    if args.json:
        print(json.dumps(payload, ensure_ascii=False))
    else:
        print(render_text(payload))
    return 0


def compute_day(prayer_config, location, day):
    return PrayTimes(prayer_config).get_times(day, location)


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Prayer times, Qibla direction and Hijri date")
    parser.add_argument("--list-methods", action="store_true", help="List calculation methods")
    parser.add_argument("--list-locations", action="store_true", help="List locations from config")
    parser.add_argument("--location", help="Named location from the config file")
    parser.add_argument("--lat", type=float, help="Latitude in degrees (north positive)")
    parser.add_argument("--lng", type=float, help="Longitude in degrees (east positive)")
    parser.add_argument("--tz", type=float, help="UTC offset in hours (default: this machine's offset)")
    parser.add_argument("--date", help="Gregorian date as YYYY-MM-DD (default: today)")
    parser.add_argument("--method", help="Calculation method (see --list-methods)")
    parser.add_argument("--asr-method", help="Asr juristic method: standard or hanafi")
    parser.add_argument("--high-lat", help="High latitude rule: none, midnight, one_seventh, angle_based")
    parser.add_argument("--offset", nargs=2, action="append", metavar=("PRAYER", "MIN"),
                        help="Shift a prayer by MIN minutes (repeatable)")
    parser.add_argument("--qibla", action="store_true", help="Only show the Qibla direction")
    parser.add_argument("--hijri", action="store_true", help="Only show the Hijri date")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--24h", dest="format_24h", action="store_const", const=True, help="24-hour clock")
    parser.add_argument("--12h", dest="format_24h", action="store_const", const=False, help="12-hour clock")
    parser.add_argument("--config", help="Settings file (default: $SALATI_CONFIG or ~/.config/salati/config.json)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        return handle_cli(args)
    except Exception as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
