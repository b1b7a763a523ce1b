import copy
import json
import os
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from .methods import PRAYER_KEYS, AsrMethod, CalculationMethod, HighLatMethod, lookup

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".config", "salati")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.json")

DEFAULT_CONFIG = {
    "location": None,
    "locations": {},
    "method": "MWL",
    "asr_method": "STANDARD",
    "high_lat_method": "ANGLE_BASED",
    "adjustments": {
        "fajr": 0,
        "sunrise": 0,
        "dhuhr": 0,
        "asr": 0,
        "maghrib": 0,
        "isha": 0
    },
    "time_format": "24h",
    "log_level": "WARNING"
}


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float
    tz: float = 0.0

    def __post_init__(self):
        if not -90 <= self.lat <= 90:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180 <= self.lng <= 180:
            raise ValueError(f"Longitude out of range: {self.lng}")
        if not -24 < self.tz < 24:
            raise ValueError(f"UTC offset out of range: {self.tz}")

    @property
    def tzinfo(self):
        return timezone(timedelta(hours=self.tz))


@dataclass(frozen=True)
class PrayerTimesConfig:
    """Calculation choices for one prayer time computation.

    Keys may be given as enum members or as their names (``"MWL"``,
    ``"hanafi"``, ``"angle_based"``); anything else is rejected here so that
    the solver never sees an unknown method. Adjustments are kept as sorted
    ``(prayer, minutes)`` pairs, so a config can be used as a cache key.
    """

    calculation_method: CalculationMethod = CalculationMethod.MWL
    asr_method: AsrMethod = AsrMethod.STANDARD
    high_lat_method: HighLatMethod = HighLatMethod.ANGLE_BASED
    adjustments: tuple = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "calculation_method", lookup(CalculationMethod, self.calculation_method))
        object.__setattr__(self, "asr_method", lookup(AsrMethod, self.asr_method))
        object.__setattr__(self, "high_lat_method", lookup(HighLatMethod, self.high_lat_method))
        adjustments = {}
        for prayer, minutes in dict(self.adjustments or {}).items():
            key = prayer.lower()
            if key not in PRAYER_KEYS:
                raise ValueError(f"Unknown prayer for offset: {prayer}")
            if isinstance(minutes, bool) or not isinstance(minutes, int):
                raise ValueError(f"Offset for {prayer} must be a whole number of minutes, got {minutes!r}")
            adjustments[key] = minutes
        object.__setattr__(self, "adjustments", tuple(sorted(adjustments.items())))

    def offset(self, prayer):
        return dict(self.adjustments).get(prayer.lower(), 0)


DEFAULT_PRAYER_CONFIG = PrayerTimesConfig()


def config_path():
    return os.environ.get("SALATI_CONFIG") or CONFIG_PATH


def load_config(path=None):
    """Read the settings file, filling anything it leaves out from DEFAULT_CONFIG.

    A missing file is not an error: the defaults are returned and nothing is
    written to disk.
    """
    path = path or config_path()
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not os.path.exists(path):
        return config
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    adjustments = data.pop("adjustments", None) or {}
    config.update(data)
    config["adjustments"].update(adjustments)
    return config


def prayer_config_from(config):
    adjustments = {k: v for k, v in config.get("adjustments", {}).items() if v}
    return PrayerTimesConfig(
        calculation_method=config.get("method", DEFAULT_CONFIG["method"]),
        asr_method=config.get("asr_method", DEFAULT_CONFIG["asr_method"]),
        high_lat_method=config.get("high_lat_method", DEFAULT_CONFIG["high_lat_method"]),
        adjustments=adjustments,
    )


def local_tz_hours(day):
    """This machine's UTC offset in hours at noon on ``day``."""
    tzinfo = datetime.now().astimezone().tzinfo
    offset = datetime(day.year, day.month, day.day, 12, tzinfo=tzinfo).utcoffset()
    return offset.total_seconds() / 3600.0 if offset else 0.0


def location_from(config, name=None, tz=None, day=None):
    """Build the named location from the settings' ``locations`` table.

    ``name`` defaults to the settings' ``location``. The UTC offset is ``tz``
    when given, then the entry's own ``tz``, then this machine's offset on
    ``day``. Returns ``(label, Location)``.
    """
    name = name or config.get("location")
    if not name:
        raise ValueError("No location: pass --lat/--lng or --location, or set 'location' in the config file")
    loc = config.get("locations", {}).get(name)
    if loc is None:
        raise ValueError(f"Unknown location: {name}")
    if tz is None and loc.get("tz") is not None:
        tz = float(loc["tz"])
    if tz is None:
        tz = local_tz_hours(day or date.today())
    location = Location(lat=float(loc["lat"]), lng=float(loc["lng"]), tz=tz)
    return loc.get("label") or name, location
