import logging
import math
from dataclasses import dataclass
from datetime import date as Date, datetime, timedelta
from typing import Optional

from .config import DEFAULT_PRAYER_CONFIG, Location, PrayerTimesConfig
from .methods import PRAYER_KEYS, PRAYER_ORDER, HighLatMethod
from .solar import CCW, CW, julian_date, mid_day, time_for_asr, time_for_sun_angle

logger = logging.getLogger(__name__)

RISE_SET_ANGLE = 0.833
DHUHR_MARGIN_MINUTES = 1
DEFAULT_ISHA_ANGLE = 18


@dataclass(frozen=True)
class PrayerTimeSet:
    date: Date
    fajr: Optional[datetime]
    sunrise: Optional[datetime]
    dhuhr: Optional[datetime]
    asr: Optional[datetime]
    maghrib: Optional[datetime]
    isha: Optional[datetime]

    def items(self):
        return [(name, getattr(self, key)) for name, key in zip(PRAYER_ORDER, PRAYER_KEYS)]


@dataclass(frozen=True)
class NextPrayer:
    current: Optional[str]
    next: str
    milliseconds_until_next: int


def _shift(value, hours):
    return None if value is None else value + hours


def hours_to_datetime(day, hours, tzinfo):
    """Clock time ``hours`` on ``day``; seconds are truncated, values past 24h roll over."""
    if hours is None:
        return None
    h = math.floor(hours)
    m = math.floor((hours - h) * 60)
    s = math.floor(((hours - h) * 60 - m) * 60)
    midnight = datetime(day.year, day.month, day.day, tzinfo=tzinfo)
    return midnight + timedelta(hours=h, minutes=m, seconds=s)


def adjust_high_latitude(times, params, policy):
    """Bound Fajr and Isha to a share of the night when twilight is missing or too long.

    ``times`` holds raw clock hours keyed by prayer; Fajr and Isha may be None.
    Returns a new dict. Fajr only ever moves later and Isha earlier.
    """
    times = dict(times)
    if policy is HighLatMethod.NONE:
        return times
    sunrise, maghrib = times["sunrise"], times["maghrib"]
    if sunrise is None or maghrib is None:
        logger.debug("No sunrise or sunset on this day, leaving Fajr and Isha as computed")
        return times

    night = sunrise + 24 - maghrib
    if policy is HighLatMethod.MIDNIGHT:
        fajr_portion = isha_portion = night / 2.0
    elif policy is HighLatMethod.ONE_SEVENTH:
        fajr_portion = isha_portion = night / 7.0
    elif policy is HighLatMethod.ANGLE_BASED:
        isha_angle = params.isha_angle if params.isha_angle is not None else DEFAULT_ISHA_ANGLE
        fajr_portion = night * params.fajr_angle / 60.0
        isha_portion = night * isha_angle / 60.0
    else:
        raise ValueError(f"Unknown high latitude method: {policy}")

    fajr = times["fajr"]
    if fajr is None or sunrise - fajr > fajr_portion:
        times["fajr"] = sunrise - fajr_portion
        logger.debug(f"{policy.label}: Fajr {fajr} -> {times['fajr']:.4f}")
    isha = times["isha"]
    if isha is None or isha - maghrib > isha_portion:
        times["isha"] = maghrib + isha_portion
        logger.debug(f"{policy.label}: Isha {isha} -> {times['isha']:.4f}")
    return times


class PrayTimes:
    def __init__(self, config=None):
        if config is None:
            config = DEFAULT_PRAYER_CONFIG
        elif not isinstance(config, PrayerTimesConfig):
            raise TypeError(f"Expected PrayerTimesConfig, got {type(config).__name__}")
        self.config = config
        self.method = config.calculation_method
        self.params = self.method.params
        self.asr_factor = config.asr_method.factor

    def get_times(self, day, location):
        if isinstance(day, datetime):
            day = day.date()
        jdate = julian_date(day.year, day.month, day.day)
        times = self._compute_times(jdate, location)
        times = adjust_high_latitude(times, self.params, self.config.high_lat_method)
        times = self._apply_offsets(times)
        tzinfo = location.tzinfo
        return PrayerTimeSet(
            date=day,
            **{key: hours_to_datetime(day, times[key], tzinfo) for key in PRAYER_KEYS}
        )

    def _compute_times(self, jdate, location):
        lat, tz = location.lat, location.tz
        correction = (tz * 15 - location.lng) / 15.0

        fajr = time_for_sun_angle(jdate, self.params.fajr_angle, lat, tz, CCW)
        sunrise = time_for_sun_angle(jdate, RISE_SET_ANGLE, lat, tz, CCW)
        dhuhr = mid_day(jdate, tz) + DHUHR_MARGIN_MINUTES / 60.0
        asr = time_for_asr(jdate, self.asr_factor, lat, tz)
        maghrib = time_for_sun_angle(jdate, RISE_SET_ANGLE, lat, tz, CW)

        times = {
            "fajr": _shift(fajr, correction),
            "sunrise": _shift(sunrise, correction),
            "dhuhr": dhuhr + correction,
            "asr": _shift(asr, correction),
            "maghrib": _shift(maghrib, correction),
        }
        if self.params.isha_minutes is not None:
            times["isha"] = _shift(times["maghrib"], self.params.isha_minutes / 60.0)
        else:
            isha = time_for_sun_angle(jdate, self.params.isha_angle, lat, tz, CW)
            times["isha"] = _shift(isha, correction)

        for key, value in times.items():
            if value is None:
                logger.debug(f"{key} unattainable at latitude {lat} on JD {jdate}")
        return times

    def _apply_offsets(self, times):
        return {key: _shift(value, self.config.offset(key) / 60.0) for key, value in times.items()}


def compute_prayer_times(day, latitude, longitude, timezone_offset, config=None):
    """The six prayer instants for ``day`` at the given place.

    ``timezone_offset`` is the UTC offset in hours the returned datetimes are
    expressed in. Fields are None where the sun never reaches the required
    angle and the high latitude policy could not supply a substitute.
    """
    location = Location(lat=latitude, lng=longitude, tz=timezone_offset)
    return PrayTimes(config).get_times(day, location)


def next_prayer(times, now=None, tomorrow=None):
    """Current and upcoming prayer in ``times`` relative to ``now``.

    A prayer whose instant equals ``now`` is reported as next, with a zero
    countdown. After Isha, Fajr is next; the countdown runs to ``tomorrow.fajr``
    when the following day's PrayerTimeSet is given and is 0 otherwise.
    """
    entries = [(name, dt) for name, dt in times.items() if dt is not None]
    tzinfo = entries[0][1].tzinfo if entries else None
    if now is None:
        now = datetime.now(tzinfo)
    elif now.tzinfo is None and tzinfo is not None:
        now = now.replace(tzinfo=tzinfo)

    for i, (name, dt) in enumerate(entries):
        if now <= dt:
            return NextPrayer(
                current=entries[i - 1][0] if i > 0 else None,
                next=name,
                milliseconds_until_next=_milliseconds(dt - now),
            )

    remaining = 0
    if tomorrow is not None and tomorrow.fajr is not None and tomorrow.fajr > now:
        remaining = _milliseconds(tomorrow.fajr - now)
    current = entries[-1][0] if entries else "Isha"
    return NextPrayer(current=current, next="Fajr", milliseconds_until_next=remaining)


def _milliseconds(delta):
    return delta // timedelta(milliseconds=1)
