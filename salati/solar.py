import math
from collections import namedtuple

CW = "cw"
CCW = "ccw"

SunPosition = namedtuple("SunPosition", ["declination", "equation"])


def _dtr(d):
    return (d * math.pi) / 180.0


def _rtd(r):
    return (r * 180.0) / math.pi


def fix_angle(a):
    return a - 360.0 * math.floor(a / 360.0)


def fix_hour(h):
    return h - 24.0 * math.floor(h / 24.0)


def julian_date(y, m, d):
    """Julian Date at 0h of the given Gregorian calendar day."""
    if m <= 2:
        y -= 1
        m += 12
    a = math.floor(y / 100)
    b = 2 - a + math.floor(a / 4)
    return math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1)) + d + b - 1524.5


def sun_position(jd):
    """Declination (degrees) and equation of time (hours) for Julian Date ``jd``.

    Low precision almanac formulae, good to about a minute of time, which is
    what the published prayer time tables use as well.
    """
    d = jd - 2451545.0
    g = fix_angle(357.529 + 0.98560028 * d)
    q = fix_angle(280.459 + 0.98564736 * d)
    L = fix_angle(q + 1.915 * math.sin(_dtr(g)) + 0.020 * math.sin(_dtr(2 * g)))
    e = 23.439 - 0.00000036 * d
    ra = _rtd(math.atan2(math.cos(_dtr(e)) * math.sin(_dtr(L)), math.cos(_dtr(L)))) / 15.0
    ra = fix_hour(ra)
    eqt = q / 15.0 - ra
    decl = _rtd(math.asin(math.sin(_dtr(e)) * math.sin(_dtr(L))))
    return SunPosition(decl, eqt)


# The solvers below take the Julian Date of local midnight and read the sun
# position at noon of that day.

def mid_day(jd, tz_hours):
    eqt = sun_position(jd + 0.5).equation
    return fix_hour(12 - eqt - tz_hours / 15.0)


def time_for_sun_angle(jd, angle, lat, tz_hours, direction=CW):
    """Clock time (hours) at which the sun is ``angle`` degrees below the horizon.

    Returns None when the sun never reaches that depression on this day at this
    latitude (midnight sun, polar night, summer twilight at high latitudes).
    """
    decl = sun_position(jd + 0.5).declination
    noon = mid_day(jd, tz_hours)
    numerator = -math.sin(_dtr(angle)) - math.sin(_dtr(decl)) * math.sin(_dtr(lat))
    denominator = math.cos(_dtr(decl)) * math.cos(_dtr(lat))
    if denominator == 0:
        return None
    ratio = numerator / denominator
    if ratio < -1 or ratio > 1:
        return None
    t = _rtd(math.acos(ratio)) / 15.0
    return noon - t if direction == CCW else noon + t


def asr_angle(factor, lat, decl):
    """Sun altitude, as a negative depression, at which shadows are ``factor`` heights long."""
    return -_rtd(math.atan(1.0 / (factor + math.tan(_dtr(abs(lat - decl))))))


def time_for_asr(jd, factor, lat, tz_hours):
    decl = sun_position(jd + 0.5).declination
    return time_for_sun_angle(jd, asr_angle(factor, lat, decl), lat, tz_hours, CW)
