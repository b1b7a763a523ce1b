import math
from collections import namedtuple

KAABA_LAT = 21.4225
KAABA_LNG = 39.8262
EARTH_RADIUS_KM = 6371.0

CARDINALS = [
    "N", "NNE", "NE", "ENE",
    "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW",
    "W", "WNW", "NW", "NNW",
]

QiblaResult = namedtuple("QiblaResult", ["bearing", "distance_km", "cardinal"])


def qibla_direction(lat, lng):
    """Initial great-circle bearing to the Kaaba, degrees clockwise from true north."""
    lat1 = math.radians(lat)
    lat2 = math.radians(KAABA_LAT)
    d_lng = math.radians(KAABA_LNG - lng)
    y = math.sin(d_lng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lng)
    bearing = math.degrees(math.atan2(y, x)) % 360.0
    # tiny negative angles wrap to exactly 360.0 in float
    return 0.0 if bearing == 360.0 else bearing


def distance_to_kaaba(lat, lng):
    d_lat = math.radians(KAABA_LAT - lat)
    d_lng = math.radians(KAABA_LNG - lng)
    a = (math.sin(d_lat / 2) ** 2
         + math.cos(math.radians(lat)) * math.cos(math.radians(KAABA_LAT)) * math.sin(d_lng / 2) ** 2)
    # rounding can push a just past 1 near the antipode
    a = min(1.0, max(0.0, a))
    c =2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def bearing_to_cardinal(bearing):
    # half-way bearings round up, so 11.25 is NNE
    index = int(math.floor(bearing / 22.5 + 0.5)) % 16
    return CARDINALS[index]


def qibla_bearing_and_distance(lat, lng):
    bearing = qibla_direction(lat, lng)
    return QiblaResult(bearing, distance_to_kaaba(lat, lng), bearing_to_cardinal(bearing))
