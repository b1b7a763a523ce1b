from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class MethodParams:
    fajr_angle: float
    isha_angle: Optional[float] = None
    isha_minutes: Optional[float] = None
    maghrib_angle: Optional[float] = None


class CalculationMethod(Enum):
    MWL = "MWL"
    ISNA = "ISNA"
    EGYPT = "EGYPT"
    MAKKAH = "MAKKAH"
    KARACHI = "KARACHI"
    TEHRAN = "TEHRAN"
    JAFARI = "JAFARI"

    @property
    def label(self):
        return METHODS[self]["name"]

    @property
    def params(self):
        return METHODS[self]["params"]


class AsrMethod(Enum):
    STANDARD = "STANDARD"
    HANAFI = "HANAFI"

    @property
    def label(self):
        return ASR_METHODS[self]["name"]

    @property
    def factor(self):
        return ASR_METHODS[self]["factor"]


class HighLatMethod(Enum):
    NONE = "None"
    MIDNIGHT = "Middle of the Night"
    ONE_SEVENTH = "One Seventh"
    ANGLE_BASED = "Angle Based"

    @property
    def label(self):
        return self.value


METHODS = {
    CalculationMethod.MWL: {
        "name": "Muslim World League",
        "params": MethodParams(fajr_angle=18, isha_angle=17),
    },
    CalculationMethod.ISNA: {
        "name": "Islamic Society of North America",
        "params": MethodParams(fajr_angle=15, isha_angle=15),
    },
    CalculationMethod.EGYPT: {
        "name": "Egyptian General Authority of Survey",
        "params": MethodParams(fajr_angle=19.5, isha_angle=17.5),
    },
    CalculationMethod.MAKKAH: {
        "name": "Umm Al-Qura University, Makkah",
        "params": MethodParams(fajr_angle=18.5, isha_minutes=90),
    },
    CalculationMethod.KARACHI: {
        "name": "University of Islamic Sciences, Karachi",
        "params": MethodParams(fajr_angle=18, isha_angle=18),
    },
    CalculationMethod.TEHRAN: {
        "name": "Institute of Geophysics, University of Tehran",
        "params": MethodParams(fajr_angle=17.7, isha_angle=14, maghrib_angle=4.5),
    },
    CalculationMethod.JAFARI: {
        "name": "Shia Ithna-Ashari, Leva Institute, Qum",
        "params": MethodParams(fajr_angle=16, isha_angle=14, maghrib_angle=4),
    },
}

ASR_METHODS = {
    AsrMethod.STANDARD: {"name": "Standard (Shafi, Maliki, Hanbali)", "factor": 1},
    AsrMethod.HANAFI: {"name": "Hanafi", "factor": 2},
}

PRAYER_ORDER = ["Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha"]
PRAYER_KEYS = [name.lower() for name in PRAYER_ORDER]


def lookup(enum_cls, key):
    """Resolve a member of ``enum_cls`` from a member, its name or its value.

    Names match case-insensitively and accept ``-`` for ``_`` so that
    ``"angle-based"`` selects ``HighLatMethod.ANGLE_BASED``.
    """
    if isinstance(key, enum_cls):
        return key
    if isinstance(key, str):
        name = key.strip().upper().replace("-", "_").replace(" ", "_")
        if name in enum_cls.__members__:
            return enum_cls[name]
        for member in enum_cls:
            if member.value == key:
                return member
    kind = {
        CalculationMethod: "method",
        AsrMethod: "Asr method",
        HighLatMethod: "high latitude method",
    }.get(enum_cls, enum_cls.__name__)
    raise ValueError(f"Unknown {kind}: {key}")
