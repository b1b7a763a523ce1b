import math
from dataclasses import dataclass
from datetime import datetime

from .solar import julian_date

HIJRI_MONTHS = [
    "Muharram", "Safar", "Rabi al-Awwal", "Rabi al-Thani",
    "Jumada al-Ula", "Jumada al-Thani", "Rajab", "Shaban",
    "Ramadan", "Shawwal", "Dhul Qadah", "Dhul Hijjah",
]

HIJRI_MONTHS_SHORT = [
    "Muh", "Saf", "Rab I", "Rab II",
    "Jum I", "Jum II", "Raj", "Sha",
    "Ram", "Shaw", "Dhul Q", "Dhul H",
]

# 1 Muharram 1 AH, civil epoch (16 July 622, Julian calendar)
ISLAMIC_EPOCH_JD = 1948439.5


@dataclass(frozen=True)
class HijriDate:
    day: int
    month: int
    year: int

    @property
    def month_name(self):
        return HIJRI_MONTHS[self.month - 1]

    @property
    def month_name_short(self):
        return HIJRI_MONTHS_SHORT[self.month - 1]

    @property
    def formatted(self):
        return f"{self.day} {self.month_name} {self.year}"

    def __str__(self):
        return self.formatted


def hijri_from_gregorian(day):
    """Tabular Hijri date for a Gregorian ``date`` (Kuwaiti algorithm).

    The arithmetic calendar can differ from the sighted Umm al-Qura calendar by
    a day either way; treat the result as an estimate.
    """
    if isinstance(day, datetime):
        day = day.date()
    jd = julian_date(day.year, day.month, day.day)

    l = math.floor(jd - ISLAMIC_EPOCH_JD) + 10632
    n = (l - 1) // 10631
    l = l - 10631 * n + 354
    j = ((10985 - l) // 5316) * ((50 * l) // 17719) + (l // 5670) * ((43 * l) // 15238)
    l = l - ((30 - j) // 15) * ((17719 * j) // 50) - (j // 16) * ((15238 * j) // 43) + 29

    month = (24 * l) // 709
    return HijriDate(
        day=l - (709 * month) // 24,
        month=month,
        year=30 * n + j - 30,
    )
