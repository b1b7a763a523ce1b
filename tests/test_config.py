import json

import pytest

from salati.config import (
    CONFIG_PATH,
    DEFAULT_CONFIG,
    Location,
    PrayerTimesConfig,
    config_path,
    load_config,
    location_from,
    prayer_config_from,
)
from salati.methods import AsrMethod, CalculationMethod, HighLatMethod


def test_defaults():
    config = PrayerTimesConfig()
    assert config.calculation_method is CalculationMethod.MWL
    assert config.asr_method is AsrMethod.STANDARD
    assert config.high_lat_method is HighLatMethod.ANGLE_BASED
    assert config.adjustments == ()
    assert config.offset("isha") == 0


def test_keys_are_coerced():
    config = PrayerTimesConfig(
        calculation_method="makkah",
        asr_method="Hanafi",
        high_lat_method="one-seventh",
        adjustments={"Maghrib": 3},
    )
    assert config.calculation_method is CalculationMethod.MAKKAH
    assert config.asr_method is AsrMethod.HANAFI
    assert config.high_lat_method is HighLatMethod.ONE_SEVENTH
    assert config.offset("maghrib") == 3
    assert PrayerTimesConfig(high_lat_method="Angle Based").high_lat_method is HighLatMethod.ANGLE_BASED


@pytest.mark.parametrize("kwargs, message", [
    ({"calculation_method": "Kuwait"}, "Unknown method: Kuwait"),
    ({"asr_method": "Maliki"}, "Unknown Asr method: Maliki"),
    ({"high_lat_method": "polar"}, "Unknown high latitude method: polar"),
    ({"adjustments": {"witr": 2}}, "Unknown prayer for offset: witr"),
    ({"adjustments": {"fajr": 1.5}}, "whole number of minutes"),
])
def test_invalid_config_rejected(kwargs, message):
    with pytest.raises(ValueError, match=message):
        PrayerTimesConfig(**kwargs)


def test_method_presets():
    assert CalculationMethod.MAKKAH.params.isha_minutes == 90
    assert CalculationMethod.MAKKAH.params.isha_angle is None
    assert CalculationMethod.TEHRAN.params.maghrib_angle == 4.5
    assert CalculationMethod.EGYPT.label == "Egyptian General Authority of Survey"
    assert AsrMethod.HANAFI.factor == 2
    assert len(CalculationMethod) == 7


def test_missing_file_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    config = load_config(str(path))
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG
    assert not path.exists()


def test_file_values_merge_over_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "method": "KARACHI",
        "adjustments": {"asr": 2},
        "locations": {"Karachi": {"lat": 24.8607, "lng": 67.0011, "tz": 5}},
    }), encoding="utf-8")
    config = load_config(str(path))
    assert config["method"] == "KARACHI"
    assert config["adjustments"]["asr"] == 2
    assert config["adjustments"]["fajr"] == 0
    assert config["time_format"] == "24h"
    assert DEFAULT_CONFIG["adjustments"]["asr"] == 0

    prayer_config = prayer_config_from(config)
    assert prayer_config.calculation_method is CalculationMethod.KARACHI
    assert prayer_config.adjustments == (("asr", 2),)
    assert prayer_config.offset("Asr") == 2


def test_non_object_file_rejected(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_config_path_from_environment(monkeypatch, tmp_path):
    monkeypatch.delenv("SALATI_CONFIG", raising=False)
    assert config_path() == CONFIG_PATH
    monkeypatch.setenv("SALATI_CONFIG", str(tmp_path / "other.json"))
    assert config_path() == str(tmp_path / "other.json")


def test_config_usable_as_cache_key():
    first = PrayerTimesConfig(calculation_method="ISNA", adjustments={"Fajr": 2, "isha": -1})
    second = PrayerTimesConfig(calculation_method=CalculationMethod.ISNA, adjustments={"isha": -1, "fajr": 2})
    assert first == second
    assert hash(first) == hash(second)

    cache = {("2024-03-21", 21.4225, 39.8262, first): "cached"}
    assert cache[("2024-03-21", 21.4225, 39.8262, second)] == "cached"
    assert PrayerTimesConfig(adjustments=first.adjustments) == first


def test_adjustments_cannot_be_changed():
    config = PrayerTimesConfig(adjustments={"fajr": 1})
    with pytest.raises(TypeError):
        config.adjustments["fajr"] = 30
    assert config.offset("fajr") == 1


@pytest.fixture
def settings(tmp_path):
    config = load_config(str(tmp_path / "config.json"))
    config["location"] = "Makkah"
    config["locations"] = {
        "Makkah": {"lat": 21.4225, "lng": 39.8262, "tz": 3, "label": "Makkah, Saudi Arabia"},
        "Jakarta": {"lat": -6.2088, "lng": 106.8456},
    }
    return config


def test_location_from_settings(settings):
    label, location = location_from(settings, "Makkah")
    assert label == "Makkah, Saudi Arabia"
    assert location == Location(lat=21.4225, lng=39.8262, tz=3.0)

    assert location_from(settings)[1] == location
    assert location_from(settings, "Makkah", tz=4)[1].tz == 4


def test_location_from_falls_back_to_local_offset(settings, monkeypatch):
    monkeypatch.setattr("salati.config.local_tz_hours", lambda day: 7.0)
    label, location = location_from(settings, "Jakarta")
    assert label == "Jakarta"
    assert location.tz == 7.0


def test_location_from_unknown(settings):
    with pytest.raises(ValueError, match="Unknown location: Atlantis"):
        location_from(settings, "Atlantis")


def test_location_from_requires_a_name():
    with pytest.raises(ValueError, match="No location"):
        location_from({"location": None, "locations": {}})
