from .methods import PRAYER_ORDER


def format_time(dt, format_24h):
    if dt is None:
        return "--:--"
    if format_24h:
        return dt.strftime("%H:%M")
    return dt.strftime("%I:%M %p").lstrip("0")


def format_countdown(milliseconds):
    total_seconds = max(0, int(milliseconds // 1000))
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes:02d}m {seconds:02d}s"
    return f"{minutes}m {seconds:02d}s"


def format_offset(tz_hours):
    sign = "-" if tz_hours < 0 else "+"
    minutes = int(round(abs(tz_hours) * 60))
    return f"UTC{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def build_payload(location_label, config, times=None, upcoming=None, qibla=None, hijri=None, format_24h=True):
    """Plain dict view of one day's results, ready for json.dumps or render_text."""
    payload = {"location": location_label}
    if hijri is not None:
        payload["hijri"] = {
            "day": hijri.day,
            "month": hijri.month,
            "year": hijri.year,
            "month_name": hijri.month_name,
            "formatted": hijri.formatted,
        }
    if times is not None:
        payload["date"] = times.date.isoformat()
        payload["method"] = config.calculation_method.label
        payload["asr_method"] = config.asr_method.label
        payload["high_lat_method"] = config.high_lat_method.label
        payload["times"] = {name: format_time(dt, format_24h) for name, dt in times.items()}
    if upcoming is not None:
        payload["next"] = {
            "current": upcoming.current,
            "next": upcoming.next,
            "countdown": format_countdown(upcoming.milliseconds_until_next),
            "milliseconds": upcoming.milliseconds_until_next,
        }
    if qibla is not None:
        payload["qibla"] = {
            "bearing": round(qibla.bearing, 2),
            "cardinal": qibla.cardinal,
            "distance_km": round(qibla.distance_km, 1),
        }
    return payload


def render_text(payload):
    lines = [payload["location"]]
    if "hijri" in payload:
        lines.append(payload["hijri"]["formatted"])
    if "times" in payload:
        lines.append(f"{payload['date']} ({payload['method']}, Asr: {payload['asr_method']})")
        width = max(len(name) for name in PRAYER_ORDER)
        for name in PRAYER_ORDER:
            lines.append(f"{name.ljust(width)}  {payload['times'][name]}")
    if "next" in payload:
        upcoming = payload["next"]
        lines.append(f"Next: {upcoming['next']} in {upcoming['countdown']}")
    if "qibla" in payload:
        qibla = payload["qibla"]
        lines.append(f"Qibla: {qibla['bearing']:.1f}° {qibla['cardinal']}, {qibla['distance_km']:.0f} km")
    return "\n".join(lines)
