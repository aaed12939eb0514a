"""
calworld.engines.daylight
-------------------------
Daylight length, sun times and a time-of-day darkness curve.

Hours are on the calendar's own clock (``hours_per_day`` need not be 24).
The day is always centred on ``hours_per_day / 2``; only its length varies.
Bad inputs never raise: they resolve to half a day of light.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from ..core.types import SunTimes, TimeComponents
from ..model import ClimateZone
from ._num import clamp, round_half_up
from .time import TimeConverter

logger = logging.getLogger(__name__)

AXIAL_TILT_DEG = 23.44


def daylight_from_latitude(
    latitude: float,
    day_of_year: int,
    days_per_year: int,
    hours_per_day: float,
    summer_solstice: Optional[int] = None,
) -> float:
    """Hours of daylight from the hour-angle formula, clamped for polar day and night."""
    if not math.isfinite(latitude) or days_per_year <= 0:
        logger.warning("Invalid latitude %r or year length %r, using half day", latitude, days_per_year)
        return hours_per_day * 0.5
    latitude = clamp(latitude, -90.0, 90.0)

    # 1. Solar declination, peaking on the summer solstice
    peak = summer_solstice if summer_solstice is not None else round_half_up(days_per_year * 0.47)
    year_angle = (day_of_year - peak) / days_per_year * 2.0 * math.pi
    declination = math.radians(AXIAL_TILT_DEG) * math.cos(year_angle)

    # 2. Hour angle of sunset
    cos_h = -math.tan(math.radians(latitude)) * math.tan(declination)
    if cos_h <= -1.0:
        return float(hours_per_day)  # sun never sets
    if cos_h >= 1.0:
        return 0.0  # sun never rises
    return math.acos(cos_h) / math.pi * hours_per_day


def sinusoidal_daylight(
    day_of_year: int,
    days_per_year: int,
    shortest: float,
    longest: float,
    winter_solstice: int,
    summer_solstice: int,
) -> float:
    """Cosine ease between the winter and summer solstice days (wrap-aware)."""
    if days_per_year <= 0:
        return (shortest + longest) / 2
    since_winter = (day_of_year - winter_solstice + days_per_year) % days_per_year
    winter_to_summer = (summer_solstice - winter_solstice + days_per_year) % days_per_year

    if since_winter <= winter_to_summer:
        progress = since_winter / winter_to_summer if winter_to_summer else 1.0
    else:
        since_summer = since_winter - winter_to_summer
        progress = 1.0 - since_summer / (days_per_year - winter_to_summer)

    eased = (1.0 - math.cos(progress * math.pi)) / 2.0
    return shortest + (longest - shortest) * eased


def darkness_from_time(
    hour: float,
    minute: float = 0,
    hours_per_day: float = 24,
    minutes_per_hour: float = 60,
    sunrise: Optional[float] = None,
    sunset: Optional[float] = None,
) -> float:
    """
    Darkness in [0, 1]: 0 at solar midday, 0.5 at sunrise/sunset, 1 at solar midnight.

    Without sun times a symmetric cosine over the whole day is used.
    """
    now = hour + minute / minutes_per_hour
    if sunrise is None or sunset is None:
        return clamp((math.cos(now / hours_per_day * 2.0 * math.pi) + 1.0) / 2.0, 0.0, 1.0)

    day_len = sunset - sunrise
    night_len = hours_per_day - day_len
    if sunrise <= now < sunset and day_len > 0:
        p = (now - sunrise) / day_len
        return clamp((math.cos(p * 2.0 * math.pi) + 1.0) / 4.0, 0.0, 1.0)
    if night_len <= 0:
        return 0.0

    since_sunset = now - sunset if now >= sunset else now + hours_per_day - sunset
    p = since_sunset / night_len
    return clamp((1.0 - math.cos(p * 2.0 * math.pi)) / 2.0 * 0.5 + 0.5, 0.0, 1.0)


def adjusted_darkness(base: float, brightness_multiplier: float = 1.0, weather_penalty: float = 0.0) -> float:
    """Scales brightness (1 - darkness) and adds a weather penalty, clamped to [0, 1]."""
    brightness = (1.0 - base) * brightness_multiplier
    return clamp(1.0 - brightness + weather_penalty, 0.0, 1.0)


class DaylightModel:
    def __init__(self, converter: TimeConverter):
        self.converter = converter
        self.definition = converter.definition
        self.hours_per_day = self.definition.hours_per_day
        self.days_per_year = self.definition.nominal_days_per_year

    def daylight_hours(self, c: TimeComponents, zone: Optional[ClimateZone] = None) -> float:
        cfg = self.definition.daylight
        dpy = self.days_per_year
        doy = self.converter.day_of_year(c)

        # 1. Zone latitude
        if zone is not None and zone.latitude is not None:
            return daylight_from_latitude(zone.latitude, doy, dpy, self.hours_per_day, cfg.summer_day(dpy))

        # 2. Zone shortest/longest day
        if zone is not None and zone.shortest_day is not None and zone.longest_day is not None:
            return sinusoidal_daylight(doy, dpy, zone.shortest_day, zone.longest_day,
                                       cfg.winter_day(dpy), cfg.summer_day(dpy))

        # 3. Calendar-wide curve
        if cfg.enabled:
            return sinusoidal_daylight(doy, dpy, cfg.shortest_day, cfg.longest_day,
                                       cfg.winter_day(dpy), cfg.summer_day(dpy))

        # 4. Static half day
        return self.hours_per_day * 0.5

    def sunrise(self, c: TimeComponents, zone: Optional[ClimateZone] = None) -> float:
        return self.hours_per_day / 2 - self.daylight_hours(c, zone) / 2

    def sunset(self, c: TimeComponents, zone: Optional[ClimateZone] = None) -> float:
        return self.hours_per_day / 2 + self.daylight_hours(c, zone) / 2

    def solar_midday(self, c: TimeComponents, zone: Optional[ClimateZone] = None) -> float:
        return (self.sunrise(c, zone) + self.sunset(c, zone)) / 2

    def solar_midnight(self, c: TimeComponents, zone: Optional[ClimateZone] = None) -> float:
        """Midpoint of the night; may exceed ``hours_per_day`` (next day)."""
        dl = self.daylight_hours(c, zone)
        return self.hours_per_day / 2 + dl / 2 + (self.hours_per_day - dl) / 2

    def sun_times(self, c: TimeComponents, zone: Optional[ClimateZone] = None) -> SunTimes:
        dl = self.daylight_hours(c, zone)
        half = self.hours_per_day / 2
        rise, set_ = half - dl / 2, half + dl / 2
        return SunTimes(
            sunrise=rise,
            sunset=set_,
            solar_midday=(rise + set_) / 2,
            solar_midnight=set_ + (self.hours_per_day - dl) / 2,
            daylight_hours=dl,
        )

    def progress_day(self, c: TimeComponents, zone: Optional[ClimateZone] = None) -> float:
        """0 at sunrise, 1 at sunset; outside that span the value leaves [0, 1]."""
        t = self.sun_times(c, zone)
        if t.daylight_hours <= 0:
            return 0.0
        return (self.converter.hours_of_day(c) - t.sunrise) / t.daylight_hours

    def progress_night(self, c: TimeComponents, zone: Optional[ClimateZone] = None) -> float:
        """0 at sunset, 1 at the next sunrise."""
        t = self.sun_times(c, zone)
        night = self.hours_per_day - t.daylight_hours
        if night <= 0:
            return 0.0
        hour = self.converter.hours_of_day(c)
        if hour < t.sunrise:
            hour += self.hours_per_day
        return (hour - t.sunset) / night

    def darkness(self, c: TimeComponents, zone: Optional[ClimateZone] = None) -> float:
        t = self.sun_times(c, zone)
        return darkness_from_time(
            c.hour,
            c.minute + c.second / self.definition.seconds_per_minute,
            self.hours_per_day,
            self.definition.minutes_per_hour,
            t.sunrise,
            t.sunset,
        )
