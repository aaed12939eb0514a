"""Diagnostics package.

- pretty_month, round_trip: always available, no extra dependencies
- daylight_curve, weather_odds: need the diagnostics extras (numpy, matplotlib)
"""

__all__ = ["pretty_month", "round_trip", "daylight_curve", "weather_odds"]
